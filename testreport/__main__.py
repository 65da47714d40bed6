"""Allow ``python -m testreport``."""

from testreport.cli import main

if __name__ == "__main__":
    main()

"""Read-only discovery of result files and the coverage export."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional, Sequence, Union

from testreport.logging import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


class ArtifactScanner:
    """Locate and read raw test artifacts.

    The scanner never writes or creates anything. A missing results directory
    or coverage file is reported as empty input, not as an error.

    Args:
        results_dir: Directory holding the result files.
        coverage_paths: Coverage CSV path, or candidate paths tried in order.
        extension: Result file suffix, matched case-sensitively (e.g. ".xml").
    """

    def __init__(
        self,
        results_dir: PathLike,
        coverage_paths: Union[PathLike, Sequence[PathLike], None] = None,
        extension: str = ".xml",
    ):
        self.results_dir = Path(results_dir)
        if coverage_paths is None:
            self.coverage_paths: list[Path] = []
        elif isinstance(coverage_paths, (str, Path)):
            self.coverage_paths = [Path(coverage_paths)]
        else:
            self.coverage_paths = [Path(p) for p in coverage_paths]
        self.extension = extension

    def result_files(self) -> list[Path]:
        """Return the result files in name order."""
        if not self.results_dir.is_dir():
            logger.info(f"Results directory not found: {self.results_dir}")
            return []
        return sorted(
            p
            for p in self.results_dir.iterdir()
            if p.is_file() and p.suffix == self.extension
        )

    def iter_result_texts(self) -> Iterator[str]:
        """Yield the text of each result file, reading one file at a time."""
        for path in self.result_files():
            try:
                text = path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.warning(f"Skipping unreadable result file {path}: {e}")
                continue
            logger.debug(f"Read result file: {path}")
            yield text

    def coverage_file(self) -> Optional[Path]:
        """Return the first candidate coverage path that is a regular file."""
        for path in self.coverage_paths:
            if path.is_file():
                return path
        return None

    def read_coverage_text(self) -> Optional[str]:
        """Return the coverage CSV text, or ``None`` when it is absent."""
        path = self.coverage_file()
        if path is None:
            shown = ", ".join(str(p) for p in self.coverage_paths) or "<none>"
            logger.info(f"Coverage CSV not found: {shown}")
            return None
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning(f"Could not read coverage CSV {path}: {e}")
            return None

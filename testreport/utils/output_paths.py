"""Path helpers shared by the configuration layer and the CLI.

Configured paths may be relative. They are resolved against a base directory:
the directory of the configuration file when one is used, otherwise the
current working directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


def ensure_parent_dir(path: Path) -> None:
    """Ensure the parent directory exists for a file path."""
    path.parent.mkdir(parents=True, exist_ok=True)


def resolve_path(path: Union[str, Path], base_dir: Optional[Path]) -> Path:
    """Resolve ``path`` against ``base_dir``.

    - Absolute paths are returned as-is.
    - Relative paths are joined to ``base_dir`` when provided; otherwise they
      stay relative to the current working directory.

    Args:
        path: Configured path.
        base_dir: Optional base directory for relative paths.

    Returns:
        The resolved path.
    """
    path = Path(path)
    if path.is_absolute() or base_dir is None:
        return path
    return base_dir / path


def resolve_optional_path(
    path: Union[str, Path, None], base_dir: Optional[Path]
) -> Optional[Path]:
    """Like :func:`resolve_path`, passing ``None`` through."""
    if path is None:
        return None
    return resolve_path(path, base_dir)

"""Utility helpers used across testreport.

This package contains small, self-contained utilities that do not depend on
project internals. Keep modules minimal and focused.
"""

from testreport.utils.output_paths import (
    ensure_parent_dir,
    resolve_optional_path,
    resolve_path,
)

__all__ = [
    "ensure_parent_dir",
    "resolve_path",
    "resolve_optional_path",
]

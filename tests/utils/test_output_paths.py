from __future__ import annotations

from pathlib import Path

from testreport.utils.output_paths import (
    ensure_parent_dir,
    resolve_optional_path,
    resolve_path,
)


def test_resolve_path_relative_and_absolute(tmp_path: Path) -> None:
    assert resolve_path("a/b.html", tmp_path) == tmp_path / "a/b.html"
    assert resolve_path(tmp_path / "x", Path("/elsewhere")) == tmp_path / "x"
    assert resolve_path("a/b.html", None) == Path("a/b.html")


def test_resolve_optional_path_passes_none(tmp_path: Path) -> None:
    assert resolve_optional_path(None, tmp_path) is None
    assert resolve_optional_path("s.json", tmp_path) == tmp_path / "s.json"


def test_ensure_parent_dir_creates_nested(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "report.html"
    ensure_parent_dir(target)
    assert target.parent.is_dir()
    # Idempotent
    ensure_parent_dir(target)
    assert not target.exists()

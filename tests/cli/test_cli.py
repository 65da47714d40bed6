import json
import logging
from pathlib import Path

import pytest

from testreport import cli
from testreport.render import PLACEHOLDERS

# generate


def test_generate_with_default_layout(gradle_project: Path, capsys, monkeypatch) -> None:
    monkeypatch.chdir(gradle_project)

    cli.main(["generate", "--date", "2024-05-01"])
    captured = capsys.readouterr()

    output = gradle_project / "build" / "reports" / "test-report.html"
    assert output.exists()
    html = output.read_text(encoding="utf-8")
    assert not any(token in html for token in PLACEHOLDERS)
    assert "<p>Total: 3</p>" in html
    assert "Report written to" in captured.out
    assert "3 tests, 1 failed, 66% success, 95% coverage" in captured.out


def test_generate_base_dir_without_chdir(gradle_project: Path, capsys) -> None:
    cli.main(["generate", "--base-dir", str(gradle_project)])
    assert (gradle_project / "build" / "reports" / "test-report.html").exists()


def test_generate_explicit_paths(gradle_project: Path, tmp_path: Path) -> None:
    out = tmp_path / "custom" / "report.html"
    summary = tmp_path / "custom" / "summary.json"
    cli.main(
        [
            "generate",
            "--results-dir",
            str(gradle_project / "build" / "test-results" / "test"),
            "--coverage",
            str(tmp_path / "missing.csv"),
            str(gradle_project / "build" / "reports" / "jacoco" / "jacocoTestReport.csv"),
            "--template",
            str(gradle_project / "src" / "test" / "resources" / "test-report-template.html"),
            "--output",
            str(out),
            "--summary-json",
            str(summary),
            "--failure-mode",
            "case",
        ]
    )

    assert out.exists()
    data = json.loads(summary.read_text(encoding="utf-8"))
    assert data["coverage"]["coverage_percent"] == 95
    # Case mode: only the case with its own <failure> is failed
    assert [(c["name"], c["failed"]) for c in data["cases"]] == [
        ("c", False),
        ("a", False),
        ("b", True),
    ]


def test_generate_coverage_override(gradle_project: Path, monkeypatch) -> None:
    monkeypatch.chdir(gradle_project)
    cli.main(["generate", "--coverage-override", "30"])
    html = (gradle_project / "build" / "reports" / "test-report.html").read_text(
        encoding="utf-8"
    )
    assert "<p>Coverage: 30%</p>" in html


def test_generate_missing_template_exits_nonzero(tmp_path: Path, capsys, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["generate"])

    assert exc_info.value.code == 1
    captured = capsys.readouterr()
    assert "ERROR: Template not found" in captured.out
    assert "test-report-template.html" in captured.out
    assert not (tmp_path / "build").exists()


def test_generate_with_config_file(gradle_project: Path, tmp_path: Path) -> None:
    cfg = gradle_project / "testreport.yaml"
    cfg.write_text(
        "output_path: out/report.html\n"
        "report_date: 2024-05-01\n"
        "labels:\n"
        "  passed: Başarılı\n"
        "  failed: Başarısız\n",
        encoding="utf-8",
    )
    cli.main(["generate", "--config", str(cfg)])

    html = (gradle_project / "out" / "report.html").read_text(encoding="utf-8")
    assert "<p>Date: 2024-05-01</p>" in html
    assert "Başarısız" in html


def test_invalid_config_exits_nonzero(tmp_path: Path, capsys) -> None:
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("nonsense_key: 1\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["generate", "--config", str(cfg)])

    assert exc_info.value.code == 1
    assert "Invalid configuration" in capsys.readouterr().out


# inspect


def test_inspect_prints_summary_table(gradle_project: Path, capsys) -> None:
    cli.main(["inspect", "--base-dir", str(gradle_project), "--cases"])
    out = capsys.readouterr().out

    assert "Total tests:  3" in out
    assert "Success rate: 66%" in out
    assert "Coverage:     95%" in out
    assert "Suites (2)" in out
    assert "Bar" in out and "Foo" in out
    assert "Test cases (3)" in out
    # inspect never renders
    assert not (gradle_project / "build" / "reports" / "test-report.html").exists()


def test_inspect_empty_directory(tmp_path: Path, capsys) -> None:
    cli.main(["inspect", "--base-dir", str(tmp_path)])
    out = capsys.readouterr().out
    assert "Total tests:  0" in out
    assert "Coverage:     0%" in out
    assert "(none)" in out


# global options


def test_no_arguments_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 0
    assert "usage: testreport" in capsys.readouterr().out


def test_unknown_failure_mode_rejected() -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["inspect", "--failure-mode", "sometimes"])
    assert exc_info.value.code == 2


@pytest.mark.parametrize(
    "flag, level",
    [("--verbose", logging.DEBUG), ("--quiet", logging.WARNING), (None, logging.INFO)],
)
def test_log_level_flags(tmp_path: Path, flag, level) -> None:
    argv = ([flag] if flag else []) + ["inspect", "--base-dir", str(tmp_path)]
    cli.main(argv)
    assert logging.getLogger("testreport").level == level

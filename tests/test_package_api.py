"""Smoke tests for the public package surface."""

import testreport


def test_public_names_are_exported() -> None:
    for name in testreport.__all__:
        assert hasattr(testreport, name), name


def test_version_is_a_string() -> None:
    assert isinstance(testreport.__version__, str)
    assert testreport.__version__.count(".") == 2


def test_top_level_pipeline(tmp_path, junit_xml, coverage_csv, full_template) -> None:
    (tmp_path / "TEST-a.xml").write_text(
        junit_xml(1, cases=[("t", "p.S", "0.1", None)]), encoding="utf-8"
    )
    scanner = testreport.ArtifactScanner(tmp_path)
    report = testreport.aggregate(
        scanner.iter_result_texts(), coverage_csv([(0, 1)])
    )
    html = testreport.render(
        full_template,
        report.totals,
        report.coverage,
        report.sorted_suites(),
        report.cases,
        report_date="today",
    )
    assert "<p>Rate: 100%</p>" in html
    assert "<p>Coverage: 100%</p>" in html

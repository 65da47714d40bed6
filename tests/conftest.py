"""Global pytest configuration and shared artifact builders."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Optional, Tuple

import pytest

# (name, classname, time, failure_kind) where failure_kind is None, "failure"
# or "error"
CaseSpec = Tuple[str, str, str, Optional[str]]


def build_junit_xml(
    tests: int,
    failures: int = 0,
    errors: int = 0,
    cases: Iterable[CaseSpec] = (),
    suite_name: str = "pkg.SampleTest",
) -> str:
    """Return a Gradle-style JUnit XML document."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<testsuite name="{suite_name}" tests="{tests}" skipped="0" '
        f'failures="{failures}" errors="{errors}" '
        'timestamp="2024-05-01T10:00:00" hostname="ci" time="1.0">',
        "  <properties/>",
    ]
    for name, classname, time, kind in cases:
        if kind is None:
            lines.append(
                f'  <testcase name="{name}" classname="{classname}" time="{time}"/>'
            )
        else:
            lines.append(
                f'  <testcase name="{name}" classname="{classname}" time="{time}">'
            )
            lines.append(
                f'    <{kind} message="boom" type="AssertionError">trace</{kind}>'
            )
            lines.append("  </testcase>")
    lines.append("  <system-out><![CDATA[]]></system-out>")
    lines.append("  <system-err><![CDATA[]]></system-err>")
    lines.append("</testsuite>")
    return "\n".join(lines) + "\n"


def build_coverage_csv(rows: Iterable[Tuple[int, int]]) -> str:
    """Return a JaCoCo-style CSV with the given (missed, covered) rows."""
    header = (
        "GROUP,PACKAGE,CLASS,INSTRUCTION_MISSED,INSTRUCTION_COVERED,"
        "BRANCH_MISSED,BRANCH_COVERED"
    )
    body = [
        f"app,com.acme,Class{i},{missed},{covered},0,0"
        for i, (missed, covered) in enumerate(rows)
    ]
    return "\n".join([header] + body) + "\n"


@pytest.fixture
def junit_xml() -> Callable[..., str]:
    return build_junit_xml


@pytest.fixture
def coverage_csv() -> Callable[..., str]:
    return build_coverage_csv


@pytest.fixture
def full_template() -> str:
    """Template containing every placeholder exactly once."""
    return (
        "<html><body>\n"
        "<p>Date: {{REPORT_DATE}}</p>\n"
        "<p>Total: {{TOTAL_TESTS}}</p>\n"
        "<p>Passed: {{PASSED_TESTS}}</p>\n"
        "<p>Failed: {{FAILED_TESTS}}</p>\n"
        "<p>Rate: {{SUCCESS_RATE}}%</p>\n"
        "<p>Coverage: {{COVERAGE}}%</p>\n"
        "<table><tbody>{{TEST_SUITES}}</tbody></table>\n"
        "<table><tbody>{{TEST_DETAILS}}</tbody></table>\n"
        "</body></html>\n"
    )


@pytest.fixture
def gradle_project(tmp_path: Path, full_template: str) -> Path:
    """A service directory laid out like a Gradle build after ``test``.

    Contains one result file with a failure, one passing result file, a
    coverage CSV and the template at their default locations.
    """
    results = tmp_path / "build" / "test-results" / "test"
    results.mkdir(parents=True)
    (results / "TEST-pkg.FooTest.xml").write_text(
        build_junit_xml(
            2,
            failures=1,
            cases=[
                ("a", "pkg.Foo", "0.1", None),
                ("b", "pkg.Foo", "0.2", "failure"),
            ],
        ),
        encoding="utf-8",
    )
    (results / "TEST-pkg.BarTest.xml").write_text(
        build_junit_xml(1, cases=[("c", "pkg.Bar", "0.3", None)]),
        encoding="utf-8",
    )
    jacoco = tmp_path / "build" / "reports" / "jacoco"
    jacoco.mkdir(parents=True)
    (jacoco / "jacocoTestReport.csv").write_text(
        build_coverage_csv([(1, 9), (0, 10)]), encoding="utf-8"
    )
    resources = tmp_path / "src" / "test" / "resources"
    resources.mkdir(parents=True)
    (resources / "test-report-template.html").write_text(
        full_template, encoding="utf-8"
    )
    return tmp_path

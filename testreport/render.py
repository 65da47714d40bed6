"""Placeholder substitution for the HTML report template.

The template is plain text with fixed ``{{TOKEN}}`` markers. Rendering is a
literal token replacement, not a templating language: only the tokens in
:data:`PLACEHOLDERS` are replaced, every occurrence of each, and anything else
in the template (including unknown ``{{...}}`` markers) is kept verbatim.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, Optional, Tuple

from testreport.model import CoverageSummary, RunTotals, SuiteSummary, TestCaseRecord

REPORT_DATE = "{{REPORT_DATE}}"
TOTAL_TESTS = "{{TOTAL_TESTS}}"
PASSED_TESTS = "{{PASSED_TESTS}}"
FAILED_TESTS = "{{FAILED_TESTS}}"
SUCCESS_RATE = "{{SUCCESS_RATE}}"
COVERAGE = "{{COVERAGE}}"
TEST_SUITES = "{{TEST_SUITES}}"
TEST_DETAILS = "{{TEST_DETAILS}}"

PLACEHOLDERS: Tuple[str, ...] = (
    REPORT_DATE,
    TOTAL_TESTS,
    PASSED_TESTS,
    FAILED_TESTS,
    SUCCESS_RATE,
    COVERAGE,
    TEST_SUITES,
    TEST_DETAILS,
)

# One pass over the template; substituted text is never scanned again
_TOKEN_RE = re.compile("|".join(re.escape(token) for token in PLACEHOLDERS))


@dataclass(frozen=True)
class RowLabels:
    """Text shown in generated table rows."""

    passed: str = "Passed"
    failed: str = "Failed"
    no_suites: str = "No suites"
    no_details: str = "No test details"


def _status_badge(failed: bool, labels: RowLabels) -> str:
    status = "failed" if failed else "passed"
    text = labels.failed if failed else labels.passed
    return f'<span class="status-badge {status}">{html.escape(text)}</span>'


def _empty_row(text: str) -> str:
    return f"<tr><td colspan='3'>{html.escape(text)}</td></tr>"


def suite_rows_html(
    suite_rows: Iterable[Tuple[str, SuiteSummary]], labels: RowLabels
) -> str:
    """Format suite summaries as table rows, or a single "no data" row."""
    rows = [
        "<tr>\n"
        f"  <td>{html.escape(name)}</td>\n"
        f"  <td>{summary.test_count}</td>\n"
        f"  <td>{_status_badge(not summary.all_passed, labels)}</td>\n"
        "</tr>"
        for name, summary in suite_rows
    ]
    return "\n".join(rows) if rows else _empty_row(labels.no_suites)


def case_rows_html(case_rows: Iterable[TestCaseRecord], labels: RowLabels) -> str:
    """Format case records as table rows, or a single "no data" row."""
    rows = [
        "<tr>\n"
        f"  <td>{html.escape(record.name)}</td>\n"
        f'  <td><span class="duration">{html.escape(record.duration_seconds)}s</span></td>\n'
        f"  <td>{_status_badge(record.failed, labels)}</td>\n"
        "</tr>"
        for record in case_rows
    ]
    return "\n".join(rows) if rows else _empty_row(labels.no_details)


def substitute(template: str, values: Dict[str, str]) -> str:
    """Replace every known placeholder found in ``values``; keep the rest."""
    return _TOKEN_RE.sub(lambda m: values.get(m.group(0), m.group(0)), template)


def render(
    template: str,
    totals: RunTotals,
    coverage: CoverageSummary,
    suite_rows: Iterable[Tuple[str, SuiteSummary]],
    case_rows: Iterable[TestCaseRecord],
    *,
    report_date: Optional[str] = None,
    labels: Optional[RowLabels] = None,
) -> str:
    """Render the report template.

    Args:
        template: Template text containing placeholder tokens.
        totals: Run totals.
        coverage: Coverage summary.
        suite_rows: ``(name, summary)`` pairs in display order.
        case_rows: Case records in display order.
        report_date: Date text for ``{{REPORT_DATE}}``; today's ISO date
            when omitted.
        labels: Row text; English defaults when omitted.

    Returns:
        The template with all known placeholders replaced.
    """
    labels = labels or RowLabels()
    if report_date is None:
        report_date = date.today().isoformat()

    values = {
        REPORT_DATE: report_date,
        TOTAL_TESTS: str(totals.total_tests),
        PASSED_TESTS: str(totals.passed_tests),
        FAILED_TESTS: str(totals.failed_tests),
        SUCCESS_RATE: str(totals.success_rate_percent),
        COVERAGE: str(coverage.coverage_percent),
        TEST_SUITES: suite_rows_html(suite_rows, labels),
        TEST_DETAILS: case_rows_html(case_rows, labels),
    }
    return substitute(template, values)

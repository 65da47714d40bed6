"""Fold parsed result files and coverage into one report model."""

from __future__ import annotations

from functools import reduce
from typing import Iterable, Optional

from testreport.logging import get_logger
from testreport.model import AggregateReport, CoverageSummary, FileResult
from testreport.parsing import FailureMode, parse_coverage_text, parse_result_text

logger = get_logger(__name__)


def aggregate(
    raw_result_texts: Iterable[str],
    raw_coverage_text: Optional[str] = None,
    *,
    failure_mode: FailureMode = FailureMode.FILE,
    coverage_override: Optional[int] = None,
) -> AggregateReport:
    """Aggregate result texts and coverage text into an :class:`AggregateReport`.

    The function is pure: each text is parsed into a :class:`FileResult` and
    the partials are folded into one fresh accumulator with
    ``FileResult.absorb``. Case rows keep the order of ``raw_result_texts``
    and of the cases inside each text.

    Args:
        raw_result_texts: Contents of the result files, consumed once.
        raw_coverage_text: Coverage CSV content, or ``None`` when absent.
        failure_mode: Failure attribution policy for case rows.
        coverage_override: When set, report this coverage figure instead of
            the one computed from ``raw_coverage_text``.

    Returns:
        Totals, suite summaries, case rows and coverage for the run.
    """
    file_count = 0

    def fold(acc: FileResult, text: str) -> FileResult:
        nonlocal file_count
        file_count += 1
        return acc.absorb(parse_result_text(text, failure_mode))

    combined = reduce(fold, raw_result_texts, FileResult())

    if coverage_override is not None:
        coverage = CoverageSummary.fixed(coverage_override)
    else:
        coverage = parse_coverage_text(raw_coverage_text)

    logger.debug(
        f"Aggregated {file_count} result files: {combined.totals.total_tests} tests, "
        f"{len(combined.cases)} cases, {len(combined.suites)} suites, "
        f"coverage {coverage.coverage_percent}%"
    )
    return AggregateReport(
        totals=combined.totals,
        suites=combined.suites,
        cases=combined.cases,
        coverage=coverage,
    )

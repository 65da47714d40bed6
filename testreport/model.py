"""Data containers for one report-generation run.

Every object here is created fresh for a run and discarded once the report is
written. Containers that take part in the aggregation fold expose ``merge`` so
per-file partial results combine associatively, and ``to_dict`` returns
JSON-safe primitives for the optional summary export.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from testreport.logging import get_logger

logger = get_logger(__name__)


def suite_key(classname: str) -> str:
    """Return the owning suite name for a qualified class name.

    Examples:
        "com.acme.Foo" -> "Foo"; "Foo" -> "Foo"; "" -> "".
    """
    return classname.rsplit(".", 1)[-1]


def percent_floor(part: int, whole: int) -> int:
    """Return ``floor(part * 100 / whole)`` or 0 when ``whole`` is not positive."""
    if whole <= 0:
        return 0
    return (part * 100) // whole


@dataclass(frozen=True, slots=True)
class TestCaseRecord:
    """One executed test case.

    Args:
        name: Display name of the test.
        owner_suite: Last dotted segment of the qualifying class name.
        duration_seconds: Duration text as found in the result file.
        failed: Whether the case is shown as failed.
    """

    __test__ = False

    name: str
    owner_suite: str
    duration_seconds: str
    failed: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "suite": self.owner_suite,
            "duration_seconds": self.duration_seconds,
            "failed": self.failed,
        }


@dataclass(slots=True)
class SuiteSummary:
    """Running count and pass flag for one suite."""

    test_count: int = 0
    all_passed: bool = True

    def add(self, record: TestCaseRecord) -> None:
        """Fold one case into this summary."""
        self.test_count += 1
        self.all_passed = self.all_passed and not record.failed

    def merge(self, other: SuiteSummary) -> SuiteSummary:
        """Return a new summary combining ``self`` and ``other``."""
        return SuiteSummary(
            test_count=self.test_count + other.test_count,
            all_passed=self.all_passed and other.all_passed,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"test_count": self.test_count, "all_passed": self.all_passed}


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    """Instruction coverage figure.

    ``coverage_percent`` is derived from the instruction counts unless the
    summary was pinned with :meth:`fixed`.
    """

    covered_instructions: int = 0
    total_instructions: int = 0
    coverage_percent: int = 0

    @classmethod
    def from_counts(cls, covered: int, total: int) -> CoverageSummary:
        return cls(
            covered_instructions=covered,
            total_instructions=total,
            coverage_percent=percent_floor(covered, total),
        )

    @classmethod
    def fixed(cls, percent: int) -> CoverageSummary:
        """Return a summary pinned to ``percent`` (clamped to 0..100)."""
        return cls(coverage_percent=max(0, min(100, int(percent))))

    def merge(self, other: CoverageSummary) -> CoverageSummary:
        return CoverageSummary.from_counts(
            self.covered_instructions + other.covered_instructions,
            self.total_instructions + other.total_instructions,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "covered_instructions": self.covered_instructions,
            "total_instructions": self.total_instructions,
            "coverage_percent": self.coverage_percent,
        }


@dataclass(frozen=True, slots=True)
class RunTotals:
    """Run-level counters.

    Build instances with :meth:`from_counts`; it derives ``passed_tests`` and
    ``success_rate_percent`` so the two stay consistent with the raw counts.
    """

    total_tests: int = 0
    failed_tests: int = 0
    passed_tests: int = 0
    success_rate_percent: int = 0

    @classmethod
    def from_counts(cls, total: int, failed: int) -> RunTotals:
        total = max(0, total)
        failed = max(0, failed)
        passed = total - failed
        if passed < 0:
            # A file can report more failures+errors than tests
            logger.debug(
                "Failed count %d exceeds total %d; clamping passed to 0",
                failed,
                total,
            )
            passed = 0
        return cls(
            total_tests=total,
            failed_tests=failed,
            passed_tests=passed,
            success_rate_percent=percent_floor(passed, total),
        )

    def merge(self, other: RunTotals) -> RunTotals:
        return RunTotals.from_counts(
            self.total_tests + other.total_tests,
            self.failed_tests + other.failed_tests,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_tests": self.total_tests,
            "passed_tests": self.passed_tests,
            "failed_tests": self.failed_tests,
            "success_rate_percent": self.success_rate_percent,
        }


@dataclass(slots=True)
class FileResult:
    """Partial aggregate for one result file.

    ``FileResult()`` is the identity of :meth:`merge`, and merging is
    associative, so a run is a left fold of per-file results.
    """

    totals: RunTotals = field(default_factory=RunTotals)
    cases: List[TestCaseRecord] = field(default_factory=list)
    suites: Dict[str, SuiteSummary] = field(default_factory=dict)

    @classmethod
    def from_parts(
        cls, tests: int, failed: int, cases: List[TestCaseRecord]
    ) -> FileResult:
        suites: Dict[str, SuiteSummary] = {}
        for record in cases:
            suites.setdefault(record.owner_suite, SuiteSummary()).add(record)
        return cls(
            totals=RunTotals.from_counts(tests, failed),
            cases=list(cases),
            suites=suites,
        )

    def absorb(self, other: FileResult) -> FileResult:
        """Fold ``other`` into this result in place and return ``self``.

        Cases are appended to the existing list, so folding many files stays
        linear in the number of cases.
        """
        self.totals = self.totals.merge(other.totals)
        self.cases.extend(other.cases)
        for name, summary in other.suites.items():
            self.suites[name] = self.suites.get(name, SuiteSummary()).merge(summary)
        return self

    def merge(self, other: FileResult) -> FileResult:
        """Return a new result combining ``self`` and ``other``."""
        combined = FileResult(
            totals=self.totals,
            cases=list(self.cases),
            suites={name: SuiteSummary().merge(s) for name, s in self.suites.items()},
        )
        return combined.absorb(other)


@dataclass(slots=True)
class AggregateReport:
    """Everything the renderer needs for one report."""

    totals: RunTotals = field(default_factory=RunTotals)
    suites: Dict[str, SuiteSummary] = field(default_factory=dict)
    cases: List[TestCaseRecord] = field(default_factory=list)
    coverage: CoverageSummary = field(default_factory=CoverageSummary)

    def sorted_suites(self) -> List[Tuple[str, SuiteSummary]]:
        """Return ``(name, summary)`` pairs ordered by suite name."""
        return sorted(self.suites.items())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totals": self.totals.to_dict(),
            "coverage": self.coverage.to_dict(),
            "suites": {name: s.to_dict() for name, s in self.sorted_suites()},
            "cases": [c.to_dict() for c in self.cases],
        }

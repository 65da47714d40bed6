"""Tolerant parsers for JUnit-style result files and coverage CSV exports.

Both parsers follow the same contract: a missing or malformed field becomes
zero (counts) or the empty string (text), and parsing moves on to the next
field, row or file. Nothing here raises on bad input.

Result files are walked as XML with :mod:`xml.etree.ElementTree`. When a file
does not parse as XML (truncated output from a crashed runner, for example)
the counts and case entries are recovered with attribute-keyed regular
expressions instead.
"""

from __future__ import annotations

import csv
import io
import re
import xml.etree.ElementTree as ET
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from testreport.logging import get_logger
from testreport.model import CoverageSummary, FileResult, TestCaseRecord, suite_key

logger = get_logger(__name__)


class FailureMode(str, Enum):
    """How a test case is judged failed.

    FILE: every case in a file fails when the file reports any failure or
        error count above zero.
    MARKUP: every case in a file fails when the file contains any
        ``<failure`` or ``<error`` element.
    CASE: a case fails when it has its own ``<failure>`` or ``<error>`` child.
    """

    FILE = "file"
    MARKUP = "markup"
    CASE = "case"


_COUNT_RE = {
    name: re.compile(rf'\b{name}="(\d+)"') for name in ("tests", "failures", "errors")
}
_TESTCASE_RE = re.compile(
    r"<testcase\b([^>]*?)(/?)>(.*?)(?:</testcase>|(?=<testcase\b)|$)", re.S
)
_ATTR_RE = re.compile(r'([\w:.-]+)\s*=\s*"([^"]*)"')
_FAILURE_MARKUP_RE = re.compile(r"<(?:failure|error)\b")

# JaCoCo CSV: GROUP,PACKAGE,CLASS,INSTRUCTION_MISSED,INSTRUCTION_COVERED,...
_MISSED_COL = 3
_COVERED_COL = 4
_MIN_COVERAGE_COLS = 5


def to_int(value: Optional[str]) -> int:
    """Parse a plain run of ASCII digits, returning 0 for anything else.

    Signs, underscores and non-ASCII digits, all of which ``int()`` accepts,
    are rejected.
    """
    if value is None:
        return 0
    digits = value.strip()
    if not (digits.isascii() and digits.isdigit()):
        return 0
    return int(digits)


def parse_result_text(
    text: str, failure_mode: FailureMode = FailureMode.FILE
) -> FileResult:
    """Parse one result file into a partial aggregate.

    Args:
        text: Raw file content.
        failure_mode: Failure attribution policy, see :class:`FailureMode`.

    Returns:
        The file's totals, case records (in document order) and suite map.
    """
    mode = FailureMode(failure_mode)
    try:
        root = ET.fromstring(text)
    except (ET.ParseError, ValueError) as e:
        logger.debug(f"Result text is not well-formed XML ({e}); using text scan")
        tests, failed, raw_cases = _scan_text(text)
    else:
        tests, failed, raw_cases = _walk_tree(root)

    if mode is FailureMode.FILE:
        file_failed = failed > 0
    elif mode is FailureMode.MARKUP:
        file_failed = _FAILURE_MARKUP_RE.search(text) is not None
    else:
        file_failed = False

    cases: List[TestCaseRecord] = []
    for attrs, own_failure in raw_cases:
        is_failed = own_failure if mode is FailureMode.CASE else file_failed
        cases.append(
            TestCaseRecord(
                name=attrs.get("name", ""),
                owner_suite=suite_key(attrs.get("classname", "")),
                duration_seconds=attrs.get("time", ""),
                failed=is_failed,
            )
        )
    return FileResult.from_parts(tests, failed, cases)


_RawCase = Tuple[Dict[str, str], bool]


def _local_name(tag: object) -> str:
    """Return ``tag`` without its ``{namespace}`` prefix."""
    if not isinstance(tag, str):
        # Comments and processing instructions
        return ""
    return tag.rsplit("}", 1)[-1]


def _outer_suites(root: ET.Element) -> List[ET.Element]:
    """Return the ``testsuite`` elements below ``root`` not nested in another one."""
    found: List[ET.Element] = []
    pending = list(root)
    while pending:
        el = pending.pop(0)
        if _local_name(el.tag) == "testsuite":
            found.append(el)
        else:
            pending[:0] = list(el)
    return found


def _walk_tree(root: ET.Element) -> Tuple[int, int, List[_RawCase]]:
    """Extract counts and cases from a parsed result tree.

    Counts come from the root when it carries ``tests``; otherwise the
    outermost ``testsuite`` elements below it are summed. Tags match by local
    name, so namespaced documents and wrapper roots parse like plain ones.
    """
    if "tests" in root.attrib:
        count_sources = [root]
    else:
        count_sources = _outer_suites(root)

    tests = sum(to_int(el.get("tests")) for el in count_sources)
    failed = sum(
        to_int(el.get("failures")) + to_int(el.get("errors")) for el in count_sources
    )

    cases: List[_RawCase] = []
    for el in root.iter():
        if _local_name(el.tag) != "testcase":
            continue
        own_failure = any(
            _local_name(child.tag) in ("failure", "error") for child in el
        )
        cases.append((dict(el.attrib), own_failure))
    return tests, failed, cases


def _scan_text(text: str) -> Tuple[int, int, List[_RawCase]]:
    """Regex fallback for result text that is not well-formed XML."""

    def first_count(name: str) -> int:
        match = _COUNT_RE[name].search(text)
        return to_int(match.group(1)) if match else 0

    tests = first_count("tests")
    failed = first_count("failures") + first_count("errors")

    cases: List[_RawCase] = []
    for match in _TESTCASE_RE.finditer(text):
        attrs = dict(_ATTR_RE.findall(match.group(1)))
        self_closing = match.group(2) == "/"
        body = "" if self_closing else match.group(3)
        cases.append((attrs, _FAILURE_MARKUP_RE.search(body) is not None))
    return tests, failed, cases


def iter_coverage_rows(text: str) -> Iterator[Tuple[int, int]]:
    """Yield ``(missed, covered)`` per usable data row; the header is skipped."""
    reader = csv.reader(io.StringIO(text))
    next(reader, None)
    for line_no, row in enumerate(reader, start=2):
        if len(row) < _MIN_COVERAGE_COLS:
            if row:
                logger.debug(f"Skipping coverage row {line_no}: {len(row)} columns")
            continue
        yield to_int(row[_MISSED_COL]), to_int(row[_COVERED_COL])


def parse_coverage_text(text: Optional[str]) -> CoverageSummary:
    """Compute instruction coverage from CSV text.

    ``None`` or text without usable rows gives a 0% summary.
    """
    if not text:
        return CoverageSummary()

    covered_total = 0
    instructions_total = 0
    try:
        for missed, covered in iter_coverage_rows(text):
            instructions_total += missed + covered
            covered_total += covered
    except csv.Error as e:
        logger.warning(f"Coverage CSV is malformed, using rows read so far: {e}")
    return CoverageSummary.from_counts(covered_total, instructions_total)

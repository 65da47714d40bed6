"""testreport: HTML test reports from JUnit XML results and coverage CSV.

The pipeline reads JUnit-style result files and a JaCoCo-style coverage CSV,
aggregates them into run totals, per-suite summaries and per-case rows, and
substitutes the figures into an existing HTML template.

Primary API:
    aggregate() - Fold raw result/coverage texts into an AggregateReport
    render() - Substitute report figures into template text
    ReportGenerator - Run scan -> aggregate -> render -> write from a ReportConfig

Example:
    from pathlib import Path
    from testreport import ReportConfig, ReportGenerator

    config = ReportConfig().resolved(Path("service"))
    report = ReportGenerator(config).generate()
    print(report.totals.success_rate_percent)
"""

from __future__ import annotations

from testreport import cli, logging
from testreport._version import __version__
from testreport.aggregate import aggregate
from testreport.config import ConfigError, ReportConfig
from testreport.model import (
    AggregateReport,
    CoverageSummary,
    FileResult,
    RunTotals,
    SuiteSummary,
    TestCaseRecord,
)
from testreport.parsing import FailureMode, parse_coverage_text, parse_result_text
from testreport.render import PLACEHOLDERS, RowLabels, render
from testreport.report import ReportGenerator, TemplateNotFoundError
from testreport.scanner import ArtifactScanner

__all__ = [
    # Version
    "__version__",
    # Model
    "AggregateReport",
    "CoverageSummary",
    "FileResult",
    "RunTotals",
    "SuiteSummary",
    "TestCaseRecord",
    # Pipeline
    "ArtifactScanner",
    "aggregate",
    "parse_result_text",
    "parse_coverage_text",
    "FailureMode",
    "render",
    "RowLabels",
    "PLACEHOLDERS",
    "ReportGenerator",
    # Configuration and errors
    "ReportConfig",
    "ConfigError",
    "TemplateNotFoundError",
    # Utilities
    "cli",
    "logging",
]

"""Report generation pipeline: scan, aggregate, render, write.

``ReportGenerator`` wires the stages together for one run. Missing artifacts
only reduce the report to zeros; a missing template is the one condition that
stops the run.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from testreport.aggregate import aggregate
from testreport.config import ReportConfig
from testreport.logging import get_logger
from testreport.model import AggregateReport
from testreport.render import render
from testreport.scanner import ArtifactScanner
from testreport.utils.output_paths import ensure_parent_dir

logger = get_logger(__name__)


class TemplateNotFoundError(FileNotFoundError):
    """Raised when the report template does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Template not found: {path}")


class ReportGenerator:
    """Generate the HTML report described by a :class:`ReportConfig`."""

    def __init__(self, config: Optional[ReportConfig] = None):
        self.config = config or ReportConfig()

    def scanner(self) -> ArtifactScanner:
        return ArtifactScanner(
            self.config.results_dir,
            self.config.coverage_paths,
            extension=self.config.result_extension,
        )

    def load_template(self) -> str:
        """Read the template text.

        Raises:
            TemplateNotFoundError: If the template path is not a file.
        """
        path = self.config.template_path
        if not path.is_file():
            raise TemplateNotFoundError(path)
        # newline="" keeps CRLF line endings intact
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()

    def collect(self) -> AggregateReport:
        """Scan the artifacts and aggregate them, without rendering."""
        scanner = self.scanner()
        logger.info(f"Reading test results from: {scanner.results_dir}")
        coverage_text = None
        if self.config.coverage_override is None:
            coverage_text = scanner.read_coverage_text()
        else:
            logger.info(f"Using fixed coverage of {self.config.coverage_override}%")
        return aggregate(
            scanner.iter_result_texts(),
            coverage_text,
            failure_mode=self.config.failure_mode,
            coverage_override=self.config.coverage_override,
        )

    def render(self, template: str, report: AggregateReport) -> str:
        return render(
            template,
            report.totals,
            report.coverage,
            report.sorted_suites(),
            report.cases,
            report_date=self.config.report_date,
            labels=self.config.labels,
        )

    def generate(self) -> AggregateReport:
        """Run the full pipeline and write the report.

        The template is checked before any artifact is read.

        Returns:
            The aggregate model the report was rendered from.

        Raises:
            TemplateNotFoundError: If the template is missing.
        """
        template = self.load_template()
        report = self.collect()
        html = self.render(template, report)

        output_path = self.config.output_path
        ensure_parent_dir(output_path)
        with open(output_path, "w", encoding="utf-8", newline="") as f:
            f.write(html)
        logger.info(f"Report written to: {output_path}")

        if self.config.summary_path is not None:
            self.write_summary(report, self.config.summary_path)
        return report

    def write_summary(self, report: AggregateReport, path: Path) -> Path:
        """Write the aggregate model as JSON."""
        ensure_parent_dir(path)
        path.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
        logger.info(f"Summary written to: {path}")
        return path

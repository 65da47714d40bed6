"""Command-line interface for testreport."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional

from testreport.config import ConfigError, ReportConfig
from testreport.logging import configure_verbosity, get_logger
from testreport.model import AggregateReport
from testreport.parsing import FailureMode
from testreport.report import ReportGenerator, TemplateNotFoundError

logger = get_logger(__name__)


def _format_table(
    headers: List[str],
    rows: List[List[Any]],
    min_width: int = 8,
    max_col_width: Optional[int] = None,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width
        max_col_width: Clip cells longer than this, if set

    Returns:
        Formatted table string
    """
    if not rows:
        return ""

    def clip(val: Any) -> str:
        s = str(val)
        if max_col_width is not None and len(s) > max_col_width:
            return s[: max_col_width - 3] + "..."
        return s

    clipped_headers = [clip(h) for h in headers]
    clipped_rows = [[clip(item) for item in row] for row in rows]

    all_data = [clipped_headers] + clipped_rows
    col_widths = []
    for col_idx in range(len(clipped_headers)):
        max_width = max(len(row[col_idx]) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{item:<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(clipped_headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    for row in clipped_rows:
        lines.append(format_row(row))
    return "\n".join(lines)


def _format_duration(seconds: float) -> str:
    """Return a concise human-readable duration string.

    Examples:
        0.123 -> "123.0 ms"; 1.234 -> "1.23 s"; 75.2 -> "1m 15.2s".
    """
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    if seconds < 60.0:
        return f"{seconds:.2f} s"
    minutes = int(seconds // 60)
    rem = seconds - minutes * 60
    return f"{minutes}m {rem:.1f}s"


def _plural(n: int, singular: str, plural: Optional[str] = None) -> str:
    if n == 1:
        return singular
    return plural or (singular + "s")


def _build_config(args: argparse.Namespace) -> ReportConfig:
    """Combine the optional config file with command-line overrides.

    Paths typed on the command line are taken relative to the current
    directory. Defaults and config-file paths are anchored at ``--base-dir``,
    or at the config file's directory.
    """
    if args.config is not None:
        config = ReportConfig.load(args.config)
        if args.base_dir is not None:
            logger.warning("--base-dir is ignored when --config is given")
    else:
        config = ReportConfig().resolved(args.base_dir)

    overrides: dict[str, Any] = {
        "results_dir": args.results_dir,
        "coverage_paths": args.coverage,
        "failure_mode": FailureMode(args.failure_mode) if args.failure_mode else None,
    }
    if args.command == "generate":
        overrides.update(
            template_path=args.template,
            output_path=args.output,
            summary_path=args.summary_json,
            coverage_override=args.coverage_override,
            report_date=args.date,
        )
    return config.with_overrides(**overrides)


def _print_summary(report: AggregateReport, show_cases: bool = False) -> None:
    totals = report.totals
    print("Test Summary")
    print("=" * 60)
    print(f"   Total tests:  {totals.total_tests}")
    print(f"   Passed:       {totals.passed_tests}")
    print(f"   Failed:       {totals.failed_tests}")
    print(f"   Success rate: {totals.success_rate_percent}%")
    print(f"   Coverage:     {report.coverage.coverage_percent}%")

    suites = report.sorted_suites()
    print()
    print(f"Suites ({len(suites)})")
    if suites:
        rows = [
            [name, s.test_count, "passed" if s.all_passed else "failed"]
            for name, s in suites
        ]
        print(_format_table(["Suite", "Tests", "Status"], rows, max_col_width=60))
    else:
        print("   (none)")

    if show_cases:
        print()
        print(f"Test cases ({len(report.cases)})")
        if report.cases:
            rows = [
                [
                    c.name,
                    c.owner_suite,
                    f"{c.duration_seconds}s",
                    "failed" if c.failed else "passed",
                ]
                for c in report.cases
            ]
            print(
                _format_table(
                    ["Test", "Suite", "Time", "Status"], rows, max_col_width=60
                )
            )
        else:
            print("   (none)")


def _generate_report(config: ReportConfig) -> None:
    """Run the report pipeline and print where the output went."""
    start = perf_counter()
    try:
        report = ReportGenerator(config).generate()
    except TemplateNotFoundError as e:
        logger.error(f"Template not found: {e.path}")
        print(f"❌ ERROR: Template not found: {e.path}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to generate report: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to generate report: {type(e).__name__}: {e}")
        sys.exit(1)

    totals = report.totals
    print(f"✅ Report written to: {config.output_path}")
    print(
        f"   {totals.total_tests} {_plural(totals.total_tests, 'test')}, "
        f"{totals.failed_tests} failed, {totals.success_rate_percent}% success, "
        f"{report.coverage.coverage_percent}% coverage"
    )
    if config.summary_path is not None:
        print(f"✅ Summary written to: {config.summary_path}")
    logger.info(f"Report generated in {_format_duration(perf_counter() - start)}")


def _inspect_artifacts(config: ReportConfig, show_cases: bool) -> None:
    """Aggregate the artifacts and print the figures without rendering."""
    try:
        report = ReportGenerator(config).collect()
    except Exception as e:
        logger.error(f"Failed to inspect artifacts: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to inspect artifacts: {type(e).__name__}: {e}")
        sys.exit(1)
    _print_summary(report, show_cases=show_cases)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``testreport`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="testreport",
        description="Aggregate JUnit XML results and coverage into an HTML report.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress informational logs"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{generate,inspect}",
        help="Available commands",
    )

    generate_parser = subparsers.add_parser(
        "generate", help="Render the HTML report from test artifacts"
    )
    generate_parser.add_argument(
        "--template", "-t", type=Path, default=None, help="HTML template path"
    )
    generate_parser.add_argument(
        "--output", "-o", type=Path, default=None, help="Rendered report path"
    )
    generate_parser.add_argument(
        "--summary-json",
        type=Path,
        default=None,
        help="Also write the aggregated figures as JSON to this path",
    )
    generate_parser.add_argument(
        "--coverage-override",
        type=int,
        default=None,
        metavar="PERCENT",
        help="Report this coverage percentage instead of reading the CSV",
    )
    generate_parser.add_argument(
        "--date", default=None, help="Report date text (default: today, ISO format)"
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Print aggregated figures without rendering"
    )
    inspect_parser.add_argument(
        "--cases", action="store_true", help="Also list every test case"
    )

    for p in (generate_parser, inspect_parser):
        p.add_argument(
            "--config", "-c", type=Path, default=None, help="YAML configuration file"
        )
        p.add_argument(
            "--base-dir",
            type=Path,
            default=None,
            help="Directory default paths are relative to (default: current directory)",
        )
        p.add_argument(
            "--results-dir", "-r", type=Path, default=None, help="Result XML directory"
        )
        p.add_argument(
            "--coverage",
            type=Path,
            nargs="+",
            default=None,
            help="Coverage CSV path(s); the first existing file is used",
        )
        p.add_argument(
            "--failure-mode",
            choices=[m.value for m in FailureMode],
            default=None,
            help="How test cases are marked failed (default: file)",
        )

    effective_args = sys.argv[1:] if argv is None else argv

    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if configure_verbosity(args.verbose, args.quiet) == logging.DEBUG:
        logger.debug("Debug logging enabled")

    try:
        config = _build_config(args)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"❌ ERROR: Invalid configuration: {e}")
        sys.exit(1)

    if args.command == "generate":
        _generate_report(config)
    elif args.command == "inspect":
        _inspect_artifacts(config, args.cases)


if __name__ == "__main__":
    main()

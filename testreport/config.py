"""Configuration for report generation.

``ReportConfig`` holds every input and output location plus the rendering
options. Defaults follow the Gradle build layout the artifacts come from. A
configuration can be loaded from a YAML file; the file is validated against
the packaged JSON schema and its relative paths are resolved against the
file's directory.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from datetime import date
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import jsonschema
import yaml

from testreport.logging import get_logger
from testreport.parsing import FailureMode
from testreport.render import RowLabels
from testreport.utils.output_paths import resolve_optional_path, resolve_path

logger = get_logger(__name__)

DEFAULT_RESULTS_DIR = Path("build/test-results/test")
DEFAULT_COVERAGE_PATHS = (
    Path("build/reports/jacoco/jacocoTestReport.csv"),
    Path("build/reports/jacoco/test/jacocoTestReport.csv"),
)
DEFAULT_TEMPLATE_PATH = Path("src/test/resources/test-report-template.html")
DEFAULT_OUTPUT_PATH = Path("build/reports/test-report.html")


class ConfigError(ValueError):
    """Raised when a configuration file cannot be used."""


@dataclass
class ReportConfig:
    """Locations and options for one report-generation run."""

    results_dir: Path = DEFAULT_RESULTS_DIR
    result_extension: str = ".xml"
    coverage_paths: List[Path] = field(
        default_factory=lambda: list(DEFAULT_COVERAGE_PATHS)
    )
    template_path: Path = DEFAULT_TEMPLATE_PATH
    output_path: Path = DEFAULT_OUTPUT_PATH

    # Optional JSON dump of the aggregate model
    summary_path: Optional[Path] = None

    failure_mode: FailureMode = FailureMode.FILE

    # Report this coverage percentage instead of reading the CSV
    coverage_override: Optional[int] = None

    # ISO date of the run when None
    report_date: Optional[str] = None

    labels: RowLabels = field(default_factory=RowLabels)

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], base_dir: Optional[Path] = None
    ) -> ReportConfig:
        """Build a configuration from a validated mapping.

        Keys that are absent keep their defaults. Relative paths given in
        ``data`` are resolved against ``base_dir``; defaults are resolved
        against it as well so a config file anchors the whole layout.
        """
        config = cls().resolved(base_dir)
        updates: Dict[str, Any] = {}
        for key in ("results_dir", "template_path", "output_path"):
            if key in data:
                updates[key] = resolve_path(data[key], base_dir)
        if "summary_path" in data:
            updates["summary_path"] = resolve_optional_path(
                data["summary_path"], base_dir
            )
        if "coverage_paths" in data:
            raw = data["coverage_paths"]
            paths = [raw] if isinstance(raw, str) else list(raw)
            updates["coverage_paths"] = [resolve_path(p, base_dir) for p in paths]
        if "result_extension" in data:
            updates["result_extension"] = data["result_extension"]
        if "failure_mode" in data:
            updates["failure_mode"] = FailureMode(data["failure_mode"])
        for key in ("coverage_override", "report_date"):
            if key in data:
                updates[key] = data[key]
        if "labels" in data:
            updates["labels"] = RowLabels(**data["labels"])
        return replace(config, **updates)

    @classmethod
    def load(cls, path: Union[str, Path]) -> ReportConfig:
        """Load and validate a YAML configuration file.

        Raises:
            ConfigError: If the file is missing, not YAML, or fails validation.
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        data = load_config_yaml(text)
        logger.info(f"Loaded configuration from: {path}")
        return cls.from_dict(data, base_dir=path.parent)

    def resolved(self, base_dir: Optional[Path]) -> ReportConfig:
        """Return a copy with every path resolved against ``base_dir``."""
        return replace(
            self,
            results_dir=resolve_path(self.results_dir, base_dir),
            coverage_paths=[resolve_path(p, base_dir) for p in self.coverage_paths],
            template_path=resolve_path(self.template_path, base_dir),
            output_path=resolve_path(self.output_path, base_dir),
            summary_path=resolve_optional_path(self.summary_path, base_dir),
        )

    def with_overrides(self, **overrides: Any) -> ReportConfig:
        """Return a copy with the given non-``None`` fields replaced."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown config field(s): {', '.join(sorted(unknown))}")
        updates = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **updates)


_RECOGNIZED_KEYS = {f.name for f in fields(ReportConfig)}


def _load_schema() -> Dict[str, Any]:
    try:
        with (
            resources.files("testreport.schemas")
            .joinpath("config.json")
            .open("r", encoding="utf-8")
        ) as f:
            return json.load(f)
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "Failed to locate packaged schema 'testreport/schemas/config.json'."
        ) from exc


def load_config_yaml(yaml_str: str) -> Dict[str, Any]:
    """Parse and validate configuration YAML into a plain mapping.

    An empty document is an empty configuration.

    Raises:
        ConfigError: On YAML syntax errors, a non-mapping document, unknown
            top-level keys, or schema violations.
    """
    try:
        data = yaml.safe_load(yaml_str)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("The config YAML must map to a dictionary at top-level.")

    data = {str(k): v for k, v in data.items()}
    # YAML turns an unquoted 2024-01-31 into a date object
    if isinstance(data.get("report_date"), date):
        data["report_date"] = data["report_date"].isoformat()

    extra = set(data) - _RECOGNIZED_KEYS
    if extra:
        raise ConfigError(
            f"Unrecognized key(s) in config: {', '.join(sorted(extra))}. "
            f"Allowed keys are {sorted(_RECOGNIZED_KEYS)}"
        )

    try:
        jsonschema.validate(data, _load_schema())
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigError(f"Invalid config at {location}: {e.message}") from e
    return data

"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (COVMERGE__SECTION__KEY)
3. Repo YAML (<root>/.covmerge.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    COVMERGE__<SECTION>__<KEY>=<VALUE>

Examples:
    COVMERGE__LOGGING__LEVEL=DEBUG
    COVMERGE__FRAGMENTS__DIRECTORY=/tmp/coverage-parts
    COVMERGE__MERGE__INCLUDE='["src", "lib"]'
    COVMERGE__REMAP__CONTAINER_ROOT=/opt/app/

Relative paths are resolved against the workspace root by the loader.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
ReportFormat = Literal["clover", "cobertura"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        COVMERGE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG lists every fragment and remapped path.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class FragmentsConfig(BaseModel):
    """Fragment store location.

    Env vars:
        COVMERGE__FRAGMENTS__DIRECTORY: Directory holding fragment files
        COVMERGE__FRAGMENTS__PATTERN: Glob used to discover fragments
    """

    directory: str = Field(
        default="coverage-parts",
        description="Directory where capture sessions write one fragment per process.",
    )
    pattern: str = Field(
        default="*.json",
        description="Glob matched against file names in the fragment directory.",
    )


class CaptureConfig(BaseModel):
    """Fragment writer configuration.

    Env vars:
        COVMERGE__CAPTURE__ENABLED: Turn capture off without removing the bootstrap hook
    """

    enabled: bool = Field(
        default=True,
        description="When false, capture sessions are silent no-ops.",
    )
    source: list[str] = Field(
        default_factory=list,
        description="Restrict measurement to these directories. Empty measures everything.",
    )
    fragment_dir: str = Field(
        default="coverage-parts",
        description="Where the fragment is written. Filled from fragments.directory by the loader.",
    )


class MergeConfig(BaseModel):
    """Aggregation and report configuration.

    Env vars:
        COVMERGE__MERGE__INCLUDE: JSON list of directories eligible for the report
        COVMERGE__MERGE__OUTPUT: Report path
        COVMERGE__MERGE__FORMAT: clover or cobertura
    """

    include: list[str] = Field(
        default_factory=lambda: ["src"],
        description="Inclusion scope. Coverage for paths outside these directories is dropped.",
    )
    output: str = Field(
        default="coverage/clover.xml",
        description="Report destination. Overwritten on every run.",
    )
    format: ReportFormat = Field(
        default="clover",
        description="Report format.",
    )


class RemapRuleConfig(BaseModel):
    """One from->to prefix pair."""

    from_prefix: str
    to_prefix: str

    @field_validator("from_prefix")
    @classmethod
    def validate_from_prefix(cls, v: str) -> str:
        if not v:
            raise ValueError("from_prefix must not be empty")
        return v


class RemapConfig(BaseModel):
    """Path canonicalization configuration.

    Env vars:
        COVMERGE__REMAP__CONTAINER_ROOT: Execution root mapped onto the workspace root
        COVMERGE__REMAP__COVERAGE_FILE: JSON coverage data file rewritten in place
        COVMERGE__REMAP__NYC_CONFIG: nyc config whose map-path is updated
    """

    rules: list[RemapRuleConfig] = Field(
        default_factory=list,
        description="Ordered prefix rules; the first matching rule wins.",
    )
    container_root: str | None = Field(
        default=None,
        description="Shorthand for a rule mapping this root onto the workspace root. "
        "Appended after explicit rules.",
    )
    coverage_file: str = Field(
        default="coverage/coverage-final.json",
        description="Aggregate coverage data produced by JS instrumentation.",
    )
    nyc_config: str = Field(
        default=".nycrc",
        description="nyc configuration file whose map-path field is rewritten.",
    )


class CovmergeConfig(BaseModel):
    """Root configuration for covmerge.

    All settings can be configured via:
    1. Environment variables: COVMERGE__SECTION__KEY
    2. <root>/.covmerge.yaml
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    fragments: FragmentsConfig = Field(default_factory=FragmentsConfig)
    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    merge: MergeConfig = Field(default_factory=MergeConfig)
    remap: RemapConfig = Field(default_factory=RemapConfig)

"""Unified line coverage: model, merging, scope and reporting.

Usage:
    from covmerge.coverage import InclusionScope, merge, write_report

    merged = merge(model1, model2, model3)
    write_report(merged, Path("coverage/clover.xml"))

Supported report formats:
    - clover: PHPUnit-style Clover XML
    - cobertura: Cobertura XML
"""

from covmerge.coverage.merge import merge, merge_file_coverage, merge_lines, merge_models
from covmerge.coverage.models import (
    CoverageFragment,
    CoverageModel,
    CoverageParseError,
    CoverageSummary,
    FileCoverage,
    LineStatus,
)
from covmerge.coverage.report import (
    RENDERERS,
    build_text_summary,
    render_clover,
    render_cobertura,
    render_report,
    write_report,
)
from covmerge.coverage.scope import InclusionScope

__all__ = [
    # Models
    "CoverageFragment",
    "CoverageModel",
    "CoverageParseError",
    "CoverageSummary",
    "FileCoverage",
    "LineStatus",
    # Scope
    "InclusionScope",
    # Merge
    "merge",
    "merge_file_coverage",
    "merge_lines",
    "merge_models",
    # Report
    "RENDERERS",
    "build_text_summary",
    "render_clover",
    "render_cobertura",
    "render_report",
    "write_report",
]

"""Report emission: XML interchange formats and a one-line text summary.

Two XML formats are supported, both rendered only from the CoverageModel
(scope decisions happened during aggregation):

Clover (the PHPUnit flavour)::

    <coverage generated="...">
      <project timestamp="...">
        <file name="/abs/path/a.php">
          <line num="10" type="stmt" count="1"/>
          <metrics loc="..." statements="..." coveredstatements="..." .../>
        </file>
        <metrics files="..." .../>
      </project>
    </coverage>

Cobertura::

    <coverage line-rate="..." lines-valid="..." lines-covered="..." ...>
      <sources/>
      <packages>
        <package name="dir">
          <classes>
            <class name="a.php" filename="/abs/dir/a.php" line-rate="...">
              <methods/>
              <lines><line number="10" hits="1"/></lines>
            </class>
          </classes>
        </package>
      </packages>
    </coverage>

Only executable lines are listed; dead lines never reach the report. Files
and lines are emitted in sorted order, so the same model and timestamp always
produce byte-identical output.
"""

import io
import posixpath
import time
import xml.etree.ElementTree as ET
from collections.abc import Callable
from pathlib import Path

import structlog

from covmerge import __version__
from covmerge.coverage.models import CoverageModel, FileCoverage, LineStatus
from covmerge.core.atomic import atomic_write
from covmerge.core.errors import ReportError

log = structlog.get_logger()


def _serialize(root: ET.Element) -> bytes:
    tree = ET.ElementTree(root)
    ET.indent(tree, space="  ")
    buf = io.BytesIO()
    tree.write(buf, encoding="UTF-8", xml_declaration=True)
    buf.write(b"\n")
    return buf.getvalue()


def _rate(hit: int, found: int) -> str:
    return f"{hit / found:.4f}" if found else "0"


def _clover_metrics(parent: ET.Element, *, loc: int, statements: int, covered: int) -> ET.Element:
    return ET.SubElement(
        parent,
        "metrics",
        {
            "loc": str(loc),
            "ncloc": str(loc),
            "classes": "0",
            "methods": "0",
            "coveredmethods": "0",
            "conditionals": "0",
            "coveredconditionals": "0",
            "statements": str(statements),
            "coveredstatements": str(covered),
            "elements": str(statements),
            "coveredelements": str(covered),
        },
    )


def _loc(fc: FileCoverage) -> int:
    return max(fc.lines, default=0)


def render_clover(model: CoverageModel, *, timestamp: int) -> bytes:
    """Render the model as Clover XML."""
    root = ET.Element("coverage", {"generated": str(timestamp)})
    project = ET.SubElement(root, "project", {"timestamp": str(timestamp)})

    total_loc = 0
    for path in sorted(model.files):
        fc = model.files[path]
        file_elem = ET.SubElement(project, "file", {"name": path})
        for num, status in fc.executable_lines.items():
            ET.SubElement(
                file_elem,
                "line",
                {
                    "num": str(num),
                    "type": "stmt",
                    "count": "1" if status is LineStatus.HIT else "0",
                },
            )
        loc = _loc(fc)
        total_loc += loc
        _clover_metrics(file_elem, loc=loc, statements=fc.lines_found, covered=fc.lines_hit)

    summary = model.summary
    project_metrics = _clover_metrics(
        project, loc=total_loc, statements=summary.lines_found, covered=summary.lines_hit
    )
    project_metrics.set("files", str(summary.files))
    return _serialize(root)


def render_cobertura(model: CoverageModel, *, timestamp: int) -> bytes:
    """Render the model as Cobertura XML, one package per directory."""
    summary = model.summary
    root = ET.Element(
        "coverage",
        {
            "version": __version__,
            "timestamp": str(timestamp * 1000),
            "lines-valid": str(summary.lines_found),
            "lines-covered": str(summary.lines_hit),
            "line-rate": _rate(summary.lines_hit, summary.lines_found),
            "branches-valid": "0",
            "branches-covered": "0",
            "branch-rate": "0",
            "complexity": "0",
        },
    )
    ET.SubElement(root, "sources")
    packages = ET.SubElement(root, "packages")

    by_dir: dict[str, list[FileCoverage]] = {}
    for path in sorted(model.files):
        by_dir.setdefault(posixpath.dirname(path), []).append(model.files[path])

    for directory, files in by_dir.items():
        found = sum(fc.lines_found for fc in files)
        hit = sum(fc.lines_hit for fc in files)
        package = ET.SubElement(
            packages,
            "package",
            {
                "name": directory,
                "line-rate": _rate(hit, found),
                "branch-rate": "0",
                "complexity": "0",
            },
        )
        classes = ET.SubElement(package, "classes")
        for fc in files:
            cls = ET.SubElement(
                classes,
                "class",
                {
                    "name": posixpath.basename(fc.path),
                    "filename": fc.path,
                    "line-rate": _rate(fc.lines_hit, fc.lines_found),
                    "branch-rate": "0",
                    "complexity": "0",
                },
            )
            ET.SubElement(cls, "methods")
            lines = ET.SubElement(cls, "lines")
            for num, status in fc.executable_lines.items():
                ET.SubElement(
                    lines,
                    "line",
                    {"number": str(num), "hits": "1" if status is LineStatus.HIT else "0"},
                )

    return _serialize(root)


RENDERERS: dict[str, Callable[..., bytes]] = {
    "clover": render_clover,
    "cobertura": render_cobertura,
}


def render_report(
    model: CoverageModel,
    *,
    fmt: str = "clover",
    timestamp: int | None = None,
) -> bytes:
    """Render the model in the requested format.

    Raises:
        ReportError: If the format is unknown.
    """
    renderer = RENDERERS.get(fmt)
    if renderer is None:
        raise ReportError.unknown_format(fmt)
    return renderer(model, timestamp=int(time.time()) if timestamp is None else timestamp)


def write_report(
    model: CoverageModel,
    output: Path,
    *,
    fmt: str = "clover",
    timestamp: int | None = None,
) -> Path:
    """Render the model and atomically replace ``output`` with it.

    The document is rendered fully in memory and written to a temporary file
    next to ``output`` before being moved over it, so a failed run leaves the
    previous report untouched.

    Raises:
        ReportError: On unknown format or any I/O failure.
    """
    payload = render_report(model, fmt=fmt, timestamp=timestamp)

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        atomic_write(output, payload)
    except OSError as e:
        raise ReportError.write_failed(str(output), str(e)) from e

    log.info("report_written", path=str(output), format=fmt, files=len(model.files))
    return output


def build_text_summary(model: CoverageModel) -> str:
    """Build a concise text summary for display contexts."""
    summary = model.summary
    if summary.lines_found == 0:
        return "No coverage data"

    percent = summary.line_rate * 100.0
    return f"Coverage: {percent:.1f}% ({summary.lines_hit}/{summary.lines_found} lines)"

"""Tests for the capture command."""

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from click.testing import CliRunner

import covmerge.capture.session as session_module
from covmerge.cli.main import cli


class _StubCoverage:
    """Records one executed line for whatever file it is asked about."""

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs

    @classmethod
    def current(cls) -> None:
        return None

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass

    def get_data(self) -> SimpleNamespace:
        return SimpleNamespace(measured_files=lambda: ["/app/src/a.py"], lines=lambda _f: [1])

    def analysis2(self, filename: str) -> tuple[str, list[int], list[int], list[int], str]:
        return filename, [1, 2], [], [2], "2"


@pytest.fixture(autouse=True)
def _stub_coverage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(session_module, "coverage", SimpleNamespace(Coverage=_StubCoverage))


class TestCaptureCommand:
    """Running a script under capture."""

    def test_runs_script_and_writes_fragment(self, tmp_path: Path) -> None:
        marker = tmp_path / "argv.json"
        script = tmp_path / "job.py"
        script.write_text(
            "import json, sys\n"
            f"open({str(marker)!r}, 'w').write(json.dumps(sys.argv[1:]))\n"
        )

        result = CliRunner().invoke(
            cli, ["--root", str(tmp_path), "capture", str(script), "--flag", "x"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(marker.read_text()) == ["--flag", "x"]
        fragments = list((tmp_path / "coverage-parts").iterdir())
        assert len(fragments) == 1
        assert json.loads(fragments[0].read_text()) == {"/app/src/a.py": {"1": 1, "2": -1}}

    def test_exit_code_passed_through(self, tmp_path: Path) -> None:
        script = tmp_path / "fail.py"
        script.write_text("raise SystemExit(3)\n")

        result = CliRunner().invoke(cli, ["--root", str(tmp_path), "capture", str(script)])

        assert result.exit_code == 3
        assert len(list((tmp_path / "coverage-parts").iterdir())) == 1

    def test_disabled_capture_still_runs_script(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("COVMERGE__CAPTURE__ENABLED", "false")
        marker = tmp_path / "ran"
        script = tmp_path / "job.py"
        script.write_text(f"open({str(marker)!r}, 'w').close()\n")

        result = CliRunner().invoke(cli, ["--root", str(tmp_path), "capture", str(script)])

        assert result.exit_code == 0, result.output
        assert marker.exists()
        assert "capture unavailable" in result.output
        assert not (tmp_path / "coverage-parts").exists()

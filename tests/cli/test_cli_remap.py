"""Tests for the remap and nyc-config commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from covmerge.cli.main import cli

CONFIG = "remap:\n  container_root: /opt/omegaup\n"


@pytest.fixture
def root(tmp_path: Path) -> Path:
    resolved = tmp_path.resolve()
    (resolved / ".covmerge.yaml").write_text(CONFIG)
    return resolved


class TestRemapCommand:
    """Canonicalizing coverage data files."""

    def test_default_file(self, root: Path) -> None:
        coverage_file = root / "coverage" / "coverage-final.json"
        coverage_file.parent.mkdir()
        coverage_file.write_text(
            json.dumps({"/opt/omegaup/www/a.js": {"path": "/opt/omegaup/www/a.js"}})
        )

        result = CliRunner().invoke(cli, ["--root", str(root), "remap"])

        assert result.exit_code == 0, result.output
        assert "remapped 1 path" in result.output
        expected = str(root / "www" / "a.js")
        assert json.loads(coverage_file.read_text()) == {expected: {"path": expected}}

    def test_missing_default_file(self, root: Path) -> None:
        result = CliRunner().invoke(cli, ["--root", str(root), "remap"])

        assert result.exit_code == 0, result.output
        assert "not found, skipped" in result.output

    def test_failure_does_not_stop_other_files(self, root: Path) -> None:
        bad = root / "bad.json"
        bad.write_text("{broken")
        good = root / "good.json"
        good.write_text(json.dumps({"/opt/omegaup/a.js": {}}))

        result = CliRunner().invoke(cli, ["--root", str(root), "remap", str(bad), str(good)])

        assert result.exit_code == 1
        assert "REMAP_READ_FAILED" in result.output
        assert json.loads(good.read_text()) == {str(root / "a.js"): {}}


class TestNycConfigCommand:
    """Exporting map-path to nyc."""

    def test_prints_config(self, root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COVMERGE__LOGGING__LEVEL", "WARNING")
        (root / ".nycrc").write_text(json.dumps({"all": True}))

        result = CliRunner().invoke(cli, ["--root", str(root), "nyc-config"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "all": True,
            "map-path": [["/opt/omegaup/", f"{root}/"]],
        }
        assert json.loads((root / ".nycrc").read_text()) == {"all": True}

    def test_write(self, root: Path) -> None:
        result = CliRunner().invoke(cli, ["--root", str(root), "nyc-config", "--write"])

        assert result.exit_code == 0, result.output
        assert json.loads((root / ".nycrc").read_text()) == {
            "map-path": [["/opt/omegaup/", f"{root}/"]]
        }

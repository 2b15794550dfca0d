"""Tests for config/models.py defaults and validation."""

import pytest
from pydantic import ValidationError

from covmerge.config.models import (
    CaptureConfig,
    CovmergeConfig,
    MergeConfig,
    RemapConfig,
    RemapRuleConfig,
)


class TestDefaults:
    """Built-in defaults."""

    def test_root_config_sections(self) -> None:
        config = CovmergeConfig()

        assert config.logging.level == "INFO"
        assert config.fragments.directory == "coverage-parts"
        assert config.fragments.pattern == "*.json"
        assert config.capture.enabled is True
        assert config.merge.include == ["src"]
        assert config.remap.container_root is None

    def test_capture_defaults(self) -> None:
        config = CaptureConfig()

        assert config.source == []
        assert config.fragment_dir == "coverage-parts"

    def test_include_lists_are_independent(self) -> None:
        a, b = MergeConfig(), MergeConfig()
        a.include.append("lib")

        assert b.include == ["src"]


class TestValidation:
    """Rejected values."""

    def test_unknown_format(self) -> None:
        with pytest.raises(ValidationError):
            MergeConfig(format="lcov")  # type: ignore[arg-type]

    def test_empty_from_prefix(self) -> None:
        with pytest.raises(ValidationError):
            RemapRuleConfig(from_prefix="", to_prefix="/x/")

    def test_empty_to_prefix_allowed(self) -> None:
        rule = RemapRuleConfig(from_prefix="/build/", to_prefix="")

        assert rule.to_prefix == ""

    def test_rules_parse_from_dicts(self) -> None:
        config = RemapConfig.model_validate(
            {"rules": [{"from_prefix": "/opt/app/", "to_prefix": "/src/"}]}
        )

        assert config.rules[0].to_prefix == "/src/"

"""Config module exports."""

from covmerge.config.loader import load_config
from covmerge.config.models import (
    CaptureConfig,
    CovmergeConfig,
    FragmentsConfig,
    LoggingConfig,
    MergeConfig,
    RemapConfig,
    RemapRuleConfig,
)

__all__ = [
    "load_config",
    "CaptureConfig",
    "CovmergeConfig",
    "FragmentsConfig",
    "LoggingConfig",
    "MergeConfig",
    "RemapConfig",
    "RemapRuleConfig",
]

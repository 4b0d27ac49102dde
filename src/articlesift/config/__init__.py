"""Configuration models and the lazily loaded global settings."""

from .config import (
    Config,
    CrawlerConfig,
    ExtractionSettings,
    MonitoringConfig,
    ScoringWeights,
    WebConfig,
    find_config_file,
    settings,
)

__all__ = [
    "Config",
    "CrawlerConfig",
    "ExtractionSettings",
    "MonitoringConfig",
    "ScoringWeights",
    "WebConfig",
    "find_config_file",
    "settings",
]

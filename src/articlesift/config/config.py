"""
Configuration management for ArticleSift using Pydantic.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, ClassVar, cast

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)


class CrawlerConfig(BaseModel):
    """HTTP fetch configuration."""

    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; ArticleSiftBot/1.0; +https://github.com/articlesift/articlesift)",
        description="User-Agent string for HTTP requests.",
    )
    timeout: float = Field(default=30.0, gt=0, description="Socket-level HTTP timeout in seconds.")
    max_connections: int = Field(default=20, ge=1, description="Size of the shared connection pool.")


class ScoringWeights(BaseModel):
    """Every weight and threshold used by the structured-data score, confidence and accessibility heuristics."""

    # Structured data performance score
    structured_present: int = 30
    body_full: int = 40
    body_partial: int = 25
    body_short: int = 10
    description_only: int = 15
    structured_author: int = 10
    structured_date: int = 10
    structured_keywords: int = 10
    body_full_length: int = 1000
    body_partial_length: int = 200
    use_structured_min_score: int = 80
    hybrid_min_score: int = 35

    # Confidence
    title: int = 20
    content_full_length: int = 1000
    content_substantial_length: int = 500
    content_some_length: int = 200
    content_minimal_length: int = 50
    content_over_1000: int = 40
    content_over_500: int = 30
    content_over_200: int = 20
    content_over_50: int = 10
    content_minimal: int = 5
    author: int = 10
    date: int = 10
    excerpt: int = 5
    lead_image: int = 5
    full_content_bonus: int = 10
    partial_content_penalty: int = 15
    partial_content_floor: int = 20
    keywords: int = 5
    publisher: int = 5
    suspicious_short_length: int = 300
    suspicious_short_penalty: int = 20
    suspicious_short_floor: int = 30
    paywall_metadata_floor: int = 65

    # Accessibility
    paywall_short_length: int = 200
    no_content_length: int = 50

    @model_validator(mode="after")
    def check_non_negative(self) -> "ScoringWeights":
        for name, value in self:
            if value < 0:
                raise ValueError(f"scoring weight '{name}' must not be negative")
        return self


class ExtractionSettings(BaseModel):
    """Configuration for the hybrid extraction pipeline."""

    stage_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("EXTRACTION_STAGE_TIMEOUT", "15.0")),
        description="Deadline for each network-bound stage",
    )
    readability_min_text_length: int = Field(default=25, ge=0)
    readability_retry_length: int = Field(default=250, ge=0)
    scoring: ScoringWeights = Field(default_factory=ScoringWeights)

    @field_validator("stage_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Ensure the stage deadline is positive."""
        if v <= 0:
            raise ValueError("stage_timeout_seconds must be positive")
        return v


class WebConfig(BaseModel):
    """Configuration for the HTTP API."""

    host: str = Field(default="127.0.0.1", description="Host for the web server.")
    port: int = Field(default=8000, description="Port for the web server.")


class MonitoringConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs to console.",
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


class Config(BaseSettings):
    """Top-level settings. Values come from YAML, then ``ARTICLESIFT_*`` environment overrides."""

    project_name: str = "ArticleSift"
    crawler: CrawlerConfig = Field(default_factory=CrawlerConfig)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    web: WebConfig = Field(default_factory=WebConfig)

    model_config = SettingsConfigDict(env_prefix="ARTICLESIFT_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        if not path.is_file():
            raise FileNotFoundError(f"No configuration file at {path}")
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not raw:
            log.warning("Empty configuration file %s, using defaults", path)
            raw = {}
        log.debug("Loaded configuration from %s", path)
        return cls.model_validate(raw)


CONFIG_FILE_NAMES = ("config.yaml", "config.yml")


def find_config_file() -> Path | None:
    """Return the first config file in the working directory, if any."""
    for name in CONFIG_FILE_NAMES:
        candidate = Path.cwd() / name
        if candidate.exists():
            return candidate
    return None


def load_settings() -> Config:
    """
    Build settings from the working directory's config file.

    A config file that fails to parse or validate is logged and replaced by
    defaults so that the library stays importable; invalid defaults are fatal.
    """
    path = find_config_file()
    if path is not None:
        try:
            return Config.from_yaml(path)
        except (ValidationError, yaml.YAMLError) as e:
            log.error("Ignoring invalid configuration file %s: %s", path, e)

    try:
        return Config()
    except ValidationError as e:
        raise RuntimeError(f"Default configuration is invalid: {e}") from e


class LazyConfig:
    """Proxy that defers ``load_settings`` until the first attribute access."""

    _lock: ClassVar[threading.Lock] = threading.Lock()
    _loaded: ClassVar[Config | None] = None

    @classmethod
    def _resolve(cls) -> Config:
        with cls._lock:
            if cls._loaded is None:
                cls._loaded = load_settings()
            return cls._loaded

    def __getattr__(self, name: str) -> Any:
        return getattr(self._resolve(), name)


settings: Config = cast(Config, LazyConfig())

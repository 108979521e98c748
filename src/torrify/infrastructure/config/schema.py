"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]

# Per-call timeout used when running on a serverless platform and no
# explicit search.timeout_seconds was configured.
SERVERLESS_SEARCH_TIMEOUT_SECONDS = 25.0

class AdapterOverride(BaseModel):
    """Per-adapter overrides (YAML section: adapters.<key>.*).

    Every field is optional; unset fields keep the built-in default.
    """

    enabled: Optional[bool] = None
    display_name: Optional[str] = None
    base_url: Optional[str] = None
    mirrors: Optional[list[str]] = None
    category_affinity: Optional[list[str]] = None
    timeout_ms: Optional[int] = Field(default=None, gt=0)
    rate_limit_ms: Optional[int] = Field(default=None, ge=0)
    check_relevance: Optional[bool] = None

class SearchConfig(BaseModel):
    """Fan-out and response shaping (YAML section: search.*)."""

    timeout_seconds: Optional[float] = Field(
        default=None,
        description=(
            "Per-adapter call timeout. If unset: 15s, or 25s when serverless."
        ),
    )
    max_concurrent: int = Field(
        default=4,
        description="Adapters launched per batch.",
    )
    batch_cooldown_seconds: float = Field(
        default=1.0,
        description="Pause between batches.",
    )
    request_deadline_seconds: Optional[float] = Field(
        default=45.0,
        description="Global budget for one search; later batches are skipped.",
    )
    default_limit: int = Field(default=50, description="Results when limit is unset.")
    max_limit: int = Field(default=100, description="Upper bound for limit.")
    per_adapter_limit: int = Field(
        default=100,
        description="Rows parsed per adapter call.",
    )
    serverless: bool = Field(
        default=False,
        description="Running on a serverless platform (no browser, longer timeout).",
    )
    enrich: bool = Field(
        default=True,
        description="Fetch detail pages for rows that lack a magnet link.",
    )
    enrich_max_concurrent: int = Field(default=5)
    enrich_timeout_seconds: float = Field(default=10.0)

    @field_validator(
        "timeout_seconds",
        "request_deadline_seconds",
        "enrich_timeout_seconds",
    )
    @classmethod
    def _validate_positive(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @field_validator(
        "max_concurrent",
        "default_limit",
        "max_limit",
        "per_adapter_limit",
        "enrich_max_concurrent",
    )
    @classmethod
    def _validate_count(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @field_validator("batch_cooldown_seconds")
    @classmethod
    def _validate_cooldown(cls, v: float) -> float:
        if v < 0:
            raise ValueError("batch_cooldown_seconds must be >= 0")
        return v

    @model_validator(mode="after")
    def _validate_limits(self) -> "SearchConfig":
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit must be <= max_limit")
        return self

    @property
    def effective_timeout_seconds(self) -> float:
        if self.timeout_seconds is not None:
            return self.timeout_seconds
        return SERVERLESS_SEARCH_TIMEOUT_SECONDS if self.serverless else 15.0

class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/playwright/logging/cache/search/adapters).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="torrify", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Default timeout of the shared HTTP client.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing requests. If unset, a desktop Chrome UA.",
    )

    # Playwright (YAML section: playwright.*)
    playwright_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "playwright_enabled",
            AliasPath("playwright", "enabled"),
        ),
        description="Allow browser-capable adapters to render pages in Chromium.",
    )
    playwright_headless: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "playwright_headless",
            AliasPath("playwright", "headless"),
        ),
        description="Run Playwright headless.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Response cache (YAML section: cache.*)
    cache_max_entries: int = Field(
        default=1000,
        validation_alias=AliasChoices(
            "cache_max_entries",
            AliasPath("cache", "max_entries"),
        ),
        description="Maximum cached search responses (LRU).",
    )
    cache_ttl_seconds: float = Field(
        default=900.0,
        validation_alias=AliasChoices(
            "cache_ttl_seconds",
            AliasPath("cache", "ttl_seconds"),
        ),
        description="Absolute lifetime of a cached response.",
    )

    search: SearchConfig = Field(default_factory=SearchConfig)

    adapters: dict[str, AdapterOverride] = Field(
        default_factory=dict,
        description="Per-adapter overrides keyed by adapter key.",
    )

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("cache_max_entries")
    @classmethod
    def _validate_cache_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("cache_max_entries must be >= 1")
        return v

    @field_validator("cache_ttl_seconds")
    @classmethod
    def _validate_cache_ttl(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("cache_ttl_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    @property
    def browser_enabled(self) -> bool:
        """Process capability flag: may adapters use the headless browser?"""
        return self.playwright_enabled and not self.search.serverless

class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read TORRIFY_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - TORRIFY_ENVIRONMENT
    - TORRIFY_SEARCH_TIMEOUT_SECONDS
    - TORRIFY_SERVERLESS
    - TORRIFY_PLAYWRIGHT_ENABLED
    - TORRIFY_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="TORRIFY_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    playwright_enabled: Optional[bool] = None
    playwright_headless: Optional[bool] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_max_entries: Optional[int] = None
    cache_ttl_seconds: Optional[float] = None

    search_timeout_seconds: Optional[float] = None
    search_max_concurrent: Optional[int] = None
    search_batch_cooldown_seconds: Optional[float] = None
    search_request_deadline_seconds: Optional[float] = None
    search_default_limit: Optional[int] = None
    search_max_limit: Optional[int] = None
    search_enrich: Optional[bool] = None
    serverless: Optional[bool] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)

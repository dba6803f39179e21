"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional
from urllib.parse import quote

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
HttpMethod = Literal["GET", "POST"]


class RelayEndpoint(BaseModel):
    """A raw CORS relay: ``prefix + quote(target_url)`` returns the target body."""

    name: str
    prefix: str

    def wrap(self, target_url: str) -> str:
        return self.prefix + quote(target_url, safe="")


class DownloaderApi(BaseModel):
    """An independent public downloader service.

    ``GET`` endpoints embed the share link through a ``{url}``
    placeholder; ``POST`` endpoints receive ``{"url": ...}`` as JSON.
    """

    name: str
    endpoint: str
    method: HttpMethod = "POST"

    @model_validator(mode="after")
    def _check_placeholder(self) -> "DownloaderApi":
        if self.method == "GET" and "{url}" not in self.endpoint:
            raise ValueError(
                f"GET downloader API {self.name!r} needs a '{{url}}' placeholder"
            )
        return self


class ResolverConfig(BaseModel):
    """Endpoint templates and knobs for the resolution pipeline.

    All values configurable via YAML (resolver section) or ENV vars.
    """

    cors_relay_prefix: str = Field(
        default="https://cors-anywhere.herokuapp.com/",
        description="Prefix relay placed in front of the mirrored info API.",
    )
    raw_relays: list[RelayEndpoint] = Field(
        default_factory=list,
        description="Raw relays used to fetch share page HTML, in order.",
    )
    downloader_apis: list[DownloaderApi] = Field(
        default_factory=list,
        description="Third-party downloader APIs, in order.",
    )
    direct_url_templates: list[str] = Field(
        default_factory=lambda: ["https://d.terabox.com/file/d/{identifier}"],
        description="Direct download templates ({identifier} / {surl}).",
    )
    share_page_template: str = Field(
        default="https://www.terabox.com/sharing/link?surl={surl}",
        description="Share page returned as external link when enabled.",
    )
    strategy_timeout_seconds: float = Field(
        default=45.0,
        description="Upper bound for one strategy attempt (all its sub-steps).",
    )
    allow_external_fallback: bool = Field(
        default=False,
        description="Return the share page as an external link as last resort.",
    )
    enforce_content_type: bool = Field(
        default=True,
        description="Reject candidates whose content-type is not media.",
    )

    @field_validator("strategy_timeout_seconds")
    @classmethod
    def _validate_strategy_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("strategy_timeout_seconds must be > 0")
        return v

    @field_validator("direct_url_templates")
    @classmethod
    def _validate_templates(cls, v: list[str]) -> list[str]:
        for template in v:
            if "{identifier}" not in template and "{surl}" not in template:
                raise ValueError(
                    f"direct url template needs {{identifier}} or {{surl}}: {template}"
                )
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/resolver).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="teraplay", description="Application name.")
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
        description="Timeout in seconds for relay, API and page requests.",
    )
    verify_timeout_seconds: float = Field(
        default=8.0,
        validation_alias=AliasChoices(
            "verify_timeout_seconds",
            AliasPath("http", "verify_timeout_seconds"),
        ),
        description="Timeout in seconds for candidate HEAD verification.",
    )
    http_user_agent: str = Field(
        default="teraplay/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
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

    # Resolution pipeline (YAML section: resolver.*)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)

    @field_validator("http_timeout_seconds", "verify_timeout_seconds")
    @classmethod
    def _validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "verify_timeout_seconds": self.verify_timeout_seconds,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "resolver": self.resolver.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Supported env var examples (flat, explicit):
    - TERAPLAY_HTTP_TIMEOUT_SECONDS
    - TERAPLAY_LOG_LEVEL
    - TERAPLAY_RESOLVER_CORS_RELAY_PREFIX
    - TERAPLAY_RESOLVER_ALLOW_EXTERNAL_FALLBACK
    """

    model_config = SettingsConfigDict(
        env_prefix="TERAPLAY_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    verify_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    resolver_cors_relay_prefix: Optional[str] = None
    resolver_share_page_template: Optional[str] = None
    resolver_strategy_timeout_seconds: Optional[float] = None
    resolver_allow_external_fallback: Optional[bool] = None
    resolver_enforce_content_type: Optional[bool] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)

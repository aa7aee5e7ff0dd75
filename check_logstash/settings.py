"""
check_logstash/settings.py — Configuration contract for the check.

Uses pydantic-settings to validate every connection option and threshold
before anything is fetched.

Two usage modes:
  Plugin / CLI:
      cfg = load_settings({"HOSTNAME": "ls01", "HEAP_WARN": 75})
      # env file (optional) < CHECK_LOGSTASH_* env vars < explicit overrides

  Tests (isolated — no env file, no os.environ bleed):
      cfg = Settings(INFLIGHT_EVENTS_WARN="100", ...)
      # All values come exclusively from kwargs → clean, reproducible.
"""
from __future__ import annotations

import os
import re
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import ValidationError, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from check_logstash.errors import ConfigurationError
from check_logstash.health.thresholds import Range

ENV_PREFIX = "CHECK_LOGSTASH_"
# Alternative spellings accepted in the environment, e.g. CHECK_LOGSTASH_BASICAUTH.
ENV_ALIASES = {"BASICAUTH": "BASIC_AUTH"}


class Settings(BaseSettings):
    # Settings() reads purely from kwargs. load_settings() is the explicit
    # entry point that layers the env file and os.environ underneath.
    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)

    # -------------------------------------------------------------------------
    # Connection
    # -------------------------------------------------------------------------
    HOSTNAME: str = "127.0.0.1"
    PORT: int = 9600
    PIPELINE: Optional[str] = None
    SECURE: bool = False
    INSECURE: bool = False
    BEARER: Optional[str] = None
    BASIC_AUTH: Optional[str] = None
    CA_FILE: Optional[str] = None
    CERT_FILE: Optional[str] = None
    KEY_FILE: Optional[str] = None
    TIMEOUT_SECONDS: int = 30

    # -------------------------------------------------------------------------
    # Events state (only used by the events-per-minute rules)
    # -------------------------------------------------------------------------
    TEMP_FILEDIR: str = "/tmp/"

    # -------------------------------------------------------------------------
    # Percentage thresholds (None disables the level)
    # -------------------------------------------------------------------------
    FILE_DESCRIPTOR_WARN: Optional[int] = 85
    FILE_DESCRIPTOR_CRIT: Optional[int] = 95
    HEAP_WARN: Optional[int] = 70
    HEAP_CRIT: Optional[int] = 80
    CPU_WARN: Optional[int] = None
    CPU_CRIT: Optional[int] = None

    # -------------------------------------------------------------------------
    # Range thresholds: "MAX", "MIN:" or "MIN:MAX"
    # -------------------------------------------------------------------------
    INFLIGHT_EVENTS_WARN: Optional[Range] = None
    INFLIGHT_EVENTS_CRIT: Optional[Range] = None
    EVENTS_IN_PER_MINUTE_WARN: Optional[Range] = None
    EVENTS_IN_PER_MINUTE_CRIT: Optional[Range] = None
    EVENTS_OUT_PER_MINUTE_WARN: Optional[Range] = None
    EVENTS_OUT_PER_MINUTE_CRIT: Optional[Range] = None

    # -------------------------------------------------------------------------
    # Convenience properties
    # -------------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        scheme = "https" if self.SECURE else "http"
        return f"{scheme}://{self.HOSTNAME}:{self.PORT}"

    @property
    def checks_events_in_per_minute(self) -> bool:
        return self.EVENTS_IN_PER_MINUTE_WARN is not None or self.EVENTS_IN_PER_MINUTE_CRIT is not None

    @property
    def checks_events_out_per_minute(self) -> bool:
        return (
            self.EVENTS_OUT_PER_MINUTE_WARN is not None
            or self.EVENTS_OUT_PER_MINUTE_CRIT is not None
        )

    @property
    def needs_state(self) -> bool:
        """Prior counters are only kept when an events-per-minute rule is active."""
        return self.checks_events_in_per_minute or self.checks_events_out_per_minute

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------

    @field_validator(
        "PIPELINE", "BEARER", "BASIC_AUTH", "CA_FILE", "CERT_FILE", "KEY_FILE", mode="before"
    )
    @classmethod
    def blank_is_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator(
        "FILE_DESCRIPTOR_WARN",
        "FILE_DESCRIPTOR_CRIT",
        "HEAP_WARN",
        "HEAP_CRIT",
        "CPU_WARN",
        "CPU_CRIT",
    )
    @classmethod
    def percent_in_range(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and not 0 <= v <= 100:
            raise ValueError(f"{v} is not in range 0..100")
        return v

    @field_validator(
        "INFLIGHT_EVENTS_WARN",
        "INFLIGHT_EVENTS_CRIT",
        "EVENTS_IN_PER_MINUTE_WARN",
        "EVENTS_IN_PER_MINUTE_CRIT",
        "EVENTS_OUT_PER_MINUTE_WARN",
        "EVENTS_OUT_PER_MINUTE_CRIT",
        mode="before",
    )
    @classmethod
    def parse_range(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return Range(max=v)
        if isinstance(v, str):
            return Range.parse(v)
        return v

    @field_validator("PORT")
    @classmethod
    def port_in_range(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError(f"port {v} is not in range 1..65535")
        return v

    @field_validator("TIMEOUT_SECONDS")
    @classmethod
    def timeout_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("TIMEOUT_SECONDS must be >= 1")
        return v

    @model_validator(mode="after")
    def validate_auth_combo(self) -> Settings:
        if self.BASIC_AUTH is not None:
            user, sep, password = self.BASIC_AUTH.partition(":")
            if not sep or not user or ":" in password:
                raise ValueError(
                    "BASIC_AUTH must be <user:password> for server authentication"
                )
        if self.BEARER and self.BASIC_AUTH:
            raise ValueError("BEARER and BASIC_AUTH are mutually exclusive")
        if self.KEY_FILE and not self.CERT_FILE:
            raise ValueError("KEY_FILE requires CERT_FILE")
        return self


def _read_env_file(env_file: str) -> dict[str, str]:
    values: dict[str, str] = {}
    try:
        with open(env_file, encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                k, _, v = line.partition("=")
                k = k.strip()
                # Strip inline comments: "9600   # API port" → "9600"
                v = re.sub(r"\s+#.*$", "", v.strip())
                if k:
                    values[k] = v
    except FileNotFoundError:
        pass
    return values


def load_settings(
    overrides: Mapping[str, Any] | None = None,
    env_file: str | None = None,
) -> Settings:
    """Load and validate settings.

    Sources, lowest precedence first:
      1. env_file (KEY=value lines, CHECK_LOGSTASH_ prefix optional)
      2. CHECK_LOGSTASH_* variables in os.environ
         (CHECK_LOGSTASH_BASICAUTH is read as BASIC_AUTH)
      3. overrides (normally the parsed command line; None values are skipped)

    Raises:
        ConfigurationError: if any value is malformed or out of range.
    """
    merged: dict[str, Any] = {}
    sources: list[Mapping[str, Any]] = []
    if env_file:
        sources.append(_read_env_file(env_file))
    sources.append(os.environ)
    for source in sources:
        found: dict[str, Any] = {}
        for key, value in source.items():
            name = key[len(ENV_PREFIX):] if key.startswith(ENV_PREFIX) else None
            if name is None and source is not os.environ:
                name = key
            if name in ENV_ALIASES:
                # The canonical name wins when a source sets both.
                found.setdefault(ENV_ALIASES[name], value)
            elif name in Settings.model_fields:
                found[name] = value
        merged.update(found)
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value
    try:
        return Settings(**merged)
    except ValidationError as exc:
        raise ConfigurationError(_describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        field = ".".join(str(p) for p in error["loc"]) or "settings"
        message = error["msg"].removeprefix("Value error, ")
        problems.append(f"{field}: {message}")
    return "Invalid configuration: " + "; ".join(problems)

"""Configuration management using Pydantic Settings.

``OdooConfig()`` reads ``ODOO_*`` variables directly; ``config_from_env``
additionally supports custom prefixes and the ``DB``/``USER`` aliases.
"""

from __future__ import annotations

import os
from typing import Any, Mapping

from pydantic import ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from odoo_toolbox.errors import OdooError

DEFAULT_ENV_PREFIX = "ODOO"

_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class OdooConfig(BaseSettings):
    """Connection settings for one Odoo instance."""

    url: str = ""
    database: str = ""
    username: str = ""
    password: str = ""
    timeout: float | None = None
    verify_ssl: bool = True
    log_level: str = "info"

    model_config = {
        "env_prefix": "ODOO_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_settings(self) -> "OdooConfig":
        errors: list[str] = []

        if self.url:
            url = self.url.rstrip("/")
            self.url = url
            if not url.startswith(("http://", "https://")):
                errors.append(f"url must start with http:// or https://, got: {url}")

        if self.timeout is not None and self.timeout <= 0:
            errors.append(f"timeout must be > 0, got: {self.timeout}")

        if self.log_level not in _LOG_LEVELS:
            errors.append(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, got: {self.log_level}"
            )

        if errors:
            raise ValueError(
                "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            )

        return self


class _ExplicitConfig(OdooConfig):
    """``OdooConfig`` built from init values only, never from ``ODOO_*``."""

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


def _format_validation_error(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        msg = error["msg"].removeprefix("Value error, ")
        loc = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{loc}: {msg}" if loc else msg)
    return "\n".join(messages)


def config_from_env(
    prefix: str = DEFAULT_ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> OdooConfig:
    """Build an ``OdooConfig`` from ``{prefix}_*`` environment variables.

    Reads ``{prefix}_URL``, ``{prefix}_DB`` or ``{prefix}_DATABASE``,
    ``{prefix}_USER`` or ``{prefix}_USERNAME`` and ``{prefix}_PASSWORD``.
    Optional ``{prefix}_TIMEOUT``, ``{prefix}_VERIFY_SSL`` and
    ``{prefix}_LOG_LEVEL`` are honoured; no other prefix is consulted.
    Every missing variable is reported in a single error, and invalid values
    raise ``OdooError`` rather than a pydantic error.
    """
    env = os.environ if environ is None else environ

    def first(*names: str) -> str | None:
        for name in names:
            value = env.get(f"{prefix}_{name}")
            if value:
                return value
        return None

    values = {
        "url": first("URL"),
        "database": first("DB", "DATABASE"),
        "username": first("USER", "USERNAME"),
        "password": first("PASSWORD"),
    }
    env_names = {
        "url": f"{prefix}_URL",
        "database": f"{prefix}_DB",
        "username": f"{prefix}_USER",
        "password": f"{prefix}_PASSWORD",
    }
    missing = [env_names[key] for key, value in values.items() if value is None]
    if missing:
        raise OdooError(f"Missing environment variables: {', '.join(missing)}")

    optional: dict[str, Any] = {}
    for key in ("timeout", "verify_ssl", "log_level"):
        value = first(key.upper())
        if value is not None:
            optional[key] = value

    try:
        return _ExplicitConfig(**values, **optional)
    except ValidationError as e:
        raise OdooError(_format_validation_error(e)) from e

"""Centralised panel configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tagpanel.models.tag import DEFAULT_PALETTE
from tagpanel.tags.validation import DEFAULT_MAX_NAME_LENGTH

logger = logging.getLogger(__name__)

# src/tagpanel/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

_HEX_COLOUR = re.compile(r"^#[0-9a-fA-F]{6}$")


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class PaletteConfig(BaseModel):
    """Colours offered to new tags, in allocation order."""

    colours: list[str] = Field(default_factory=lambda: list(DEFAULT_PALETTE))

    @field_validator("colours")
    @classmethod
    def _hex_colours(cls, value: list[str]) -> list[str]:
        if not value:
            msg = "PALETTE__COLOURS must contain at least one colour"
            raise ValueError(msg)
        bad = [c for c in value if not _HEX_COLOUR.match(c)]
        if bad:
            msg = f"PALETTE__COLOURS entries must be #rrggbb hex colours: {bad}"
            raise ValueError(msg)
        return [c.lower() for c in value]


class PanelConfig(BaseModel):
    """Tag panel behaviour toggles."""

    show_tag_input_box: bool = False
    show_search_box: bool = False
    max_name_length: int = Field(default=DEFAULT_MAX_NAME_LENGTH, ge=1)


class AppConfig(BaseModel):
    """Demo host runtime configuration."""

    port: int = 8080
    storage_secret: SecretStr = SecretStr("dev-secret-change-me")
    log_dir: Path = Path("logs")


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Panel settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``PALETTE__COLOURS``, ``PANEL__SHOW_SEARCH_BOX``, ``APP__PORT``, etc.
    List values are given as JSON (``PALETTE__COLOURS='["#112233"]'``).
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    palette: PaletteConfig = PaletteConfig()
    panel: PanelConfig = PanelConfig()
    app: AppConfig = AppConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings

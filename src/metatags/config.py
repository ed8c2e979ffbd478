"""Runtime configuration for normalization limits and tag output.

Settings are read from ``METATAGS_<FIELD>`` environment variables the first
time ``get_config()`` is called, so a malformed variable surfaces where the
configuration is used rather than on import.
"""
from __future__ import annotations

import logging
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

ENV_PREFIX = "METATAGS_"


class Configuration(BaseSettings):
    title_limit: int = 70
    truncate_site_title_first: bool = False
    description_limit: int = 300
    keywords_limit: int = 255
    keywords_separator: str = ", "
    keywords_lowercase: bool = True
    # Emit `<meta ...>` instead of `<meta ... />`.
    open_meta_tags: bool = False

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        frozen=True,
        extra="ignore",
    )

    def with_overrides(self, **overrides: object) -> "Configuration":
        """Copy with selected settings replaced; unknown names raise ``TypeError``."""
        unknown = sorted(set(overrides) - set(type(self).model_fields))
        if unknown:
            raise TypeError(f"unknown configuration settings: {', '.join(unknown)}")
        return self.model_copy(update=overrides)


_CONFIG: Optional[Configuration] = None


def get_config() -> Configuration:
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = Configuration()
        logger.debug("Loaded configuration: %s", _CONFIG.model_dump())
    return _CONFIG


def configure(**overrides: object) -> Configuration:
    global _CONFIG
    _CONFIG = get_config().with_overrides(**overrides)
    return _CONFIG


def reset_config() -> None:
    """Forget the loaded settings; the next ``get_config()`` re-reads the environment."""
    global _CONFIG
    _CONFIG = None


__all__ = ["Configuration", "configure", "get_config", "reset_config"]

from __future__ import annotations

from warmpath.core.config import Settings, get_settings


def get_settings_dep() -> Settings:
    return get_settings()

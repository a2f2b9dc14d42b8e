# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Settings for the LLM provider, the session loop and the API."""

from src.core.config.settings import (
    APISettings,
    LLMSettings,
    Settings,
    TutoringSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "APISettings",
    "LLMSettings",
    "Settings",
    "TutoringSettings",
    "clear_settings_cache",
    "get_settings",
]

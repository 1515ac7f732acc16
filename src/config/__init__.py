"""Configuration module for the feed translation proxy."""

from src.config.settings import (
    AppSettings,
    EvictionPolicyType,
    get_app_settings,
    resolve_api_settings,
)

__all__ = [
    "AppSettings",
    "EvictionPolicyType",
    "get_app_settings",
    "resolve_api_settings",
]

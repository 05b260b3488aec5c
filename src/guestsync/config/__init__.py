"""Application configuration helpers."""

from __future__ import annotations

from .august import AugustConfig, get_august_config
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .google_calendar import GoogleCalendarConfig, get_google_calendar_config
from .guesty import GuestyConfig, get_guesty_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .sync import SyncConfig, get_sync_config

__all__ = [
    "AugustConfig",
    "CacheConfig",
    "ConfigurationError",
    "GoogleCalendarConfig",
    "GuestyConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SyncConfig",
    "configure_logging",
    "get_august_config",
    "get_google_calendar_config",
    "get_guesty_config",
    "get_sync_config",
    "require_env_var",
    "require_env_vars",
]

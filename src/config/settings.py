"""Application settings and runtime config resolution.

This module centralizes environment-backed defaults and resolution rules used by
the API layer and the feed pipeline.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

# API env names and defaults
ENV_API_HOST = "API_HOST"
ENV_API_PORT = "API_PORT"
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8080

# Pipeline env names and defaults
ENV_TARGET_LANGUAGE = "TARGET_LANGUAGE"
ENV_FETCH_TIMEOUT_SECONDS = "FETCH_TIMEOUT_SECONDS"
ENV_FEED_MAX_ITEMS = "FEED_MAX_ITEMS"
ENV_USER_AGENT = "USER_AGENT"

DEFAULT_TARGET_LANGUAGE = "ja"
DEFAULT_FETCH_TIMEOUT_SECONDS = 30
DEFAULT_FEED_MAX_ITEMS = 10
DEFAULT_USER_AGENT = "FeedTranslateProxy/1.0"

# Translation env names and defaults
ENV_GOOGLE_CLIENT_CREDENTIALS = "GOOGLE_CLIENT_CREDENTIALS"
ENV_GOOGLE_TRANSLATE_API_KEY = "GOOGLE_TRANSLATE_API_KEY"
ENV_TRANSLATE_TIMEOUT_SECONDS = "TRANSLATE_TIMEOUT_SECONDS"
DEFAULT_TRANSLATE_TIMEOUT_SECONDS = 30

# Response cache env names and defaults
ENV_CACHE_TTL_SECONDS = "CACHE_TTL_SECONDS"
ENV_CACHE_CAPACITY = "CACHE_CAPACITY"
ENV_CACHE_EVICTION_POLICY = "CACHE_EVICTION_POLICY"
DEFAULT_CACHE_TTL_SECONDS = 3600
DEFAULT_CACHE_CAPACITY = 1024

# Logging env names and defaults
ENV_ENVIRONMENT = "ENV"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_LOG_FORMAT = "LOG_FORMAT"
ENV_LOG_FILE = "LOG_FILE"
DEFAULT_LOG_LEVEL = logging.INFO
_PRODUCTION_ENVIRONMENTS = ("production", "prod")
_LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_LANGUAGE_TAG_RE = re.compile(r"^[A-Za-z]{2,3}(-[A-Za-z0-9]{2,8})*$")


class EvictionPolicyType(str, Enum):
    """Available cache eviction policies."""

    LRU = "lru"
    LFU = "lfu"


DEFAULT_EVICTION_POLICY: EvictionPolicyType = EvictionPolicyType.LRU


def _clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


def _int_setting(env: Mapping[str, str], name: str, default: int, minimum: int, maximum: int) -> int:
    try:
        value = int(env.get(name, str(default)))
    except ValueError:
        value = default
    return _clamp(value, minimum, maximum)


@dataclass(frozen=True)
class APISettings:
    host: str
    port: int


@dataclass(frozen=True)
class PipelineSettings:
    target_language: str
    fetch_timeout_seconds: int
    max_items: int
    user_agent: str


@dataclass(frozen=True)
class TranslationSettings:
    credentials_json: Optional[str]
    api_key: Optional[str]
    timeout_seconds: int


@dataclass(frozen=True)
class CacheSettings:
    ttl_seconds: int
    capacity: int
    eviction_policy: EvictionPolicyType


@dataclass(frozen=True)
class LoggingSettings:
    json_format: bool
    level: int
    log_file: Optional[str]


@dataclass(frozen=True)
class AppSettings:
    api: APISettings
    pipeline: PipelineSettings
    translation: TranslationSettings
    cache: CacheSettings
    logging: LoggingSettings


def resolve_api_settings(env: Mapping[str, str] = os.environ) -> APISettings:
    host = env.get(ENV_API_HOST, DEFAULT_API_HOST)
    try:
        port = int(env.get(ENV_API_PORT, str(DEFAULT_API_PORT)))
    except ValueError:
        port = DEFAULT_API_PORT

    return APISettings(host=host, port=port)


def resolve_target_language(
    override: Optional[str] = None,
    env: Mapping[str, str] = os.environ,
) -> str:
    tag = (override or env.get(ENV_TARGET_LANGUAGE) or DEFAULT_TARGET_LANGUAGE).strip()
    if not _LANGUAGE_TAG_RE.match(tag):
        raise ValueError(f"Invalid target language tag '{tag}'. Expected a BCP-47 tag such as 'ja' or 'zh-TW'.")
    return tag


def resolve_pipeline_settings(
    target_language_override: Optional[str] = None,
    env: Mapping[str, str] = os.environ,
) -> PipelineSettings:
    user_agent = (env.get(ENV_USER_AGENT) or "").strip() or DEFAULT_USER_AGENT

    return PipelineSettings(
        target_language=resolve_target_language(target_language_override, env=env),
        fetch_timeout_seconds=_int_setting(
            env, ENV_FETCH_TIMEOUT_SECONDS, DEFAULT_FETCH_TIMEOUT_SECONDS, 1, 120
        ),
        max_items=_int_setting(env, ENV_FEED_MAX_ITEMS, DEFAULT_FEED_MAX_ITEMS, 1, 100),
        user_agent=user_agent,
    )


def resolve_translation_settings(env: Mapping[str, str] = os.environ) -> TranslationSettings:
    credentials_json = env.get(ENV_GOOGLE_CLIENT_CREDENTIALS)
    if credentials_json is not None:
        credentials_json = credentials_json.strip() or None

    api_key = env.get(ENV_GOOGLE_TRANSLATE_API_KEY)
    if api_key is not None:
        api_key = api_key.strip() or None

    return TranslationSettings(
        credentials_json=credentials_json,
        api_key=api_key,
        timeout_seconds=_int_setting(
            env, ENV_TRANSLATE_TIMEOUT_SECONDS, DEFAULT_TRANSLATE_TIMEOUT_SECONDS, 1, 120
        ),
    )


def resolve_eviction_policy(env: Mapping[str, str] = os.environ) -> EvictionPolicyType:
    if value := env.get(ENV_CACHE_EVICTION_POLICY):
        try:
            return EvictionPolicyType(value.strip().lower())
        except ValueError:
            valid_values = ", ".join(p.value for p in EvictionPolicyType)
            raise ValueError(
                f"Invalid CACHE_EVICTION_POLICY '{value}'. "
                f"Valid options: {valid_values}"
            )

    return DEFAULT_EVICTION_POLICY


def resolve_cache_settings(env: Mapping[str, str] = os.environ) -> CacheSettings:
    return CacheSettings(
        ttl_seconds=_int_setting(env, ENV_CACHE_TTL_SECONDS, DEFAULT_CACHE_TTL_SECONDS, 1, 86400),
        capacity=_int_setting(env, ENV_CACHE_CAPACITY, DEFAULT_CACHE_CAPACITY, 1, 100000),
        eviction_policy=resolve_eviction_policy(env=env),
    )


def resolve_logging_settings(env: Mapping[str, str] = os.environ) -> LoggingSettings:
    """JSON in production, console elsewhere. ``LOG_FORMAT`` overrides either way.

    An unknown ``LOG_LEVEL`` falls back to INFO rather than failing startup.
    """
    environment = env.get(ENV_ENVIRONMENT, env.get("ENVIRONMENT", "development")).strip().lower()
    log_format = (env.get(ENV_LOG_FORMAT) or "").strip().lower()
    if log_format in ("json", "console"):
        json_format = log_format == "json"
    else:
        json_format = environment in _PRODUCTION_ENVIRONMENTS

    level = _LOG_LEVELS.get((env.get(ENV_LOG_LEVEL) or "").strip().upper(), DEFAULT_LOG_LEVEL)
    log_file = (env.get(ENV_LOG_FILE) or "").strip() or None

    return LoggingSettings(json_format=json_format, level=level, log_file=log_file)


def get_app_settings(env: Mapping[str, str] = os.environ) -> AppSettings:
    return AppSettings(
        api=resolve_api_settings(env=env),
        pipeline=resolve_pipeline_settings(env=env),
        translation=resolve_translation_settings(env=env),
        cache=resolve_cache_settings(env=env),
        logging=resolve_logging_settings(env=env),
    )

"""Tests for environment-backed settings resolution."""

import logging

import pytest

from src.config.settings import (
    DEFAULT_CACHE_CAPACITY,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    EvictionPolicyType,
    get_app_settings,
    resolve_api_settings,
    resolve_cache_settings,
    resolve_logging_settings,
    resolve_pipeline_settings,
    resolve_target_language,
    resolve_translation_settings,
)


def test_defaults_from_empty_env():
    settings = get_app_settings(env={})

    assert settings.api.port == 8080
    assert settings.pipeline.target_language == "ja"
    assert settings.pipeline.fetch_timeout_seconds == DEFAULT_FETCH_TIMEOUT_SECONDS
    assert settings.pipeline.max_items == 10
    assert settings.cache.ttl_seconds == DEFAULT_CACHE_TTL_SECONDS
    assert settings.cache.capacity == DEFAULT_CACHE_CAPACITY
    assert settings.cache.eviction_policy is EvictionPolicyType.LRU
    assert settings.translation.credentials_json is None
    assert settings.translation.api_key is None


@pytest.mark.parametrize("tag", ["ja", "en", "zh-TW", "pt-BR", "sr-Latn"])
def test_valid_language_tags(tag):
    assert resolve_target_language(env={"TARGET_LANGUAGE": tag}) == tag


@pytest.mark.parametrize("tag", ["j", "japanese!", "en_US", "-en"])
def test_invalid_language_tags(tag):
    with pytest.raises(ValueError, match="Invalid target language"):
        resolve_target_language(env={"TARGET_LANGUAGE": tag})


def test_override_wins_over_env():
    assert resolve_target_language("de", env={"TARGET_LANGUAGE": "fr"}) == "de"


def test_integers_are_clamped_and_fall_back():
    pipeline = resolve_pipeline_settings(env={"FETCH_TIMEOUT_SECONDS": "9999", "FEED_MAX_ITEMS": "abc"})
    assert pipeline.fetch_timeout_seconds == 120
    assert pipeline.max_items == 10

    cache = resolve_cache_settings(env={"CACHE_CAPACITY": "0", "CACHE_TTL_SECONDS": "60"})
    assert cache.capacity == 1
    assert cache.ttl_seconds == 60


def test_bad_port_falls_back():
    assert resolve_api_settings(env={"API_PORT": "http"}).port == 8080


def test_eviction_policy_choice():
    assert resolve_cache_settings(env={"CACHE_EVICTION_POLICY": "LFU"}).eviction_policy is EvictionPolicyType.LFU

    with pytest.raises(ValueError, match="CACHE_EVICTION_POLICY"):
        resolve_cache_settings(env={"CACHE_EVICTION_POLICY": "random"})


def test_blank_credentials_are_ignored():
    translation = resolve_translation_settings(
        env={"GOOGLE_CLIENT_CREDENTIALS": "   ", "GOOGLE_TRANSLATE_API_KEY": " key "}
    )
    assert translation.credentials_json is None
    assert translation.api_key == "key"


def test_logging_defaults_to_console_at_info():
    settings = resolve_logging_settings(env={})

    assert settings.json_format is False
    assert settings.level == logging.INFO
    assert settings.log_file is None


@pytest.mark.parametrize(
    "env, json_format",
    [
        ({"ENV": "production"}, True),
        ({"ENVIRONMENT": "prod"}, True),
        ({"ENV": "staging"}, False),
        ({"ENV": "production", "LOG_FORMAT": "console"}, False),
        ({"LOG_FORMAT": "JSON"}, True),
        ({"ENV": "production", "LOG_FORMAT": "xml"}, True),
    ],
)
def test_logging_format_selection(env, json_format):
    assert resolve_logging_settings(env=env).json_format is json_format


def test_log_level_and_file():
    settings = resolve_logging_settings(env={"LOG_LEVEL": " debug ", "LOG_FILE": "logs/proxy.log"})
    assert settings.level == logging.DEBUG
    assert settings.log_file == "logs/proxy.log"

    assert resolve_logging_settings(env={"LOG_LEVEL": "verbose"}).level == logging.INFO

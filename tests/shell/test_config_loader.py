"""Tests for the Configuration Loader module.

Tests configuration loading from YAML files and environment variables.
"""

import os
from unittest.mock import patch

import pytest

from src.core.config import Config, StoreBackend, WritePolicy
from src.shell.config_loader import (
    _resolve_value,
    load_config,
    load_config_from_dict,
    load_config_from_env,
)


class TestResolveValue:
    """Tests for _resolve_value function."""

    def test_returns_non_string_unchanged(self):
        assert _resolve_value(10) == 10
        assert _resolve_value(None) is None

    def test_returns_plain_string_unchanged(self):
        assert _resolve_value("https://example.com") == "https://example.com"

    def test_resolves_env_var_placeholder(self):
        with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
            assert _resolve_value("${TEST_VAR}") == "test_value"

    def test_returns_placeholder_if_env_var_not_set(self):
        with patch.dict(os.environ, {}, clear=True):
            assert _resolve_value("${UNDEFINED_VAR}") == "${UNDEFINED_VAR}"


class TestLoadConfigFromDict:
    """Tests for load_config_from_dict function."""

    def test_empty_dict_gives_defaults(self):
        assert load_config_from_dict({}) == Config()

    def test_full_config(self):
        data = {
            "notification": {
                "service_url": "https://notify.example.com/send",
                "timeout_seconds": 3,
                "templates": {
                    "sms_setup_confirmation": "sms-1",
                    "email_setup_confirmation": "email-1",
                },
            },
            "store": {
                "backend": "memory",
                "firestore_database": "aq",
                "firestore_collection": "subs",
            },
            "write_policy": "persist_then_notify",
            "tracing_header": "x-trace",
        }

        config = load_config_from_dict(data)

        assert config.notification.service_url == "https://notify.example.com/send"
        assert config.notification.timeout_seconds == 3.0
        assert config.notification.templates.sms_setup_confirmation == "sms-1"
        assert config.notification.templates.email_setup_confirmation == "email-1"
        assert config.store.backend is StoreBackend.MEMORY
        assert config.store.firestore_database == "aq"
        assert config.store.firestore_collection == "subs"
        assert config.write_policy is WritePolicy.PERSIST_THEN_NOTIFY
        assert config.tracing_header == "x-trace"

    def test_resolves_placeholders(self):
        data = {"notification": {"service_url": "${NOTIFY_URL}"}}

        with patch.dict(os.environ, {"NOTIFY_URL": "http://notify.internal/send"}):
            config = load_config_from_dict(data)

        assert config.notification.service_url == "http://notify.internal/send"

    def test_unknown_backend_raises(self):
        with pytest.raises(ValueError):
            load_config_from_dict({"store": {"backend": "mongo"}})

    def test_unknown_policy_raises(self):
        with pytest.raises(ValueError):
            load_config_from_dict({"write_policy": "whenever"})


class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "missing.yaml") == Config()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(path) == Config()

    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "notification:\n"
            "  service_url: http://notify.test/send\n"
            "store:\n"
            "  backend: memory\n"
        )

        config = load_config(path)

        assert config.notification.service_url == "http://notify.test/send"
        assert config.store.backend is StoreBackend.MEMORY

    def test_uses_config_path_env(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("tracing_header: x-custom\n")

        with patch.dict(os.environ, {"CONFIG_PATH": str(path)}):
            config = load_config()

        assert config.tracing_header == "x-custom"


class TestLoadConfigFromEnv:
    """Tests for load_config_from_env function."""

    def test_no_env_gives_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            assert load_config_from_env() == Config()

    def test_reads_env(self):
        env = {
            "NOTIFICATION_SERVICE_URL": "http://notify.test/send",
            "NOTIFICATION_TIMEOUT_SECONDS": "2.5",
            "SMS_SET_UP_CONFIRMATION_TEMPLATE_ID": "sms-env",
            "EMAIL_SET_UP_CONFIRMATION_TEMPLATE_ID": "email-env",
            "STORE_BACKEND": "memory",
            "FIRESTORE_DATABASE": "aq",
            "FIRESTORE_COLLECTION": "subs",
            "WRITE_POLICY": "notify_then_persist",
            "TRACING_HEADER": "x-env",
        }

        with patch.dict(os.environ, env, clear=True):
            config = load_config_from_env()

        assert config.notification.service_url == "http://notify.test/send"
        assert config.notification.timeout_seconds == 2.5
        assert config.notification.templates.sms_setup_confirmation == "sms-env"
        assert config.notification.templates.email_setup_confirmation == "email-env"
        assert config.store.backend is StoreBackend.MEMORY
        assert config.store.firestore_database == "aq"
        assert config.store.firestore_collection == "subs"
        assert config.write_policy is WritePolicy.NOTIFY_THEN_PERSIST
        assert config.tracing_header == "x-env"

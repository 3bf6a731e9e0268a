"""Unit tests for configuration validation.

Pure function tests - no mocks needed.
"""

from src.core.config import (
    Config,
    NotificationConfig,
    NotificationTemplates,
    StoreBackend,
    StoreConfig,
    WritePolicy,
    validate_config,
    validate_service_url,
)


class TestValidateServiceUrl:
    """Tests for validate_service_url() function."""

    def test_valid_http(self):
        assert validate_service_url("http://localhost:3000/send-notification", "url") == []

    def test_valid_https(self):
        assert validate_service_url("https://notify.example.com/send", "url") == []

    def test_unresolved_placeholder(self):
        errors = validate_service_url("${NOTIFICATION_SERVICE_URL}", "url")

        assert len(errors) == 1
        assert "placeholder" in errors[0].message

    def test_wrong_scheme(self):
        errors = validate_service_url("ftp://example.com", "url")

        assert len(errors) == 1
        assert errors[0].field == "url"

    def test_missing_host(self):
        assert len(validate_service_url("http://", "url")) == 1


class TestValidateConfig:
    """Tests for validate_config() function."""

    def test_defaults_are_valid(self):
        result = validate_config(Config())

        assert result.valid is True
        assert result.errors == []

    def test_non_positive_timeout(self):
        config = Config(notification=NotificationConfig(timeout_seconds=0))

        result = validate_config(config)

        assert result.valid is False
        assert result.critical_errors[0].field == "notification.timeout_seconds"

    def test_missing_template(self):
        config = Config(notification=NotificationConfig(
            templates=NotificationTemplates(sms_setup_confirmation=""),
        ))

        result = validate_config(config)

        assert result.valid is False
        assert result.critical_errors[0].field == "notification.templates.sms_setup_confirmation"

    def test_memory_backend_warns(self):
        config = Config(store=StoreConfig(backend=StoreBackend.MEMORY))

        result = validate_config(config)

        assert result.valid is True
        assert [w.field for w in result.warnings] == ["store.backend"]

    def test_legacy_policy_warns(self):
        config = Config(write_policy=WritePolicy.PERSIST_THEN_NOTIFY)

        result = validate_config(config)

        assert result.valid is True
        assert [w.field for w in result.warnings] == ["write_policy"]

    def test_empty_collection(self):
        config = Config(store=StoreConfig(firestore_collection=""))

        result = validate_config(config)

        assert result.valid is False

"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, NotificationConfig, StoreConfig) are defined in
src/core/config.py to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from src.core.config import (
    Config,
    NotificationConfig,
    NotificationTemplates,
    StoreBackend,
    StoreConfig,
    WritePolicy,
)


logger = logging.getLogger(__name__)


def _resolve_value(value: Any) -> Any:
    """Resolve a ${ENV_VAR} placeholder from the environment.

    Args:
        value: Value to resolve (may be a ${...} placeholder)

    Returns:
        Resolved value, or the placeholder unchanged if the variable is unset
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        env_value = os.environ.get(value[2:-1])
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", value[2:-1])

    return value


def _parse_templates(data: dict[str, Any]) -> NotificationTemplates:
    """Parse notification template ids from config data."""
    defaults = NotificationTemplates()
    return NotificationTemplates(
        sms_setup_confirmation=_resolve_value(
            data.get("sms_setup_confirmation", defaults.sms_setup_confirmation)
        ),
        email_setup_confirmation=_resolve_value(
            data.get("email_setup_confirmation", defaults.email_setup_confirmation)
        ),
    )


def _parse_notification(data: dict[str, Any]) -> NotificationConfig:
    """Parse notification gateway settings from config data."""
    defaults = NotificationConfig()
    return NotificationConfig(
        service_url=_resolve_value(data.get("service_url", defaults.service_url)),
        timeout_seconds=float(
            _resolve_value(data.get("timeout_seconds", defaults.timeout_seconds))
        ),
        templates=_parse_templates(data.get("templates", {})),
    )


def _parse_store(data: dict[str, Any]) -> StoreConfig:
    """Parse subscription store settings from config data."""
    defaults = StoreConfig()
    return StoreConfig(
        backend=StoreBackend(_resolve_value(data.get("backend", defaults.backend.value))),
        firestore_database=_resolve_value(data.get("firestore_database")),
        firestore_collection=_resolve_value(
            data.get("firestore_collection", defaults.firestore_collection)
        ),
    )


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object

    Raises:
        ValueError: If backend or write_policy is not a known value
    """
    defaults = Config()
    return Config(
        notification=_parse_notification(data.get("notification", {})),
        store=_parse_store(data.get("store", {})),
        write_policy=WritePolicy(
            _resolve_value(data.get("write_policy", defaults.write_policy.value))
        ),
        tracing_header=_resolve_value(data.get("tracing_header", defaults.tracing_header)),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: store=%s, policy=%s, notification=%s",
        config.store.backend.value,
        config.write_policy.value,
        config.notification.service_url,
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for deployments without a YAML file. Unset variables keep
    their defaults.

    Environment variables:
        NOTIFICATION_SERVICE_URL: Notification service endpoint
        NOTIFICATION_TIMEOUT_SECONDS: Request timeout
        SMS_SET_UP_CONFIRMATION_TEMPLATE_ID: Template for sms alerts
        EMAIL_SET_UP_CONFIRMATION_TEMPLATE_ID: Template for email alerts
        STORE_BACKEND: firestore or memory
        FIRESTORE_DATABASE: Firestore database name
        FIRESTORE_COLLECTION: Firestore collection name
        WRITE_POLICY: notify_then_persist or persist_then_notify
        TRACING_HEADER: Inbound header carrying the request id

    Returns:
        Config object from environment
    """
    env_map = {
        ("notification", "service_url"): "NOTIFICATION_SERVICE_URL",
        ("notification", "timeout_seconds"): "NOTIFICATION_TIMEOUT_SECONDS",
        ("notification", "templates", "sms_setup_confirmation"): "SMS_SET_UP_CONFIRMATION_TEMPLATE_ID",
        ("notification", "templates", "email_setup_confirmation"): "EMAIL_SET_UP_CONFIRMATION_TEMPLATE_ID",
        ("store", "backend"): "STORE_BACKEND",
        ("store", "firestore_database"): "FIRESTORE_DATABASE",
        ("store", "firestore_collection"): "FIRESTORE_COLLECTION",
        ("write_policy",): "WRITE_POLICY",
        ("tracing_header",): "TRACING_HEADER",
    }

    data: dict[str, Any] = {}
    for path, var in env_map.items():
        value = os.environ.get(var)
        if not value:
            continue
        node = data
        for key in path[:-1]:
            node = node.setdefault(key, {})
        node[path[-1]] = value

    return load_config_from_dict(data)

"""Cloud Function Entry Point.

This module provides the entry point for Google Cloud Functions.
It's a thin wrapper that loads configuration once per instance and
hands each request to the setup-alert handler.
"""

import logging
import os

import functions_framework
from flask import Request, Response

from src.api_handler import setup_alert as handle_setup_alert
from src.core.config import Config, validate_config
from src.orchestrator import SetupAlertOrchestrator
from src.shell.config_loader import load_config, load_config_from_env


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


_orchestrator: SetupAlertOrchestrator | None = None


def _get_config() -> Config:
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        config = load_config(config_path)
    else:
        config = load_config_from_env()

    result = validate_config(config)
    for warning in result.warnings:
        logger.warning("Config warning: %s - %s", warning.field, warning.message)
    if not result.valid:
        problems = "; ".join(f"{e.field}: {e.message}" for e in result.critical_errors)
        raise ValueError(f"Invalid configuration: {problems}")

    return config


def get_orchestrator() -> SetupAlertOrchestrator:
    """Build the orchestrator on first use and reuse it afterwards."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = SetupAlertOrchestrator(_get_config())
    return _orchestrator


@functions_framework.http
def setup_alert(request: Request) -> Response:
    """HTTP Cloud Function entry point for POST /setup-alert.

    Args:
        request: Flask request object

    Returns:
        Flask response from the setup-alert handler
    """
    return handle_setup_alert(request, get_orchestrator())

"""Setup-alert HTTP Handler - Imperative Shell.

This module serves POST /setup-alert. It parses the request, resolves
the request id, runs the orchestrator and maps errors to status codes.
"""

import json
import logging
import uuid
from typing import Any

from flask import Request, Response

from src.core.errors import SetupAlertError, ValidationError
from src.core.masking import mask_payload
from src.core.request import parse_setup_request
from src.orchestrator import INTERNAL_MESSAGE, SetupAlertOrchestrator

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"


def _json_response(
    data: dict[str, Any],
    status: int = 200,
    request_id: str | None = None,
) -> Response:
    """Create a JSON response carrying the request id."""
    response = Response(
        json.dumps(data, default=str),
        status=status,
        mimetype="application/json",
    )
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id
    return response


def resolve_request_id(request: Request, tracing_header: str | None = None) -> str:
    """Pick the request id from the tracing header, x-request-id, or generate one."""
    for header in (tracing_header, REQUEST_ID_HEADER):
        if header:
            value = request.headers.get(header)
            if value:
                return value
    return f"req-{uuid.uuid4().hex}"


def setup_alert(request: Request, orchestrator: SetupAlertOrchestrator) -> Response:
    """API endpoint: Register a location for air-quality alerts.

    Body:
        phoneNumber / emailAddress, alertType, location, lat, long

    Returns:
        201 with message and userId, or an error status with {"error": ...}
    """
    request_id = resolve_request_id(request, orchestrator.config.tracing_header)

    if request.method != "POST":
        return _json_response(
            {"error": f"Method {request.method} not allowed"},
            status=405,
            request_id=request_id,
        )

    payload = request.get_json(silent=True)

    if isinstance(payload, dict):
        logger.info(
            "Setup alert %s started: %s (user-agent=%s)",
            request_id,
            mask_payload(payload),
            request.headers.get("User-Agent"),
        )

    try:
        setup_request = parse_setup_request(payload)
        result = orchestrator.setup_alert(setup_request, request_id)
    except ValidationError as e:
        logger.warning("Setup alert %s invalid payload: %s", request_id, e.message)
        return _json_response({"error": e.message}, status=e.status_code, request_id=request_id)
    except SetupAlertError as e:
        return _json_response({"error": e.message}, status=e.status_code, request_id=request_id)
    except Exception:
        logger.exception("Setup alert %s failed with unhandled error", request_id)
        return _json_response({"error": INTERNAL_MESSAGE}, status=500, request_id=request_id)

    return _json_response(
        {"message": result.message, "userId": result.subscription_id},
        status=201,
        request_id=request_id,
    )

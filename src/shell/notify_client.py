"""Notification Gateway Client - Imperative Shell.

This module handles HTTP communication with the notification service
that sends set-up confirmation messages.
All I/O is contained here; payload construction is in the core module.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any

import requests

from src.core.errors import NotificationError, NotificationErrorCategory
from src.core.masking import mask_payload


logger = logging.getLogger(__name__)


# Default timeout for notification requests (seconds)
DEFAULT_TIMEOUT = 10

DEFAULT_SERVICE_URL = "http://localhost:3000/send-notification"


@dataclass
class NotificationAck:
    """Successful response from the notification service.

    Attributes:
        status_code: HTTP status code
        body: Parsed JSON body (None if the body was empty)
        duration_ms: Round-trip time in milliseconds
    """
    status_code: int
    body: Any
    duration_ms: int


class NotifyClient:
    """Client for the notification service.

    This is part of the imperative shell - it handles HTTP I/O.
    Calls are never retried here.
    """

    def __init__(
        self,
        service_url: str = DEFAULT_SERVICE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize notification client.

        Args:
            service_url: URL the payload is POSTed to
            timeout: Request timeout in seconds
        """
        self.service_url = service_url
        self.timeout = timeout

    def send(
        self,
        payload: dict[str, Any],
        correlation_id: str | None = None,
    ) -> NotificationAck:
        """Send a notification request.

        This method performs HTTP I/O.

        Args:
            payload: Notification payload (from core.notification)
            correlation_id: Sent as the x-request-id header

        Returns:
            NotificationAck for a 2xx response

        Raises:
            NotificationError: On any failure, tagged with its category
        """
        request_id = correlation_id or f"notify-{uuid.uuid4().hex}"
        start = time.monotonic()

        logger.info(
            "Sending notification request %s to %s: %s",
            request_id,
            self.service_url,
            mask_payload(payload),
        )

        try:
            response = requests.post(
                self.service_url,
                json=payload,
                timeout=self.timeout,
                headers={
                    "Content-Type": "application/json",
                    "x-request-id": request_id,
                },
            )
        except requests.Timeout as e:
            logger.error(
                "Notification request %s timed out after %dms",
                request_id,
                _elapsed_ms(start),
            )
            raise NotificationError(
                NotificationErrorCategory.TIMEOUT,
                "Notification service did not respond in time",
            ) from e
        except requests.ConnectionError as e:
            logger.error(
                "Connection to notification service refused for %s: %s",
                request_id,
                str(e),
            )
            raise NotificationError(
                NotificationErrorCategory.CONNECTION_REFUSED,
                "Could not connect to notification service",
            ) from e
        except requests.RequestException as e:
            logger.error(
                "Notification request %s failed: %s",
                request_id,
                str(e),
            )
            raise NotificationError(
                NotificationErrorCategory.OTHER,
                f"Notification request failed: {e}",
            ) from e

        duration_ms = _elapsed_ms(start)

        if not response.ok:
            error_text = response.text
            # Body may echo the recipient; log its size only
            logger.error(
                "Notification service returned %d for %s after %dms (%d byte body)",
                response.status_code,
                request_id,
                duration_ms,
                len(error_text or ""),
            )
            raise NotificationError(
                NotificationErrorCategory.UPSTREAM_REJECTED,
                f"Notification service error: {response.status_code}",
                status=response.status_code,
                body=error_text,
            )

        try:
            content = response.content
        except (
            requests.exceptions.ContentDecodingError,
            requests.exceptions.ChunkedEncodingError,
        ) as e:
            logger.error(
                "Could not read notification response body for %s: %s",
                request_id,
                type(e).__name__,
            )
            raise NotificationError(
                NotificationErrorCategory.MALFORMED_RESPONSE,
                "Notification service response could not be read",
                status=response.status_code,
            ) from e

        body = None
        if content:
            try:
                body = response.json()
            except ValueError:
                # Accepted 2xx with an unparseable body still counts as sent
                logger.warning(
                    "Could not parse notification response body for %s",
                    request_id,
                )

        logger.info(
            "Notification request %s accepted with %d in %dms",
            request_id,
            response.status_code,
            duration_ms,
        )

        return NotificationAck(
            status_code=response.status_code,
            body=body,
            duration_ms=duration_ms,
        )


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)

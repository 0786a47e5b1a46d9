"""
Notion API Transport
====================

This module provides the HTTP transport used to talk to the Notion API.
It owns the `requests.Session`, the authentication and versioning headers,
and the retry policy for transient network errors.

The transport does not interpret response bodies: it hands back the status
outcome and raw text, and the decoders decide what the text means. This
keeps pagination and decoding testable with a fake transport.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import requests
import structlog

from .config import NotionConfig, Settings
from .errors import TransportError
from .utils import retry

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Outcome of one request: success flag, HTTP status and raw body."""

    ok: bool
    status_code: int
    text: str


class Transport(Protocol):
    """Anything that can send a request to the Notion API."""

    def send(
        self,
        url: str,
        method: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> TransportResponse: ...


class NotionTransport:
    """A `requests`-backed transport for the Notion API."""

    def __init__(self, settings: Settings, config: NotionConfig | None = None):
        """Initializes the session with authentication and version headers."""
        self.settings = settings
        self.config = config or settings.notion_config()
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {self.config.bearer_token}",
                "Notion-Version": self.config.api_version,
                "Content-Type": "application/json",
            }
        )

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> "NotionTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @retry(retryable_exceptions=(requests.exceptions.RequestException,))
    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """A retriable version of session.request."""
        return self._session.request(
            method, url, timeout=self.settings.REQUEST_TIMEOUT, **kwargs
        )

    def send(
        self,
        url: str,
        method: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> TransportResponse:
        """
        Send one request and return its outcome.

        HTTP error statuses are returned with ``ok=False``; network failures
        that survive every retry raise `TransportError`.
        """
        log.debug("Notion API call", method=method, url=url)
        try:
            response = self._request(method, url, json=body, params=params)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if self.settings.LOG_RAW_RESPONSES:
            log.debug("Notion API response", url=url, body=response.text)

        if not response.ok:
            log.error(
                "Notion API call failed",
                method=method,
                url=url,
                status_code=response.status_code,
                body=response.text,
            )
        return TransportResponse(
            ok=response.ok, status_code=response.status_code, text=response.text
        )

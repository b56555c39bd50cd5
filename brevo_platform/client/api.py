"""Brevo v3 REST client: one authenticated request per call, no retries."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import httpx
import structlog

from brevo_platform.config import (
    API_KEY_OPTION,
    BASE_URL_OPTION,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    TIMEOUT_OPTION,
    ConfigStore,
)
from brevo_platform.errors import ConfigurationError, TransportError

logger = structlog.get_logger()

METHODS = ("GET", "POST", "PUT", "DELETE")
BODY_METHODS = ("POST", "PUT")

NO_API_KEY_MESSAGE = "Brevo API key not configured. Install and configure the Brevo plugin first."


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class UpstreamRequest:
    method: str
    path: str                                  # relative to the API base, e.g. "contacts/lists"
    body: Optional[Dict[str, Any]] = None      # sent for POST/PUT only
    query: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if self.method not in METHODS:
            raise ValueError(f"Unsupported method '{self.method}'")

    def url_path(self) -> str:
        if not self.query:
            return self.path
        pairs = [(k, _query_value(v)) for k, v in self.query.items() if v is not None]
        return f"{self.path}?{urlencode(pairs)}" if pairs else self.path


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    reason_phrase: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    text: str = ""


class BrevoClient:
    """
    Issues a single request against the Brevo API.

    The API key is read from the config store on every call so that a key
    added after startup is picked up; without one no request is made.
    """

    def __init__(self, config: ConfigStore, http_client: Optional[httpx.Client] = None):
        self.config = config
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "BrevoClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def base_url(self) -> str:
        return str(self.config.get(BASE_URL_OPTION, DEFAULT_BASE_URL) or DEFAULT_BASE_URL)

    @property
    def timeout(self) -> float:
        return float(self.config.get(TIMEOUT_OPTION, DEFAULT_TIMEOUT) or DEFAULT_TIMEOUT)

    def url_for(self, request: UpstreamRequest) -> str:
        return self.base_url.rstrip("/") + "/" + request.url_path().lstrip("/")

    def send(self, request: UpstreamRequest) -> RawResponse:
        api_key = self.config.get(API_KEY_OPTION, "")
        if not api_key:
            raise ConfigurationError(NO_API_KEY_MESSAGE)

        headers = {
            "api-key": str(api_key),
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        content = None
        if request.method in BODY_METHODS and request.body is not None:
            content = json.dumps(request.body)

        url = self.url_for(request)
        timeout = self.timeout

        try:
            resp = self._http.request(
                request.method,
                url,
                headers=headers,
                content=content,
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            logger.warning("brevo_request_timeout", method=request.method, path=request.path)
            raise TransportError(
                f"API request failed: timed out after {timeout:g}s",
                details={"error": str(e)},
            ) from e
        except httpx.TransportError as e:
            logger.warning("brevo_request_failed", method=request.method, path=request.path, error=str(e))
            raise TransportError(f"API request failed: {e}", details={"error": str(e)}) from e

        logger.debug(
            "brevo_response",
            method=request.method,
            path=request.path,
            status=resp.status_code,
        )
        return RawResponse(
            status_code=resp.status_code,
            reason_phrase=resp.reason_phrase,
            headers=dict(resp.headers),
            text=resp.text,
        )

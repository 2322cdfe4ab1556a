"""Backend configuration and the single completion call."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..logging import safe_headers_for_log
from ..types import BackendCompletionRequest
from .exceptions import AuthenticationError, UpstreamApiError, UpstreamUnavailableError

logger = logging.getLogger("ozwell-proxy")

DEFAULT_BASE_URL = "https://ai.bluehive.com"
DEFAULT_COMPLETION_PATH = "/api/v1/completion"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Backend:
    """Location of the Ozwell completion API."""

    base_url: str = DEFAULT_BASE_URL
    completion_path: str = DEFAULT_COMPLETION_PATH
    timeout: float = DEFAULT_TIMEOUT

    @property
    def completion_url(self) -> str:
        path = self.completion_path or ""
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url.rstrip('/')}{path}"


def build_outbound_headers(credential: str) -> dict[str, str]:
    """Headers for the backend call; the caller's credential is sent as-is."""
    return {
        "Authorization": credential,
        "Content-Type": "application/json",
        "Accept": "application/json",
    }


def build_backend_body(
    prompt: str, system_message: str, max_tokens: Optional[int] = None
) -> BackendCompletionRequest:
    body: BackendCompletionRequest = {"prompt": prompt, "systemMessage": system_message}
    if max_tokens is not None:
        body["maxTokens"] = max_tokens
    return body


def format_httpx_error(exc: Exception, backend: Backend, url: Optional[str] = None) -> str:
    """Produce a detailed, user-facing description of an httpx error."""
    parts = [exc.__class__.__name__]
    message = str(exc).strip()
    if message:
        parts.append(message)

    request = None
    try:
        request = getattr(exc, "request", None)
    except RuntimeError:
        # httpx raises when .request is read on an error built without one
        request = None
    if request is not None:
        parts.append(f"request={request.method} {request.url}")
    elif url:
        parts.append(f"url={url}")

    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError)):
        parts.append(f"timeout={backend.timeout}s")

    return "; ".join(parts)


def extract_error_message(resp: httpx.Response) -> str:
    """Pick the most useful error message out of a backend error response."""
    fallback = f"Backend returned HTTP {resp.status_code}"
    try:
        data = resp.json()
    except ValueError:
        text = resp.text.strip()
        return text[:500] if text else fallback

    if isinstance(data, dict):
        message = data.get("message")
        if isinstance(message, str) and message:
            return message
        error = data.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, str) and message:
                return message
        if isinstance(error, str) and error:
            return error
    return fallback


def decode_backend_reply(resp: httpx.Response) -> Any:
    """Decode a successful backend response.

    Returns the JSON value, the raw text when the body is not JSON, or
    ``None`` when the body is empty.
    """
    if not resp.content.strip():
        return None
    try:
        return resp.json()
    except ValueError:
        logger.debug("Backend reply is not JSON; treating it as plain text")
        return resp.text


class BackendClient:
    """Issues the one completion call made per gateway request.

    There is no retry: a failed call surfaces immediately as a
    ``GatewayError`` subclass.
    """

    def __init__(
        self,
        backend: Backend,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        log_payloads: bool = False,
    ) -> None:
        self.backend = backend
        self.transport = transport
        self.log_payloads = log_payloads

    async def complete(
        self,
        prompt: str,
        system_message: str,
        credential: str,
        max_tokens: Optional[int] = None,
    ) -> Any:
        url = self.backend.completion_url
        headers = build_outbound_headers(credential)
        body = build_backend_body(prompt, system_message, max_tokens)

        logger.info(f"Calling backend {url} (timeout {self.backend.timeout}s)")
        if self.log_payloads and logger.isEnabledFor(logging.DEBUG):
            logger.debug("Outbound headers: %s", safe_headers_for_log(headers))
            logger.debug("Outbound body: %s", json.dumps(body, ensure_ascii=False))

        try:
            # The deadline covers the whole exchange, not each httpx phase
            resp = await asyncio.wait_for(
                self._post(url, headers, body), timeout=self.backend.timeout
            )
        except (httpx.HTTPError, asyncio.TimeoutError) as exc:
            detail = format_httpx_error(exc, self.backend, url=url)
            logger.error(f"Backend request failed: {detail}")
            raise UpstreamUnavailableError(detail, status_code=500) from exc

        logger.info(f"Backend responded with status {resp.status_code}")
        if self.log_payloads and logger.isEnabledFor(logging.DEBUG):
            logger.debug("Backend response body: %s", resp.text)

        if resp.status_code >= 400:
            message = extract_error_message(resp)
            logger.error(f"Backend error {resp.status_code}: {message}")
            if resp.status_code == 401:
                raise AuthenticationError(message, status_code=401)
            raise UpstreamApiError(message, status_code=resp.status_code)

        return decode_backend_reply(resp)

    async def _post(
        self, url: str, headers: dict[str, str], body: BackendCompletionRequest
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.backend.timeout,
            transport=self.transport,
            follow_redirects=True,
        ) as client:
            return await client.post(url, headers=headers, json=body)

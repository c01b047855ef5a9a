"""Outbound HTTP call abstraction used by bridges."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from bridges.bridge.errors import BridgeCallError
from bridges.bridge.models import (
    AuthDescriptor,
    BasicAuth,
    BearerAuth,
    CallOptions,
    HeaderAuth,
    ParamAuth,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class OutboundCaller(Protocol):
    """Performs one outbound call and returns the decoded JSON object."""

    async def call(self, method: str, url: str, options: CallOptions) -> dict[str, Any]: ...


def build_request_kwargs(options: CallOptions) -> dict[str, Any]:
    """Serialize call options (auth included) into ``httpx`` request arguments."""
    headers: dict[str, str] = {}
    params: dict[str, str] = dict(options.query)
    kwargs: dict[str, Any] = {}
    _apply_auth(options.auth, headers, params, kwargs)

    kwargs["headers"] = headers
    kwargs["params"] = params
    if options.body is not None:
        kwargs["content"] = options.body
    return kwargs


def _apply_auth(
    auth: AuthDescriptor,
    headers: dict[str, str],
    params: dict[str, str],
    kwargs: dict[str, Any],
) -> None:
    if isinstance(auth, BasicAuth):
        kwargs["auth"] = httpx.BasicAuth(auth.username, auth.password)
    elif isinstance(auth, BearerAuth):
        headers["Authorization"] = f"Bearer {auth.token}"
    elif isinstance(auth, HeaderAuth):
        headers[auth.header] = auth.value
    elif isinstance(auth, ParamAuth):
        params[auth.param] = auth.value


class HTTPCaller:
    """``httpx``-backed caller. Opens a client per call, no retries."""

    def __init__(self, timeout_seconds: float = 30) -> None:
        self.timeout_seconds = timeout_seconds

    async def call(self, method: str, url: str, options: CallOptions) -> dict[str, Any]:
        kwargs = build_request_kwargs(options)
        logger.debug("Outbound %s %s query=%s", method, url, sorted(options.query))

        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_seconds)) as client:
                resp = await client.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise BridgeCallError(
                f"{method} {url} failed: {exc}",
                code="transport",
                original_error=exc,
            ) from exc
        except UnicodeEncodeError as exc:
            # Header values (auth secrets included) must be ASCII.
            raise BridgeCallError(
                f"{method} {url} has a header value that is not ASCII",
                code="encode",
                original_error=exc,
            ) from exc

        if resp.status_code != options.expected_code:
            raise BridgeCallError(
                f"{method} {url} returned {resp.status_code}, expected {options.expected_code}",
                code="unexpected_status",
                status_code=resp.status_code,
            )

        if method.upper() == "HEAD":
            return {}

        try:
            data = resp.json()
        except ValueError as exc:
            raise BridgeCallError(
                f"{method} {url} returned a body that is not JSON",
                code="decode",
                status_code=resp.status_code,
                original_error=exc,
            ) from exc

        if not isinstance(data, dict):
            raise BridgeCallError(
                f"{method} {url} returned JSON {type(data).__name__}, expected an object",
                code="decode",
                status_code=resp.status_code,
            )
        return data

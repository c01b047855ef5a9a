"""Executable JSON-declared bridges."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from bridges.bridge.client import HTTPCaller, OutboundCaller
from bridges.bridge.models import (
    AuthDescriptor,
    BridgeDefinition,
    BridgeDescriptor,
    CallOptions,
    NoAuth,
)
from bridges.bridge.params import InboundContext, resolve_query

logger = logging.getLogger(__name__)


class JSONBridge:
    """A bridge definition paired with its resolved auth.

    Instances are shared by all concurrent requests; ``run`` builds fresh
    per-call options and never writes to the definition.
    """

    def __init__(
        self,
        definition: BridgeDefinition,
        auth: AuthDescriptor | None = None,
        caller: OutboundCaller | None = None,
    ) -> None:
        self._definition = definition
        self._auth = auth if auth is not None else NoAuth()
        self._caller = caller if caller is not None else HTTPCaller()

    @property
    def name(self) -> str:
        return self._definition.name

    @property
    def definition(self) -> BridgeDefinition:
        return self._definition

    @property
    def auth(self) -> AuthDescriptor:
        return self._auth

    @property
    def descriptor(self) -> BridgeDescriptor:
        return BridgeDescriptor(
            name=self._definition.name,
            path=self._definition.path,
            lambda_compatible=True,
        )

    def target_url(self, inbound: InboundContext) -> str:
        """Static url when declared, else the inbound ``url`` parameter (possibly empty)."""
        if self._definition.url:
            return self._definition.url
        return inbound.get_param("url")

    def build_options(self, inbound: InboundContext) -> CallOptions:
        opts = self._definition.opts
        query: dict[str, str] = {}
        inbound_params = getattr(inbound, "params", None)
        if opts.query_passthrough and isinstance(inbound_params, Mapping):
            # An inbound "url" is the call target when no static url is declared.
            skip = set() if self._definition.url else {"url"}
            query.update({k: inbound.get_param(k) for k in inbound_params if k not in skip})
        query.update(resolve_query(opts.query, inbound))
        return CallOptions(
            query=query,
            auth=self._auth,
            body=opts.body,
            expected_code=opts.expected_code,
        )

    async def run(self, inbound: InboundContext) -> dict[str, Any]:
        """Make the one outbound call for this request and return its decoded body."""
        options = self.build_options(inbound)
        url = self.target_url(inbound)
        logger.debug("Bridge %s -> %s %s", self.name, self._definition.method, url)
        return await self._caller.call(self._definition.method, url, options)

    def __repr__(self) -> str:
        return f"JSONBridge(name={self.name!r}, path={self._definition.path!r})"

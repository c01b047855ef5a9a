"""Inbound request parameters and query template resolution."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class InboundContext(Protocol):
    """Read-only view over an incoming request.

    Contexts may also expose a ``params`` mapping of every parameter name; query
    passthrough uses it when present.
    """

    def get_param(self, name: str) -> str: ...


class InboundRequest:
    """Inbound parameters taken from a request's ``data`` object and query string.

    Body parameters override query string parameters of the same name.
    """

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        job_run_id: str = "",
        query: Mapping[str, Any] | None = None,
    ) -> None:
        merged: dict[str, Any] = dict(query or {})
        merged.update(data or {})
        self._params = merged
        self.job_run_id = job_run_id

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        query: Mapping[str, Any] | None = None,
    ) -> InboundRequest:
        """Build from a decoded JSON body of the form ``{"id": ..., "data": {...}}``."""
        if not isinstance(payload, Mapping):
            return cls(query=query)
        data = payload.get("data")
        job_run_id = payload.get("id")
        if job_run_id is None:
            job_run_id = payload.get("jobRunID")
        if job_run_id is None:
            job_run_id = ""
        return cls(
            data=data if isinstance(data, Mapping) else None,
            job_run_id=str(job_run_id),
            query=query,
        )

    @property
    def params(self) -> dict[str, Any]:
        return dict(self._params)

    def get_param(self, name: str) -> str:
        """Return the named parameter as text; absent or null parameters are ``""``."""
        value = self._params.get(name)
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        return json.dumps(value)


def resolve_query(
    template: Mapping[str, str],
    inbound: InboundContext,
) -> dict[str, str]:
    """Resolve every template entry as the name of an inbound parameter.

    Always returns a new dict; ``template`` is never written to.
    """
    return {key: inbound.get_param(ref) for key, ref in template.items()}

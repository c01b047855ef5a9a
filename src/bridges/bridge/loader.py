"""Load bridge definitions from a local file or a remote URI."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

import httpx
import yaml
from pydantic import TypeAdapter, ValidationError

from bridges.bridge.auth import resolve_auth_spec
from bridges.bridge.client import OutboundCaller
from bridges.bridge.errors import (
    BridgeConfigurationError,
    BridgeIOError,
    BridgeParseError,
    DuplicateBridgeError,
)
from bridges.bridge.executor import JSONBridge
from bridges.bridge.models import BridgeDefinition

logger = logging.getLogger(__name__)

_DEFINITIONS = TypeAdapter(list[BridgeDefinition])
_YAML_SUFFIXES = (".yml", ".yaml")


def open_uri(uri: str, timeout_seconds: float = 30) -> bytes:
    """Read the full contents of a filesystem path, ``file://`` or ``http(s)://`` URI."""
    parsed = urlparse(uri)
    scheme = parsed.scheme.lower()

    # Single-letter schemes are Windows drive letters.
    if scheme in ("", "file") or len(scheme) == 1:
        path = Path(unquote(parsed.path)) if scheme == "file" else Path(uri)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise BridgeIOError(
                f"Cannot read bridge file {str(path)!r}: {exc}",
                original_error=exc,
            ) from exc

    if scheme in ("http", "https"):
        try:
            resp = httpx.get(uri, follow_redirects=True, timeout=timeout_seconds)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise BridgeIOError(
                f"Cannot fetch bridge document {uri!r}: {exc}",
                original_error=exc,
            ) from exc
        return resp.content

    raise BridgeIOError(f"Unsupported bridge URI scheme {scheme!r} in {uri!r}")


def parse_definitions(raw: bytes, *, yaml_document: bool = False) -> list[BridgeDefinition]:
    """Parse a document holding an array of bridge definitions."""
    try:
        if yaml_document:
            document: Any = yaml.safe_load(raw)
        else:
            document = json.loads(raw)
    except (ValueError, yaml.YAMLError) as exc:
        raise BridgeParseError(f"Malformed bridge document: {exc}", original_error=exc) from exc

    if not isinstance(document, list):
        raise BridgeParseError(
            f"Bridge document must be an array, got {type(document).__name__}"
        )

    try:
        return _DEFINITIONS.validate_python(document)
    except ValidationError as exc:
        raise BridgeParseError(
            f"Invalid bridge definition: {exc}",
            details={"errors": exc.errors(include_url=False)},
            original_error=exc,
        ) from exc


def check_unique_names(definitions: list[BridgeDefinition]) -> None:
    seen: set[str] = set()
    for definition in definitions:
        if definition.name in seen:
            raise DuplicateBridgeError(
                f"Duplicate bridge name {definition.name!r}",
                details={"name": definition.name},
            )
        seen.add(definition.name)


def load_bridges(
    uri: str,
    environ: Mapping[str, str] | None = None,
    caller: OutboundCaller | None = None,
    timeout_seconds: float = 30,
) -> list[JSONBridge]:
    """Load, validate and auth-resolve every bridge declared at ``uri``.

    Args:
        uri: Filesystem path or file/http(s) URI of the bridge document.
        environ: Secret lookup used for ``auth.env``. Defaults to ``os.environ``.
        caller: Outbound caller shared by the returned bridges.
        timeout_seconds: Fetch timeout for remote documents.

    Returns:
        Executable bridges, in declaration order.
    """
    if not uri:
        raise BridgeConfigurationError("Empty bridge URI given")
    if environ is None:
        environ = os.environ

    raw = open_uri(uri, timeout_seconds=timeout_seconds)
    yaml_document = urlparse(uri).path.lower().endswith(_YAML_SUFFIXES)
    definitions = parse_definitions(raw, yaml_document=yaml_document)
    check_unique_names(definitions)

    bridges = [
        JSONBridge(definition, resolve_auth_spec(definition.auth, environ), caller)
        for definition in definitions
    ]
    logger.info("Loaded %d bridge(s) from %s", len(bridges), uri)
    for bridge in bridges:
        logger.info("  %s %s -> %s", bridge.definition.method, bridge.definition.path, bridge.name)
    return bridges

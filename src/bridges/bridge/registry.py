"""Registry of executable bridges, keyed by name and routing path."""

from __future__ import annotations

from bridges.bridge.errors import DuplicateBridgeError
from bridges.bridge.executor import JSONBridge
from bridges.bridge.models import BridgeDescriptor

# Served by the introspection router; bridges may not mount here.
RESERVED_PATHS = frozenset({"/api/bridges", "/api/health"})
RESERVED_PREFIXES = ("/api/bridges/",)


def is_reserved_path(path: str) -> bool:
    normalized = path.rstrip("/") or "/"
    return normalized in RESERVED_PATHS or path.startswith(RESERVED_PREFIXES)


class BridgeRegistry:
    """Registry for bridges. Provides register/get/list."""

    def __init__(self) -> None:
        self._bridges: dict[str, JSONBridge] = {}
        self._paths: dict[str, str] = {}

    def register(self, bridge: JSONBridge) -> None:
        """Register a bridge. Name and path must both be unused, and the path unreserved."""
        descriptor = bridge.descriptor
        if descriptor.name in self._bridges:
            raise DuplicateBridgeError(f"Bridge {descriptor.name!r} is already registered")
        if is_reserved_path(descriptor.path):
            raise DuplicateBridgeError(
                f"Path {descriptor.path!r} of bridge {descriptor.name!r} is reserved",
                details={"name": descriptor.name, "path": descriptor.path},
            )
        if descriptor.path in self._paths:
            raise DuplicateBridgeError(
                f"Path {descriptor.path!r} of bridge {descriptor.name!r} is already "
                f"served by {self._paths[descriptor.path]!r}"
            )
        self._bridges[descriptor.name] = bridge
        self._paths[descriptor.path] = descriptor.name

    def get(self, name: str) -> JSONBridge | None:
        return self._bridges.get(name)

    def list_bridges(self) -> list[BridgeDescriptor]:
        """List descriptors in registration order."""
        return [bridge.descriptor for bridge in self._bridges.values()]

    @property
    def bridge_names(self) -> list[str]:
        return list(self._bridges.keys())

    def __len__(self) -> int:
        return len(self._bridges)

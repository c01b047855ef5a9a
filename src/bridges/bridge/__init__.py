"""Declarative HTTP bridges: definitions, auth resolution and execution.

A bridge proxies one inbound request into exactly one outbound HTTP call
whose target, method, auth and query are declared in a JSON document.
"""

from bridges.bridge.errors import (
    BridgeCallError,
    BridgeConfigurationError,
    BridgeError,
    BridgeIOError,
    BridgeParseError,
    DuplicateBridgeError,
)
from bridges.bridge.executor import JSONBridge
from bridges.bridge.loader import load_bridges
from bridges.bridge.params import InboundRequest

__all__ = [
    "BridgeCallError",
    "BridgeConfigurationError",
    "BridgeError",
    "BridgeIOError",
    "BridgeParseError",
    "DuplicateBridgeError",
    "InboundRequest",
    "JSONBridge",
    "load_bridges",
]

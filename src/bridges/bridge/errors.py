"""Bridge domain exceptions."""

from __future__ import annotations


class BridgeError(Exception):
    """Base for bridge domain errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class BridgeConfigurationError(BridgeError):
    """Missing or inconsistent bridge configuration."""


class DuplicateBridgeError(BridgeConfigurationError):
    """Two bridges share a name or a routing path."""


class BridgeIOError(BridgeError):
    """Configuration source could not be opened or read."""


class BridgeParseError(BridgeError):
    """Configuration document is not a valid list of bridge definitions."""


class BridgeCallError(BridgeError):
    """Outbound call failed: transport, unexpected status, or undecodable body."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        **kwargs: object,
    ) -> None:
        super().__init__(message, **kwargs)  # type: ignore[arg-type]
        self.status_code = status_code

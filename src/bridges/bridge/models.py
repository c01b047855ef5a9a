"""Bridge data models: declared definitions, resolved auth, per-call options."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, ValidationInfo, field_validator

HTTP_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"})


class AuthType(StrEnum):
    """Supported outbound authentication schemes."""

    NONE = "none"
    BASIC = "basic"
    BEARER = "bearer"
    HEADER = "header"
    PARAM = "param"


class AuthSpec(BaseModel):
    """Declared authentication, before the secret is read from the environment."""

    model_config = {"frozen": True}

    type: AuthType = AuthType.NONE
    key: str = ""
    env: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        if value is None or value == "":
            return AuthType.NONE
        if isinstance(value, str):
            return value.strip().lower()
        return value


# --- Resolved auth descriptors ---


class NoAuth(BaseModel):
    model_config = {"frozen": True}

    type: Literal[AuthType.NONE] = AuthType.NONE


class BasicAuth(BaseModel):
    """HTTP basic auth; the declared key is the username."""

    model_config = {"frozen": True}

    type: Literal[AuthType.BASIC] = AuthType.BASIC
    username: str
    password: str = Field(default="", repr=False)


class BearerAuth(BaseModel):
    model_config = {"frozen": True}

    type: Literal[AuthType.BEARER] = AuthType.BEARER
    token: str = Field(default="", repr=False)


class HeaderAuth(BaseModel):
    """API key sent in a request header named by the declared key."""

    model_config = {"frozen": True}

    type: Literal[AuthType.HEADER] = AuthType.HEADER
    header: str
    value: str = Field(default="", repr=False)


class ParamAuth(BaseModel):
    """API key sent as a query parameter named by the declared key."""

    model_config = {"frozen": True}

    type: Literal[AuthType.PARAM] = AuthType.PARAM
    param: str
    value: str = Field(default="", repr=False)


AuthDescriptor = Annotated[
    NoAuth | BasicAuth | BearerAuth | HeaderAuth | ParamAuth,
    Field(discriminator="type"),
]


# --- Declared bridges ---


class CallOpts(BaseModel):
    """Declared call options (the ``opts`` object of a bridge definition).

    ``query_passthrough`` copies every inbound parameter onto the outbound query.
    It needs an inbound context exposing a ``params`` mapping, as
    ``InboundRequest`` does; other contexts contribute only template entries.
    """

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}

    query: dict[str, str] = Field(default_factory=dict)
    query_passthrough: bool = Field(default=False, alias="queryPassthrough")
    body: str | None = None
    expected_code: int = Field(default=200, alias="expectedCode")

    @field_validator("query", mode="before")
    @classmethod
    def _stringify_refs(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k): "" if v is None else str(v) for k, v in value.items()}
        return value

    @field_validator("expected_code", mode="before")
    @classmethod
    def _default_expected_code(cls, value: Any) -> Any:
        return 200 if value in (None, 0) else value


class BridgeDefinition(BaseModel):
    """One declared adapter, immutable once loaded."""

    model_config = {"frozen": True}

    name: str
    method: str
    url: str = ""
    path: str = Field(default="", validate_default=True)
    auth: AuthSpec = Field(default_factory=AuthSpec)
    opts: CallOpts = Field(default_factory=CallOpts)

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("bridge name must not be empty")
        return value

    @field_validator("method")
    @classmethod
    def _validate_method(cls, value: str) -> str:
        method = value.strip().upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"unsupported HTTP method {value!r}")
        return method

    @field_validator("url", "path", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("path")
    @classmethod
    def _default_path(cls, value: str, info: ValidationInfo) -> str:
        path = value.strip() or info.data.get("name", "")
        if not path.startswith("/"):
            path = f"/{path}"
        return path

    @property
    def query_template(self) -> dict[str, str]:
        return self.opts.query


class BridgeDescriptor(BaseModel):
    """What the hosting layer needs to mount a bridge."""

    model_config = {"frozen": True, "populate_by_name": True}

    name: str
    path: str
    lambda_compatible: bool = Field(default=True, alias="lambda")


class CallOptions(BaseModel):
    """Outbound parameters for a single call. Built fresh per inbound request."""

    model_config = {"frozen": True}

    query: dict[str, str] = Field(default_factory=dict)
    auth: AuthDescriptor = Field(default_factory=NoAuth)
    body: str | None = None
    expected_code: int = 200


class RunStatus(StrEnum):
    COMPLETED = "completed"
    ERRORED = "errored"


class RunResult(BaseModel):
    """Response envelope written back to the inbound caller."""

    model_config = {"populate_by_name": True}

    job_run_id: str = Field(default="", alias="jobRunID")
    status: RunStatus = RunStatus.COMPLETED
    data: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    pending: bool = False

"""Resolve declared bridge auth into ready-to-use descriptors."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from bridges.bridge.models import (
    AuthDescriptor,
    AuthSpec,
    AuthType,
    BasicAuth,
    BearerAuth,
    HeaderAuth,
    NoAuth,
    ParamAuth,
)

logger = logging.getLogger(__name__)


def resolve_auth(
    auth_type: AuthType | str,
    key: str,
    env_name: str,
    environ: Mapping[str, str] | None = None,
) -> AuthDescriptor:
    """Read the secret named by ``env_name`` once and build the descriptor.

    An unset variable resolves to an empty secret. Guarding against that is
    left to the caller, since it is valid for ``AuthType.NONE``.
    """
    if environ is None:
        environ = os.environ
    auth_type = AuthType((auth_type or AuthType.NONE).lower())
    secret = environ.get(env_name, "") if env_name else ""

    if auth_type == AuthType.BASIC:
        return BasicAuth(username=key, password=secret)
    if auth_type == AuthType.BEARER:
        return BearerAuth(token=secret)
    if auth_type == AuthType.HEADER:
        return HeaderAuth(header=key, value=secret)
    if auth_type == AuthType.PARAM:
        return ParamAuth(param=key, value=secret)
    return NoAuth()


def resolve_auth_spec(
    spec: AuthSpec,
    environ: Mapping[str, str] | None = None,
) -> AuthDescriptor:
    """Resolve a declared AuthSpec, warning when a secret-bearing scheme has no secret."""
    descriptor = resolve_auth(spec.type, spec.key, spec.env, environ)
    if spec.type != AuthType.NONE and not _has_secret(descriptor):
        logger.warning(
            "Auth %s declared but environment variable %r is unset or empty",
            spec.type.value, spec.env,
        )
    return descriptor


def _has_secret(descriptor: AuthDescriptor) -> bool:
    if isinstance(descriptor, BasicAuth):
        return bool(descriptor.password)
    if isinstance(descriptor, BearerAuth):
        return bool(descriptor.token)
    if isinstance(descriptor, (HeaderAuth, ParamAuth)):
        return bool(descriptor.value)
    return True

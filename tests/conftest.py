"""Shared test fixtures and helpers."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import pytest

from bridges.bridge.models import CallOptions


class RecordingCaller:
    """In-memory outbound caller that echoes what it was asked to send."""

    def __init__(self, delay: float = 0.0, error: Exception | None = None) -> None:
        self.delay = delay
        self.error = error
        self.calls: list[tuple[str, str, CallOptions]] = []

    async def call(self, method: str, url: str, options: CallOptions) -> dict[str, Any]:
        self.calls.append((method, url, options))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return {"method": method, "url": url, "query": dict(options.query)}


@pytest.fixture
def recording_caller() -> RecordingCaller:
    return RecordingCaller()


@pytest.fixture
def write_bridges(tmp_path: Path):
    """Write a list of bridge definitions to a JSON file and return its path."""

    def _write(definitions: list[dict[str, Any]], name: str = "bridges.json") -> str:
        path = tmp_path / name
        path.write_text(json.dumps(definitions))
        return str(path)

    return _write

"""Tests for JSONBridge execution: target selection, options, concurrency."""

from __future__ import annotations

import asyncio

import pytest

from bridges.bridge.errors import BridgeCallError
from bridges.bridge.executor import JSONBridge
from bridges.bridge.models import BridgeDefinition, HeaderAuth, NoAuth
from bridges.bridge.params import InboundRequest
from conftest import RecordingCaller


def _definition(**overrides) -> BridgeDefinition:
    defaults = {"name": "search", "method": "GET", "url": "http://a"}
    defaults.update(overrides)
    return BridgeDefinition.model_validate(defaults)


class TestTargetURL:
    @pytest.mark.asyncio
    async def test_static_url_wins(self, recording_caller: RecordingCaller) -> None:
        bridge = JSONBridge(_definition(url="http://a"), caller=recording_caller)
        result = await bridge.run(InboundRequest({"url": "http://b"}))
        assert result["url"] == "http://a"

    @pytest.mark.asyncio
    async def test_inbound_url_when_no_static(self, recording_caller: RecordingCaller) -> None:
        bridge = JSONBridge(_definition(url=""), caller=recording_caller)
        result = await bridge.run(InboundRequest({"url": "http://b"}))
        assert result["url"] == "http://b"

    @pytest.mark.asyncio
    async def test_missing_url_passed_as_empty(self, recording_caller: RecordingCaller) -> None:
        bridge = JSONBridge(_definition(url=""), caller=recording_caller)
        result = await bridge.run(InboundRequest({}))
        assert result["url"] == ""


class TestCallOptions:
    @pytest.mark.asyncio
    async def test_query_resolved_from_inbound(self, recording_caller: RecordingCaller) -> None:
        bridge = JSONBridge(
            _definition(opts={"query": {"q": "search"}}), caller=recording_caller
        )
        result = await bridge.run(InboundRequest({"search": "cats"}))
        assert result["query"] == {"q": "cats"}

    @pytest.mark.asyncio
    async def test_method_and_auth_forwarded(self, recording_caller: RecordingCaller) -> None:
        auth = HeaderAuth(header="X-Api-Key", value="k")
        bridge = JSONBridge(_definition(method="post"), auth, recording_caller)
        await bridge.run(InboundRequest({}))
        method, _, options = recording_caller.calls[0]
        assert method == "POST"
        assert options.auth == auth

    @pytest.mark.asyncio
    async def test_body_and_expected_code(self, recording_caller: RecordingCaller) -> None:
        bridge = JSONBridge(
            _definition(opts={"body": "{}", "expectedCode": 202}), caller=recording_caller
        )
        await bridge.run(InboundRequest({}))
        options = recording_caller.calls[0][2]
        assert options.body == "{}"
        assert options.expected_code == 202

    def test_query_passthrough(self) -> None:
        bridge = JSONBridge(
            _definition(opts={"query": {"q": "search"}, "queryPassthrough": True})
        )
        options = bridge.build_options(InboundRequest({"search": "cats", "page": 2}))
        assert options.query == {"search": "cats", "page": "2", "q": "cats"}

    def test_query_passthrough_skips_inbound_target(self) -> None:
        bridge = JSONBridge(_definition(url="", opts={"queryPassthrough": True}))
        inbound = InboundRequest({"url": "http://b", "page": "2"})
        assert bridge.build_options(inbound).query == {"page": "2"}
        assert bridge.target_url(inbound) == "http://b"

    def test_query_passthrough_any_context_with_params(self) -> None:
        class MappingContext:
            params = {"page": "3"}

            def get_param(self, name: str) -> str:
                return self.params.get(name, "")

        bridge = JSONBridge(_definition(opts={"queryPassthrough": True}))
        assert bridge.build_options(MappingContext()).query == {"page": "3"}

    def test_query_passthrough_without_params_uses_template_only(self) -> None:
        class LookupOnly:
            def get_param(self, name: str) -> str:
                return "cats" if name == "search" else ""

        bridge = JSONBridge(
            _definition(opts={"query": {"q": "search"}, "queryPassthrough": True})
        )
        assert bridge.build_options(LookupOnly()).query == {"q": "cats"}

    @pytest.mark.asyncio
    async def test_head_bridge_returns_empty_mapping(self, httpx_mock) -> None:
        httpx_mock.add_response(url="http://a", method="HEAD", status_code=200)
        bridge = JSONBridge(_definition(method="HEAD"))
        assert await bridge.run(InboundRequest({})) == {}

    def test_default_auth_is_none(self) -> None:
        assert JSONBridge(_definition()).auth == NoAuth()

    @pytest.mark.asyncio
    async def test_definition_not_mutated(self, recording_caller: RecordingCaller) -> None:
        definition = _definition(opts={"query": {"q": "search"}})
        bridge = JSONBridge(definition, caller=recording_caller)
        await bridge.run(InboundRequest({"search": "cats"}))
        assert definition.query_template == {"q": "search"}

    @pytest.mark.asyncio
    async def test_call_error_propagates(self) -> None:
        caller = RecordingCaller(error=BridgeCallError("upstream down", status_code=503))
        bridge = JSONBridge(_definition(), caller=caller)
        with pytest.raises(BridgeCallError, match="upstream down"):
            await bridge.run(InboundRequest({}))


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_no_cross_talk_between_requests(self) -> None:
        caller = RecordingCaller(delay=0.01)
        bridge = JSONBridge(_definition(opts={"query": {"q": "search"}}), caller=caller)
        terms = [f"term-{i}" for i in range(20)]

        results = await asyncio.gather(
            *(bridge.run(InboundRequest({"search": term})) for term in terms)
        )

        assert [r["query"]["q"] for r in results] == terms
        assert bridge.definition.query_template == {"q": "search"}
        assert len({id(options) for _, _, options in caller.calls}) == len(terms)


class TestDescriptor:
    def test_descriptor(self) -> None:
        bridge = JSONBridge(_definition(name="prices", path="/v1/prices"))
        desc = bridge.descriptor
        assert desc.name == "prices"
        assert desc.path == "/v1/prices"
        assert desc.lambda_compatible is True

    def test_default_path(self) -> None:
        assert JSONBridge(_definition(name="prices")).descriptor.path == "/prices"

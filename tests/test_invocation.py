"""Tests for the guarded tool call path."""
import asyncio

import mcp.types as types
import pytest

from sb_mcp.errors import OutputContractError, ToolError
from sb_mcp.schema import ArrayNode, ObjectNode, StringNode
from sb_mcp.specs import ToolSpec
from sb_mcp.tools.invocation import wrap_tool_callback

OUTPUT_SCHEMA = ObjectNode({
    "values": ArrayNode(ObjectNode({"id": StringNode(), "name": StringNode()})).describe("List of values"),
})


def make_invoke(client, sink, callback, **spec_fields):
    spec = ToolSpec(**{"title": "Test Tool", "summary": "A test tool", **spec_fields})
    return wrap_tool_callback(
        client, spec, "test_product_test_tool", "Test Product: Test Tool", callback, sink
    )


class TestWrapToolCallback:
    @pytest.mark.asyncio
    async def test_passes_arguments_through(self, client, sink):
        calls = []

        async def callback(args, extra):
            calls.append((args, extra))
            return types.CallToolResult(content=[types.TextContent(type="text", text="ok")])

        invoke = make_invoke(client, sink, callback)
        result = await invoke({"q": "alpha"}, "extra")

        assert calls == [({"q": "alpha"}, "extra")]
        assert result.content[0].text == "ok"
        assert sink.events == []

    @pytest.mark.asyncio
    async def test_sync_callback(self, client, sink):
        invoke = make_invoke(client, sink, lambda args, extra: {"content": [{"type": "text", "text": "sync"}]})
        result = await invoke()
        assert isinstance(result, types.CallToolResult)
        assert result.content[0].text == "sync"

    @pytest.mark.asyncio
    async def test_none_result_is_returned(self, client, sink):
        invoke = make_invoke(client, sink, lambda args, extra: None)
        assert await invoke() is None

    @pytest.mark.asyncio
    async def test_not_configured(self, unconfigured_client, sink):
        called = []
        invoke = make_invoke(unconfigured_client, sink, lambda args, extra: called.append(args))
        result = await invoke()

        assert result.isError is True
        assert result.content[0].text == (
            "Error executing Test Product: Test Tool: The tool is not configured - "
            "configuration options for Test Product are missing or invalid."
        )
        assert called == []
        assert sink.events == []

    @pytest.mark.asyncio
    async def test_tool_error_becomes_error_result(self, client, sink):
        def callback(args, extra):
            raise ToolError("X")

        result = await make_invoke(client, sink, callback)()

        assert result.isError is True
        assert len(result.content) == 1
        assert result.content[0].type == "text"
        assert result.content[0].text == "Error executing Test Product: Test Tool: X"
        assert sink.events == []

    @pytest.mark.asyncio
    async def test_unexpected_error_is_reported_and_raised(self, client, sink):
        error = RuntimeError("Y")

        async def callback(args, extra):
            raise error

        with pytest.raises(RuntimeError, match="Y"):
            await make_invoke(client, sink, callback)()

        assert len(sink.events) == 1
        event = sink.events[0]
        assert event.error is error
        assert event.metadata == {"app": {"tool": "test_product_test_tool"}}
        assert event.unhandled is True

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, client, sink):
        async def callback(args, extra):
            raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await make_invoke(client, sink, callback)()
        assert sink.events == []

    @pytest.mark.asyncio
    async def test_structured_content_is_mirrored_as_text(self, client, sink):
        structured = {"values": [{"id": "1", "name": "Alpha"}, {"id": "2", "name": "Beta"}]}

        async def callback(args, extra):
            return types.CallToolResult(content=[], isError=False, structuredContent=structured)

        result = await make_invoke(client, sink, callback, output_schema=OUTPUT_SCHEMA)({"query": "alpha"}, {})

        assert result.isError is False
        assert len(result.structuredContent["values"]) == 2
        assert result.content[0].text == '{"values":[{"id":"1","name":"Alpha"},{"id":"2","name":"Beta"}]}'
        assert sink.events == []

    @pytest.mark.asyncio
    async def test_existing_content_is_kept(self, client, sink):
        async def callback(args, extra):
            return types.CallToolResult(
                content=[types.TextContent(type="text", text="summary")],
                structuredContent={"a": 1},
            )

        result = await make_invoke(client, sink, callback)()
        assert [item.text for item in result.content] == ["summary"]

    @pytest.mark.asyncio
    async def test_missing_structured_content_violates_contract(self, client, sink):
        invoke = make_invoke(
            client, sink, lambda args, extra: {"isError": False}, title="Get values", output_schema=OUTPUT_SCHEMA
        )

        with pytest.raises(OutputContractError, match="must include 'structuredContent'") as exc_info:
            await invoke({}, {})

        assert str(exc_info.value) == "The result of the tool 'Get values' must include 'structuredContent'"
        assert len(sink.events) == 1
        assert sink.events[0].error is exc_info.value

    @pytest.mark.asyncio
    async def test_error_result_skips_output_contract(self, client, sink):
        invoke = make_invoke(client, sink, lambda args, extra: {"isError": True}, output_schema=OUTPUT_SCHEMA)
        result = await invoke({}, {})

        assert result.isError is True
        assert sink.events == []

    @pytest.mark.asyncio
    async def test_invalid_result_type_is_reported(self, client, sink):
        invoke = make_invoke(client, sink, lambda args, extra: 42)
        with pytest.raises(TypeError):
            await invoke()
        assert len(sink.events) == 1

"""Guarded call path wrapped around every client tool callback."""
import mcp.types as types
from loguru import logger

from sb_mcp.errors import OutputContractError, ToolError, ToolNotConfiguredError
from sb_mcp.specs import ToolSpec
from sb_mcp.utils import compact_json, maybe_await


def coerce_result(result) -> types.CallToolResult:
    """Accept plain dicts from callbacks in place of CallToolResult."""
    if isinstance(result, types.CallToolResult):
        return result
    if isinstance(result, dict):
        return types.CallToolResult.model_validate({"content": [], **result})
    raise TypeError(f"Tool callbacks must return CallToolResult or dict, got {type(result).__name__}")


def validate_callback_result(result: types.CallToolResult, spec: ToolSpec) -> None:
    if result.isError:
        return
    if spec.output_schema is not None and result.structuredContent is None:
        raise OutputContractError(
            f"The result of the tool '{spec.title}' must include 'structuredContent'"
        )


def add_structured_content_as_text(result: types.CallToolResult) -> None:
    if result.structuredContent is not None and not result.content:
        result.content = [types.TextContent(type="text", text=compact_json(result.structuredContent))]


def error_result(tool_title: str, error: ToolError) -> types.CallToolResult:
    return types.CallToolResult(
        isError=True,
        content=[types.TextContent(type="text", text=f"Error executing {tool_title}: {error}")],
    )


def wrap_tool_callback(client, spec: ToolSpec, tool_name: str, tool_title: str, callback, sink):
    """Build the function the host calls for a tool.

    The configuration check runs first, then the callback. A result is checked
    against the declared output schema and structured content is mirrored as
    text when the callback left content empty. ToolErrors become error results;
    any other exception is reported to the sink and re-raised.
    """

    async def invoke(args=None, extra=None):
        try:
            if not client.is_configured():
                raise ToolNotConfiguredError(
                    f"The tool is not configured - configuration options for {client.name} are missing or invalid."
                )
            result = await maybe_await(callback(args, extra))
            if result is not None:
                result = coerce_result(result)
                validate_callback_result(result, spec)
                add_structured_content_as_text(result)
            return result
        except ToolError as e:
            # ToolErrors are expected failures and are not reported
            logger.debug(f"Tool {tool_name} returned error: {e}")
            return error_result(tool_title, e)
        except Exception as e:
            def configure_event(event):
                event.add_metadata("app", {"tool": tool_name})
                event.unhandled = True

            sink.notify(e, configure_event)
            raise

    invoke.__name__ = tool_name
    return invoke

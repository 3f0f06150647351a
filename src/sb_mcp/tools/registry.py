import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

import mcp.types as types

from sb_mcp.schema import flatten
from sb_mcp.specs import ToolSpec
from sb_mcp.tools.description import get_description
from sb_mcp.tools.invocation import wrap_tool_callback

MAX_TOOL_NAME_LENGTH = 64


def get_tool_name(prefix: str, title: str) -> str:
    """Derive the tool name: prefix + title with whitespace runs as underscores, lower-cased, cut at 64 chars."""
    words = re.sub(r'\s+', '_', title).lower()
    raw_name = f"{prefix}_{words}"
    return raw_name[:MAX_TOOL_NAME_LENGTH]


def get_tool_title(client_name: str, title: str) -> str:
    return f"{client_name}: {title}"


def get_annotations(tool_title: str, spec: ToolSpec) -> types.ToolAnnotations:
    return types.ToolAnnotations(
        title=tool_title,
        readOnlyHint=True if spec.read_only is None else spec.read_only,
        destructiveHint=False if spec.destructive is None else spec.destructive,
        idempotentHint=True if spec.idempotent is None else spec.idempotent,
        openWorldHint=False if spec.open_world is None else spec.open_world,
    )


def get_input_shape(spec: ToolSpec) -> dict:
    """Explicit parameters merged with the input schema's fields (schema wins)."""
    args = {}
    for param in spec.parameters or ():
        node = param.type
        if param.description:
            node = node.describe(param.description)
        if not param.required:
            node = node.optional()
        args[param.name] = node
    return {**args, **(flatten(spec.input_schema) or {})}


def get_output_shape(spec: ToolSpec) -> Optional[dict]:
    return flatten(spec.output_schema)


@dataclass(frozen=True)
class RegisteredTool:
    name: str
    title: str
    description: str
    input_shape: dict
    output_shape: Optional[dict]
    annotations: types.ToolAnnotations
    invoke: Callable[..., Any]

    @property
    def metadata(self) -> dict:
        """Registration metadata in the shape the host expects."""
        return {
            "title": self.title,
            "description": self.description,
            "input_schema": self.input_shape,
            "output_schema": self.output_shape,
            "annotations": self.annotations,
        }


def build_tool(client, spec: ToolSpec, callback, sink) -> RegisteredTool:
    """Compile a ToolSpec into everything needed to register it."""
    tool_name = get_tool_name(client.tool_prefix, spec.title)
    tool_title = get_tool_title(client.name, spec.title)
    return RegisteredTool(
        name=tool_name,
        title=tool_title,
        description=get_description(spec),
        input_shape=get_input_shape(spec),
        output_shape=get_output_shape(spec),
        annotations=get_annotations(tool_title, spec),
        invoke=wrap_tool_callback(client, spec, tool_name, tool_title, callback, sink),
    )

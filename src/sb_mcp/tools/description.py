"""Compile the human-readable description advertised for a tool."""
from typing import Any, Optional

from sb_mcp.schema import MISSING, SchemaKind, flatten, kind_of, readable_type_name
from sb_mcp.specs import ParameterSpec, ToolSpec
from sb_mcp.utils import compact_json, pretty_json


def _numbered(items) -> str:
    return " ".join(f"{i}. {item}" for i, item in enumerate(items, 1))


def format_parameter(param: ParameterSpec) -> str:
    line = f"- {param.name} ({readable_type_name(param.type)})"
    if param.required:
        line += " *required*"
    if param.description:
        line += f": {param.description}"
    if param.examples:
        line += f" (e.g. {', '.join(param.examples)})"
    if param.constraints:
        line += "".join(f"\n  - {constraint}" for constraint in param.constraints)
    return line


def format_field(key: str, node, description: Optional[str] = None,
                 is_optional: bool = False, default: Any = MISSING) -> str:
    """Describe one input schema field.

    Optional and default wrappers are peeled off recursively; the outermost
    description wins and a default makes the field not required.
    """
    if description is None:
        description = getattr(node, "description", None) or None

    kind = kind_of(node)
    if kind is SchemaKind.OPTIONAL:
        return format_field(key, node.inner, description, True, default)
    if kind is SchemaKind.DEFAULT:
        return format_field(key, node.inner, description, True, node.default_value)

    line = f"- {key} ({readable_type_name(node)})"
    if not is_optional:
        line += " *required*"
    if description:
        line += f": {description}"
    if default is not MISSING:
        line += f" (default: {compact_json(default)})"
    return line


def get_description(spec: ToolSpec) -> str:
    description = spec.summary

    if spec.parameters:
        description += "\n\n**Parameters:**\n"
        description += "\n".join(format_parameter(p) for p in spec.parameters)

    # An explicit parameter list and an object input schema are both listed
    input_shape = flatten(spec.input_schema)
    if input_shape is not None:
        description += "\n\n**Parameters:**\n"
        description += "\n".join(format_field(key, node) for key, node in input_shape.items())

    if spec.output_description:
        description += f"\n\n**Output Description:** {spec.output_description}"

    if spec.use_cases:
        description += f"\n\n**Use Cases:** {_numbered(spec.use_cases)}"

    if spec.examples:
        examples = []
        for i, example in enumerate(spec.examples, 1):
            text = f"{i}. {example.description}\n```json\n{pretty_json(example.parameters)}\n```"
            if example.expected_output:
                text += f"\nExpected Output: {example.expected_output}"
            examples.append(text)
        description += "\n\n**Examples:**\n" + "\n\n".join(examples)

    if spec.hints:
        description += f"\n\n**Hints:** {_numbered(spec.hints)}"

    return description.strip()

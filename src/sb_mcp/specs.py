"""Declarative descriptions of tools supplied by product clients."""
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from sb_mcp.schema import SchemaNode


@dataclass(frozen=True)
class ParameterSpec:
    """A single documented tool parameter.

    Attributes:
        name: Parameter name, unique within a tool
        type: Schema of the parameter value
        required: Whether callers must supply the parameter
        description: Human-readable description
        examples: Example values shown in the tool description
        constraints: Extra rules listed under the parameter
    """
    name: str
    type: SchemaNode
    required: bool
    description: Optional[str] = None
    examples: Optional[Sequence[str]] = None
    constraints: Optional[Sequence[str]] = None


@dataclass(frozen=True)
class ExampleSpec:
    description: str
    parameters: Any
    expected_output: Optional[str] = None


@dataclass(frozen=True)
class ToolSpec:
    """Product-agnostic definition of one callable tool.

    The behavioural flags are left as None when the client does not set them;
    defaults are applied when annotations are derived.
    """
    title: str
    summary: str
    parameters: Sequence[ParameterSpec] = ()
    input_schema: Optional[SchemaNode] = None
    output_schema: Optional[SchemaNode] = None
    use_cases: Sequence[str] = ()
    examples: Sequence[ExampleSpec] = ()
    hints: Sequence[str] = ()
    output_description: Optional[str] = None
    read_only: Optional[bool] = None
    destructive: Optional[bool] = None
    idempotent: Optional[bool] = None
    open_world: Optional[bool] = None

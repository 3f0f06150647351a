"""Schema nodes describing tool inputs and outputs.

Every schema a client hands over is a tree of immutable ``SchemaNode``
objects.  The set of kinds is closed (see ``SchemaKind``); anything that does
not carry a recognised kind is treated as ``any``, so introspection never
fails on unexpected input.

Python type hints are translated into nodes at the boundary with
``from_annotation`` / ``schema_from_function``, and nodes are rendered to JSON
Schema for the MCP wire with ``to_json_schema`` / ``shape_to_json_schema``.
"""
import collections.abc
import dataclasses
import enum
import inspect
from dataclasses import dataclass, field, replace
from types import UnionType
from typing import (
    Annotated,
    Any,
    ClassVar,
    Literal,
    Mapping,
    NamedTuple,
    Optional,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel


class SchemaKind(str, enum.Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    RECORD = "record"
    ENUM = "enum"
    LITERAL = "literal"
    UNION = "union"
    INTERSECTION = "intersection"
    OPTIONAL = "optional"
    DEFAULT = "default"
    ANY = "any"


class _Missing:
    def __repr__(self):
        return "MISSING"


# Marks "no default value", since None is a valid default.
MISSING = _Missing()


@dataclass(frozen=True)
class SchemaNode:
    kind: ClassVar[SchemaKind] = SchemaKind.ANY
    description: Optional[str] = field(default=None, kw_only=True)

    def describe(self, description: str) -> "SchemaNode":
        return replace(self, description=description)

    def optional(self) -> "OptionalNode":
        return OptionalNode(self)

    def with_default(self, value: Any) -> "DefaultNode":
        return DefaultNode(self, value)


@dataclass(frozen=True)
class StringNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.STRING


@dataclass(frozen=True)
class NumberNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.NUMBER


@dataclass(frozen=True)
class BooleanNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.BOOLEAN


@dataclass(frozen=True)
class AnyNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.ANY


@dataclass(frozen=True)
class ArrayNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.ARRAY
    items: SchemaNode = field(default_factory=AnyNode)


@dataclass(frozen=True)
class ObjectNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.OBJECT
    fields: Mapping[str, SchemaNode] = field(default_factory=dict)


@dataclass(frozen=True)
class RecordNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.RECORD
    key: SchemaNode = field(default_factory=StringNode)
    value: SchemaNode = field(default_factory=AnyNode)


@dataclass(frozen=True)
class EnumNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.ENUM
    values: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class LiteralNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.LITERAL
    value: Any = None


@dataclass(frozen=True)
class UnionNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.UNION
    options: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "options", tuple(self.options))


@dataclass(frozen=True)
class IntersectionNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.INTERSECTION
    left: SchemaNode = field(default_factory=AnyNode)
    right: SchemaNode = field(default_factory=AnyNode)


@dataclass(frozen=True)
class OptionalNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.OPTIONAL
    inner: SchemaNode = field(default_factory=AnyNode)


@dataclass(frozen=True)
class DefaultNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.DEFAULT
    inner: SchemaNode = field(default_factory=AnyNode)
    default_value: Any = None


class Unwrapped(NamedTuple):
    node: Any
    is_optional: bool
    default: Any


def kind_of(node) -> SchemaKind:
    """Return the kind of node, falling back to ANY for anything unrecognised."""
    kind = getattr(node, "kind", None)
    if isinstance(kind, SchemaKind):
        return kind
    try:
        return SchemaKind(kind)
    except ValueError:
        return SchemaKind.ANY


def unwrap(node, is_optional: bool = False, default: Any = MISSING) -> Unwrapped:
    """Strip optional/default wrappers down to the first concrete node.

    Optionality is sticky once any optional wrapper is seen; the innermost
    default wins.
    """
    kind = kind_of(node)
    if kind is SchemaKind.OPTIONAL:
        return unwrap(node.inner, True, default)
    if kind is SchemaKind.DEFAULT:
        return unwrap(node.inner, is_optional, node.default_value)
    return Unwrapped(node, is_optional, default)


_READABLE_NAMES = {
    SchemaKind.STRING: "string",
    SchemaKind.NUMBER: "number",
    SchemaKind.BOOLEAN: "boolean",
    SchemaKind.ARRAY: "array",
    SchemaKind.OBJECT: "object",
    SchemaKind.ENUM: "enum",
    SchemaKind.LITERAL: "literal",
    SchemaKind.UNION: "union",
}


def readable_type_name(node) -> str:
    """Short label for a node as shown in tool descriptions, e.g. 'record<string, number>'."""
    node = unwrap(node).node
    if kind_of(node) is SchemaKind.RECORD:
        return f"record<{readable_type_name(node.key)}, {readable_type_name(node.value)}>"
    return _READABLE_NAMES.get(kind_of(node), "any")


def flatten(node) -> Optional[dict]:
    """Return the field mapping of an object-like node, or None.

    Intersections are merged recursively with right-hand fields overriding
    left-hand fields of the same name.
    """
    if node is None:
        return None
    kind = kind_of(node)
    if kind is SchemaKind.OBJECT:
        return dict(node.fields)
    if kind is SchemaKind.INTERSECTION:
        return {**(flatten(node.left) or {}), **(flatten(node.right) or {})}
    return None


def is_required(node) -> bool:
    unwrapped = unwrap(node)
    return not unwrapped.is_optional and unwrapped.default is MISSING


def to_json_schema(node) -> dict:
    """Render a node as a JSON Schema dict."""
    kind = kind_of(node)
    if kind is SchemaKind.OPTIONAL:
        schema = to_json_schema(node.inner)
    elif kind is SchemaKind.DEFAULT:
        schema = {**to_json_schema(node.inner), "default": node.default_value}
    elif kind in (SchemaKind.STRING, SchemaKind.NUMBER, SchemaKind.BOOLEAN):
        schema = {"type": kind.value}
    elif kind is SchemaKind.ARRAY:
        schema = {"type": "array", "items": to_json_schema(node.items)}
    elif kind is SchemaKind.OBJECT:
        schema = shape_to_json_schema(node.fields)
    elif kind is SchemaKind.RECORD:
        schema = {"type": "object", "additionalProperties": to_json_schema(node.value)}
    elif kind is SchemaKind.ENUM:
        schema = {"enum": list(node.values)}
        if all(isinstance(value, str) for value in node.values):
            schema["type"] = "string"
    elif kind is SchemaKind.LITERAL:
        schema = {"const": node.value}
    elif kind is SchemaKind.UNION:
        schema = {"anyOf": [to_json_schema(option) for option in node.options]}
    elif kind is SchemaKind.INTERSECTION:
        schema = {"allOf": [to_json_schema(node.left), to_json_schema(node.right)]}
    else:
        schema = {}

    description = getattr(node, "description", None)
    if description:
        schema["description"] = description
    return schema


def shape_to_json_schema(shape: Optional[Mapping[str, Any]]) -> dict:
    """Render a flattened name -> node mapping as an object JSON Schema."""
    shape = shape or {}
    return {
        "type": "object",
        "properties": {name: to_json_schema(node) for name, node in shape.items()},
        "required": [name for name, node in shape.items() if is_required(node)],
    }


_ARRAY_TYPES = (list, tuple, set, frozenset, collections.abc.Sequence, collections.abc.Set)
_MAPPING_TYPES = (dict, collections.abc.Mapping)


def from_annotation(tp) -> SchemaNode:
    """Translate a Python type hint into a SchemaNode.

    Unsupported hints become AnyNode.
    """
    if tp is Any or tp is inspect.Parameter.empty:
        return AnyNode()

    origin = get_origin(tp)
    args = get_args(tp)

    if origin is Annotated:
        return from_annotation(args[0])

    if origin is Literal:
        if len(args) == 1:
            return LiteralNode(args[0])
        return UnionNode(tuple(LiteralNode(value) for value in args))

    if origin is Union or origin is UnionType:
        members = [arg for arg in args if arg is not type(None)]
        if len(members) == 1:
            inner = from_annotation(members[0])
        else:
            inner = UnionNode(tuple(from_annotation(member) for member in members))
        return OptionalNode(inner) if len(members) < len(args) else inner

    # bool is a subclass of int, check it first
    if tp is bool:
        return BooleanNode()
    if tp is int or tp is float:
        return NumberNode()
    if tp is str:
        return StringNode()

    if origin in _ARRAY_TYPES or tp in _ARRAY_TYPES:
        return ArrayNode(from_annotation(args[0]) if args else AnyNode())

    if origin in _MAPPING_TYPES or tp in _MAPPING_TYPES:
        if len(args) == 2:
            return RecordNode(from_annotation(args[0]), from_annotation(args[1]))
        return RecordNode()

    if isinstance(tp, type) and issubclass(tp, enum.Enum):
        return EnumNode(tuple(member.value for member in tp))

    if origin is None and isinstance(tp, type) and issubclass(tp, BaseModel):
        fields = {}
        for name, info in tp.model_fields.items():
            node = from_annotation(info.annotation)
            if info.description:
                node = node.describe(info.description)
            if info.default_factory is not None:
                node = node.optional()
            elif not info.is_required():
                node = node.with_default(info.default)
            fields[name] = node
        return ObjectNode(fields)

    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        hints = get_type_hints(tp)
        fields = {}
        for f in dataclasses.fields(tp):
            node = from_annotation(hints.get(f.name, Any))
            if f.default is not dataclasses.MISSING:
                node = node.with_default(f.default)
            elif f.default_factory is not dataclasses.MISSING:
                node = node.optional()
            fields[f.name] = node
        return ObjectNode(fields)

    return AnyNode()


def _docstring_descriptions(func) -> dict:
    """Pull 'name: description' lines out of a Google-style Args section."""
    descriptions = {}
    if not func.__doc__:
        return descriptions
    in_args = False
    for line in func.__doc__.split('\n'):
        stripped = line.strip()
        if stripped.startswith('Args:'):
            in_args = True
            continue
        if stripped.startswith(('Returns:', 'Raises:')):
            in_args = False
        if in_args and ':' in stripped:
            name, desc = stripped.split(':', 1)
            name = name.split('(')[0].strip()
            if name.isidentifier() and desc.strip():
                descriptions[name] = desc.strip()
    return descriptions


def schema_from_function(func) -> ObjectNode:
    """Build an object schema from a callable's signature.

    Parameters without a type hint are treated as strings; parameters with a
    default become DefaultNodes. Descriptions come from the docstring's
    Args section.
    """
    sig = inspect.signature(func)
    type_hints = get_type_hints(func)
    descriptions = _docstring_descriptions(func)

    fields = {}
    for param_name, param in sig.parameters.items():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        node = from_annotation(type_hints.get(param_name, str))
        if param_name in descriptions:
            node = node.describe(descriptions[param_name])
        if param.default is not inspect.Parameter.empty:
            node = node.with_default(param.default)
        fields[param_name] = node

    return ObjectNode(fields)

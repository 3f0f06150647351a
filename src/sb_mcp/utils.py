import inspect
import json


def compact_json(data) -> str:
    """Serialize data as compact JSON (no whitespace between tokens)."""
    return json.dumps(data, separators=(',', ':'), ensure_ascii=False, default=str)


def pretty_json(data) -> str:
    """Serialize data as JSON indented with two spaces."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


async def maybe_await(value):
    """Await value if it is awaitable, so callbacks can be sync or async."""
    if inspect.isawaitable(value):
        return await value
    return value

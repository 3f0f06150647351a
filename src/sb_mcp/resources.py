"""Resource registration: URI composition and error reporting."""
import re

from sb_mcp.utils import maybe_await

_TEMPLATE_VARIABLE = re.compile(r"{(\w+)}")


def get_resource_uri(prefix: str, name: str, path_template: str) -> str:
    return f"{prefix}://{name}/{path_template}"


def match_uri_template(uri_template: str, uri: str):
    """Match uri against a '{var}' template, returning the variables or None."""
    pattern = ""
    last = 0
    for match in _TEMPLATE_VARIABLE.finditer(uri_template):
        pattern += re.escape(uri_template[last:match.start()])
        pattern += f"(?P<{match.group(1)}>[^/]+)"
        last = match.end()
    pattern += re.escape(uri_template[last:])

    matched = re.fullmatch(pattern, uri)
    return matched.groupdict() if matched else None


def wrap_resource_callback(name: str, callback, sink):
    """Wrap a resource callback so every failure is reported, then re-raised."""

    async def read(uri=None, variables=None, extra=None):
        try:
            return await maybe_await(callback(uri, variables, extra))
        except Exception as e:
            def configure_event(event):
                event.add_metadata("app", {"resource": name, "url": uri})
                event.unhandled = True

            sink.notify(e, configure_event)
            raise

    read.__name__ = name
    return read

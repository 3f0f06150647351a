"""Interfaces between the adapter, product clients and the host server."""
from typing import Any, Awaitable, Callable, Optional, Protocol, runtime_checkable

from sb_mcp.specs import ToolSpec

# (arguments, extra) -> CallToolResult | dict | None, sync or async
ToolCallback = Callable[[Optional[dict], Any], Any]
# (uri, variables, extra) -> ReadResourceResult | str, sync or async
ResourceCallback = Callable[[str, dict, Any], Any]
# (message, requested_schema) -> ElicitResult
ElicitFn = Callable[[str, dict], Awaitable[Any]]

RegisterToolFn = Callable[[ToolSpec, ToolCallback], Any]
RegisterResourceFn = Callable[[str, str, ResourceCallback], Any]
RegisterPromptFn = Callable[[str, dict, Callable[..., Any]], Any]


@runtime_checkable
class Client(Protocol):
    """A product integration contributing tools to the server.

    Clients may additionally define ``register_resources(register)``,
    ``register_prompts(register)``, and ``config_prefix`` together with
    ``configure(config)``; the adapter looks these up with getattr.
    """
    name: str
    tool_prefix: str

    def register_tools(self, register: RegisterToolFn, elicit: ElicitFn) -> None:
        ...

    def is_configured(self) -> bool:
        ...


class Host(Protocol):
    """Registration capabilities of the protocol server exposing the tools."""

    def register_tool(self, name: str, metadata: dict, invoke: Callable[..., Awaitable[Any]]) -> Any:
        ...

    def register_resource(self, name: str, uri_template: str, options: dict,
                          invoke: Callable[..., Awaitable[Any]]) -> Any:
        ...

    def register_prompt(self, name: str, config: dict, callback: Callable[..., Any]) -> Any:
        ...

    async def elicit(self, message: str, requested_schema: dict) -> Any:
        ...

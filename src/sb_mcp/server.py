"""Adapter between product clients and the host MCP server.

The host is injected rather than inherited from: anything providing
``register_tool``, ``register_resource``, ``register_prompt`` and ``elicit``
(see ``sb_mcp.client.Host``) can serve client tools.
"""
from typing import Optional

from loguru import logger

from sb_mcp.client import Client, Host
from sb_mcp.resources import get_resource_uri, wrap_resource_callback
from sb_mcp.telemetry import LoggingSink, TelemetrySink
from sb_mcp.tools.registry import build_tool


class ClientRegistrar:
    def __init__(self, host: Host, sink: Optional[TelemetrySink] = None):
        self.host = host
        self.sink = sink if sink is not None else LoggingSink()

    def add_client(self, client: Client) -> None:
        """Register every tool, resource and prompt the client contributes."""

        def register_tool(spec, callback):
            tool = build_tool(client, spec, callback, self.sink)
            logger.debug(f"Registering tool {tool.name} for {client.name}")
            return self.host.register_tool(tool.name, tool.metadata, tool.invoke)

        def elicit(message, requested_schema):
            return self.host.elicit(message, requested_schema)

        client.register_tools(register_tool, elicit)

        register_resources = getattr(client, "register_resources", None)
        if register_resources is not None:
            def register_resource(name, path_template, callback):
                uri = get_resource_uri(client.tool_prefix, name, path_template)
                logger.debug(f"Registering resource {name} at {uri}")
                return self.host.register_resource(
                    name, uri, {}, wrap_resource_callback(name, callback, self.sink)
                )

            register_resources(register_resource)

        register_prompts = getattr(client, "register_prompts", None)
        if register_prompts is not None:
            def register_prompt(name, config, callback):
                logger.debug(f"Registering prompt {name}")
                return self.host.register_prompt(name, config, callback)

            register_prompts(register_prompt)

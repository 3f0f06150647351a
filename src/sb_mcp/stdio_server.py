"""MCP server hosting the tools, resources and prompts of product clients."""
import base64

import mcp.types as types
from loguru import logger
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents

from sb_mcp.info import MCP_SERVER_NAME, MCP_SERVER_VERSION
from sb_mcp.resources import match_uri_template
from sb_mcp.schema import SchemaNode, shape_to_json_schema, to_json_schema
from sb_mcp.server import ClientRegistrar
from sb_mcp.utils import maybe_await


class StdioMCPServer:
    """Low-level MCP server speaking over stdio.

    Implements the host side of ``ClientRegistrar``: registered tools,
    resource templates and prompts are kept here and served from the MCP
    request handlers.
    """

    def __init__(self, name: str = MCP_SERVER_NAME, version: str = MCP_SERVER_VERSION, sink=None):
        self.server = Server(name, version=version)
        self.tools = {}
        self.resources = {}
        self.prompts = {}
        self.registrar = ClientRegistrar(self, sink)
        self._setup_handlers()

    def add_client(self, client) -> None:
        self.registrar.add_client(client)

    # Host capabilities

    def register_tool(self, name: str, metadata: dict, invoke) -> types.Tool:
        output_schema = metadata.get("output_schema")
        tool = types.Tool(
            name=name,
            title=metadata.get("title"),
            description=metadata.get("description"),
            inputSchema=shape_to_json_schema(metadata.get("input_schema")),
            outputSchema=shape_to_json_schema(output_schema) if output_schema is not None else None,
            annotations=metadata.get("annotations"),
        )
        self.tools[name] = (tool, invoke)
        return tool

    def register_resource(self, name: str, uri_template: str, options: dict, invoke) -> types.ResourceTemplate:
        template = types.ResourceTemplate(name=name, uriTemplate=uri_template, **options)
        self.resources[name] = (template, invoke)
        return template

    def register_prompt(self, name: str, config: dict, callback) -> types.Prompt:
        arguments = [
            types.PromptArgument.model_validate(argument) if isinstance(argument, dict) else argument
            for argument in config.get("arguments", [])
        ]
        prompt = types.Prompt(
            name=name,
            title=config.get("title"),
            description=config.get("description"),
            arguments=arguments,
        )
        self.prompts[name] = (prompt, callback)
        return prompt

    async def elicit(self, message: str, requested_schema):
        if isinstance(requested_schema, SchemaNode):
            requested_schema = to_json_schema(requested_schema)
        return await self.server.request_context.session.elicit(
            message=message,
            requestedSchema=requested_schema,
        )

    # Request handling

    def _request_context(self):
        try:
            return self.server.request_context
        except LookupError:
            return None

    async def list_tools(self) -> list[types.Tool]:
        return [tool for tool, _ in self.tools.values()]

    async def call_tool(self, name: str, arguments: dict) -> types.CallToolResult:
        if name not in self.tools:
            raise ValueError(f"Unknown tool: {name}")
        _, invoke = self.tools[name]
        result = await invoke(arguments, self._request_context())
        return result if result is not None else types.CallToolResult(content=[])

    async def list_resource_templates(self) -> list[types.ResourceTemplate]:
        return [template for template, _ in self.resources.values()]

    async def read_resource(self, uri) -> list[ReadResourceContents]:
        uri = str(uri)
        for template, read in self.resources.values():
            variables = match_uri_template(template.uriTemplate, uri)
            if variables is not None:
                result = await read(uri, variables, self._request_context())
                return self._resource_contents(result)
        raise ValueError(f"Unknown resource: {uri}")

    @staticmethod
    def _resource_contents(result) -> list[ReadResourceContents]:
        if isinstance(result, str):
            return [ReadResourceContents(content=result, mime_type="text/plain")]
        if isinstance(result, bytes):
            return [ReadResourceContents(content=result, mime_type="application/octet-stream")]
        if isinstance(result, dict):
            result = types.ReadResourceResult.model_validate(result)

        contents = []
        for item in result.contents:
            if isinstance(item, types.TextResourceContents):
                contents.append(ReadResourceContents(content=item.text, mime_type=item.mimeType))
            else:
                contents.append(ReadResourceContents(content=base64.b64decode(item.blob), mime_type=item.mimeType))
        return contents

    async def list_prompts(self) -> list[types.Prompt]:
        return [prompt for prompt, _ in self.prompts.values()]

    async def get_prompt(self, name: str, arguments: dict | None) -> types.GetPromptResult:
        if name not in self.prompts:
            raise ValueError(f"Unknown prompt: {name}")
        _, callback = self.prompts[name]
        result = await maybe_await(callback(arguments or {}))
        if isinstance(result, dict):
            result = types.GetPromptResult.model_validate(result)
        return result

    def _setup_handlers(self):
        self.server.list_tools()(self.list_tools)
        self.server.call_tool()(self.call_tool)
        self.server.list_resource_templates()(self.list_resource_templates)
        self.server.read_resource()(self.read_resource)
        self.server.list_prompts()(self.list_prompts)
        self.server.get_prompt()(self.get_prompt)

    async def run(self):
        from mcp.server.stdio import stdio_server

        logger.info(
            f"Serving {len(self.tools)} tools, {len(self.resources)} resources "
            f"and {len(self.prompts)} prompts over stdio"
        )
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(
                    notification_options=NotificationOptions(
                        prompts_changed=True,
                        resources_changed=True,
                        tools_changed=True,
                    ),
                ),
            )

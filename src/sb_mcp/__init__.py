"""Expose product tool, resource and prompt definitions on an MCP server."""
from sb_mcp.info import MCP_SERVER_VERSION as __version__  # noqa: F401
from sb_mcp.errors import OutputContractError, ToolError, ToolNotConfiguredError  # noqa: F401
from sb_mcp.specs import ExampleSpec, ParameterSpec, ToolSpec  # noqa: F401
from sb_mcp.server import ClientRegistrar  # noqa: F401

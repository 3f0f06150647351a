# Re-export tool compilation helpers
from sb_mcp.tools.registry import (  # noqa: F401
    MAX_TOOL_NAME_LENGTH,
    RegisteredTool,
    build_tool,
    get_annotations,
    get_input_shape,
    get_output_shape,
    get_tool_name,
    get_tool_title,
)
from sb_mcp.tools.description import get_description  # noqa: F401
from sb_mcp.tools.invocation import wrap_tool_callback  # noqa: F401

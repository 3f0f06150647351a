MCP_SERVER_NAME = "SmartBear MCP Server"
MCP_SERVER_VERSION = "0.4.0"

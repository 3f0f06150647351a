import sys

import click
from loguru import logger


@click.command(context_settings=dict(help_option_names=['-h', '--help']))
@click.option('--client', 'clients', multiple=True, envvar='SB_MCP_CLIENTS',
              help='Client to serve as module:attribute (repeatable, or space-separated in SB_MCP_CLIENTS)')
@click.option('--env-file', type=click.Path(dir_okay=False), help='Path to a .env file (default: ./.env)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def serve(clients, env_file, verbose):
    """Start MCP server (stdio transport).

    Each client contributes its tools, resources and prompts. Client
    configuration is read from environment variables named after the
    client's config prefix, e.g. TEST_PRODUCT_API_TOKEN.

    Examples:
      sb-mcp --client my_product.client:MyProductClient
      SB_MCP_CLIENTS=my_product.client:MyProductClient sb-mcp
    """
    import asyncio
    from sb_mcp.config import configure_client, get_telemetry_sink, load_clients, load_environment
    from sb_mcp.stdio_server import StdioMCPServer

    # stdout carries the MCP protocol, so logs go to stderr
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")

    load_environment(env_file)

    if not clients:
        logger.error("No clients given. Provide --client or the SB_MCP_CLIENTS environment variable")
        print("Error: at least one client is required", file=sys.stderr)
        print("Usage: sb-mcp --client package.module:ClientClass", file=sys.stderr)
        sys.exit(1)

    try:
        loaded = load_clients(clients)
    except (ImportError, ValueError) as e:
        logger.error(f"Failed to load clients: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    server = StdioMCPServer(sink=get_telemetry_sink())
    for client in loaded:
        configure_client(client)
        server.add_client(client)

    if verbose:
        logger.info(f"Starting MCP server (stdio) with {len(loaded)} client(s)")

    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        if verbose:
            logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    serve()

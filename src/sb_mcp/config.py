"""Environment-driven configuration for the server and its clients."""
import importlib
import inspect
import os

from dotenv import load_dotenv
from loguru import logger

from sb_mcp.telemetry import BugsnagSink, LoggingSink


def load_environment(env_file: str | None = None) -> None:
    """Load variables from a .env file (defaults to ./.env) without overriding the environment."""
    load_dotenv(env_file or os.path.join(os.getcwd(), '.env'))


def env_prefix(config_prefix: str) -> str:
    """'test-product' -> 'TEST_PRODUCT_'"""
    return config_prefix.replace('-', '_').upper() + '_'


def get_client_config(config_prefix: str, environ=None) -> dict:
    """Collect PREFIX_* environment variables as a lower-cased config dict."""
    environ = os.environ if environ is None else environ
    prefix = env_prefix(config_prefix)
    return {
        key[len(prefix):].lower(): value
        for key, value in environ.items()
        if key.startswith(prefix) and len(key) > len(prefix)
    }


def configure_client(client, environ=None) -> bool:
    """Pass environment configuration to a client that declares a config_prefix.

    Returns whether the client reports itself configured afterwards.
    """
    config_prefix = getattr(client, 'config_prefix', None)
    configure = getattr(client, 'configure', None)
    if config_prefix and configure is not None:
        configure(get_client_config(config_prefix, environ))
    configured = client.is_configured()
    if not configured:
        logger.warning(f"{client.name} is not configured; its tools will report configuration errors")
    return configured


def load_client(path: str):
    """Import a client from 'package.module:attribute'.

    Classes and factory functions are called without arguments.
    """
    module_name, sep, attribute = path.partition(':')
    if not sep or not attribute:
        raise ValueError(f"Client '{path}' must be given as 'module:attribute'")

    module = importlib.import_module(module_name)
    try:
        client = getattr(module, attribute)
    except AttributeError:
        raise ValueError(f"Module '{module_name}' has no attribute '{attribute}'") from None

    if inspect.isclass(client) or inspect.isfunction(client):
        client = client()
    return client


def load_clients(paths) -> list:
    return [load_client(path) for path in paths]


def get_telemetry_sink(environ=None):
    """Report to Bugsnag when BUGSNAG_API_KEY is set, otherwise to the log."""
    environ = os.environ if environ is None else environ
    api_key = environ.get('BUGSNAG_API_KEY')
    if api_key:
        return BugsnagSink(
            api_key,
            release_stage=environ.get('BUGSNAG_RELEASE_STAGE', 'production'),
            endpoint=environ.get('BUGSNAG_ENDPOINT'),
        )
    return LoggingSink()

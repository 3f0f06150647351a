"""Shared fakes for the host server, product clients and telemetry."""
import pytest

from sb_mcp.telemetry import build_event


class RecordingSink:
    """Telemetry sink that keeps every event in memory."""

    def __init__(self):
        self.events = []

    def notify(self, error, configure_event=None):
        self.events.append(build_event(error, configure_event))


class FakeHost:
    """Host that records registrations instead of serving them."""

    def __init__(self):
        self.tools = []
        self.resources = []
        self.prompts = []
        self.elicitations = []

    def register_tool(self, name, metadata, invoke):
        self.tools.append((name, metadata, invoke))
        return name

    def register_resource(self, name, uri_template, options, invoke):
        self.resources.append((name, uri_template, options, invoke))
        return name

    def register_prompt(self, name, config, callback):
        self.prompts.append((name, config, callback))
        return name

    async def elicit(self, message, requested_schema):
        self.elicitations.append((message, requested_schema))
        return "mocked input"


class FakeClient:
    """Client that hands its register functions back to the test."""

    name = "Test Product"
    tool_prefix = "test_product"
    config_prefix = "test-product"

    def __init__(self, configured=True):
        self.configured = configured
        self.config = None
        self.register_tool = None
        self.elicit = None
        self.register_resource = None
        self.register_prompt = None

    def register_tools(self, register, elicit):
        self.register_tool = register
        self.elicit = elicit

    def register_resources(self, register):
        self.register_resource = register

    def register_prompts(self, register):
        self.register_prompt = register

    def configure(self, config):
        self.config = config
        self.configured = bool(config.get("api_token"))

    def is_configured(self):
        return self.configured


class ToolsOnlyClient:
    name = "Tools Only"
    tool_prefix = "tools_only"

    def __init__(self):
        self.register_tool = None

    def register_tools(self, register, elicit):
        self.register_tool = register

    def is_configured(self):
        return True


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def unconfigured_client():
    return FakeClient(configured=False)


@pytest.fixture
def tools_only_client():
    return ToolsOnlyClient()

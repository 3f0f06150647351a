class ToolError(Exception):
    """Expected, user-facing tool failure.

    Raised by tool callbacks to report a problem the caller can act on. It is
    returned to the caller as an error result and is never sent to telemetry.
    """


class ToolNotConfiguredError(ToolError):
    """The client owning the tool reports that it is not configured."""


class OutputContractError(Exception):
    """A tool result does not honour the tool's declared output schema."""

"""Error reporting sinks.

A sink receives unexpected errors raised while serving tools and resources.
``notify`` takes the error and an optional callback that decorates the event
with metadata before it is recorded.
"""
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

import bugsnag
from loguru import logger

from sb_mcp.info import MCP_SERVER_VERSION


@dataclass
class TelemetryEvent:
    error: BaseException
    metadata: dict = field(default_factory=dict)
    unhandled: bool = False

    def add_metadata(self, section: str, values: dict) -> None:
        self.metadata.setdefault(section, {}).update(values)


ConfigureEvent = Callable[[TelemetryEvent], None]


class TelemetrySink(Protocol):
    def notify(self, error: BaseException, configure_event: Optional[ConfigureEvent] = None) -> None:
        ...


def build_event(error: BaseException, configure_event: Optional[ConfigureEvent] = None) -> TelemetryEvent:
    event = TelemetryEvent(error)
    if configure_event is not None:
        configure_event(event)
    return event


class LoggingSink:
    """Record errors in the log with their traceback."""

    def notify(self, error: BaseException, configure_event: Optional[ConfigureEvent] = None) -> None:
        event = build_event(error, configure_event)
        logger.opt(exception=error).error(
            f"{'Unhandled' if event.unhandled else 'Handled'} error: {error!r} metadata={event.metadata}"
        )


class BugsnagSink:
    """Report errors to Bugsnag through the bugsnag SDK.

    ``notify`` only queues the report; the SDK call runs on a worker thread
    so a slow delivery never stalls the event loop serving other calls.
    Failures inside the worker are logged, never raised.
    """

    def __init__(self, api_key: str, release_stage: str = "production",
                 endpoint: Optional[str] = None, client: Optional[bugsnag.Client] = None):
        self.api_key = api_key
        self.release_stage = release_stage
        self.endpoint = endpoint
        if client is None:
            options = {
                "api_key": api_key,
                "release_stage": release_stage,
                "app_version": MCP_SERVER_VERSION,
                "auto_capture_sessions": False,
            }
            if endpoint:
                options["endpoint"] = endpoint
            client = bugsnag.Client(install_sys_hook=False, **options)
        self.client = client
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="bugsnag")

    def notify(self, error: BaseException, configure_event: Optional[ConfigureEvent] = None) -> Future:
        event = build_event(error, configure_event)
        future = self._executor.submit(
            self.client.notify,
            error,
            unhandled=event.unhandled,
            severity="error",
            severity_reason={"type": "unhandledException" if event.unhandled else "handledException"},
            metadata=event.metadata,
        )
        future.add_done_callback(_log_delivery_failure)
        return future

    def close(self, wait: bool = True) -> None:
        """Stop accepting reports, by default after the queued ones are sent."""
        self._executor.shutdown(wait=wait)


def _log_delivery_failure(future: Future) -> None:
    error = future.exception()
    if error is not None:
        logger.warning(f"Failed to deliver error report: {error!r}")

"""
Event Router - Route sandbox events into the navigation and console state.

One router owns at most one subscription. Subscribed -> Unsubscribed is the
only transition; once closed the router never subscribes again.
"""

from typing import Any, Optional

from preview_panel.console.decoder import decode_console, decode_value, is_suppressed
from preview_panel.console.log_store import LogStore
from preview_panel.errors import PanelStateError
from preview_panel.logutil import get_logger
from preview_panel.navigation import NavigationStack
from preview_panel.sandbox.bridge import SandboxService, Unsubscribe
from preview_panel.schemas import (
    ConsoleEvent,
    DecodeFailure,
    EvalResultEvent,
    UrlChangeEvent,
    parse_inbound_event,
)


logger = get_logger(__name__)


class Subscription:
    """
    Handle for the router's single inbound subscription.

    close() releases it exactly once; further calls are no-ops. Use it as a
    context manager to release on every exit path.
    """

    def __init__(self, unsubscribe: Unsubscribe):
        self._unsubscribe: Optional[Unsubscribe] = unsubscribe

    @property
    def closed(self) -> bool:
        return self._unsubscribe is None

    def close(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
            logger.debug("Sandbox subscription released")

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class EventRouter:
    """Dispatch each inbound event by tag, in arrival order."""

    def __init__(self, navigation: NavigationStack, logs: LogStore):
        self.navigation = navigation
        self.logs = logs
        self._subscription: Optional[Subscription] = None

    @property
    def subscription(self) -> Optional[Subscription]:
        return self._subscription

    def connect(self, service: SandboxService) -> Subscription:
        """
        Subscribe to the sandbox event stream.

        Raises:
            PanelStateError: If this router already subscribed
        """
        if self._subscription is not None:
            state = "closed" if self._subscription.closed else "active"
            raise PanelStateError(f"Event router subscription is already {state}")

        subscription = Subscription(service.subscribe(self._on_event))
        self._subscription = subscription
        return subscription

    def _on_event(self, raw: Any) -> None:
        if self._subscription is None or self._subscription.closed:
            return
        try:
            self.handle(raw)
        except Exception:
            # Keep the stream alive for the next event
            logger.exception("Failed to handle sandbox event")

    def handle(self, raw: Any) -> None:
        """Apply one inbound event."""
        event = parse_inbound_event(raw)

        if isinstance(event, DecodeFailure):
            logger.debug("Ignoring sandbox frame", extra={"tag": event.tag, "reason": event.reason})
        elif isinstance(event, UrlChangeEvent):
            self.navigation.apply_url_change(event.url)
        elif isinstance(event, EvalResultEvent):
            decoded = decode_value(event.result)
            self.logs.append("error" if event.error else "result", [decoded])
        elif isinstance(event, ConsoleEvent):
            self._handle_console(event)

    def _handle_console(self, event: ConsoleEvent) -> None:
        message = decode_console(event.log)

        if message.is_clear:
            self.logs.clear()
            return

        if is_suppressed(message):
            return

        self.logs.append(message.method, message.data)

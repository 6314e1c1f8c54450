"""
Sandbox Bridge - The message channel between the panel and the sandbox.

The sandbox itself is an external service. The panel only needs three calls
from it, captured by the SandboxService protocol:
- subscribe(handler) -> unsubscribe callable
- dispatch(command) -> fire-and-forget
- update_preview(tree) -> push new files/dependencies
- get_codesandbox_url() -> editor URL for the current tree, if any

LoopbackBridge implements the protocol in-process. Hosts (and tests) feed it
sandbox frames through emit(); every dispatched command and pushed tree is
recorded for inspection.
"""

import hashlib
import json
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional, Protocol

from preview_panel.logutil import get_logger


logger = get_logger(__name__)

EventHandler = Callable[[Any], None]
Unsubscribe = Callable[[], None]

EDITOR_URL = "https://codesandbox.io/s/"


class SandboxService(Protocol):
    """What the panel consumes from the sandbox execution service."""

    def subscribe(self, handler: EventHandler) -> Unsubscribe:
        ...

    def dispatch(self, command: Dict[str, Any]) -> None:
        ...

    def update_preview(self, tree: Dict[str, Any]) -> None:
        ...

    def get_codesandbox_url(self) -> Optional[str]:
        ...


class LoopbackBridge:
    """
    In-process SandboxService.

    Frames are delivered to subscribers strictly in emit order. A frame
    emitted from inside a handler is queued and delivered after the current
    frame has reached every subscriber. A subscriber that raises does not
    stop delivery; the first error is re-raised once the queue is drained.
    """

    def __init__(self):
        self._handlers: List[EventHandler] = []
        self._queue: Deque[Any] = deque()
        self._delivering = False
        self.dispatched: List[Dict[str, Any]] = []
        self.trees: List[Dict[str, Any]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: EventHandler) -> Unsubscribe:
        """Register a handler; the returned callable removes it (idempotent)."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def dispatch(self, command: Dict[str, Any]) -> None:
        logger.debug("Dispatch %s", command.get("type"), extra={"command": command})
        self.dispatched.append(dict(command))

    def update_preview(self, tree: Dict[str, Any]) -> None:
        logger.debug("Preview update", extra={"files": len(tree.get("files", {}))})
        self.trees.append(tree)

    def get_codesandbox_url(self) -> Optional[str]:
        """Editor URL keyed by the last pushed tree; None before the first push."""
        if not self.trees:
            return None
        body = json.dumps(self.trees[-1], sort_keys=True, default=str)
        return EDITOR_URL + hashlib.sha1(body.encode("utf-8")).hexdigest()[:10]

    def emit(self, frame: Any) -> None:
        """Deliver a frame from the sandbox to every subscriber."""
        self._queue.append(frame)
        if self._delivering:
            return

        self._delivering = True
        failure: Optional[Exception] = None
        try:
            while self._queue:
                current = self._queue.popleft()
                for handler in list(self._handlers):
                    try:
                        handler(current)
                    except Exception as e:
                        logger.exception("Subscriber failed on %r", current)
                        if failure is None:
                            failure = e
        finally:
            self._delivering = False

        # Every queued frame has been delivered; surface the first failure
        if failure is not None:
            raise failure

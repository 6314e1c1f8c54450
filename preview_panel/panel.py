"""
Preview Panel - Wire the navigation, console and command components together.

Lifecycle:
1. Build components from configuration
2. mount() subscribes to the sandbox event stream
3. update(tree) pushes code; events flow in; snapshot() feeds the renderer
4. unmount() releases the subscription (always, exactly once)
"""

import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, Union

from preview_panel.commands import CommandInterface
from preview_panel.config import Config, get_config
from preview_panel.console.log_store import LogStore
from preview_panel.logutil import get_logger
from preview_panel.navigation import NavigationStack
from preview_panel.router import EventRouter, Subscription
from preview_panel.sandbox.bridge import SandboxService
from preview_panel.schemas import PreviewTree
from preview_panel.state import PanelSnapshot, create_snapshot


logger = get_logger(__name__)


class PreviewPanel:
    """A single sandboxed preview with its history and console."""

    def __init__(
        self,
        service: SandboxService,
        config: Optional[Config] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        config = config or get_config()

        self.service = service
        self.navigation = NavigationStack(
            default_url=config.default_url,
            ack_timeout=config.nav_ack_timeout,
            clock=clock,
            confirm_same_url=config.nav_confirm_same_url,
        )
        self.logs = LogStore(capacity=config.log_capacity)
        self.router = EventRouter(self.navigation, self.logs)
        self.commands = CommandInterface(
            service,
            self.navigation,
            self.logs,
            show_console=config.show_console,
        )

    @property
    def is_mounted(self) -> bool:
        subscription = self.router.subscription
        return subscription is not None and not subscription.closed

    def mount(self) -> Subscription:
        """Subscribe to sandbox events."""
        subscription = self.router.connect(self.service)
        logger.info("Preview panel mounted")
        return subscription

    def unmount(self) -> None:
        """Release the subscription; safe to call more than once."""
        subscription = self.router.subscription
        if subscription is not None and not subscription.closed:
            subscription.close()
            logger.info("Preview panel unmounted")

    @contextmanager
    def mounted(self) -> Iterator["PreviewPanel"]:
        self.mount()
        try:
            yield self
        finally:
            self.unmount()

    def update(self, tree: Union[PreviewTree, Dict[str, Any]]) -> None:
        """
        Render a new file tree in the sandbox.

        The console is cleared first; output from the previous tree does not
        carry over.
        """
        if not isinstance(tree, PreviewTree):
            tree = PreviewTree.model_validate(tree)

        self.logs.clear()
        tree = tree.model_copy(update={"show_open_in_codesandbox": False})
        self.service.update_preview(tree.to_wire())

    def snapshot(self) -> PanelSnapshot:
        """Current state for the renderer; stale optimistic moves are rolled back first."""
        self.navigation.expire_pending()
        return create_snapshot(self.navigation, self.logs, self.commands.show_console)

"""
Command Interface - Translate user actions into sandbox commands.
"""

from typing import Callable, Optional

from preview_panel.console.log_store import LogStore
from preview_panel.logutil import get_logger
from preview_panel.navigation import Direction, NavigationStack
from preview_panel.sandbox.bridge import SandboxService
from preview_panel.schemas import (
    EvaluateCommand,
    OutboundCommand,
    RefreshCommand,
    UrlBackCommand,
    UrlForwardCommand,
    to_wire,
)


logger = get_logger(__name__)

_NAVIGATION_COMMANDS = {
    "urlback": UrlBackCommand,
    "urlforward": UrlForwardCommand,
}


class CommandInterface:
    """Action callbacks bound to the panel controls."""

    def __init__(
        self,
        service: SandboxService,
        navigation: NavigationStack,
        logs: LogStore,
        show_console: bool = True,
    ):
        self.service = service
        self.navigation = navigation
        self.logs = logs
        self.show_console = show_console
        self.input_buffer = ""

    def _dispatch(self, command: OutboundCommand) -> None:
        self.service.dispatch(to_wire(command))

    def set_input(self, text: str) -> None:
        self.input_buffer = text

    def submit_command(self, text: Optional[str] = None) -> bool:
        """
        Evaluate console input in the sandbox.

        Args:
            text: Command text; defaults to the input buffer

        Returns:
            True if a command was sent
        """
        command = self.input_buffer if text is None else text
        if not command or not command.strip():
            return False

        self.logs.append("command", [command])
        self._dispatch(EvaluateCommand(command=command))
        self.input_buffer = ""
        return True

    def request_clear(self) -> None:
        self.logs.clear()

    def request_toggle_console(self) -> bool:
        self.show_console = not self.show_console
        return self.show_console

    def request_refresh(self) -> None:
        # The urlchange that follows, if any, updates the history
        self._dispatch(RefreshCommand())

    def request_open_in_codesandbox(
        self, opener: Optional[Callable[[str], object]] = None
    ) -> Optional[str]:
        """
        Look up the editor URL for the current tree and hand it to opener.

        Returns:
            The editor URL, or None if the sandbox has none yet
        """
        url = self.service.get_codesandbox_url()
        if url is None:
            logger.debug("No editor URL available")
            return None
        if opener is not None:
            opener(url)
        return url

    def request_go(self, direction: Direction) -> bool:
        """Step through history; returns True if the sandbox was asked to navigate."""
        action = self.navigation.go(direction)
        if action is None:
            logger.debug("Navigation ignored at history edge", extra={"direction": direction})
            return False

        self._dispatch(_NAVIGATION_COMMANDS[action]())
        return True

    def go_back(self) -> bool:
        return self.request_go(-1)

    def go_forward(self) -> bool:
        return self.request_go(1)

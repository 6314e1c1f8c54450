"""
Navigation Stack - Browser-style history for the preview frame.

The sandbox owns the page that is actually shown. This stack mirrors it from
`urlchange` events and predicts the result of back/forward requests until the
sandbox confirms them.
"""

import time
from dataclasses import dataclass
from typing import Callable, List, Literal, Optional

from preview_panel.config import DEFAULT_URL
from preview_panel.logutil import get_logger
from preview_panel.utils import clamp


logger = get_logger(__name__)

Direction = Literal[-1, 1]


@dataclass
class PendingMove:
    """A back/forward request the sandbox has not confirmed yet."""
    origin_index: int
    deadline: float


class NavigationStack:
    """
    History list with a cursor.

    Invariants:
    - -1 <= current_index < len(locations)
    - current_index == -1 only while locations is empty
    """

    def __init__(
        self,
        default_url: str = DEFAULT_URL,
        ack_timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        confirm_same_url: bool = False,
    ):
        self.default_url = default_url
        self.ack_timeout = ack_timeout
        # Off: a urlchange behind the tip always branches, as a browser does
        self.confirm_same_url = confirm_same_url
        self._clock = clock
        self._locations: List[str] = []
        self._current_index = -1
        self._pending: Optional[PendingMove] = None

    @property
    def locations(self) -> List[str]:
        return list(self._locations)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_location(self) -> str:
        """URL to display; the default URL while nothing has loaded."""
        if self._current_index < 0:
            return self.default_url
        return self._locations[self._current_index]

    @property
    def can_go_back(self) -> bool:
        return self._current_index > 0

    @property
    def can_go_forward(self) -> bool:
        return self._current_index < len(self._locations) - 1

    @property
    def pending(self) -> Optional[PendingMove]:
        return self._pending

    def apply_url_change(self, url: str) -> bool:
        """
        Reconcile a `urlchange` event from the sandbox.

        Returns:
            True if the history changed
        """
        self._pending = None
        last = len(self._locations) - 1

        if self._current_index == last and last >= 0 and self._locations[last] == url:
            return False

        if self._current_index < last:
            if self.confirm_same_url and self._locations[self._current_index] == url:
                # Sandbox confirming a back/forward move
                return False

            # Branching from an earlier page discards forward history
            del self._locations[self._current_index + 1:]
            logger.debug("Truncated forward history", extra={"kept": len(self._locations)})

        self._locations.append(url)
        self._current_index += 1
        return True

    def go(self, direction: Direction) -> Optional[str]:
        """
        Move the cursor optimistically.

        Args:
            direction: -1 for back, +1 for forward

        Returns:
            The command type to dispatch ("urlback" / "urlforward"), or None
            when the cursor cannot move
        """
        if direction not in (-1, 1):
            raise ValueError(f"direction must be -1 or 1, got {direction!r}")

        if not self._locations:
            return None

        new_index = clamp(self._current_index + direction, 0, len(self._locations) - 1)
        if new_index == self._current_index:
            return None

        if self.ack_timeout:
            origin = self._pending.origin_index if self._pending else self._current_index
            self._pending = PendingMove(origin, self._clock() + self.ack_timeout)

        self._current_index = new_index
        return "urlforward" if direction > 0 else "urlback"

    def expire_pending(self, now: Optional[float] = None) -> bool:
        """
        Roll back an optimistic move the sandbox never confirmed.

        Returns:
            True if the cursor was restored
        """
        if self._pending is None:
            return False

        now = self._clock() if now is None else now
        if now < self._pending.deadline:
            return False

        logger.warning(
            "Navigation not confirmed by sandbox, restoring cursor",
            extra={"from_index": self._current_index, "to_index": self._pending.origin_index},
        )
        self._current_index = self._pending.origin_index
        self._pending = None
        return True

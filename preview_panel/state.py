"""
Snapshot definitions handed to the rendering layer.
"""

from typing import List, TypedDict

from preview_panel.console.log_store import LogStore
from preview_panel.navigation import NavigationStack
from preview_panel.schemas import LogEntry
from preview_panel.utils import location_path


class PanelSnapshot(TypedDict):
    """
    Read-only view of the panel state.

    The renderer draws from this dictionary and never touches the live
    components, so a snapshot stays valid after later events arrive.
    """
    # Navigation
    locations: List[str]
    current_index: int
    current_location: str
    location_path: str
    can_go_back: bool
    can_go_forward: bool

    # Console
    logs: List[LogEntry]
    evicted_logs: int
    show_console: bool


def create_snapshot(
    navigation: NavigationStack,
    logs: LogStore,
    show_console: bool,
) -> PanelSnapshot:
    """
    Capture the current navigation and console state.

    Args:
        navigation: History to read
        logs: Console buffer to read
        show_console: Whether the console pane is visible

    Returns:
        A PanelSnapshot detached from the live components
    """
    current = navigation.current_location
    return PanelSnapshot(
        locations=navigation.locations,
        current_index=navigation.current_index,
        current_location=current,
        location_path=location_path(current),
        can_go_back=navigation.can_go_back,
        can_go_forward=navigation.can_go_forward,
        logs=logs.snapshot(),
        evicted_logs=logs.evicted,
        show_console=show_console,
    )

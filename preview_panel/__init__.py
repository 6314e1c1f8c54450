"""
Preview panel: a sandboxed code preview with mirrored history and console.

Modules:
- navigation: back/forward history reconciled from sandbox events
- console/: decoder and buffered log store
- router: the single subscription dispatching inbound events
- commands: user actions turned into sandbox commands
- panel: composition root with mount/unmount, update and snapshots
- sandbox/: the SandboxService protocol and an in-process bridge
"""

from preview_panel.commands import CommandInterface
from preview_panel.config import Config, get_config
from preview_panel.console import LogStore
from preview_panel.errors import ConfigError, PanelStateError, PreviewPanelError
from preview_panel.navigation import NavigationStack
from preview_panel.panel import PreviewPanel
from preview_panel.router import EventRouter, Subscription
from preview_panel.sandbox import LoopbackBridge, SandboxService
from preview_panel.schemas import LogEntry, PreviewTree, default_tree
from preview_panel.state import PanelSnapshot

__all__ = [
    "CommandInterface",
    "Config",
    "ConfigError",
    "EventRouter",
    "LogEntry",
    "LogStore",
    "LoopbackBridge",
    "NavigationStack",
    "PanelSnapshot",
    "PanelStateError",
    "PreviewPanel",
    "PreviewPanelError",
    "PreviewTree",
    "SandboxService",
    "Subscription",
    "default_tree",
    "get_config",
]

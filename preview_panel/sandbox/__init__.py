"""
Sandbox module for talking to the external preview sandbox.

Components:
- bridge: SandboxService protocol and the in-process LoopbackBridge
"""

from preview_panel.sandbox.bridge import (
    EventHandler,
    LoopbackBridge,
    SandboxService,
    Unsubscribe,
)

__all__ = [
    "EventHandler",
    "LoopbackBridge",
    "SandboxService",
    "Unsubscribe",
]

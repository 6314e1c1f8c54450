"""
Console mirroring for the preview panel.

Components:
- decoder: Decode wire-encoded console calls and evaluation results
- log_store: Buffer decoded entries in display order
"""

from preview_panel.console.decoder import (
    ConsoleMessage,
    NOISE_MESSAGE,
    Opaque,
    UNDECODABLE,
    UNDEFINED,
    decode_console,
    decode_value,
    is_suppressed,
)
from preview_panel.console.log_store import LogStore

__all__ = [
    # Decoder
    "ConsoleMessage",
    "NOISE_MESSAGE",
    "Opaque",
    "UNDECODABLE",
    "UNDEFINED",
    "decode_console",
    "decode_value",
    "is_suppressed",
    # Store
    "LogStore",
]

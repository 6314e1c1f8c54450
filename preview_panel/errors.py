"""
Exception types raised by the preview panel.

Problems on the wire (unknown events, undecodable payloads) never raise;
these are reserved for configuration and lifecycle misuse.
"""


class PreviewPanelError(Exception):
    """Base class for preview panel errors."""
    pass


class ConfigError(PreviewPanelError):
    """Raised when configuration is invalid or missing."""
    pass


class PanelStateError(PreviewPanelError):
    """Raised when the panel lifecycle is used out of order."""
    pass

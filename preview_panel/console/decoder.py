"""
Message Decoder - Turn wire-encoded console payloads into Python values.

Payloads arrive as already-parsed JSON values, or as raw JSON bytes. Strings
are plain values and are never re-parsed. Values JSON cannot carry are wrapped
in type markers of the form ``{"@t": "<type>", "data": <payload>}``; markers
may nest inside lists and objects.

Decoding never raises: a body that cannot be read becomes the UNDECODABLE
placeholder so that one bad message cannot stop the router.
"""

import json
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List

from preview_panel.logutil import get_logger


logger = get_logger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

TYPE_KEY = "@t"
DATA_KEY = "data"

# Known false-positive diagnostic emitted by the sandbox runtime
NOISE_MESSAGE = "undefined used as a key, but it is not a string."

CLEAR_METHOD = "clear"
DEFAULT_METHOD = "log"

_NUMBER_MARKERS = {
    "NaN": math.nan,
    "Infinity": math.inf,
    "-Infinity": -math.inf,
}


# =============================================================================
# DATA CLASSES
# =============================================================================

class _Undefined:
    """Sentinel for JavaScript ``undefined``."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


@dataclass(frozen=True)
class Opaque:
    """A sandbox value with no Python counterpart (functions, errors, DOM nodes)."""
    type: str
    data: Any = None

    def __repr__(self) -> str:
        if self.data is None:
            return f"[{self.type}]"
        return f"[{self.type} {self.data!r}]"


UNDECODABLE = Opaque("Undecodable")


@dataclass(frozen=True)
class ConsoleMessage:
    """A decoded console call."""
    method: str
    data: tuple

    @property
    def is_clear(self) -> bool:
        return self.method == CLEAR_METHOD


# =============================================================================
# DECODING
# =============================================================================

def _load(raw: Any) -> Any:
    """Parse raw JSON bytes; already-decoded values, strings included, pass through."""
    if isinstance(raw, (bytes, bytearray)):
        return json.loads(raw.decode("utf-8"))
    return raw


def _parse_date(payload: Any) -> Any:
    if isinstance(payload, str):
        text = payload[:-1] + "+00:00" if payload.endswith("Z") else payload
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            pass
    return Opaque("Date", payload)


def _revive(value: Any) -> Any:
    """Replace type markers with Python values, depth first."""
    if isinstance(value, list):
        return [_revive(item) for item in value]

    if not isinstance(value, dict):
        return value

    marker = value.get(TYPE_KEY)
    if not isinstance(marker, str):
        return {key: _revive(item) for key, item in value.items()}

    payload = value.get(DATA_KEY)

    if marker == "undefined":
        return UNDEFINED
    if marker in _NUMBER_MARKERS:
        return _NUMBER_MARKERS[marker]
    if marker == "Date":
        return _parse_date(payload)
    if marker == "Map":
        return _revive_map(payload)
    if marker == "Set":
        return [_revive(item) for item in payload] if isinstance(payload, list) else Opaque("Set", payload)

    return Opaque(marker, _revive(payload))


def _revive_map(payload: Any) -> Any:
    """Maps travel as a list of [key, value] pairs."""
    if not isinstance(payload, list):
        return Opaque("Map", payload)

    result: Dict[Any, Any] = {}
    for pair in payload:
        if not (isinstance(pair, list) and len(pair) == 2):
            return Opaque("Map", payload)
        key = _revive(pair[0])
        try:
            hash(key)
        except TypeError:
            key = repr(key)
        result[key] = _revive(pair[1])
    return result


def decode_value(raw: Any) -> Any:
    """
    Decode an evaluation result or a single console argument.

    Args:
        raw: An already-parsed JSON value, or the raw JSON bytes of one

    Returns:
        The decoded Python value, or UNDECODABLE if the body cannot be read
    """
    try:
        return _revive(_load(raw))
    except (ValueError, TypeError, RecursionError) as e:
        logger.debug("Undecodable value: %s", e)
        return UNDECODABLE


def decode_console(raw: Any) -> ConsoleMessage:
    """
    Decode a console call of the form ``{"method": ..., "data": [...]}``.

    A body without a usable method becomes a ``log`` call carrying the
    UNDECODABLE placeholder.
    """
    try:
        message = _load(raw)
    except (ValueError, TypeError, RecursionError) as e:
        logger.debug("Undecodable console payload: %s", e)
        return ConsoleMessage(DEFAULT_METHOD, (UNDECODABLE,))

    if not isinstance(message, dict) or not isinstance(message.get("method"), str):
        logger.debug("Console payload without a method", extra={"payload_type": type(message).__name__})
        return ConsoleMessage(DEFAULT_METHOD, (UNDECODABLE,))

    args = message.get(DATA_KEY, [])
    if not isinstance(args, list):
        args = [args]

    try:
        data: List[Any] = [_revive(arg) for arg in args]
    except RecursionError:
        data = [UNDECODABLE]

    return ConsoleMessage(message["method"], tuple(data))


def is_suppressed(message: ConsoleMessage) -> bool:
    """Whether a console call is the known sandbox false positive."""
    return bool(message.data) and message.data[0] == NOISE_MESSAGE

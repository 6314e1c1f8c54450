"""
Pydantic schemas for the messages exchanged with the sandbox.
"""

from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


# =============================================================================
# INBOUND EVENTS
# =============================================================================

class UrlChangeEvent(BaseModel):
    """The page shown inside the sandbox changed."""
    type: Literal["urlchange"]
    url: str = Field(..., description="URL now displayed by the sandbox")


class EvalResultEvent(BaseModel):
    """Outcome of an `evaluate` command."""
    type: Literal["eval-result"]
    result: Any = Field(None, description="Wire-encoded evaluation result")
    error: bool = Field(False, description="Whether the evaluation raised")


class ConsoleEvent(BaseModel):
    """A console method call made by code running in the sandbox."""
    type: Literal["console"]
    log: Any = Field(..., description="Wire-encoded console call")


InboundEvent = Annotated[
    Union[UrlChangeEvent, EvalResultEvent, ConsoleEvent],
    Field(discriminator="type"),
]

_inbound_adapter = TypeAdapter(InboundEvent)


class DecodeFailure(BaseModel):
    """An inbound frame that is not a recognized event."""
    reason: str
    tag: Optional[str] = None


def parse_inbound_event(raw: Any) -> Union[UrlChangeEvent, EvalResultEvent, ConsoleEvent, DecodeFailure]:
    """
    Validate a raw frame from the sandbox.

    Args:
        raw: A mapping (or event model) received from the sandbox

    Returns:
        The typed event, or a DecodeFailure for unknown tags and bad shapes
    """
    if isinstance(raw, (UrlChangeEvent, EvalResultEvent, ConsoleEvent)):
        return raw

    tag = raw.get("type") if isinstance(raw, dict) else None

    try:
        return _inbound_adapter.validate_python(raw)
    except ValidationError as e:
        return DecodeFailure(
            reason=f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}",
            tag=tag if isinstance(tag, str) else None,
        )


# =============================================================================
# OUTBOUND COMMANDS
# =============================================================================

class UrlBackCommand(BaseModel):
    """Ask the sandbox to go back one page."""
    type: Literal["urlback"] = "urlback"


class UrlForwardCommand(BaseModel):
    """Ask the sandbox to go forward one page."""
    type: Literal["urlforward"] = "urlforward"


class EvaluateCommand(BaseModel):
    """Ask the sandbox to evaluate console input."""
    type: Literal["evaluate"] = "evaluate"
    command: str = Field(..., description="Literal text typed by the user")


class RefreshCommand(BaseModel):
    """Ask the sandbox to reload the current page."""
    type: Literal["refresh"] = "refresh"


OutboundCommand = Union[UrlBackCommand, UrlForwardCommand, EvaluateCommand, RefreshCommand]


def to_wire(command: OutboundCommand) -> Dict[str, Any]:
    """Serialize a command to the dict shape the sandbox expects."""
    return command.model_dump(by_alias=True)


# =============================================================================
# CONSOLE
# =============================================================================

class LogEntry(BaseModel):
    """One line of mirrored console output or command history."""
    model_config = ConfigDict(frozen=True)

    method: str = Field(..., description="Console method, or command/result/error")
    data: Tuple[Any, ...] = Field(default_factory=tuple, description="Decoded arguments")

    @property
    def level(self) -> str:
        return self.method


# =============================================================================
# PREVIEW TREE
# =============================================================================

class PreviewFile(BaseModel):
    """A single file pushed to the sandbox."""
    code: str = ""


class PreviewTree(BaseModel):
    """Files and dependencies rendered by the sandbox."""
    model_config = ConfigDict(populate_by_name=True)

    files: Dict[str, PreviewFile] = Field(default_factory=dict, description="Map of path to file")
    dependencies: Dict[str, str] = Field(default_factory=dict, description="Package name to version")
    entry: str = Field("/index.js", description="Module the sandbox starts from")
    show_open_in_codesandbox: bool = Field(False, alias="showOpenInCodeSandbox")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def default_tree() -> PreviewTree:
    """Tree loaded before the host pushes any code."""
    return PreviewTree(files={"/index.js": PreviewFile(code="")}, dependencies={}, entry="/index.js")

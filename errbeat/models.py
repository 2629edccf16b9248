"""Data models for error events."""

from dataclasses import dataclass, asdict, field
from typing import Any, Optional, Dict, List


@dataclass
class StackFrame:
    """Stack frame information."""

    abs_path: str
    filename: str
    function: str
    module: Optional[str]
    lineno: int
    in_app: bool
    colno: Optional[int] = None
    context_line: Optional[str] = None
    pre_context: List[str] = field(default_factory=list)
    post_context: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StackFrame":
        return cls(
            abs_path=data["abs_path"],
            filename=data["filename"],
            function=data["function"],
            module=data.get("module"),
            lineno=data["lineno"],
            in_app=data["in_app"],
            colno=data.get("colno"),
            context_line=data.get("context_line"),
            pre_context=list(data.get("pre_context", [])),
            post_context=list(data.get("post_context", [])),
        )


@dataclass
class Stacktrace:
    """Ordered frames of a single stack."""

    frames: List[StackFrame] = field(default_factory=list)

    def has_in_app_frame(self) -> bool:
        return any(frame.in_app for frame in self.frames)


@dataclass
class ExceptionInfo:
    """Exception type information."""

    type: str
    value: str
    module: Optional[str]


@dataclass
class HttpInfo:
    """Inbound HTTP request information."""

    method: str
    url: str
    headers: Dict[str, str]
    query_string: str
    remote_address: Optional[str]
    cookies: Dict[str, str] = field(default_factory=dict)


@dataclass
class MachineInfo:
    """Machine the event was captured on."""

    hostname: str


@dataclass
class ErrorEvent:
    """Main error event structure.

    Frames are stored top-of-stack first while the event is being built and
    bottom-of-stack first once it has been finalized.
    """

    message: str
    stacktrace: Stacktrace
    level: str = "error"
    exception: Optional[ExceptionInfo] = None
    culprit: Optional[str] = None
    http: Optional[HttpInfo] = None
    machine: Optional[MachineInfo] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    timestamp: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Unset optional sections are omitted rather than sent as null.
        """
        data = asdict(self)
        for key in ("exception", "culprit", "http", "machine", "timestamp"):
            if data[key] is None:
                del data[key]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ErrorEvent":
        """Create from dictionary."""
        exception_data = data.get("exception")
        http_data = data.get("http")
        machine_data = data.get("machine")

        return cls(
            message=data["message"],
            stacktrace=Stacktrace(
                frames=[
                    StackFrame.from_dict(frame)
                    for frame in data.get("stacktrace", {}).get("frames", [])
                ]
            ),
            level=data.get("level", "error"),
            exception=ExceptionInfo(**exception_data) if exception_data else None,
            culprit=data.get("culprit"),
            http=HttpInfo(**http_data) if http_data else None,
            machine=MachineInfo(**machine_data) if machine_data else None,
            extra=dict(data.get("extra", {})),
            timestamp=data.get("timestamp"),
        )

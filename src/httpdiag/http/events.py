"""
Structured output events.

The pipeline never writes to the terminal itself. It hands plain
``OutputEvent`` values to an ``emit`` callable; the CLI decides how they
look.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable


class EventKind(str, Enum):
    """What an output line describes."""
    CONNECT = "connect"
    TLS = "tls"
    REQUEST = "request"
    NOTE = "note"
    HEADER = "header"
    BODY = "body"


class Style(str, Enum):
    """Styling hint for the terminal layer."""
    SUCCESS = "success"
    INFO = "info"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class OutputEvent:
    """One line (or block) of rendered output."""
    kind: EventKind
    label: str
    value: str = ""
    style: Style = Style.INFO
    # exact bytes for blocks that must be written verbatim
    data: bytes | None = None

    @property
    def text(self) -> str:
        if self.label and self.value:
            return f"{self.label} {self.value}"
        return self.label or self.value


Emitter = Callable[[OutputEvent], None]


class EventRecorder:
    """Emitter that keeps every event, for callers that render later."""

    def __init__(self) -> None:
        self.events: list[OutputEvent] = []

    def __call__(self, event: OutputEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: EventKind) -> list[OutputEvent]:
        return [e for e in self.events if e.kind == kind]

    @property
    def lines(self) -> list[str]:
        return [e.text for e in self.events]

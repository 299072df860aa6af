"""Progress events and sinks for pipeline runs.

Events are emitted in a fixed order per run: StageChanged("organizing"),
StageChanged("designing"), then per unit UnitStarted / StageChanged("painting")
/ UnitCompleted in ascending order, and finally StageChanged("done").
PipelineFailed is emitted at most once, only for a hard pipeline failure.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Literal, Optional, Protocol, Union

from .state import NoteUnit

logger = logging.getLogger(__name__)

Stage = Literal["organizing", "designing", "painting", "done"]


@dataclass(frozen=True)
class StageChanged:
    stage: Stage
    message: str


@dataclass(frozen=True)
class UnitStarted:
    index: int
    total: int


@dataclass(frozen=True)
class UnitCompleted:
    """Carries a copy of the unit as it stood when painting finished."""

    index: int
    unit: NoteUnit


@dataclass(frozen=True)
class PipelineFailed:
    message: str
    user_message: str


ProgressEvent = Union[StageChanged, UnitStarted, UnitCompleted, PipelineFailed]


class ProgressSink(Protocol):
    def emit(self, event: ProgressEvent) -> None: ...


class NullProgressSink:
    def emit(self, event: ProgressEvent) -> None:
        pass


@dataclass
class CallbackProgressSink:
    """Adapter for the four optional callback hooks."""

    on_stage_change: Optional[Callable[[str, str], None]] = None
    on_unit_start: Optional[Callable[[int, int], None]] = None
    on_unit_complete: Optional[Callable[[int, NoteUnit], None]] = None
    on_error: Optional[Callable[[str], None]] = None

    def emit(self, event: ProgressEvent) -> None:
        if isinstance(event, StageChanged) and self.on_stage_change:
            self.on_stage_change(event.stage, event.message)
        elif isinstance(event, UnitStarted) and self.on_unit_start:
            self.on_unit_start(event.index, event.total)
        elif isinstance(event, UnitCompleted) and self.on_unit_complete:
            self.on_unit_complete(event.index, event.unit)
        elif isinstance(event, PipelineFailed) and self.on_error:
            self.on_error(event.message)


class LoggingProgressSink:
    """Writes events to a logger; used by the CLI."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger

    def emit(self, event: ProgressEvent) -> None:
        if isinstance(event, StageChanged):
            self._log.info(f"[{event.stage}] {event.message}")
        elif isinstance(event, UnitStarted):
            self._log.info(f"Unit {event.index + 1}/{event.total} started")
        elif isinstance(event, UnitCompleted):
            unit = event.unit
            detail = f": {unit.error_message}" if unit.error_message else ""
            self._log.info(f"Unit {event.index + 1} {unit.status.value}{detail}")
        elif isinstance(event, PipelineFailed):
            self._log.error(f"Pipeline failed: {event.message}")


@dataclass
class RecordingProgressSink:
    """Keeps every event in order for inspection."""

    events: list[ProgressEvent] = field(default_factory=list)

    def emit(self, event: ProgressEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list:
        return [event for event in self.events if isinstance(event, event_type)]

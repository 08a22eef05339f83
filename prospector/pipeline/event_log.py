"""Append-only narrative of pipeline activity."""

from typing import Callable, Iterator, List, Optional, Union

from ..models.pipeline_state import LogEvent, Severity


class EventLog:
    """
    Timestamped, severity-tagged record of what the pipeline did.

    Events are only ever appended. The log is observability: nothing in the
    pipeline reads it to make decisions.
    """

    def __init__(self, on_append: Optional[Callable[[LogEvent], None]] = None):
        """
        Args:
            on_append: Optional callback invoked with every new event
        """
        self._events: List[LogEvent] = []
        self.on_append = on_append

    def append(self, message: str, severity: Union[Severity, str] = Severity.INFO) -> LogEvent:
        """Record a message and return the stored event."""
        event = LogEvent(message=message, severity=Severity(severity))
        self._events.append(event)
        if self.on_append:
            self.on_append(event)
        return event

    def info(self, message: str) -> LogEvent:
        return self.append(message, Severity.INFO)

    def success(self, message: str) -> LogEvent:
        return self.append(message, Severity.SUCCESS)

    def warning(self, message: str) -> LogEvent:
        return self.append(message, Severity.WARNING)

    def error(self, message: str) -> LogEvent:
        return self.append(message, Severity.ERROR)

    def all(self) -> List[LogEvent]:
        """Snapshot of every event in insertion order."""
        return list(self._events)

    def errors(self) -> List[LogEvent]:
        return [e for e in self._events if e.severity == Severity.ERROR]

    def clear(self) -> None:
        """Drop every event. Only a full pipeline reset may call this."""
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[LogEvent]:
        return iter(self.all())

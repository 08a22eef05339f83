"""Pipeline state tracking models for transparency and debugging."""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import RunStateError
from .search import SearchRequest


class RunPhase(str, Enum):
    """Run-level lifecycle of one discovery campaign."""

    IDLE = "idle"
    INITIALIZING = "initializing"
    DISCOVERING = "discovering"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunPhase.COMPLETED, RunPhase.FAILED)

    @property
    def is_active(self) -> bool:
        return self in (RunPhase.INITIALIZING, RunPhase.DISCOVERING, RunPhase.STREAMING)


ALLOWED_TRANSITIONS: Dict[RunPhase, frozenset] = {
    RunPhase.IDLE: frozenset({RunPhase.INITIALIZING, RunPhase.FAILED}),
    RunPhase.INITIALIZING: frozenset({RunPhase.DISCOVERING, RunPhase.FAILED}),
    RunPhase.DISCOVERING: frozenset({RunPhase.STREAMING, RunPhase.FAILED}),
    RunPhase.STREAMING: frozenset({RunPhase.COMPLETED, RunPhase.FAILED}),
    RunPhase.COMPLETED: frozenset(),
    RunPhase.FAILED: frozenset(),
}


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class LogEvent(BaseModel):
    """One line of the pipeline narrative."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:9])
    timestamp: datetime = Field(default_factory=datetime.now)
    message: str
    severity: Severity = Severity.INFO


class PipelineRun(BaseModel):
    """Tracks the phase of the single active discovery run."""

    run_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    phase: RunPhase = RunPhase.IDLE
    request: Optional[SearchRequest] = Field(None, description="The submitted search request")
    target_count: int = Field(0, description="How many leads the request asked for")
    error: Optional[str] = Field(None, description="Terminal error if the run failed")

    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    stage_timestamps: Dict[str, datetime] = Field(default_factory=dict)

    def advance(self, phase: RunPhase) -> None:
        """Move to ``phase``, refusing transitions the lifecycle does not allow."""
        if phase not in ALLOWED_TRANSITIONS[self.phase]:
            raise RunStateError(self.phase.value, phase.value)
        now = datetime.now()
        self.stage_timestamps[phase.value] = now
        if phase == RunPhase.INITIALIZING:
            self.started_at = now
        if phase.is_terminal:
            self.finished_at = now
        self.phase = phase

    def fail(self, error_message: str) -> None:
        """Record the terminal error and move to FAILED."""
        self.error = error_message
        self.advance(RunPhase.FAILED)

    @property
    def duration_seconds(self) -> Optional[float]:
        """Run duration in seconds once it has finished."""
        if self.started_at and self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return None


class RunOutcome(BaseModel):
    """Terminal item of a discovery stream."""

    model_config = ConfigDict(frozen=True)

    run_id: str
    phase: RunPhase
    lead_count: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.phase == RunPhase.COMPLETED


class EnrichmentOutcome(str, Enum):
    """What a single enrich() call ended up doing."""

    ENRICHED = "enriched"
    EMPTY = "empty"
    FAILED = "failed"
    SKIPPED = "skipped"
    IN_FLIGHT = "in_flight"
    STALE = "stale"

"""Derived models computed from the event log.

- Session: one reconstructed teleport episode (mutable while open)
- SessionSummary: the flat per-episode statistics record
- AnalysisResult: the wrapper handed to renderers and the API
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from tplog.models.events import Point


# -----------------------------------------------------------------------------
# Session
# -----------------------------------------------------------------------------


class GoalRecord(BaseModel):
    """A goal recorded while a session was active."""

    ts: datetime
    position: Point
    mode: str
    distance_from_origin: float | None = None


class Session(BaseModel):
    """A teleport episode for one player.

    Owned by the reconstructor while open; once ``end_time`` is set the
    session is closed and must not be mutated any further.
    """

    player: str
    origin: Point | None = None
    dwell_planned_ms: float | None = None

    start_time: datetime
    last_activity_time: datetime
    end_time: datetime | None = None

    goals: list[GoalRecord] = []
    mode_counts: dict[str, int] = {}

    @property
    def is_closed(self) -> bool:
        return self.end_time is not None


# -----------------------------------------------------------------------------
# Summary
# -----------------------------------------------------------------------------


class SessionSummary(BaseModel):
    """Per-session statistics, serialised with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    index: int
    player: str
    start_time: str
    duration_seconds: int
    planned_dwell_seconds: int | None = None
    origin: Point | None = None
    goal_count: int = 0
    avg_distance_from_origin: float | None = None
    max_distance_from_origin: float | None = None
    mode_counts: dict[str, int] = {}

    @field_serializer("origin")
    def origin_as_logged(self, origin: Point | None) -> dict[str, Any] | None:
        # Only the keys present in the log, extras included
        if origin is None:
            return None
        present = origin.model_fields_set | set(origin.model_extra or {})
        return {k: v for k, v in origin.model_dump().items() if k in present}


class AnalysisResult(BaseModel):
    """All session summaries for one log, in emission order."""

    sessions: list[SessionSummary] = []

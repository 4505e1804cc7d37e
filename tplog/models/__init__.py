"""tplog data models."""

from tplog.models.events import EventKind, LogEvent, Point
from tplog.models.derived import (
    AnalysisResult,
    GoalRecord,
    Session,
    SessionSummary,
)

__all__ = [
    # Events
    "EventKind",
    "LogEvent",
    "Point",
    # Derived
    "GoalRecord",
    "Session",
    "SessionSummary",
    "AnalysisResult",
]

"""Analysis reducer - combines reconstruction and summarization.

This is the main entry point for computing results from parsed events.

Pipeline:
- reconstruct_sessions: ordered events -> closed Sessions
- summarize_sessions: closed Sessions -> SessionSummary records

The whole pass is a deterministic fold; the same sorted input always
yields the same result.
"""

from tplog.models.events import LogEvent
from tplog.models.derived import AnalysisResult
from tplog.reducers.sessions import reconstruct_sessions
from tplog.reducers.summary import summarize_sessions


def analyze_events(events: list[LogEvent]) -> AnalysisResult:
    """Reduce sorted events to an AnalysisResult.

    Args:
        events: Parsed log events, sorted ascending by ts.

    Returns:
        One summary per reconstructed session.
    """
    sessions = reconstruct_sessions(events)
    return AnalysisResult(sessions=summarize_sessions(sessions))


def sort_events(events: list[LogEvent]) -> list[LogEvent]:
    """Sort events by ts, keeping input order for equal timestamps."""
    return sorted(events, key=lambda e: e.ts)

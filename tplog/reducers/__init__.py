"""Reducers that compute sessions and statistics from the event log."""

from tplog.reducers.geometry import distance3
from tplog.reducers.sessions import reconstruct_sessions
from tplog.reducers.summary import summarize_sessions
from tplog.reducers.analysis import analyze_events

__all__ = [
    "distance3",
    "reconstruct_sessions",
    "summarize_sessions",
    "analyze_events",
]

"""Summary reducer - flattens closed sessions into statistics records."""

import math
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

from tplog.models.derived import Session, SessionSummary


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties towards +infinity."""
    return math.floor(value + 0.5)


def round2(value: float) -> float:
    """Round to two decimals, ties away from zero on the exact binary value."""
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_instant(ts: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision, e.g. 2024-01-01T00:00:00.000Z."""
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def summarize_session(session: Session, index: int) -> SessionSummary:
    """Compute the summary for one closed session.

    Args:
        session: A closed session. It is only read, never modified.
        index: 1-based position in the output.

    Returns:
        The SessionSummary.
    """
    end_time = session.end_time or session.start_time
    duration_ms = (end_time - session.start_time) / timedelta(milliseconds=1)

    planned = (
        round_half_up(session.dwell_planned_ms / 1000)
        if session.dwell_planned_ms is not None
        else None
    )

    distances = [
        g.distance_from_origin
        for g in session.goals
        if g.distance_from_origin is not None
    ]
    avg_distance = None
    max_distance = None
    if distances:
        avg_distance = round2(sum(distances) / len(distances))
        max_distance = round2(max(distances))

    return SessionSummary(
        index=index,
        player=session.player,
        start_time=format_instant(session.start_time),
        duration_seconds=round_half_up(duration_ms / 1000),
        planned_dwell_seconds=planned,
        origin=session.origin,
        goal_count=len(session.goals),
        avg_distance_from_origin=avg_distance,
        max_distance_from_origin=max_distance,
        mode_counts=dict(session.mode_counts),
    )


def summarize_sessions(sessions: list[Session]) -> list[SessionSummary]:
    """Summarize sessions in order, numbering them from 1."""
    return [summarize_session(s, i) for i, s in enumerate(sessions, 1)]

"""Session reducer - folds the event stream into teleport episodes.

A session opens on ``tp.success`` and closes on a matching
``tp.target_left``. Goal updates in between are attached when they name
the session's player.

Key invariant: there is a single active-session slot shared by all
players. Opening a session closes whichever one was open, even if it
belongs to somebody else; concurrent teleports are not tracked side by
side.
"""

from datetime import datetime

from pydantic import BaseModel

from tplog.models.events import EventKind, LogEvent
from tplog.models.derived import GoalRecord, Session
from tplog.reducers.geometry import distance3


UNKNOWN = "unknown"


class ReconstructionState(BaseModel):
    """Accumulator threaded through the fold."""

    active: Session | None = None
    closed: list[Session] = []


def reconstruct_sessions(events: list[LogEvent]) -> list[Session]:
    """Reduce events to closed sessions.

    Args:
        events: Parsed log events, sorted ascending by ts.

    Returns:
        Closed sessions in the order they were closed.
    """
    state = ReconstructionState()
    for event in events:
        state = apply_event(state, event)
    return finish(state).closed


def apply_event(state: ReconstructionState, event: LogEvent) -> ReconstructionState:
    """Apply a single event to the accumulator.

    The state and its open session are updated in place; the same state
    object is returned so callers can write ``state = apply_event(...)``.
    Irrelevant or uncorrelated events leave the state as it is.
    """
    kind = event.kind

    if kind == EventKind.TP_SUCCESS:
        if state.active is not None:
            _close(state, _idle_end(state.active))
        state.active = Session(
            player=event.target if event.target is not None else UNKNOWN,
            origin=event.origin,
            dwell_planned_ms=event.dwell_ms,
            start_time=event.ts,
            last_activity_time=event.ts,
        )

    elif kind == EventKind.GOAL_UPDATED:
        session = state.active
        if session is None:
            return state
        if event.tp_target is None or event.tp_target != session.player:
            return state

        if session.origin is None and event.tp_origin is not None:
            session.origin = event.tp_origin

        if event.goal is not None:
            mode = event.mode if event.mode is not None else UNKNOWN
            distance = (
                distance3(event.goal, session.origin)
                if session.origin is not None
                else None
            )
            session.goals.append(
                GoalRecord(
                    ts=event.ts,
                    position=event.goal,
                    mode=mode,
                    distance_from_origin=distance,
                )
            )
            session.mode_counts[mode] = session.mode_counts.get(mode, 0) + 1
            session.last_activity_time = event.ts

    elif kind == EventKind.TARGET_LEFT:
        session = state.active
        if session is not None and event.target is not None and event.target == session.player:
            _close(state, event.ts)

    return state


def finish(state: ReconstructionState) -> ReconstructionState:
    """Close a session still open at end of input."""
    if state.active is not None:
        _close(state, _idle_end(state.active))
    return state


def _idle_end(session: Session) -> datetime:
    """End time for a session closed without its own end event.

    last_activity_time starts out equal to start_time, so a session with
    no recorded goals ends where it started.
    """
    return session.last_activity_time


def _close(state: ReconstructionState, end_time: datetime) -> None:
    state.active.end_time = end_time
    state.closed.append(state.active)
    state.active = None

"""Event models for teleport session logs.

A session log is JSON Lines: one structured record per line, each carrying
at least a timestamp (``ts``) and a ``message``. Only three message kinds
drive session reconstruction; everything else is passed through untouched.

Beyond ``ts`` and ``message`` nothing is enforced. Optional fields of the
wrong shape are coerced where the value still means something (a numeric
player id becomes its text) and dropped to None otherwise, so one odd
field never costs the whole record.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------


class EventKind(str, Enum):
    """Message kinds that the session reconstructor reacts to."""

    TP_SUCCESS = "tp.success"
    GOAL_UPDATED = "manager.goal_updated"
    TARGET_LEFT = "tp.target_left"


# -----------------------------------------------------------------------------
# Coercion helpers
# -----------------------------------------------------------------------------


def as_text(value: Any) -> str | None:
    """Render a JSON scalar as text; objects and arrays give None."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return None


def as_number(value: Any) -> int | float | None:
    """Read a coordinate or duration; anything non-numeric gives None."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


# -----------------------------------------------------------------------------
# Common types
# -----------------------------------------------------------------------------


class Point(BaseModel):
    """A 3D position. Any coordinate may be missing.

    Extra keys (yaw, pitch, world, ...) are kept so a point can be echoed
    back as it appeared in the log.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    x: int | float | None = None
    y: int | float | None = None
    z: int | float | None = None

    @field_validator("x", "y", "z", mode="before")
    @classmethod
    def lenient_coordinate(cls, v: Any) -> int | float | None:
        return as_number(v)


# -----------------------------------------------------------------------------
# Log event
# -----------------------------------------------------------------------------


class LogEvent(BaseModel):
    """A single parsed log record.

    Field names follow the log's wire format through aliases
    (``dwellMs``, ``tpTarget``, ``tpOrigin``). Fields that are not used by
    the analysis are kept as extras so an event can be re-serialised.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    ts: datetime
    message: str

    # tp.success / tp.target_left
    target: str | None = None
    origin: Point | None = None
    dwell_ms: float | None = Field(default=None, alias="dwellMs")

    # manager.goal_updated
    goal: Point | None = None
    mode: str | None = None
    tp_target: str | None = Field(default=None, alias="tpTarget")
    tp_origin: Point | None = Field(default=None, alias="tpOrigin")

    @field_validator("ts")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Naive timestamps are read as UTC so they compare with aware ones
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("message", "target", "mode", "tp_target", mode="before")
    @classmethod
    def scalar_as_text(cls, v: Any) -> str | None:
        return as_text(v)

    @field_validator("dwell_ms", mode="before")
    @classmethod
    def lenient_duration(cls, v: Any) -> int | float | None:
        return as_number(v)

    @field_validator("origin", "goal", "tp_origin", mode="before")
    @classmethod
    def object_or_none(cls, v: Any) -> Any:
        if isinstance(v, (dict, Point)):
            return v
        return None

    @property
    def kind(self) -> EventKind | None:
        """The recognised event kind, or None for any other message."""
        try:
            return EventKind(self.message)
        except ValueError:
            return None

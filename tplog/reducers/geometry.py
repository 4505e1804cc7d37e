"""Distance helpers for positions recorded in the log."""

import math

from tplog.models.events import Point


def distance3(a: Point, b: Point) -> float:
    """Euclidean distance between two points.

    Missing coordinates count as 0.
    """
    dx = (a.x or 0.0) - (b.x or 0.0)
    dy = (a.y or 0.0) - (b.y or 0.0)
    dz = (a.z or 0.0) - (b.z or 0.0)
    return math.sqrt(dx * dx + dy * dy + dz * dz)

"""Text rendering for analysis results."""

from tplog.models.derived import AnalysisResult, SessionSummary


TABLE_COLUMNS = [
    "index",
    "player",
    "start",
    "durationSec",
    "plannedDwellSec",
    "goals",
    "avgDist",
    "maxDist",
    "modes",
]


def render_json(result: AnalysisResult) -> str:
    """Render as indented JSON with camelCase field names."""
    return result.model_dump_json(indent=2, by_alias=True)


def _cell(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def _row(summary: SessionSummary) -> list[str]:
    modes = ", ".join(f"{mode}={count}" for mode, count in summary.mode_counts.items())
    return [
        _cell(summary.index),
        _cell(summary.player),
        _cell(summary.start_time),
        _cell(summary.duration_seconds),
        _cell(summary.planned_dwell_seconds),
        _cell(summary.goal_count),
        _cell(summary.avg_distance_from_origin),
        _cell(summary.max_distance_from_origin),
        modes or "-",
    ]


def render_table(result: AnalysisResult) -> str:
    """Render as a fixed-width plain-text table, one row per session."""
    if not result.sessions:
        return "No sessions found."

    rows = [TABLE_COLUMNS] + [_row(s) for s in result.sessions]
    widths = [max(len(row[i]) for row in rows) for i in range(len(TABLE_COLUMNS))]

    lines = []
    for n, row in enumerate(rows):
        lines.append("  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip())
        if n == 0:
            lines.append("  ".join("-" * w for w in widths))
    return "\n".join(lines)

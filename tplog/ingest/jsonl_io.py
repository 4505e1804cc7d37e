"""JSONL loading for teleport session logs.

Log files are written line by line by a running server, so a file may
contain truncated lines or records that are not events at all. Loading is
tolerant: anything that does not parse into a LogEvent is skipped.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from tplog.models.events import LogEvent
from tplog.reducers.analysis import sort_events

logger = logging.getLogger(__name__)

LOG_FILE_PREFIX = "session-"
LOG_FILE_SUFFIX = ".log"


def parse_log_lines(lines: Iterable[str]) -> list[LogEvent]:
    """Parse JSONL lines into events sorted by ts.

    Skips blank lines, invalid JSON, non-object values, records missing
    ``ts`` or ``message``, and records that fail validation.

    Args:
        lines: Raw text lines.

    Returns:
        Parsed events, stably sorted ascending by ts.
    """
    events: list[LogEvent] = []
    skipped = 0

    for line_num, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue

        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            logger.debug("Skipping line %d: invalid JSON (%s)", line_num, e)
            skipped += 1
            continue

        if not isinstance(data, dict) or not data.get("ts") or not data.get("message"):
            logger.debug("Skipping line %d: missing ts or message", line_num)
            skipped += 1
            continue

        try:
            events.append(LogEvent.model_validate(data))
        except ValidationError as e:
            logger.debug("Skipping line %d: %s", line_num, e)
            skipped += 1

    logger.info("Parsed %d events, skipped %d lines", len(events), skipped)
    return sort_events(events)


def load_log_events(path: str | Path) -> list[LogEvent]:
    """Load events from a JSONL log file.

    Args:
        path: Path to the log file.

    Returns:
        Parsed events, stably sorted ascending by ts.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return parse_log_lines(f)


def find_latest_log_file(log_dir: str | Path) -> Path | None:
    """Find the most recently modified ``session-*.log`` file.

    Args:
        log_dir: Directory to search.

    Returns:
        Path to the newest log file, or None if there is none.
    """
    log_dir = Path(log_dir)
    if not log_dir.is_dir():
        logger.debug("Log directory not found: %s", log_dir)
        return None

    candidates = [
        p
        for p in log_dir.iterdir()
        if p.is_file()
        and p.name.startswith(LOG_FILE_PREFIX)
        and p.name.endswith(LOG_FILE_SUFFIX)
    ]
    if not candidates:
        return None

    return max(candidates, key=lambda p: p.stat().st_mtime)

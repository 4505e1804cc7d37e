"""Log ingestion for tplog."""

from tplog.ingest.jsonl_io import find_latest_log_file, load_log_events, parse_log_lines

__all__ = ["find_latest_log_file", "load_log_events", "parse_log_lines"]

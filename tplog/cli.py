"""CLI tools for tplog.

Commands:
- analyze: Reconstruct teleport sessions from a log and print statistics
- events: List the parsed events of a log
- serve: Start the API server
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from tplog.ingest.jsonl_io import find_latest_log_file, load_log_events
from tplog.reducers.analysis import analyze_events
from tplog.render import render_json, render_table

logger = logging.getLogger(__name__)

DEFAULT_LOG_DIR = "logs"
EXIT_NO_LOG = 2


def _default_log_dir() -> str:
    return os.environ.get("TPLOG_LOG_DIR", DEFAULT_LOG_DIR)


def _resolve_log_file(args: argparse.Namespace) -> Path | None:
    """Pick the log file: an explicit --file wins, else the newest with --last."""
    if args.file:
        path = Path(args.file).resolve()
    elif args.last:
        path = find_latest_log_file(args.log_dir or _default_log_dir())
    else:
        return None

    if path is None or not path.exists():
        return None
    return path


def cmd_analyze(args: argparse.Namespace) -> int:
    """Analyze a log file and print session statistics."""
    path = _resolve_log_file(args)
    if path is None:
        print("No log file found. Use --file <path> or --last", file=sys.stderr)
        return EXIT_NO_LOG

    logger.info("Analyzing %s", path)
    events = load_log_events(path)
    result = analyze_events(events)

    if args.json:
        print(render_json(result))
    else:
        print(f"Analyzed: {path.name}")
        print(render_table(result))

    return 0


def cmd_events(args: argparse.Namespace) -> int:
    """List parsed events in timestamp order."""
    path = _resolve_log_file(args)
    if path is None:
        print("No log file found. Use --file <path> or --last", file=sys.stderr)
        return EXIT_NO_LOG

    events = load_log_events(path)
    if not events:
        print("No events found.")
        return 0

    for event in events:
        line = f"{event.ts.isoformat()} {event.message}"
        player = event.target or event.tp_target
        if player:
            line += f" ({player})"
        print(line)

    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the API server."""
    try:
        import uvicorn
        from tplog.api.main import create_app
    except ImportError:
        print("uvicorn not installed. Run: pip install uvicorn")
        return 1

    app = create_app()
    print(f"Starting tplog API server on http://{args.host}:{args.port}")

    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--file", help="Log file to read")
    parser.add_argument("--last", action="store_true", help="Use the newest session-*.log")
    parser.add_argument(
        "--log-dir",
        help=f"Directory searched by --last (default: $TPLOG_LOG_DIR or {DEFAULT_LOG_DIR})",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="tplog CLI - teleport session analysis",
        prog="tplog",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # analyze
    analyze_parser = subparsers.add_parser("analyze", help="Summarize teleport sessions")
    _add_source_args(analyze_parser)
    analyze_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # events
    events_parser = subparsers.add_parser("events", help="List parsed events")
    _add_source_args(events_parser)

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "analyze": cmd_analyze,
        "events": cmd_events,
        "serve": cmd_serve,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Site Timeline CLI - render a project's Gantt layout in the terminal.

Usage:
    python -m cli.main render --tasks tasks.json --project p1 --granularity weekly
    python -m cli.main render --db site.db --project p1 --nav zoom_in --nav pan_next
    python -m cli.main render --tasks tasks.yaml --project p1 --json
"""

import argparse
import json
import logging
import sys

from timeline.axis import suggest_granularity
from timeline.config import get_settings, load_settings
from timeline.durations import resolve_interval
from timeline.errors import TimelineError
from timeline.extent import compute_extent
from timeline.gantt import build_timeline
from timeline.navigator import ViewportNavigator
from timeline.observability import configure_logging, request_scope
from timeline.records import ALL_PHASES, filter_by_phase, parse_instant
from timeline.task_source import InMemoryTaskSource, SQLiteTaskSource

logger = logging.getLogger(__name__)

NAV_ACTIONS = ("pan_prev", "pan_next", "zoom_in", "zoom_out", "reset")


def print_header(text: str):
    """Print a section header."""
    print(f"\n{'═' * 50}")
    print(f"  {text}")
    print(f"{'═' * 50}")


def print_table(headers: list, rows: list, widths: list = None):
    """Print a simple table."""
    if not widths:
        widths = [
            max(len(str(row[i])) for row in [headers] + rows)
            for i in range(len(headers))
        ]

    header_str = " │ ".join(str(h).ljust(w) for h, w in zip(headers, widths))
    print(header_str)
    print("─" * len(header_str))

    for row in rows:
        print(" │ ".join(str(c)[:w].ljust(w) for c, w in zip(row, widths)))


def _fmt(instant) -> str:
    return instant.strftime("%Y-%m-%d %H:%M")


def _flags(row) -> str:
    flags = []
    if row.efficiency.is_overtime:
        flags.append("overtime")
    if row.overdue:
        flags.append("overdue")
    if row.interval.clamped:
        flags.append("clamped")
    return ",".join(flags) or "-"


def _source(args):
    if args.tasks:
        return InMemoryTaskSource.from_file(args.tasks)
    return SQLiteTaskSource(args.db)


def cmd_render(args) -> int:
    """Lay out one project and print it."""
    settings = load_settings(args.config) if args.config else get_settings()

    tasks = _source(args).list_tasks(args.project)
    phase = args.phase or ALL_PHASES
    now = parse_instant(args.now) if args.now else None
    if args.now and now is None:
        print(f"Invalid --now value: {args.now}", file=sys.stderr)
        return 2

    extent = compute_extent(
        (resolve_interval(t, settings) for t in filter_by_phase(tasks, phase)), settings
    )
    nav = ViewportNavigator(settings=settings)
    for action in args.nav or []:
        kind, _, direction = action.partition("_")
        if kind == "pan":
            nav.pan(direction, extent)
        elif kind == "zoom":
            nav.zoom(direction, extent)
        else:
            nav.reset()

    granularity = args.granularity
    if granularity is None and extent is not None:
        granularity = suggest_granularity(nav.current_window(extent), settings)

    view = build_timeline(
        tasks,
        granularity=granularity,
        viewport=nav.viewport,
        phase=phase,
        now=now,
        settings=settings,
    )

    if args.json:
        print(json.dumps(view.to_dict(), indent=2))
        return 0

    print_header(f"TIMELINE · {args.project}")
    if view.is_empty:
        print("No tasks with dates found.")
        return 0

    print(f"Extent:  {_fmt(view.extent.start)} → {_fmt(view.extent.end)}")
    print(f"Window:  {_fmt(view.window.start)} → {_fmt(view.window.end)}")
    if view.now_percent is not None:
        print(f"Now:     {view.now_percent:.1f}%")
    print()

    rows = [
        [
            row.task.id,
            row.task.status.value,
            _fmt(row.interval.start),
            _fmt(row.interval.end),
            f"{row.position.start_percent:.1f}",
            f"{row.position.width_percent:.1f}",
            f"{row.efficiency.classification.value} ({row.efficiency.efficiency_percent}%)",
            _flags(row),
        ]
        for row in view.rows
    ]
    print_table(["Task", "Status", "Start", "End", "At %", "Width %", "Efficiency", "Flags"], rows)

    print_header(f"AXIS · {view.granularity.value}")
    print("  ".join(f"[{t.label}]" if t.is_major else t.label for t in view.ticks))

    summary = view.summary
    print_header("EFFICIENCY")
    for name, count in summary.counts.items():
        print(f"  {name:<15} {count}")
    print(f"  {'overtime':<15} {summary.overtime_count}")
    if summary.average_efficiency is not None:
        print(f"  {'average':<15} {summary.average_efficiency}%")

    for warning in view.warnings:
        print(f"⚠ {warning}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="site-timeline", description="Construction project timeline")
    p.add_argument("--log-level", default="WARNING")
    sub = p.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a project's Gantt layout")
    source = render.add_mutually_exclusive_group(required=True)
    source.add_argument("--tasks", help="JSON/YAML task file")
    source.add_argument("--db", help="SQLite database with a tasks table")
    render.add_argument("--project", required=True, help="Project id")
    render.add_argument("--granularity", choices=["hourly", "daily", "weekly", "monthly", "yearly"])
    render.add_argument("--phase", help="Project phase filter (default: all)")
    render.add_argument("--nav", action="append", choices=NAV_ACTIONS, help="Navigation steps, in order")
    render.add_argument("--now", help="Current instant (ISO-8601) for the now marker")
    render.add_argument("--config", help="Settings YAML (default: the packaged timeline/data/timeline.yaml)")
    render.add_argument("--json", action="store_true", help="Print the layout as JSON")
    render.set_defaults(func=cmd_render)
    return p


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, json_format=False)
    # one request ID per invocation
    with request_scope():
        try:
            return args.func(args)
        except TimelineError as e:
            logger.error(f"{args.command} failed: {e}")
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2


if __name__ == "__main__":
    sys.exit(main())

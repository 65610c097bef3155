"""
CLI (Command Line Interface).

Quick terminal commands on top of TtClient and Schedule, e.g.:

    ttschedule faculties
    ttschedule groups <faculty_id>
    ttschedule search <group name>
    ttschedule today --group <id> [--subgroup N]
    ttschedule week --group <id> [--week N]
    ttschedule date 2025-09-08 --group <id>
    ttschedule now --group <id>

Note:
- fetched data is cached in a JSON snapshot (--cache-file) between runs
- output is plain text
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

from ttschedule import config
from ttschedule.client import TtClient
from ttschedule.errors import TtError
from ttschedule.model import EducationType, Lesson
from ttschedule.schedule import Schedule
from ttschedule.storage import load_cache_snapshot, save_cache_snapshot
from ttschedule.weeks import weekday_index, weekday_name

SCHEDULE_COMMANDS = ("today", "tomorrow", "week", "date", "now")


def _format_lesson(lesson: Lesson) -> str:
    """
    One lesson per line: date, time, slot number, subject and details.
    """
    parts = [
        f"{lesson.start:%Y-%m-%d} {lesson.start:%H:%M}-{lesson.end:%H:%M}",
        f"{lesson.number}.",
        lesson.subject,
    ]
    if lesson.type:
        parts.append(f"({lesson.type})")
    if lesson.room:
        parts.append(lesson.room)
    if lesson.teacher.name:
        parts.append(lesson.teacher.name)
    if lesson.subgroup:
        parts.append(f"[{lesson.subgroup} подгр.]")
    if lesson.original_room is not None:
        parts.append(f"(замена, было {lesson.original_room})")
    if lesson.transfer is not None:
        parts.append(f"(перенос с {lesson.transfer.from_date:%d.%m}, {lesson.transfer.from_slot} пара)")
    if lesson.possible_changes:
        parts.append("*")
    return " ".join(parts)


def _print_lessons(lessons: List[Lesson]) -> None:
    if not lessons:
        print("No lessons.")
        return

    current: Optional[date] = None
    for lesson in lessons:
        day = lesson.start.date()
        if day != current:
            current = day
            print(f"{weekday_name(weekday_index(day))}, {day:%d.%m.%Y}")
        print(f"  {_format_lesson(lesson)}")


def _make_client(args: argparse.Namespace) -> TtClient:
    education_type = EducationType.VOCATIONAL if args.vocational else None
    return TtClient(
        education_type=education_type,
        cache=dict(config.DEFAULT_CACHE_TTLS),
        auto_guest_login=True,
    )


def _cmd_faculties(client: TtClient) -> int:
    faculties = client.get_faculties()
    if not faculties:
        print("No faculties found.")
        return 0
    for f in faculties:
        print(f"[{f.id}] {f.name}")
    return 0


def _cmd_groups(args: argparse.Namespace, client: TtClient) -> int:
    groups = client.get_groups_for_faculty(args.faculty_id)
    if not groups:
        print("No groups found.")
        return 0
    for g in groups:
        print(f"[{g.id}] {g.name}")
    return 0


def _cmd_search(args: argparse.Namespace, client: TtClient) -> int:
    query = (args.name or "").strip()
    if not query:
        print("Please provide a group name.")
        return 1

    groups = client.search_group(query)
    if not groups:
        print("No results.")
        return 0
    for g in groups:
        print(f"[{g.id}] {g.name}")
    return 0


def _cmd_schedule(args: argparse.Namespace, client: TtClient) -> int:
    """
    Load the group's timetable and print the requested lessons.
    """
    if args.group is None:
        print("Please provide --group.")
        return 1

    schedule: Schedule = client.load_schedule(args.group, holidays=[] if args.no_holidays else None)
    subgroup = args.subgroup

    if args.command == "today":
        _print_lessons(schedule.today(subgroup=subgroup))
    elif args.command == "tomorrow":
        _print_lessons(schedule.tomorrow(subgroup=subgroup))
    elif args.command == "week":
        _print_lessons(schedule.for_week(args.week, subgroup=subgroup))
    elif args.command == "date":
        try:
            day = datetime.strptime(args.day, "%Y-%m-%d").date()
        except ValueError:
            print(f"Invalid date: {args.day!r} (expected YYYY-MM-DD)")
            return 1
        _print_lessons(schedule.for_date(day, subgroup=subgroup))
    else:
        lesson = schedule.current_lesson(subgroup=subgroup)
        if lesson is None:
            print("No lesson right now.")
        else:
            print(_format_lesson(lesson))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="ttschedule", description="University timetable CLI")
    parser.add_argument("--cache-file", type=Path, default=None, help="Cache snapshot path (JSON)")
    parser.add_argument("--vocational", action="store_true", help="Use the vocational education timetable")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("faculties", help="List faculties")

    p_groups = sub.add_parser("groups", help="List groups of a faculty")
    p_groups.add_argument("faculty_id", type=int, help="Faculty ID")

    p_search = sub.add_parser("search", help="Search groups by name")
    p_search.add_argument("name", type=str, help="Group name")

    for name, help_text in (
        ("today", "Lessons today"),
        ("tomorrow", "Lessons tomorrow"),
        ("week", "Lessons this week (or semester week --week)"),
        ("date", "Lessons on a date"),
        ("now", "Lesson running right now"),
    ):
        p = sub.add_parser(name, help=help_text)
        if name == "date":
            p.add_argument("day", type=str, help="Date (YYYY-MM-DD)")
        if name == "week":
            p.add_argument("--week", type=int, default=None, help="0-based semester week")
        p.add_argument("--group", "-g", type=int, default=None, help="Group ID")
        p.add_argument("--subgroup", "-s", type=int, default=None, help="Subgroup number")
        p.add_argument("--no-holidays", action="store_true", help="Do not skip public holidays")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    client = _make_client(args)
    client.import_cache(load_cache_snapshot(args.cache_file))

    try:
        if args.command == "faculties":
            code = _cmd_faculties(client)
        elif args.command == "groups":
            code = _cmd_groups(args, client)
        elif args.command == "search":
            code = _cmd_search(args, client)
        elif args.command in SCHEDULE_COMMANDS:
            code = _cmd_schedule(args, client)
        else:
            code = 2
    except TtError as e:
        print(f"Error: {e}", file=sys.stderr)
        code = 1
    finally:
        save_cache_snapshot(client.export_cache(), args.cache_file)

    raise SystemExit(code)

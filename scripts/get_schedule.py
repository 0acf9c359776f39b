"""Look up RTU periods, programs, courses, groups and schedules from the shell.

Run with: python scripts/get_schedule.py periods
Programs: python scripts/get_schedule.py programs --period 25/26-R
Courses:  python scripts/get_schedule.py courses --period 25/26-R --program RDBD0
Groups:   python scripts/get_schedule.py groups --period 25/26-R --program RDBD0 --course 1
Schedule: python scripts/get_schedule.py schedule --program RDBD0 --course 1 --group 13
Table:    python scripts/get_schedule.py schedule --program RDBD0 --course 1 --table
Window:   python scripts/get_schedule.py schedule --program RDBD0 --course 1 \
              --start 2025-09-01 --end 2025-09-30

Settings come from RTU_* environment variables or a .env file.

Exit codes:
  0 = success (JSON or table on stdout)
  1 = error (message on stderr)
"""

import argparse
import asyncio
import json
import sys

from dotenv import load_dotenv

load_dotenv()

from rtu_schedule import RTUSchedule, Schedule, get_config  # noqa: E402
from rtu_schedule.logging import configure_from  # noqa: E402


def _identifier(value: str) -> int | str:
    """Digits are ids, anything else is a code or name."""
    value = value.strip()
    return int(value) if value.isdigit() else value


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Query the RTU timetable (nodarbibas.rtu.lv).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("periods", help="List study periods.")

    programs = sub.add_parser("programs", help="List programs of a period.")
    programs.add_argument("--period", type=_identifier, default=None)

    courses = sub.add_parser("courses", help="List courses of a program.")
    courses.add_argument("--period", type=_identifier, required=True)
    courses.add_argument("--program", type=_identifier, required=True)

    groups = sub.add_parser("groups", help="List groups of a course.")
    groups.add_argument("--period", type=_identifier, required=True)
    groups.add_argument("--program", type=_identifier, required=True)
    groups.add_argument("--course", type=int, required=True)

    schedule = sub.add_parser("schedule", help="Get a schedule.")
    schedule.add_argument("--period", type=_identifier, default=None)
    schedule.add_argument("--program", type=_identifier, required=True)
    schedule.add_argument("--course", type=int, required=True)
    schedule.add_argument("--group", type=int, default=None)
    schedule.add_argument("--start", default=None, help="First day (YYYY-MM-DD).")
    schedule.add_argument("--end", default=None, help="Last day (YYYY-MM-DD).")
    schedule.add_argument(
        "--table",
        action="store_true",
        help="Output a human-readable table instead of JSON.",
    )
    return parser.parse_args(argv)


def _format_table(schedule: Schedule) -> str:
    """Render entries as aligned columns."""
    headers = ["Date", "Time", "Type", "Subject", "Location", "Lecturer"]
    rows = [
        [
            e.date.isoformat(),
            f"{e.start_time}-{e.end_time}",
            e.type,
            e.subject.name,
            e.location,
            e.lecturer,
        ]
        for e in schedule
    ]
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    separator = "-+-".join("-" * w for w in widths)
    row_lines = [" | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)) for row in rows]
    return "\n".join([header_line, separator, *row_lines])


def _dump(items: list) -> None:
    print(
        json.dumps(
            [item.model_dump(mode="json", exclude={"raw"}) for item in items],
            indent=2,
            ensure_ascii=False,
        )
    )


async def main(args: argparse.Namespace) -> None:
    config = get_config()
    configure_from(config)

    async with RTUSchedule(config) as rtu:
        if args.command == "periods":
            _dump(await rtu.get_periods())
        elif args.command == "programs":
            _dump(await rtu.get_programs(args.period))
        elif args.command == "courses":
            _dump(await rtu.get_courses(args.period, args.program))
        elif args.command == "groups":
            _dump(await rtu.get_groups(args.period, args.program, args.course))
        else:
            options = {"program": args.program, "course": args.course}
            if isinstance(args.period, int):
                options["period_id"] = args.period
            elif args.period is not None:
                options["period"] = args.period
            if isinstance(args.program, int):
                options = {**options, "program": None, "program_id": args.program}
            if args.group is not None:
                options["group"] = args.group
            if args.start:
                options["start_date"] = args.start
            if args.end:
                options["end_date"] = args.end

            schedule = await rtu.get_schedule(options)
            if args.table:
                print(_format_table(schedule))
            else:
                _dump(schedule.to_list())


if __name__ == "__main__":
    args = _parse_args()
    try:
        asyncio.run(main(args))
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

"""
Command-line shell around render_schedule.

Reads a rotation config and a list of overrides from JSON files and prints
the rendered schedule for the requested window as JSON.
"""

import argparse
from datetime import datetime
import json
import logging
from pathlib import Path
import sys

import pydantic

from .errors import ScheduleError
from .models import Override, Schedule
from .schedule_utils import render_schedule

logger = logging.getLogger(__name__)

_INSTANT = pydantic.TypeAdapter(datetime)
_OVERRIDES = pydantic.TypeAdapter(list[Override])


def parse_instant(value: str) -> datetime:
    try:
        return _INSTANT.validate_python(value)
    except pydantic.ValidationError:
        raise argparse.ArgumentTypeError(f'not an ISO-8601 timestamp: {value!r}') from None


def load_schedule(path: str | Path) -> Schedule:
    return Schedule.model_validate_json(Path(path).read_text())


def load_overrides(path: str | Path) -> list[Override]:
    return _OVERRIDES.validate_json(Path(path).read_text())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='oncall-schedule', description='Render an on-call schedule')
    parser.add_argument('--schedule', required=True,
                        help='JSON file with users, handover_start_at and handover_interval_days')
    parser.add_argument('--overrides', required=True,
                        help='JSON file with a list of {user, start_at, end_at} overrides')
    parser.add_argument('--from', dest='from_time', required=True, type=parse_instant,
                        help='Start of the window (ISO-8601)')
    parser.add_argument('--until', dest='until_time', required=True, type=parse_instant,
                        help='End of the window (ISO-8601)')
    parser.add_argument('--merge', action='store_true',
                        help='Join back-to-back entries for the same user')
    parser.add_argument('--strict', action='store_true',
                        help='Fail on overlapping overrides instead of letting the later one win')
    parser.add_argument('--indent', type=int, default=4,
                        help='JSON indentation (default: 4)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log debug output to stderr')
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        schedule = load_schedule(args.schedule)
        overrides = load_overrides(args.overrides)
        entries = render_schedule(
            schedule,
            overrides,
            args.from_time,
            args.until_time,
            merge=args.merge,
            strict=args.strict,
        )
    except OSError as e:
        logger.error('Could not read input: %s', e)
        return 1
    except pydantic.ValidationError as e:
        logger.error('Invalid input:\n%s', e)
        return 1
    except ScheduleError as e:
        logger.error('%s', e)
        return 1

    print(json.dumps(entries, indent=args.indent))
    return 0


if __name__ == '__main__':
    sys.exit(main())

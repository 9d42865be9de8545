"""Errors raised by the schedule pipeline."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Override


class ScheduleError(ValueError):
    """Base class for schedule computation errors."""


class InvalidConfig(ScheduleError):
    """Rotation config has no users or a non-positive handover interval."""


class InvalidWindow(ScheduleError):
    """Query window where from is not strictly before until."""


class InvalidOverride(ScheduleError):
    """Override whose end_at is not after its start_at."""


class OverlappingOverrides(ScheduleError):
    """Two overrides cover the same instant (strict mode only)."""

    def __init__(self, pairs: 'list[tuple[Override, Override]]') -> None:
        self.pairs = pairs
        first, second = pairs[0]
        super().__init__(
            f'{len(pairs)} overlapping override pair(s), first: '
            f'{first.user} [{first.start_at}, {first.end_at}) and '
            f'{second.user} [{second.start_at}, {second.end_at})'
        )

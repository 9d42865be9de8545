"""On-call schedule rendering: rotation, overrides and window truncation."""

from .errors import (
    InvalidConfig,
    InvalidOverride,
    InvalidWindow,
    OverlappingOverrides,
    ScheduleError
)
from .models import Schedule, Override, Shift, format_timestamp
from .schedule_utils import (
    generate_base_schedule,
    apply_overrides,
    find_overlapping_overrides,
    render_schedule,
    truncate_to_window,
    merge_consecutive_entries
)

__all__ = [
    'Schedule',
    'Override',
    'Shift',
    'format_timestamp',
    'generate_base_schedule',
    'apply_overrides',
    'find_overlapping_overrides',
    'render_schedule',
    'truncate_to_window',
    'merge_consecutive_entries',
    'ScheduleError',
    'InvalidConfig',
    'InvalidWindow',
    'InvalidOverride',
    'OverlappingOverrides'
]

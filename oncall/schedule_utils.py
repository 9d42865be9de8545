"""Functions for generating, overriding and windowing on-call schedules."""

from datetime import datetime, timedelta
import logging

from .errors import InvalidConfig, InvalidOverride, InvalidWindow, OverlappingOverrides
from .models import Override, Schedule, Shift, as_utc

logger = logging.getLogger(__name__)


def generate_base_schedule(schedule: Schedule, from_time: datetime, until_time: datetime) -> list[Shift]:
    """
    Generate base schedule entries based on the rotation configuration.

    Shift boundaries sit at handover_start_at + k * interval for integer k.
    The first entry is the shift containing from_time (k may be negative
    when the window starts before the handover start), and shifts are
    emitted until one starts at or after until_time.

    Args:
        schedule: The schedule configuration with users and handover details
        from_time: First instant that must be covered
        until_time: Generate shifts up to this time

    Returns:
        Gapless list of shifts covering [from_time, until_time)

    Raises:
        InvalidConfig: If the interval is not a positive duration, shift
            boundaries leave the datetime range, or there are no users
    """
    if not schedule.users:
        raise InvalidConfig('users list cannot be empty')
    try:
        interval = schedule.handover_interval
    except (ValueError, OverflowError):
        raise InvalidConfig(f'handover_interval_days is not a usable duration: {schedule.handover_interval_days}') from None
    if interval <= timedelta(0):
        raise InvalidConfig('handover_interval_days must be greater than 0')

    anchor = as_utc(schedule.handover_start_at)
    from_time = as_utc(from_time)
    until_time = as_utc(until_time)

    base_entries = []
    try:
        # timedelta // timedelta floors, so instants before the anchor give k < 0
        intervals_passed = (from_time - anchor) // interval
        current_time = anchor + intervals_passed * interval
        # Python's % already lands in [0, len(users)) for a negative k
        user_index = intervals_passed % len(schedule.users)

        while current_time < until_time:
            shift_end = current_time + interval
            base_entries.append(Shift(
                user=schedule.users[user_index],
                start_at=current_time,
                end_at=shift_end,
            ))
            current_time = shift_end
            user_index = (user_index + 1) % len(schedule.users)
    except OverflowError:
        raise InvalidConfig(
            f'a handover interval of {schedule.handover_interval_days} days puts shift '
            f'boundaries outside the supported date range'
        ) from None

    logger.debug('Generated %d base shifts starting at rotation offset %d', len(base_entries), intervals_passed)
    return base_entries


def find_overlapping_overrides(overrides: list[Override]) -> list[tuple[Override, Override]]:
    """Return every pair of overrides whose intervals intersect, earliest first."""
    ordered = sorted(overrides, key=lambda o: o.start_at)
    pairs = []
    for i, first in enumerate(ordered):
        for second in ordered[i + 1:]:
            if second.start_at >= first.end_at:
                break
            pairs.append((first, second))
    return pairs


def _split_around(shift: Shift, override: Override) -> list[Shift]:
    if not shift.overlaps(override.start_at, override.end_at):
        return [shift]

    remnants = []
    if shift.start_at < override.start_at:
        remnants.append(shift.model_copy(update={'end_at': override.start_at}))
    if shift.end_at > override.end_at:
        remnants.append(shift.model_copy(update={'start_at': override.end_at}))
    return remnants


def apply_overrides(base_entries: list[Shift], overrides: list[Override]) -> list[Shift]:
    """
    Apply overrides to schedule entries by splitting shifts.

    Overrides are applied one at a time in start order. For each one, every
    overlapping shift is replaced by the part before the override and the
    part after it (either may be missing, so a fully covered shift
    disappears), then the override is added as a shift of its own and the
    list is re-sorted.

    Overlapping overrides are allowed: the one applied last, i.e. the later
    start (input order on a tie), wins where they intersect.

    Time complexity: O(m × n log n)
    n = number of entries in the working schedule,
    m = number of overrides

    Args:
        base_entries: Schedule entries to modify
        overrides: List of override periods

    Returns:
        New list of entries with overrides applied, sorted by start_at

    Raises:
        InvalidOverride: If an override does not end after it starts
    """
    if not overrides:
        return list(base_entries)

    for override in overrides:
        if override.end_at <= override.start_at:
            raise InvalidOverride(
                f'override for {override.user} ends at {override.end_at}, '
                f'not after its start {override.start_at}'
            )

    for first, second in find_overlapping_overrides(overrides):
        logger.warning(
            'Override for %s starting %s overlaps override for %s starting %s; the later one wins',
            first.user, first.start_at, second.user, second.start_at,
        )

    working = list(base_entries)
    for override in sorted(overrides, key=lambda o: o.start_at):
        working = [piece for shift in working for piece in _split_around(shift, override)]
        working.append(Shift(user=override.user, start_at=override.start_at, end_at=override.end_at))
        working.sort(key=lambda s: s.start_at)

    logger.debug('Applied %d overrides, %d entries -> %d', len(overrides), len(base_entries), len(working))
    return working


def truncate_to_window(entries: list[Shift], from_time: datetime, until_time: datetime) -> list[Shift]:
    """
    Truncate schedule entries to fit within the requested time window.

    Entries entirely outside the window are dropped, as are entries that
    end up empty after clipping. Order is preserved.

    Args:
        entries: Schedule entries to truncate
        from_time: Start of the time window
        until_time: End of the time window

    Returns:
        Entries truncated to the time window
    """
    from_time = as_utc(from_time)
    until_time = as_utc(until_time)

    truncated_entries = []
    for entry in entries:
        if entry.end_at <= from_time or entry.start_at >= until_time:
            continue

        start_at = max(entry.start_at, from_time)
        end_at = min(entry.end_at, until_time)
        if start_at >= end_at:
            continue

        truncated_entries.append(entry.model_copy(update={'start_at': start_at, 'end_at': end_at}))

    return truncated_entries


def merge_consecutive_entries(entries: list[Shift]) -> list[Shift]:
    """
    Merge consecutive entries with the same user.

    If a user has multiple back-to-back shifts (e.g. both halves of a split
    around their own override), combine them into a single entry.
    """
    if not entries:
        return []

    merged_entries = []
    current_merged = entries[0]

    for entry in entries[1:]:
        if entry.user == current_merged.user and entry.start_at == current_merged.end_at:
            current_merged = current_merged.model_copy(update={'end_at': entry.end_at})
        else:
            merged_entries.append(current_merged)
            current_merged = entry

    merged_entries.append(current_merged)

    return merged_entries


def render_schedule(
    schedule: Schedule,
    overrides: list[Override],
    from_time: datetime,
    until_time: datetime,
    *,
    merge: bool = False,
    strict: bool = False,
) -> list[dict]:
    """
    Generate schedule entries with overrides applied.

    Algorithm:
    1. Generate base schedule shifts covering the window
    2. Apply overrides, splitting shifts where needed
    3. Truncate to the requested time window
    4. Optionally merge consecutive entries with the same user

    Args:
        schedule: Schedule configuration
        overrides: List of override periods
        from_time: Start of requested time window
        until_time: End of requested time window
        merge: Join back-to-back entries of the same user
        strict: Reject overlapping overrides instead of letting the later win

    Returns:
        Final entries as dicts of user, start_at and end_at, with
        timestamps formatted as YYYY-MM-DDTHH:MM:SSZ

    Raises:
        InvalidWindow: If from_time is not before until_time
        OverlappingOverrides: In strict mode, if any overrides overlap
    """
    from_time = as_utc(from_time)
    until_time = as_utc(until_time)
    if from_time >= until_time:
        raise InvalidWindow(f'from ({from_time}) must be earlier than until ({until_time})')

    if strict:
        overlapping = find_overlapping_overrides(overrides)
        if overlapping:
            raise OverlappingOverrides(overlapping)

    # Step 1: Generate base schedule
    base_entries = generate_base_schedule(schedule, from_time, until_time)

    # Step 2: Apply overrides
    entries_with_overrides = apply_overrides(base_entries, overrides)

    # Step 3: Truncate to the requested time window
    entries = truncate_to_window(entries_with_overrides, from_time, until_time)

    # Step 4: Merge consecutive entries with the same user
    if merge:
        entries = merge_consecutive_entries(entries)

    logger.info('Rendered %d entries for %s -> %s', len(entries), from_time, until_time)
    return [entry.model_dump(mode='json') for entry in entries]

"""
Hypothesis property-based tests.

Properties that must hold for every valid rotation, window and set of
non-overlapping overrides.
"""

from datetime import datetime, timedelta, timezone
import os
import sys

from hypothesis import given, settings
from hypothesis import strategies as st

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from oncall import (
    Schedule,
    Override,
    apply_overrides,
    generate_base_schedule,
    render_schedule,
    truncate_to_window
)


ANCHOR = datetime(2025, 1, 1, tzinfo=timezone.utc)
HOUR = timedelta(hours=1)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

# Binary-exact day fractions so interval arithmetic has no rounding
_interval_days = st.sampled_from([0.25, 0.5, 1, 2, 7, 14])

_schedules = st.builds(
    lambda n, days: Schedule(
        users=[f'u{i}' for i in range(n)],
        handover_start_at=ANCHOR,
        handover_interval_days=days
    ),
    st.integers(min_value=1, max_value=6),
    _interval_days,
)


@st.composite
def _windows(draw):
    start = draw(st.integers(min_value=-2000, max_value=2000))
    length = draw(st.integers(min_value=1, max_value=800))
    return ANCHOR + start * HOUR, ANCHOR + (start + length) * HOUR


@st.composite
def _disjoint_overrides(draw, window):
    """Disjoint overrides around a window, built from sorted unique hour marks."""
    from_time, until_time = window
    low = int((from_time - ANCHOR) / HOUR) - 100
    high = int((until_time - ANCHOR) / HOUR) + 100
    marks = sorted(draw(st.sets(st.integers(min_value=low, max_value=high), max_size=12)))
    if len(marks) % 2:
        marks = marks[:-1]
    return [
        Override(user=f'x{i}', start_at=ANCHOR + marks[2 * i] * HOUR, end_at=ANCHOR + marks[2 * i + 1] * HOUR)
        for i in range(len(marks) // 2)
    ]


@st.composite
def _scenarios(draw):
    window = draw(_windows())
    return draw(_schedules), window, draw(_disjoint_overrides(window))


def _user_at(entries, instant):
    matches = [e.user for e in entries if e.start_at <= instant < e.end_at]
    assert len(matches) == 1, f'{len(matches)} entries cover {instant}'
    return matches[0]


# ---------------------------------------------------------------------------
# Property: base schedule shape
# ---------------------------------------------------------------------------
class TestBaseSchedule:

    @given(schedule=_schedules, window=_windows())
    @settings(max_examples=100)
    def test_gapless_and_covering(self, schedule, window):
        """Consecutive shifts touch, and together they cover the window."""
        from_time, until_time = window
        entries = generate_base_schedule(schedule, from_time, until_time)

        assert entries[0].start_at <= from_time
        assert entries[-1].end_at >= until_time
        for current, following in zip(entries, entries[1:]):
            assert current.end_at == following.start_at

    @given(schedule=_schedules, window=_windows())
    @settings(max_examples=100)
    def test_cyclic_fairness(self, schedule, window):
        """Shift k after the anchor (k may be negative) belongs to users[k mod n]."""
        entries = generate_base_schedule(schedule, *window)

        for e in entries:
            offset = e.start_at - ANCHOR
            assert offset % schedule.handover_interval == timedelta(0)
            k = offset // schedule.handover_interval
            assert e.user == schedule.users[k % len(schedule.users)]


# ---------------------------------------------------------------------------
# Property: overrides take precedence, everything else is untouched
# ---------------------------------------------------------------------------
class TestOverridePrecedence:

    @given(scenario=_scenarios(), samples=st.lists(st.floats(min_value=0, max_value=1), min_size=1, max_size=20))
    @settings(max_examples=100)
    def test_assignment_at_any_instant(self, scenario, samples):
        """Inside an override its user is on call; elsewhere the rotation user is."""
        schedule, (from_time, until_time), overrides = scenario
        base_entries = generate_base_schedule(schedule, from_time, until_time)
        entries = apply_overrides(base_entries, overrides)

        for fraction in samples:
            instant = from_time + (until_time - from_time) * fraction
            if instant >= until_time:
                continue
            covering = [o for o in overrides if o.start_at <= instant < o.end_at]
            expected = covering[0].user if covering else _user_at(base_entries, instant)
            assert _user_at(entries, instant) == expected

    @given(scenario=_scenarios(), data=st.data())
    @settings(max_examples=50)
    def test_order_insensitive(self, scenario, data):
        """Shuffling disjoint overrides does not change the result."""
        schedule, window, overrides = scenario
        base_entries = generate_base_schedule(schedule, *window)
        shuffled = data.draw(st.permutations(overrides))

        assert apply_overrides(base_entries, shuffled) == apply_overrides(base_entries, overrides)


# ---------------------------------------------------------------------------
# Property: truncation keeps everything inside the window
# ---------------------------------------------------------------------------
class TestTruncation:

    @given(scenario=_scenarios())
    @settings(max_examples=100)
    def test_entries_within_window(self, scenario):
        """Every truncated entry is non-empty and inside [from, until)."""
        schedule, (from_time, until_time), overrides = scenario
        entries = apply_overrides(generate_base_schedule(schedule, from_time, until_time), overrides)

        for e in truncate_to_window(entries, from_time, until_time):
            assert from_time <= e.start_at < e.end_at <= until_time

    @given(scenario=_scenarios())
    @settings(max_examples=100)
    def test_rendered_output_tiles_window(self, scenario):
        """Rendered entries start at from, end at until and leave no gaps."""
        schedule, (from_time, until_time), overrides = scenario
        result = render_schedule(schedule, overrides, from_time, until_time)

        assert result[0]['start_at'] == from_time.strftime('%Y-%m-%dT%H:%M:%SZ')
        assert result[-1]['end_at'] == until_time.strftime('%Y-%m-%dT%H:%M:%SZ')
        for current, following in zip(result, result[1:]):
            assert current['end_at'] == following['start_at']

#!/usr/bin/env python3
"""
Simple example demonstrating the on-call scheduling system.
Loads schedule.json and overrides.json from this directory.
"""

from datetime import datetime, timezone
from pathlib import Path
import sys
import os

# Add parent directory to path so we can import oncall
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from oncall import render_schedule
from oncall.cli import load_overrides, load_schedule
import json

HERE = Path(__file__).parent


def main():
    # Alice, Bob, Charlie rotating weekly from Friday Nov 7, 2025 at 5pm;
    # Charlie covers 5pm-10pm on Monday 10th November
    schedule = load_schedule(HERE / 'schedule.json')
    overrides = load_overrides(HERE / 'overrides.json')

    # Generate schedule for 2 weeks from 7th November 2025 to 21st November 2025
    from_time = datetime(2025, 11, 7, 17, 0, tzinfo=timezone.utc)
    until_time = datetime(2025, 11, 21, 17, 0, tzinfo=timezone.utc)

    print(f"Generating schedule from {from_time.strftime('%Y-%m-%d')} to {until_time.strftime('%Y-%m-%d')}...")

    entries = render_schedule(schedule, overrides, from_time, until_time)

    print(json.dumps(entries, indent=2))

    for entry in entries:
        start_at = datetime.fromisoformat(entry['start_at'].replace('Z', '+00:00'))
        end_at = datetime.fromisoformat(entry['end_at'].replace('Z', '+00:00'))
        duration = end_at - start_at

        hours = duration.total_seconds() / 3600
        if hours < 24:
            duration_str = f"{hours:.1f} hours"
        else:
            duration_str = f"{hours / 24:.1f} days"

        print(f"{entry['user']:8} | {start_at.strftime('%a %b %d, %I:%M %p')} → {end_at.strftime('%a %b %d, %I:%M %p')} ({duration_str})")


if __name__ == '__main__':
    main()

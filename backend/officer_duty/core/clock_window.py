"""
Clock-in / clock-out window evaluation.

Everything here is a pure function of the current time-of-day and the
configured boundaries, expressed in minutes since midnight (0-1439).
``clock_in_start`` opens the clock-in window and ``clock_out_start`` both
closes it and opens clock-out, which then stays open for the rest of the
day. A clock-in start later than the clock-out start means the clock-in
window spans midnight.
"""

import enum
from dataclasses import dataclass
from datetime import datetime, time

MINUTES_PER_DAY = 24 * 60


class ClockWindowState(str, enum.Enum):
    not_configured = "not_configured"
    disabled = "disabled"
    active = "active"


@dataclass(frozen=True)
class ClockAvailability:
    can_clock_in: bool
    can_clock_out: bool
    state: ClockWindowState
    message: str


def to_minutes(value: time | datetime | str) -> int:
    """Minutes since midnight for a time, a datetime or an ``HH:MM[:SS]`` string."""
    if isinstance(value, datetime):
        return value.hour * 60 + value.minute
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    parts = str(value or "").strip().split(":")
    try:
        hours = int(parts[0] or 0)
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError as exc:
        raise ValueError(f"Invalid time of day: {value!r}") from exc
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Invalid time of day: {value!r}")
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def spans_midnight(clock_in_start: int, clock_out_start: int) -> bool:
    return clock_in_start > clock_out_start


def can_clock_in(now: int, clock_in_start: int, clock_out_start: int) -> bool:
    if spans_midnight(clock_in_start, clock_out_start):
        return now >= clock_in_start or now < clock_out_start
    return clock_in_start <= now < clock_out_start


def can_clock_out(now: int, clock_out_start: int) -> bool:
    return now >= clock_out_start


def evaluate(now: time | datetime | int, config) -> ClockAvailability:
    """
    Availability for ``now`` under ``config``.

    ``config`` is anything exposing ``clock_in_start_time``,
    ``clock_out_start_time`` and ``is_active`` (the ORM row in practice),
    or ``None`` when nothing has been configured yet.
    """
    if config is None:
        return ClockAvailability(False, False, ClockWindowState.not_configured, "Clock settings not configured")
    if not config.is_active:
        return ClockAvailability(False, False, ClockWindowState.disabled, "Clock settings are currently disabled")

    current = now if isinstance(now, int) else to_minutes(now)
    clock_in_start = to_minutes(config.clock_in_start_time)
    clock_out_start = to_minutes(config.clock_out_start_time)

    allowed_in = can_clock_in(current, clock_in_start, clock_out_start)
    allowed_out = can_clock_out(current, clock_out_start)

    if allowed_in:
        message = "You can clock in now"
    elif allowed_out:
        message = "You can clock out now"
    elif current < clock_in_start:
        message = (
            f"Clock-in starts at {format_minutes(clock_in_start)}, "
            f"clock-out starts at {format_minutes(clock_out_start)}"
        )
    else:
        message = f"Clock-out started at {format_minutes(clock_out_start)}"

    return ClockAvailability(allowed_in, allowed_out, ClockWindowState.active, message)

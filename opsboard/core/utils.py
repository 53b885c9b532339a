# opsboard/core/utils.py
from datetime import date, datetime, time, timezone
from typing import Tuple, Union


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values pass through unchanged.

    Stored timestamps are always naive so both backends compare them the same way.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def start_of_day(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        value = to_naive_utc(value).date()
    return datetime.combine(value, time.min)


def end_of_day(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        value = to_naive_utc(value).date()
    return datetime.combine(value, time.max)


def day_bounds(value: Union[date, datetime]) -> Tuple[datetime, datetime]:
    """Return the first and last instant of the calendar day containing ``value``.

    An aware ``datetime`` is first converted to UTC, then reduced to its
    calendar date. Both bounds are inclusive.
    """
    return start_of_day(value), end_of_day(value)

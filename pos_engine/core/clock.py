# =========================================================
# TIMESTAMP COMPARISON
#
# Two aware datetimes compare as real instants, whatever their
# offsets. The offset is only dropped when an aware value meets
# a naive one, which is then read as the same wall clock.
# =========================================================

from datetime import datetime, timezone


def align(first: datetime, second: datetime):
    if (first.tzinfo is None) != (second.tzinfo is None):
        return first.replace(tzinfo=None), second.replace(tzinfo=None)

    return first, second


def is_before(first: datetime, second: datetime) -> bool:
    first, second = align(first, second)
    return first < second


def between(moment: datetime, start: datetime, end: datetime) -> bool:
    return not is_before(moment, start) and not is_before(end, moment)


def elapsed(start: datetime, end: datetime):
    start, end = align(start, end)
    return end - start


def sort_key(moment: datetime) -> datetime:
    # Single ordering key for mixed collections: aware values by instant
    if moment.tzinfo is None:
        return moment

    return moment.astimezone(timezone.utc).replace(tzinfo=None)

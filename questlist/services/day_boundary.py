from datetime import date, datetime


def local_day(ts: datetime) -> date:
    """Calendar day of ts in the host's local timezone.

    Naive datetimes are taken as local already. If the host timezone changes
    between two calls the same instant can land on a different day.
    """
    if ts.tzinfo is not None:
        ts = ts.astimezone()
    return ts.date()


def is_same_day(a: datetime, b: datetime) -> bool:
    return local_day(a) == local_day(b)


def is_today(ts: datetime, now: datetime) -> bool:
    return is_same_day(ts, now)

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def today_iso(clock: Optional[Callable[[], datetime]] = None) -> str:
    """
    Today's date as YYYY-MM-DD.

    The calendar day is taken in UTC, so just after midnight local
    time east of Greenwich the default date is still "yesterday".
    """
    now = (clock or utc_now)()
    return now.astimezone(timezone.utc).date().isoformat()

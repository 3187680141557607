"""Trading-hours gate for scheduled runs.

A-share continuous trading runs in two sessions separated by a lunch recess.
Runs are allowed from the morning open through the lunch start, and from the
lunch end through the close. Every boundary is inclusive and evaluated at
minute precision, so 11:30:59 still passes while 15:01 does not.
"""

from datetime import datetime, time, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

import config

MORNING_OPEN = time(9, 15)
LUNCH_START = time(11, 30)
LUNCH_END = time(13, 0)
SESSION_CLOSE = time(15, 0)


def _minutes(t) -> int:
    return t.hour * 60 + t.minute


def market_now(tz_name: Optional[str] = None) -> datetime:
    """Current time in the market's civil timezone."""
    return datetime.now(ZoneInfo(tz_name or config.MARKET_TIMEZONE))


def should_run(now: datetime, tz: Optional[tzinfo] = None) -> bool:
    """Return True when ``now`` falls inside a trading session.

    An aware ``now`` is converted to ``tz`` first when one is given; a naive
    ``now`` is taken to already be market-local time.
    """
    if tz is not None and now.tzinfo is not None:
        now = now.astimezone(tz)
    m = _minutes(now)
    morning = _minutes(MORNING_OPEN) <= m <= _minutes(LUNCH_START)
    afternoon = _minutes(LUNCH_END) <= m <= _minutes(SESSION_CLOSE)
    return morning or afternoon

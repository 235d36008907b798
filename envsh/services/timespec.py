"""Parse, resolve and display expiry values.

The host accepts ``expires`` either as a number of hours or as an absolute
epoch-millisecond timestamp. It tells the two apart by magnitude: anything
below ``MILLIS_THRESHOLD`` (2022-04-20T13:12:00Z in epoch milliseconds) is an
hours value. We apply the same cut-off locally and always transmit the
resolved absolute timestamp.
"""

import logging
import time
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from envsh.errors import ParseError
from envsh.models.timespec import AbsoluteMillis, RelativeHours, TimeSpec

logger = logging.getLogger(__name__)

MILLIS_THRESHOLD = 1_650_460_320_000
MS_PER_HOUR = 3_600_000

DISPLAY_FORMAT = "%Y-%m-%d (%A), %H:%M:%S"


def parse_timespec(text: str) -> TimeSpec:
    """Classify a user-supplied expiry as hours or epoch milliseconds."""
    value = text.strip()
    if not value.isdigit() or not value.isascii():
        raise ParseError(
            ParseError.Kind.NOT_A_NUMBER,
            f"invalid expiry {text!r}: expected hours or epoch milliseconds",
        )
    number = int(value)
    if number < MILLIS_THRESHOLD:
        return RelativeHours(number)
    return AbsoluteMillis(number)


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def resolve(spec: TimeSpec, now_ms: int) -> AbsoluteMillis:
    """Turn any TimeSpec into an absolute timestamp relative to ``now_ms``."""
    if isinstance(spec, AbsoluteMillis):
        return spec
    resolved = AbsoluteMillis(now_ms + spec.hours * MS_PER_HOUR)
    logger.debug("Resolved %d hour(s) from %d to %d", spec.hours, now_ms, resolved.millis)
    return resolved


def format_display(millis: int, tz_name: str) -> str:
    """Render epoch milliseconds as ``YYYY-MM-DD (Weekday), HH:MM:SS.mmm [Zone]``."""
    tz = ZoneInfo(tz_name)
    seconds, ms = divmod(millis, 1000)
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc).astimezone(tz)
    return f"{moment.strftime(DISPLAY_FORMAT)}.{ms:03d} [{tz_name}]"

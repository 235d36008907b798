"""Expiry instants as given by the user and as sent to the host."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RelativeHours:
    """Expire this many hours after the request is built."""

    hours: int


@dataclass(frozen=True)
class AbsoluteMillis:
    """Expire at this epoch-millisecond timestamp."""

    millis: int


TimeSpec = RelativeHours | AbsoluteMillis

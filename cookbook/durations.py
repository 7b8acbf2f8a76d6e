"""Duration parsing for recipe timing fields.

Three entry points, never to be swapped for one another:

* ``parse_iso_duration``: ISO-8601 only (``PT1H30M``), raises ``FormatError``.
* ``parse_duration_lenient``: ISO-8601 first, then human friendly forms
  (``1:30``, ``1h30m``, ``90``), raises ``FormatError``. Used for new input.
* ``parse_duration_or_zero``: never raises, logs and returns zero. Used only
  when re-reading values that are already stored.
"""

import logging
import re
from datetime import timedelta

from django.utils.dateparse import iso8601_duration_re, parse_duration

from cookbook.exceptions import FormatError

logger = logging.getLogger(__name__)

ZERO = timedelta(0)

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{1,2})(?::(\d{1,2}))?$")
_UNITS_RE = re.compile(
    r"^\s*(?:(?P<hours>\d+)\s*h(?:rs?|ours?)?)?"
    r"\s*(?:(?P<minutes>\d+)\s*m(?:ins?|inutes?)?)?"
    r"\s*(?:(?P<seconds>\d+)\s*s(?:ecs?|econds?)?)?\s*$",
    re.IGNORECASE,
)
_MINUTES_RE = re.compile(r"^\d+$")


def parse_iso_duration(text):
    """Parse strict ISO-8601 duration text into a ``timedelta``."""
    if text is None:
        raise FormatError(text)
    value = str(text).strip().upper()
    match = iso8601_duration_re.match(value)
    if not match or not any(
        match.group(name) is not None for name in ("days", "hours", "minutes", "seconds")
    ):
        raise FormatError(text)
    try:
        parsed = parse_duration(value)
    except (OverflowError, ValueError):
        raise FormatError(text)
    if parsed is None:
        raise FormatError(text)
    return parsed


def _parse_clock(value):
    match = _CLOCK_RE.match(value)
    if not match:
        return None
    first, second, third = match.groups()
    if third is not None:
        return timedelta(hours=int(first), minutes=int(second), seconds=int(third))
    if int(first) <= 23:
        return timedelta(hours=int(first), minutes=int(second))
    return timedelta(minutes=int(first), seconds=int(second))


def _parse_units(value):
    match = _UNITS_RE.match(value)
    if not match or not any(match.groupdict().values()):
        return None
    parts = {name: int(amount) for name, amount in match.groupdict().items() if amount}
    return timedelta(**parts)


def parse_duration_lenient(text):
    """
    Parse duration text, trying ISO-8601 before the human friendly fallbacks.

    Fallbacks, in order: clock notation (``H:MM``, ``H:MM:SS``; two parts with a
    leading value above 23 read as ``MM:SS``), unit suffixes (``1h30m``,
    ``2 hours``, ``45s``) and a bare integer taken as minutes.
    """
    if text is None:
        raise FormatError(text)
    value = str(text).strip()
    try:
        return parse_iso_duration(value)
    except FormatError:
        pass

    try:
        for fallback in (_parse_clock, _parse_units):
            parsed = fallback(value)
            if parsed is not None:
                return parsed

        if _MINUTES_RE.match(value):
            return timedelta(minutes=int(value))
    except (OverflowError, ValueError):
        raise FormatError(text)

    raise FormatError(text)


def parse_duration_or_zero(text):
    """Parse a stored duration, falling back to zero when it is missing or corrupt."""
    if text is None or not str(text).strip():
        return ZERO
    try:
        return parse_duration_lenient(text)
    except (FormatError, OverflowError, ValueError) as error:
        logger.warning("Failed to parse stored duration %r, treating as zero: %s", text, error)
        return ZERO


def format_duration(value):
    """Render a ``timedelta`` as canonical ISO-8601 text, e.g. ``PT1H30M``."""
    sign = "-" if value < ZERO else ""
    value = abs(value)
    seconds = value.days * 86400 + value.seconds
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = []
    if hours:
        parts.append(f"{hours}H")
    if minutes:
        parts.append(f"{minutes}M")
    if value.microseconds:
        fraction = f"{value.microseconds:06d}".rstrip("0")
        parts.append(f"{seconds}.{fraction}S")
    elif seconds or not parts:
        parts.append(f"{seconds}S")
    return f"{sign}PT{''.join(parts)}"

"""
Recover a meeting date from the leading digits of a work item name.

Recordings are usually named after the day they were made, e.g.
``241029-standup`` or ``2024102910_planning``. Only the leading digit run is
considered; anything after it is ignored.
"""

import re
from datetime import datetime
from typing import Optional

from .error_handling import InvalidFormatError

_LEADING_DIGITS = re.compile(r"^[0-9]+")

DEFAULT_HOUR = 12
DEFAULT_MINUTE = 0
MIN_YEAR = 1970


def parse_date_string(date_string: str) -> datetime:
    """
    Parse the leading digit run of a string into a naive local datetime.

    Accepted digit runs:
        6 digits  - YYMMDD (12:00)
        8 digits  - YYYYMMDD (12:00)
        10 digits - YYYYMMDDHH (minute 0)

    Two-digit years are always taken as 20xx.

    Raises:
        InvalidFormatError: If there are no leading digits, the run has an
            unsupported length, or the values do not form a real date-time
            on or after 1970.
    """
    match = _LEADING_DIGITS.match(date_string)
    if not match:
        raise InvalidFormatError(f"Invalid date string format: {date_string!r}")

    digits = match.group(0)
    hour = DEFAULT_HOUR
    minute = DEFAULT_MINUTE

    if len(digits) == 6:
        year, month, day = int(digits[0:2]), int(digits[2:4]), int(digits[4:6])
    elif len(digits) == 8:
        year, month, day = int(digits[0:4]), int(digits[4:6]), int(digits[6:8])
    elif len(digits) == 10:
        year, month, day = int(digits[0:4]), int(digits[4:6]), int(digits[6:8])
        hour = int(digits[8:10])
    else:
        raise InvalidFormatError(
            f"Invalid date string format: {digits} (length {len(digits)})"
        )

    if year < 100:
        year += 2000

    try:
        parsed = datetime(year, month, day, hour, minute)
    except ValueError as e:
        raise InvalidFormatError(f"Invalid date: {digits} ({e})", original_exception=e)

    if parsed.year < MIN_YEAR:
        raise InvalidFormatError(f"Invalid date: {digits} is before {MIN_YEAR}")

    return parsed


def parse_date_string_safe(date_string: str) -> Optional[datetime]:
    """Like parse_date_string, but returns None instead of raising."""
    try:
        return parse_date_string(date_string)
    except InvalidFormatError:
        return None

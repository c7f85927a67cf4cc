"""Helpers for validating input and generating verification codes."""

from typing import Any, Optional
from datetime import date, datetime
import calendar
import re
import secrets
import string

from pytz import UTC

from .exceptions import InvalidRequest

CODE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits

EMAIL_PATTERN = re.compile(
    r'^([0-9a-zA-Z_.-]+)@([0-9a-zA-Z_-]+)(\.[0-9a-zA-Z_-]+){1,3}$'
)

EARLIEST_BIRTH_YEAR = 1900


def now() -> datetime:
    """Get the current time in UTC."""
    return datetime.now(tz=UTC)


def as_utc(t: datetime) -> datetime:
    """Attach UTC to a naive timestamp read back from the database."""
    if t.tzinfo is None:
        return UTC.localize(t)
    return t.astimezone(UTC)


def generate_code(length: int) -> str:
    """Generate a random alphanumeric code of ``length`` characters."""
    return ''.join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def is_valid_email(email: Optional[str]) -> bool:
    """Determine whether ``email`` is shaped like ``local@domain.tld``."""
    if not email:
        return False
    return EMAIL_PATTERN.fullmatch(email) is not None


def is_empty(value: Any) -> bool:
    """``None`` and empty strings count as missing; ``False`` does not."""
    return value is None or value == ''


def require(**fields: Any) -> None:
    """Raise :class:`.InvalidRequest` if any of ``fields`` is missing."""
    if any(is_empty(value) for value in fields.values()):
        raise InvalidRequest()


def is_valid_birthday(birthday: Optional[str],
                      today: Optional[date] = None) -> bool:
    """
    Check that a ``YYYYMMDD`` string is a real date of birth.

    The year must lie between 1900 and the current year, and the day must
    exist in its month; February 29 is only accepted in leap years.

    Parameters
    ----------
    birthday : str
    today : :class:`date`
        Reference date for the upper bound on the year. Defaults to today.

    Returns
    -------
    bool

    """
    if not birthday or len(birthday) != 8 or not birthday.isascii() \
            or not birthday.isdecimal():
        return False
    year, month, day = int(birthday[:4]), int(birthday[4:6]), int(birthday[6:])
    current_year = (today or now().date()).year
    if year < EARLIEST_BIRTH_YEAR or year > current_year:
        return False
    if month < 1 or month > 12:
        return False
    if day < 1 or day > 31:
        return False
    if month in (4, 6, 9, 11) and day == 31:
        return False
    if month == 2 and (day > 29 or (day == 29 and not calendar.isleap(year))):
        return False
    return True

# app/daterange.py
"""Month/year to half-open UTC interval."""
import re
from dataclasses import dataclass
from datetime import datetime, timezone, MINYEAR, MAXYEAR

from .errors import InvalidMonth, InvalidYear

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
MONTH_NUMBERS = {name: number for number, name in enumerate(MONTHS, start=1)}

# leading integer, as a query-string year like "2022abc" is read
_YEAR_PREFIX = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class Interval:
    start: datetime  # inclusive
    end: datetime  # exclusive


def month_number(month) -> int:
    if not isinstance(month, str):
        raise InvalidMonth()
    try:
        return MONTH_NUMBERS[month.strip()]
    except KeyError:
        raise InvalidMonth() from None


def parse_year(value) -> int:
    if isinstance(value, bool):
        raise InvalidYear()
    if isinstance(value, int):
        year = value
    elif isinstance(value, str):
        m = _YEAR_PREFIX.match(value)
        if not m:
            raise InvalidYear()
        year = int(m.group(1))
    else:
        raise InvalidYear()
    # the following month must still be representable
    if not MINYEAR <= year < MAXYEAR:
        raise InvalidYear()
    return year


def resolve(month, year) -> Interval:
    """Interval covering `month` of `year`, from UTC midnight on the 1st to
    UTC midnight on the 1st of the next month."""
    number = month_number(month)
    year = parse_year(year)
    start = datetime(year, number, 1, tzinfo=timezone.utc)
    if number == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, number + 1, 1, tzinfo=timezone.utc)
    return Interval(start, end)

import re
from datetime import date, datetime, timedelta

_DATE_RE = re.compile(r"^(?P<day>\d{1,2})\.(?P<month>\d{1,2})(?:\.(?P<year>\d{4}))?$")
_SPAN_SEPARATOR_RE = re.compile(r"\s+по\s+", re.IGNORECASE)

# Indexed by date.weekday(), Monday first.
DAY_NAMES = (
    "Понедельник",
    "Вторник",
    "Среда",
    "Четверг",
    "Пятница",
    "Суббота",
    "Воскресенье",
)


class DateParseError(ValueError):
    pass


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def day_name(day: date) -> str:
    return DAY_NAMES[day.weekday()]


def format_date(day: date) -> str:
    """Return the ``DD.MM.YYYY`` form used both for display and as the storage key."""
    return f"{day.day:02d}.{day.month:02d}.{day.year:04d}"


def parse_date_key(key: str) -> date:
    try:
        return datetime.strptime(key, "%d.%m.%Y").date()
    except ValueError as error:
        raise DateParseError(f"Invalid calendar key: {key!r}") from error


def parse_date(text: str, year: int | None = None) -> date:
    """Parse ``DD.MM`` or ``DD.MM.YYYY``.

    When the text carries no year, ``year`` is used, falling back to the
    current year.
    """
    match = _DATE_RE.match(text.strip())
    if not match:
        raise DateParseError(f"Expected DD.MM or DD.MM.YYYY, got {text!r}")

    explicit_year = match.group("year")
    effective_year = int(explicit_year) if explicit_year else (year or date.today().year)
    try:
        return date(effective_year, int(match.group("month")), int(match.group("day")))
    except ValueError as error:
        raise DateParseError(f"No such calendar date: {text!r}") from error


def parse_date_range(text: str, reference: date | None = None, max_days: int | None = None) -> list[date]:
    """Expand a date expression into concrete days.

    Two forms are understood:

    * span ``"16.08 по 18.08"``: every day from start to end, both inclusive.
      Raises DateParseError when an endpoint is malformed, start > end, or the
      span is longer than ``max_days``.
    * list ``"16.08 17.08"``: each whitespace-separated date token; tokens
      that are not dates are skipped.
    """
    year = (reference or date.today()).year
    parts = _SPAN_SEPARATOR_RE.split(text.strip(), maxsplit=1)

    if len(parts) == 2:
        start = parse_date(parts[0], year)
        end = parse_date(parts[1], year)
        if start > end:
            raise DateParseError(f"Range start {format_date(start)} is after end {format_date(end)}")
        if max_days is not None and (end - start).days + 1 > max_days:
            raise DateParseError(f"Range {format_date(start)} - {format_date(end)} spans more than {max_days} days")

        days: list[date] = []
        cursor = start
        while cursor <= end:
            days.append(cursor)
            cursor += timedelta(days=1)
        return days

    days = []
    for token in text.split():
        if not _DATE_RE.match(token):
            continue
        try:
            days.append(parse_date(token, year))
        except DateParseError:
            continue
    return days

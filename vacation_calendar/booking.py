from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from .dates import day_name, format_date, is_weekend
from .vacations import VacationCalendar, capacity_for

BOOKING_WINDOW_DAYS = 30

WRONG_YEAR = "wrong_year"
OUT_OF_WINDOW = "out_of_window"
CAPACITY_EXCEEDED = "capacity_exceeded"


@dataclass(frozen=True)
class LimitViolation:
    day: date
    kind: str
    message: str


def check_limits(
    calendar: VacationCalendar,
    dates: Iterable[date],
    name: str,
    now: datetime | None = None,
) -> list[LimitViolation]:
    """Return every rule the requested days break, in request order.

    Limits are per day, not per person: ``name`` does not affect the count.
    An empty result means the whole request may be applied.
    """
    today = (now or datetime.now()).date()
    violations: list[LimitViolation] = []

    for day in dates:
        if day.year != today.year:
            violations.append(
                LimitViolation(day, WRONG_YEAR, f"Выходные можно брать только в {today.year} году")
            )
            continue

        days_ahead = (day - today).days
        if days_ahead < 0 or days_ahead > BOOKING_WINDOW_DAYS:
            violations.append(
                LimitViolation(
                    day,
                    OUT_OF_WINDOW,
                    f"Выходные можно брать только в ближайшие {BOOKING_WINDOW_DAYS} дней",
                )
            )
            continue

        max_allowed = capacity_for(day)
        if len(calendar.entries_for(day)) >= max_allowed:
            day_type = "выходные" if is_weekend(day) else "будни"
            violations.append(
                LimitViolation(
                    day,
                    CAPACITY_EXCEEDED,
                    f"{day_name(day)} {format_date(day)} — лимит в {day_type} исчерпан "
                    f"(максимум {max_allowed} человек)",
                )
            )

    return violations


def add_vacations(calendar: VacationCalendar, dates: Iterable[date], name: str) -> int:
    """Add ``name`` to each day, skipping days it already holds. Returns how many days changed."""
    return sum(1 for day in dates if calendar.add(day, name))


def remove_vacations(calendar: VacationCalendar, dates: Iterable[date], name: str) -> int:
    return sum(1 for day in dates if calendar.remove(day, name))


def remove_all_vacations(calendar: VacationCalendar, name: str) -> int:
    return remove_vacations(calendar, calendar.days(), name)

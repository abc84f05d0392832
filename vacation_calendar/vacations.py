from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

from .dates import day_name, format_date, is_weekend, parse_date_key

WEEKEND_CAPACITY = 3
WEEKDAY_CAPACITY = 2
CALENDAR_DISPLAY_DAYS = 30
NOBODY_PLACEHOLDER = "Никто"


def capacity_for(day: date) -> int:
    return WEEKEND_CAPACITY if is_weekend(day) else WEEKDAY_CAPACITY


@dataclass
class VacationCalendar:
    """Day key (``DD.MM.YYYY``) to the ordered list of holders of that day.

    A holder appears at most once per day and days without holders have no entry.
    Holder names are compared case-insensitively; the first spelling stored is kept.
    """

    entries: dict[str, list[str]] = field(default_factory=dict)

    def entries_for(self, day: date) -> list[str]:
        return list(self.entries.get(format_date(day), []))

    def add(self, day: date, name: str) -> bool:
        holders = self.entries.setdefault(format_date(day), [])
        if any(_same_holder(holder, name) for holder in holders):
            return False
        holders.append(name)
        return True

    def remove(self, day: date, name: str) -> bool:
        key = format_date(day)
        holders = self.entries.get(key)
        if not holders:
            return False

        remaining = [holder for holder in holders if not _same_holder(holder, name)]
        if len(remaining) == len(holders):
            return False
        if remaining:
            self.entries[key] = remaining
        else:
            del self.entries[key]
        return True

    def days(self) -> list[date]:
        return [parse_date_key(key) for key in self.entries]

    def to_dict(self) -> dict[str, Any]:
        return {"vacations": {key: list(holders) for key, holders in self.entries.items()}}

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "VacationCalendar":
        """Build a calendar from stored data, rewriting keys to ``DD.MM.YYYY``.

        Entries whose keys name the same day (``1.8.2026`` and ``01.08.2026``)
        are merged.
        """
        calendar = VacationCalendar()
        for key, holders in (data.get("vacations") or {}).items():
            day = parse_date_key(str(key))
            for holder in holders:
                calendar.add(day, holder)
            if not calendar.entries.get(format_date(day)):
                calendar.entries.pop(format_date(day), None)
        return calendar


def _same_holder(left: str, right: str) -> bool:
    return left.strip().casefold() == right.strip().casefold()


def render_calendar(calendar: VacationCalendar, today: date) -> str:
    lines: list[str] = []
    for offset in range(CALENDAR_DISPLAY_DAYS):
        day = today + timedelta(days=offset)
        holders = calendar.entries_for(day)
        status = "❌" if len(holders) > capacity_for(day) else "✅"
        names = ", ".join(holders) if holders else NOBODY_PLACEHOLDER
        lines.append(f"{day_name(day)} {format_date(day)} — {names} {status}")

    return "📅 Текущие выходные:\n" + "\n".join(lines)

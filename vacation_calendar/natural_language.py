import re
from dataclasses import dataclass
from datetime import date

from .dates import DateParseError, parse_date_range

_CALENDAR_COMMANDS = {"/календарь", "/calendar", "календарь"}
_REMOVE_ALL_KEYWORD = "отмена всех выходных"
_REMOVE_KEYWORD = "отмена"

_REMOVE_ALL_RE = re.compile(r"отмена всех выходных\s+(?P<name>.+)", re.IGNORECASE)
_REMOVE_RE = re.compile(r"отмена\s+(?:выходных\s+)?(?P<rest>.+)", re.IGNORECASE)
_DATES_THEN_NAME_RE = re.compile(r"(?P<dates>.+?)\s+(?P<name>.+)$")
_ADD_RE = re.compile(r"(?:выходной\s+)?(?P<dates>.+?)\s+(?P<name>.+)$", re.IGNORECASE)


@dataclass(frozen=True)
class Greet:
    pass


@dataclass(frozen=True)
class ShowCalendar:
    pass


@dataclass(frozen=True)
class AddVacation:
    dates: tuple[date, ...]
    name: str


@dataclass(frozen=True)
class RemoveVacation:
    dates: tuple[date, ...]
    name: str


@dataclass(frozen=True)
class RemoveAllVacations:
    name: str


@dataclass(frozen=True)
class UnknownCommand:
    pass


Command = Greet | ShowCalendar | AddVacation | RemoveVacation | RemoveAllVacations | UnknownCommand


def _parse_dates(expression: str, reference: date | None) -> tuple[date, ...]:
    try:
        return tuple(parse_date_range(expression, reference))
    except DateParseError:
        return ()


def parse_command(text: str, reference: date | None = None) -> Command:
    """Map a chat message to a command.

    Rules are tried in a fixed order and the first that yields a command wins:
    ``/start``, calendar, remove-all, remove, add. Keywords match regardless of
    case; names keep the case they were typed in. The date expression is the
    first token after the keyword and the name is everything after it.
    """
    stripped = (text or "").strip()
    lowered = stripped.lower()

    if lowered == "/start":
        return Greet()

    if lowered in _CALENDAR_COMMANDS:
        return ShowCalendar()

    if _REMOVE_ALL_KEYWORD in lowered:
        match = _REMOVE_ALL_RE.search(stripped)
        if match:
            return RemoveAllVacations(name=match.group("name").strip())

    if _REMOVE_KEYWORD in lowered:
        match = _REMOVE_RE.search(stripped)
        if match:
            split = _DATES_THEN_NAME_RE.search(match.group("rest").strip())
            if split:
                dates = _parse_dates(split.group("dates").strip(), reference)
                if dates:
                    return RemoveVacation(dates=dates, name=split.group("name").strip())

    match = _ADD_RE.search(stripped)
    if match:
        expression = match.group("dates").strip()
        if _REMOVE_KEYWORD not in expression.lower():
            dates = _parse_dates(expression, reference)
            if dates:
                return AddVacation(dates=dates, name=match.group("name").strip())

    return UnknownCommand()

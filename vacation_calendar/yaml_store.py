from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any
import logging
import shutil

import yaml

from .booking import LimitViolation, add_vacations, check_limits, remove_all_vacations, remove_vacations
from .dates import DateParseError, format_date, parse_date_key
from .vacations import VacationCalendar

logger = logging.getLogger(__name__)

EMPTY_CALENDAR_YAML = "vacations: {}\n"


class VacationStorageError(RuntimeError):
    pass


@dataclass(frozen=True)
class BookingResult:
    violations: list[LimitViolation]
    changed_days: int
    saved: bool

    @property
    def ok(self) -> bool:
        return not self.violations


class VacationYamlRepository:
    """Read-fresh / write-back storage of the shared calendar.

    Nothing is cached between calls: each ``load`` reads the file and each
    ``save`` replaces it, so concurrent writers follow last-write-wins.
    """

    def __init__(self, base_dir: str | Path = "data") -> None:
        self.base_dir = Path(base_dir)
        self.calendar_file = self.base_dir / "vacations.yaml"
        self.log_file = self.base_dir / "vacation_events.yaml"
        self._ensure_files()

    def _ensure_files(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        if not self.calendar_file.exists():
            self.calendar_file.write_text(EMPTY_CALENDAR_YAML, encoding="utf-8")
        if not self.log_file.exists():
            self.log_file.write_text("", encoding="utf-8")

    def load(self) -> VacationCalendar:
        """Return the stored calendar, or an empty one when it cannot be read."""
        try:
            payload = yaml.safe_load(self.calendar_file.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return VacationCalendar()
        except (OSError, ValueError, yaml.YAMLError) as error:
            self._recover_corrupted_yaml(self.calendar_file, error)
            return VacationCalendar()

        if payload is None:
            return VacationCalendar()
        if not isinstance(payload, dict) or not isinstance(payload.get("vacations") or {}, dict):
            self._recover_corrupted_yaml(self.calendar_file, ValueError("top-level YAML is not a vacations mapping"))
            return VacationCalendar()

        sanitized: dict[str, list[str]] = {}
        for key, holders in (payload.get("vacations") or {}).items():
            try:
                parse_date_key(str(key))
            except DateParseError:
                logger.warning("Skipping calendar entry with invalid key %r", key)
                continue
            if not isinstance(holders, list):
                logger.warning("Skipping calendar entry %s: holders are not a list", key)
                continue
            sanitized[str(key)] = [str(holder) for holder in holders if holder is not None]

        return VacationCalendar.from_dict({"vacations": sanitized})

    def save(self, calendar: VacationCalendar) -> bool:
        """Persist the whole calendar. Failures are logged, never raised."""
        try:
            self._write_yaml(self.calendar_file, calendar.to_dict())
        except VacationStorageError:
            logger.exception("Failed to save vacation calendar to %s", self.calendar_file)
            return False
        return True

    def _write_yaml(self, path: Path, payload: Any) -> None:
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            temp_path.write_text(yaml.safe_dump(payload, allow_unicode=True, sort_keys=False), encoding="utf-8")
            temp_path.replace(path)
        except OSError as error:
            raise VacationStorageError(f"Failed to write YAML file: {path}") from error
        finally:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)

    def _recover_corrupted_yaml(self, path: Path, error: Exception) -> None:
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        backup_path = path.with_name(f"{path.stem}.corrupt.{timestamp}{path.suffix}")
        logger.warning("Calendar file %s is unreadable (%s); backing up to %s", path, error, backup_path.name)
        try:
            if path.exists():
                shutil.copy2(path, backup_path)
            path.write_text(EMPTY_CALENDAR_YAML, encoding="utf-8")
        except OSError:
            logger.exception("Could not reset corrupted calendar file %s", path)
            return

        self.log_event(
            "YAML_RECOVERED",
            {"file": str(path.name), "backup": str(backup_path.name), "reason": str(error)},
        )

    def read_events(self) -> list[dict[str, Any]]:
        try:
            events = yaml.safe_load(self.log_file.read_text(encoding="utf-8"))
        except (OSError, ValueError, yaml.YAMLError):
            logger.exception("Event log %s is unreadable", self.log_file)
            return []
        if not isinstance(events, list):
            return []
        return [event for event in events if isinstance(event, dict)]

    def log_event(self, event_type: str, payload: dict[str, Any], event_time: datetime | None = None) -> None:
        """Append one event as a YAML block-sequence item; the existing log is never rewritten."""
        timestamp = (event_time or datetime.now()).isoformat(timespec="seconds")
        entry = yaml.safe_dump(
            [{"event_time": timestamp, "event_type": event_type, "payload": payload}],
            allow_unicode=True,
            sort_keys=False,
        )
        try:
            with self.log_file.open("a", encoding="utf-8") as handle:
                handle.write(entry)
        except OSError:
            logger.exception("Failed to append %s to event log", event_type)


def book_vacations(
    repository: VacationYamlRepository,
    dates: list[date],
    name: str,
    now: datetime | None = None,
) -> BookingResult:
    """Validate and add all ``dates`` for ``name`` in one load/save cycle.

    Any violation aborts the request before the calendar is touched.
    """
    effective_now = now or datetime.now()
    calendar = repository.load()

    violations = check_limits(calendar, dates, name, effective_now)
    if violations:
        return BookingResult(violations=violations, changed_days=0, saved=False)

    changed = add_vacations(calendar, dates, name)
    saved = _save_if_changed(repository, calendar, changed)
    if saved:
        repository.log_event(
            "VACATIONS_ADDED",
            {"name": name, "dates": [format_date(day) for day in dates]},
            effective_now,
        )
    return BookingResult(violations=[], changed_days=changed, saved=saved)


def cancel_vacations(
    repository: VacationYamlRepository,
    dates: list[date],
    name: str,
    now: datetime | None = None,
) -> BookingResult:
    calendar = repository.load()
    changed = remove_vacations(calendar, dates, name)
    saved = _save_if_changed(repository, calendar, changed)
    if saved:
        repository.log_event(
            "VACATIONS_REMOVED",
            {"name": name, "dates": [format_date(day) for day in dates]},
            now,
        )
    return BookingResult(violations=[], changed_days=changed, saved=saved)


def cancel_all_vacations(
    repository: VacationYamlRepository,
    name: str,
    now: datetime | None = None,
) -> BookingResult:
    calendar = repository.load()
    changed = remove_all_vacations(calendar, name)
    saved = _save_if_changed(repository, calendar, changed)
    if saved:
        repository.log_event("VACATIONS_CLEARED", {"name": name, "days": changed}, now)
    return BookingResult(violations=[], changed_days=changed, saved=saved)


def _save_if_changed(repository: VacationYamlRepository, calendar: VacationCalendar, changed: int) -> bool:
    if not changed:
        return False
    return repository.save(calendar)

from .booking import LimitViolation, add_vacations, check_limits, remove_all_vacations, remove_vacations
from .bot import InboundMessage, handle_message
from .dates import DateParseError, day_name, format_date, is_weekend, parse_date, parse_date_range
from .natural_language import parse_command
from .vacations import VacationCalendar, capacity_for, render_calendar
from .yaml_store import (
	BookingResult,
	VacationStorageError,
	VacationYamlRepository,
	book_vacations,
	cancel_all_vacations,
	cancel_vacations,
)

__all__ = [
	"LimitViolation",
	"add_vacations",
	"check_limits",
	"remove_all_vacations",
	"remove_vacations",
	"InboundMessage",
	"handle_message",
	"DateParseError",
	"day_name",
	"format_date",
	"is_weekend",
	"parse_date",
	"parse_date_range",
	"parse_command",
	"VacationCalendar",
	"capacity_for",
	"render_calendar",
	"BookingResult",
	"VacationStorageError",
	"VacationYamlRepository",
	"book_vacations",
	"cancel_all_vacations",
	"cancel_vacations",
]

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
import logging

from .natural_language import (
    AddVacation,
    Greet,
    RemoveAllVacations,
    RemoveVacation,
    ShowCalendar,
    parse_command,
)
from .vacations import render_calendar
from .yaml_store import VacationYamlRepository, book_vacations, cancel_all_vacations, cancel_vacations

logger = logging.getLogger(__name__)

GROUP_CHAT_TYPES = {"group", "supergroup"}

HELP_TEXT = (
    "Привет! Я бот для управления выходными. Доступные команды:\n"
    "/календарь - показать календарь выходных\n"
    "выходной DD.MM.YYYY Имя - добавить выходной\n"
    "отмена DD.MM.YYYY Имя - отменить выходной\n"
    "отмена всех выходных Имя - отменить все выходные"
)
GROUP_ONLY_TEXT = "Бот работает только в групповых чатах"
UNKNOWN_COMMAND_TEXT = "Неизвестная команда. Используйте /календарь для просмотра выходных."


@dataclass(frozen=True)
class InboundMessage:
    text: str
    from_display_name: str
    chat_id: int | str
    chat_type: str

    @property
    def is_group(self) -> bool:
        return self.chat_type in GROUP_CHAT_TYPES

    @staticmethod
    def from_telegram(message: dict[str, Any]) -> "InboundMessage":
        sender = message.get("from") or {}
        chat = message.get("chat") or {}
        return InboundMessage(
            text=str(message.get("text") or ""),
            from_display_name=str(sender.get("first_name") or ""),
            chat_id=chat.get("id"),
            chat_type=str(chat.get("type") or ""),
        )


def handle_message(
    message: InboundMessage,
    repository: VacationYamlRepository,
    now: datetime | None = None,
) -> str:
    """Execute one chat message against the calendar and return the reply text."""
    effective_now = now or datetime.now()
    command = parse_command(message.text, effective_now.date())

    if isinstance(command, Greet):
        return HELP_TEXT

    if not message.is_group:
        return GROUP_ONLY_TEXT

    logger.info(
        "chat=%s from=%s command=%s",
        message.chat_id,
        message.from_display_name,
        type(command).__name__,
    )

    if isinstance(command, ShowCalendar):
        return render_calendar(repository.load(), effective_now.date())

    if isinstance(command, RemoveAllVacations):
        cancel_all_vacations(repository, command.name, now=effective_now)
        return f"Удалены все выходные для {command.name}"

    if isinstance(command, RemoveVacation):
        cancel_vacations(repository, list(command.dates), command.name, now=effective_now)
        return f"Удалены выходные для {command.name}"

    if isinstance(command, AddVacation):
        result = book_vacations(repository, list(command.dates), command.name, now=effective_now)
        if not result.ok:
            return "\n".join(violation.message for violation in result.violations)
        return f"Добавлены выходные для {command.name}"

    return UNKNOWN_COMMAND_TEXT

from __future__ import annotations

from datetime import datetime
import os
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from vacation_calendar import (
    DateParseError,
    InboundMessage,
    VacationYamlRepository,
    check_limits,
    handle_message,
    parse_date_range,
    render_calendar,
)
from vacation_calendar.booking import BOOKING_WINDOW_DAYS

mcp = FastMCP(
    "Vacation Calendar MCP Server",
    instructions="Expose the shared day-off calendar and booking commands from the vacation_calendar project.",
    json_response=True,
)

DATA_DIR = Path(os.environ.get("VACATIONS_DATA_DIR", Path(__file__).parent / "data"))
REPOSITORY = VacationYamlRepository(DATA_DIR)


@mcp.resource("vacations://calendar")
async def calendar_view() -> str:
    """Render the next 30 days of the calendar."""
    return render_calendar(REPOSITORY.load(), datetime.now().date())


@mcp.tool()
def list_vacations() -> dict[str, list[str]]:
    """Return every stored day with its holders, keyed by DD.MM.YYYY."""
    return REPOSITORY.load().to_dict()["vacations"]


@mcp.tool()
def check_vacation_limits(dates_text: str, name: str) -> list[str]:
    """Return the reasons a booking would be refused; an empty list means it would be accepted."""
    now = datetime.now()
    try:
        dates = parse_date_range(dates_text, now.date(), max_days=BOOKING_WINDOW_DAYS + 1)
    except DateParseError as error:
        return [str(error)]
    return [violation.message for violation in check_limits(REPOSITORY.load(), dates, name, now)]


@mcp.tool()
def run_command(text: str, sender: str = "MCP") -> str:
    """Run a chat command (e.g. 'выходной 16.08 Иван') as if sent in the group chat."""
    message = InboundMessage(text=text, from_display_name=sender, chat_id="mcp", chat_type="group")
    return handle_message(message, REPOSITORY)


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()

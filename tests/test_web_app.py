import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest import mock

from vacation_calendar import VacationCalendar, VacationYamlRepository
from vacation_calendar.bot import GROUP_ONLY_TEXT
from vacation_calendar.config import Settings
from vacation_calendar.telegram import TelegramTransportError
from vacation_calendar.web_app import LIVENESS_MESSAGE, create_app

NOW = datetime(2026, 8, 14, 10, 0)


def telegram_update(text: str, chat_type: str = "group") -> dict:
    return {
        "update_id": 1,
        "message": {
            "message_id": 10,
            "text": text,
            "from": {"id": 7, "first_name": "Иван"},
            "chat": {"id": -100, "type": chat_type},
        },
    }


class TestWebApp(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._temp_dir.name) / "data"
        self.transport = mock.Mock()
        app = create_app(
            self.data_dir,
            now_provider=lambda: NOW,
            transport=self.transport,
            settings=Settings(bot_token="token"),
        )
        self.client = app.test_client()

    def tearDown(self) -> None:
        self._temp_dir.cleanup()

    def test_get_returns_liveness_payload(self) -> None:
        for path in ("/", "/api/webhook"):
            response = self.client.get(path)
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.get_json(), {"message": LIVENESS_MESSAGE})
        self.transport.send_message.assert_not_called()

    def test_post_books_and_replies(self) -> None:
        response = self.client.post("/", json=telegram_update("выходной 16.08 Иван"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"ok": True})
        self.transport.send_message.assert_called_once_with(-100, "Добавлены выходные для Иван")
        self.assertEqual(VacationYamlRepository(self.data_dir).load().entries, {"16.08.2026": ["Иван"]})

    def test_private_chat_gets_group_only_reply(self) -> None:
        response = self.client.post("/api/webhook", json=telegram_update("календарь", chat_type="private"))

        self.assertEqual(response.status_code, 200)
        self.transport.send_message.assert_called_once_with(-100, GROUP_ONLY_TEXT)

    def test_calendar_reply_lists_thirty_days(self) -> None:
        VacationYamlRepository(self.data_dir).save(VacationCalendar({"15.08.2026": ["Анна"]}))

        self.client.post("/", json=telegram_update("/calendar"))

        reply = self.transport.send_message.call_args.args[1]
        lines = reply.splitlines()
        self.assertEqual(lines[0], "📅 Текущие выходные:")
        self.assertEqual(len(lines), 31)
        self.assertEqual(lines[1], "Пятница 14.08.2026 — Никто ✅")
        self.assertEqual(lines[2], "Суббота 15.08.2026 — Анна ✅")

    def test_update_without_text_is_acknowledged(self) -> None:
        response = self.client.post("/", json={"update_id": 2, "edited_message": {"text": "x"}})

        self.assertEqual(response.status_code, 200)
        self.transport.send_message.assert_not_called()

    def test_transport_failure_is_reported_as_server_error(self) -> None:
        self.transport.send_message.side_effect = TelegramTransportError("chat not found")

        with self.assertLogs("vacation_calendar.web_app", level="ERROR"):
            response = self.client.post("/", json=telegram_update("привет"))

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json(), {"error": "Internal Server Error"})


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Protocol
import logging

from flask import Flask, jsonify, request

from .bot import InboundMessage, handle_message
from .config import Settings, configure_logging
from .telegram import TelegramClient
from .yaml_store import VacationYamlRepository

logger = logging.getLogger(__name__)

LIVENESS_MESSAGE = "Vacation bot is running!"


class MessageTransport(Protocol):
    def send_message(self, chat_id: int | str, text: str) -> Any: ...


def create_app(
    data_dir: str | Path | None = None,
    now_provider: Callable[[], datetime] | None = None,
    transport: MessageTransport | None = None,
    settings: Settings | None = None,
) -> Flask:
    effective_settings = settings or Settings.from_env()
    app = Flask(__name__)
    repository = VacationYamlRepository(data_dir or effective_settings.data_dir)
    clock: Callable[[], datetime] = now_provider or datetime.now
    sender: MessageTransport = transport or TelegramClient(
        effective_settings.bot_token,
        api_base=effective_settings.telegram_api_base,
    )

    @app.route("/", methods=["GET", "POST", "PUT", "DELETE", "PATCH"])
    @app.route("/api/webhook", methods=["GET", "POST", "PUT", "DELETE", "PATCH"])
    def webhook() -> Any:
        if request.method != "POST":
            return jsonify({"message": LIVENESS_MESSAGE})

        try:
            update = request.get_json(silent=True) or {}
            message = update.get("message")
            if isinstance(message, dict) and message.get("text"):
                inbound = InboundMessage.from_telegram(message)
                reply = handle_message(inbound, repository, now=clock())
                sender.send_message(inbound.chat_id, reply)
            return jsonify({"ok": True})
        except Exception:
            logger.exception("Failed to process webhook update")
            return jsonify({"error": "Internal Server Error"}), 500

    return app


if __name__ == "__main__":
    env_settings = Settings.from_env()
    configure_logging(env_settings.log_level)
    app = create_app(settings=env_settings)
    app.run(host=env_settings.host, port=env_settings.port, debug=False)

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping
import logging
import os

from .telegram import DEFAULT_API_BASE


@dataclass(frozen=True)
class Settings:
    bot_token: str | None = None
    data_dir: str = "data"
    telegram_api_base: str = DEFAULT_API_BASE
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 5000

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return Settings(
            bot_token=env.get("BOT_TOKEN") or None,
            data_dir=env.get("VACATIONS_DATA_DIR", "data"),
            telegram_api_base=env.get("TELEGRAM_API_BASE", DEFAULT_API_BASE),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            host=env.get("HOST", "127.0.0.1"),
            port=int(env.get("PORT", "5000")),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

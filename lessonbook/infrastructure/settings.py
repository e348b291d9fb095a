# lessonbook/infrastructure/settings.py

from dataclasses import dataclass
import logging
import os

from dotenv import load_dotenv

load_dotenv()


DEFAULT_API_BASE_URL = "http://localhost:3000"


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_BASE_URL
    search_debounce_seconds: float = 0.25
    request_timeout_seconds: float = 10.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_base_url=os.getenv("LESSONBOOK_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            search_debounce_seconds=float(os.getenv("LESSONBOOK_SEARCH_DEBOUNCE_MS", "250")) / 1000,
            request_timeout_seconds=float(os.getenv("LESSONBOOK_REQUEST_TIMEOUT", "10.0")),
            log_level=os.getenv("LESSONBOOK_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

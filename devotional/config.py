"""Configuration management for the WCF devotional plan."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_EXPECTED_ITEMS = 175


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


def get_data_dir() -> Path:
    """Get the data directory."""
    return get_project_root() / "data"


def get_state_dir() -> Path:
    """Get the directory holding persisted plan ranges."""
    return get_project_root() / ".state"


@dataclass(frozen=True)
class Config:
    """Immutable application configuration."""

    telegram_bot_token: str | None = None
    telegram_chat_id: str | None = None
    log_level: str = "INFO"
    data_source: str = str(get_data_dir() / "dados.json")
    expected_items: int = DEFAULT_EXPECTED_ITEMS
    request_timeout: int = 10
    broadcast_timezone: str = "America/Sao_Paulo"
    broadcast_hour: int = 6
    # TTS config (optional, narration is a graceful enhancement)
    google_tts_enabled: bool = False
    google_tts_credentials_json: str | None = None

    @classmethod
    def from_env(cls, require_telegram: bool = False) -> "Config":
        """Load configuration from environment variables."""
        token = os.getenv("TELEGRAM_BOT_TOKEN")
        chat_id = os.getenv("TELEGRAM_CHAT_ID")

        if require_telegram:
            if not token:
                raise ValueError("TELEGRAM_BOT_TOKEN environment variable is required")
            if not chat_id:
                raise ValueError("TELEGRAM_CHAT_ID environment variable is required")

        try:
            expected_items = int(
                os.getenv("DEVOTIONAL_EXPECTED_ITEMS", str(DEFAULT_EXPECTED_ITEMS))
            )
            request_timeout = int(os.getenv("REQUEST_TIMEOUT", "10"))
            broadcast_hour = int(os.getenv("BROADCAST_HOUR", "6"))
        except ValueError as e:
            raise ValueError(f"Invalid numeric setting: {e}") from e

        if not 0 <= broadcast_hour <= 23:
            raise ValueError(f"BROADCAST_HOUR must be 0-23, got {broadcast_hour}")

        config = cls(
            telegram_bot_token=token,
            telegram_chat_id=chat_id,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            data_source=os.getenv(
                "DEVOTIONAL_DATA_SOURCE", str(get_data_dir() / "dados.json")
            ),
            expected_items=expected_items,
            request_timeout=request_timeout,
            broadcast_timezone=os.getenv("BROADCAST_TIMEZONE", "America/Sao_Paulo"),
            broadcast_hour=broadcast_hour,
            google_tts_enabled=os.getenv("GOOGLE_TTS_ENABLED", "false").lower()
            == "true",
            google_tts_credentials_json=os.getenv("GOOGLE_TTS_CREDENTIALS_JSON"),
        )

        if config.google_tts_enabled:
            logger.info("TTS narration: ENABLED")
            if not config.google_tts_credentials_json:
                logger.warning(
                    "TTS is enabled but GOOGLE_TTS_CREDENTIALS_JSON is not set "
                    "-- narration will fail"
                )
        else:
            logger.debug("TTS narration: DISABLED (set GOOGLE_TTS_ENABLED=true)")

        return config

    def setup_logging(self) -> None:
        """Configure application logging."""
        logging.basicConfig(
            level=getattr(logging, self.log_level.upper()),
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

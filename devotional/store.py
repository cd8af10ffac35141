"""Persistence of the last chosen plan range."""

import json
import logging
from pathlib import Path

from .config import get_state_dir
from .models import DateRange

logger = logging.getLogger(__name__)

STATE_DIR = get_state_dir()
START_KEY = "start_date"
END_KEY = "end_date"


class ScheduleStore:
    """Keeps a (start, end) pair as ISO strings in a small JSON file."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> DateRange | None:
        """Load the saved range, or None if there is no usable one."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return DateRange.from_iso(data[START_KEY], data[END_KEY])
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring unreadable plan state in {self.path}: {e}")
            return None

    def save(self, plan: DateRange) -> None:
        """Persist the range."""
        start, end = plan.iso()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({START_KEY: start, END_KEY: end}, indent=2), encoding="utf-8"
        )
        logger.info(f"Saved plan range {start} -> {end}")

    def clear(self) -> bool:
        """Forget the saved range. Returns True if one existed."""
        if not self.path.exists():
            return False
        self.path.unlink()
        logger.info(f"Cleared plan state {self.path}")
        return True


def default_store() -> ScheduleStore:
    """Store used by the command line."""
    return ScheduleStore(STATE_DIR / "plan.json")


def store_for_chat(chat_id: int | str) -> ScheduleStore:
    """Store for a single Telegram chat."""
    return ScheduleStore(STATE_DIR / "plans" / f"{chat_id}.json")

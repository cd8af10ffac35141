"""Command logic shared by the CLI and the Telegram bot.

Functions here sit at the error boundary: they validate input, restore and
persist the plan range, and return plain text. Only PresentationBlocked
escapes, from ``write_plan_document``, so callers can report it inline.
"""

from __future__ import annotations

import logging
import webbrowser
from datetime import date
from pathlib import Path

from .dates import parse_day
from .errors import PresentationBlocked, ValidationError
from .formatter import (
    format_daily_messages,
    format_error_message,
    format_info_message,
    format_no_plan_message,
    format_range_saved_message,
    render_plan_document,
)
from .models import DateRange
from .planner import ReadingPlanner
from .store import ScheduleStore

logger = logging.getLogger(__name__)

MISSING_DATES_TEXT = "Por favor, selecione uma Data de Início E uma Data de Fim."


def build_range(start_text: str | None, end_text: str | None) -> DateRange:
    """Validate user input into a DateRange."""
    if not start_text or not start_text.strip() or not end_text or not end_text.strip():
        raise ValidationError(MISSING_DATES_TEXT)
    return DateRange(start=parse_day(start_text), end=parse_day(end_text))


def set_plan(
    planner: ReadingPlanner,
    store: ScheduleStore,
    start_text: str | None,
    end_text: str | None,
) -> tuple[bool, str]:
    """Validate and persist a new range. Returns (saved, status text)."""
    try:
        plan = build_range(start_text, end_text)
    except ValidationError as e:
        logger.info(f"Rejected plan range {start_text!r} -> {end_text!r}: {e}")
        return False, str(e)

    try:
        store.save(plan)
    except OSError as e:
        logger.exception(f"Failed to save plan range to {store.path}: {e}")
        return False, format_error_message()
    return True, format_range_saved_message(plan, planner.pace(plan))


def get_today_messages(
    planner: ReadingPlanner, store: ScheduleStore, for_date: date | None = None
) -> list[str]:
    """Get messages for today's reading of the stored plan."""
    if for_date is None:
        for_date = date.today()

    try:
        plan = store.load()
        if plan is None:
            return [format_no_plan_message()]
        reading = planner.daily_reading(plan, for_date)
        return format_daily_messages(reading)
    except Exception as e:
        logger.exception(f"Error building reading for {for_date}: {e}")
        return [format_error_message()]


def get_plan_document(
    planner: ReadingPlanner, store: ScheduleStore
) -> tuple[DateRange, str] | None:
    """Full printable plan for the stored range, or None without a plan."""
    plan = store.load()
    if plan is None:
        return None
    return plan, render_plan_document(plan, planner.full_plan(plan))


def plan_filename(plan: DateRange) -> str:
    start, end = plan.iso()
    return f"plano-devocional-{start}-a-{end}.html"


def write_plan_document(html: str, path: Path, open_browser: bool = False) -> Path:
    """Write the printable plan and optionally open it in a browser."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
    except OSError as e:
        raise PresentationBlocked(f"Could not write {path}: {e}") from e
    logger.info(f"Wrote plan document to {path}")

    if open_browser:
        try:
            opened = webbrowser.open(path.resolve().as_uri())
        except webbrowser.Error as e:
            raise PresentationBlocked(f"Could not open browser: {e}") from e
        if not opened:
            raise PresentationBlocked("No browser available to display the plan")
    return path


def get_info_message() -> str:
    """Get message for /info command."""
    return format_info_message()


def get_error_message() -> str:
    """Get generic error message."""
    return format_error_message()

#!/usr/bin/env python3
"""
WCF Devotional Plan - the Westminster Confession spread over your dates.

Usage:
    python main.py --start 2025-01-01 --end 2025-12-31   # Choose the plan range
    python main.py --today                               # Show today's reading
    python main.py --print --open                        # Full printable plan
    python main.py --serve                               # Run interactive bot
    python main.py                                       # Daily broadcast (cron/CI)
"""

import argparse
import asyncio
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

from devotional.bot import DevotionalPlanBot
from devotional.commands import (
    get_plan_document,
    get_today_messages,
    plan_filename,
    set_plan,
    write_plan_document,
)
from devotional.config import Config, get_project_root
from devotional.corpus import CorpusClient
from devotional.dates import parse_day, today_in
from devotional.errors import DataUnavailable, PresentationBlocked, ValidationError
from devotional.formatter import (
    format_no_plan_message,
    format_presentation_blocked_message,
    format_unavailable_message,
    to_plain_text,
)
from devotional.planner import ReadingPlanner
from devotional.store import default_store

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="WCF Devotional Plan",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py --start 2025-01-01 --end 2025-06-30   Save a new plan range
    python main.py --today --date 2025-03-10             Preview a given day
    python main.py --print --output plano.html           Write the full plan
    python main.py --serve                               Run the Telegram bot
        """,
    )
    parser.add_argument("--start", type=str, help="Plan start date (YYYY-MM-DD)")
    parser.add_argument("--end", type=str, help="Plan end date (YYYY-MM-DD)")
    parser.add_argument(
        "--today",
        action="store_true",
        help="Show the reading for today (or --date)",
    )
    parser.add_argument(
        "--date",
        type=str,
        help="Override today's date (YYYY-MM-DD format)",
    )
    parser.add_argument(
        "--print",
        dest="print_plan",
        action="store_true",
        help="Write the full plan as a printable HTML document",
    )
    parser.add_argument("--output", type=Path, help="Where to write the document")
    parser.add_argument(
        "--open",
        dest="open_browser",
        action="store_true",
        help="Open the printable plan in a browser",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run bot in interactive polling mode",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Send broadcast regardless of time (for manual triggers)",
    )
    return parser.parse_args()


def load_planner(config: Config) -> ReadingPlanner:
    """Load the corpus once for this session."""
    client = CorpusClient(
        config.data_source,
        expected_count=config.expected_items,
        timeout=config.request_timeout,
    )
    return ReadingPlanner(client.items)


def show_today(
    planner: ReadingPlanner, date_override: str | None, today: date | None = None
) -> int:
    """Print today's reading without sending it."""
    try:
        target_date = parse_day(date_override) if date_override else today
    except ValidationError as e:
        print(f"Invalid --date: {e}", file=sys.stderr)
        return 1

    for msg in get_today_messages(planner, default_store(), target_date):
        print(to_plain_text(msg))
        print()
    return 0


def print_plan(planner: ReadingPlanner, output: Path | None, open_browser: bool) -> int:
    """Write the full plan and report where it went."""
    document = get_plan_document(planner, default_store())
    if document is None:
        print(to_plain_text(format_no_plan_message()))
        return 1

    plan, html = document
    path = output or get_project_root() / plan_filename(plan)
    try:
        write_plan_document(html, path, open_browser=open_browser)
    except PresentationBlocked as e:
        logger.error(f"Presentation failed: {e}")
        print(format_presentation_blocked_message(), file=sys.stderr)
        return 1

    print(f"Plano de {plan.total_days} dias salvo em {path}")
    return 0


def is_broadcast_hour(config: Config) -> bool:
    """Check if it's currently the broadcast hour in the plan's timezone."""
    now = datetime.now(ZoneInfo(config.broadcast_timezone))
    return now.hour == config.broadcast_hour


def main() -> int:
    """Main entry point."""
    load_dotenv()

    args = parse_args()
    local_only = (
        args.today or args.print_plan or args.start is not None or args.end is not None
    )

    try:
        config = Config.from_env(require_telegram=not local_only)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    config.setup_logging()

    try:
        planner = load_planner(config)
    except DataUnavailable as e:
        logger.error(f"Failed to load devotional data: {e}")
        print(format_unavailable_message(), file=sys.stderr)
        return 1

    if args.start is not None or args.end is not None:
        saved, text = set_plan(planner, default_store(), args.start, args.end)
        print(text)
        if not saved:
            return 1
        if not (args.today or args.print_plan):
            return 0

    if args.today:
        status = show_today(
            planner, args.date, today_in(config.broadcast_timezone)
        )
        if status or not args.print_plan:
            return status

    if args.print_plan:
        return print_plan(planner, args.output, args.open_browser)

    bot = DevotionalPlanBot(config, planner)
    if args.serve:
        logger.info("WCF Devotional Plan bot starting...")
        bot.run_polling()
        return 0

    if not args.force and not is_broadcast_hour(config):
        logger.info(
            f"Skipping broadcast: not {config.broadcast_hour}:00 in "
            f"{config.broadcast_timezone}"
        )
        return 0

    logger.info("Sending daily broadcast...")
    success = asyncio.run(bot.send_daily_broadcast())
    if success:
        logger.info("Broadcast completed successfully!")
    else:
        logger.error("Broadcast failed!")
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Run the bot locally in interactive polling mode."""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from devotional.bot import DevotionalPlanBot
from devotional.config import Config
from devotional.corpus import CorpusClient
from devotional.errors import DataUnavailable
from devotional.formatter import format_unavailable_message
from devotional.planner import ReadingPlanner

logger = logging.getLogger(__name__)


def main() -> int:
    """Load the corpus and start the bot in polling mode."""
    load_dotenv()
    config = Config.from_env(require_telegram=True)
    config.setup_logging()

    client = CorpusClient(
        config.data_source,
        expected_count=config.expected_items,
        timeout=config.request_timeout,
    )
    try:
        corpus = client.items
    except DataUnavailable as e:
        logger.error(f"Failed to load devotional data: {e}")
        print(format_unavailable_message(), file=sys.stderr)
        return 1

    bot = DevotionalPlanBot(config, ReadingPlanner(corpus))
    bot.run_polling()
    return 0


if __name__ == "__main__":
    sys.exit(main())

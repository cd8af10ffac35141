"""Telegram bot implementation."""

import io
import logging
from datetime import date, time
from zoneinfo import ZoneInfo

from telegram import Bot, BotCommand, Update
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from .commands import (
    get_info_message,
    get_plan_document,
    get_today_messages,
    plan_filename,
    set_plan,
)
from .config import Config
from .dates import today_in
from .formatter import (
    format_no_plan_message,
    format_presentation_blocked_message,
    format_welcome_message,
)
from .planner import ReadingPlanner
from .store import ScheduleStore, store_for_chat
from .tts import is_tts_enabled, send_voice_for_reading

logger = logging.getLogger(__name__)


class DevotionalPlanBot:
    """Telegram bot delivering the devotional plan."""

    def __init__(self, config: Config, planner: ReadingPlanner):
        self.config = config
        self.planner = planner
        self.tz = ZoneInfo(config.broadcast_timezone)

    def today(self) -> date:
        """Today's calendar day in the broadcast timezone."""
        return today_in(self.config.broadcast_timezone)

    async def _post_init(self, app: Application) -> None:
        """Post-initialization: set up commands."""
        commands = [
            BotCommand("hoje", "📖 Leitura de hoje"),
            BotCommand("plano", "📅 Escolher o período do plano"),
            BotCommand("imprimir", "🖨️ Plano completo para impressão"),
            BotCommand("info", "ℹ️ Informação e ajuda"),
        ]
        await app.bot.set_my_commands(commands)
        logger.info("Bot commands configured")

    async def _reply_messages(self, update: Update, messages: list[str]) -> None:
        if not update.message:
            return
        for msg in messages:
            await update.message.reply_text(
                msg, parse_mode=ParseMode.HTML, disable_web_page_preview=True
            )

    async def _send_today(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE, store: ScheduleStore
    ) -> None:
        if not update.message:
            return
        today = self.today()
        await self._reply_messages(
            update, get_today_messages(self.planner, store, today)
        )

        plan = store.load()
        if plan is not None and is_tts_enabled(self.config):
            reading = self.planner.daily_reading(plan, today)
            await send_voice_for_reading(
                context.bot,
                reading,
                update.message.chat_id,
                credentials_json=self.config.google_tts_credentials_json,
            )

    async def start_command(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /start command."""
        if not update.message:
            return
        chat_id = update.message.chat_id
        logger.info(f"/start from chat {chat_id}")

        await self._reply_messages(update, [format_welcome_message()])
        store = store_for_chat(chat_id)
        if store.load() is not None:
            await self._send_today(update, context, store)

    async def today_command(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /hoje and /today commands."""
        if not update.message:
            return
        chat_id = update.message.chat_id
        logger.info(f"/hoje from chat {chat_id}")
        await self._send_today(update, context, store_for_chat(chat_id))

    async def plan_command(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /plano <start> <end>."""
        if not update.message:
            return
        chat_id = update.message.chat_id
        args = context.args or []
        start_text = args[0] if len(args) > 0 else None
        end_text = args[1] if len(args) > 1 else None
        logger.info(f"/plano {args} from chat {chat_id}")

        store = store_for_chat(chat_id)
        saved, text = set_plan(self.planner, store, start_text, end_text)
        await self._reply_messages(update, [text])
        if saved:
            await self._send_today(update, context, store)

    async def print_command(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /imprimir: send the full plan as an HTML file."""
        if not update.message:
            return
        chat_id = update.message.chat_id
        logger.info(f"/imprimir from chat {chat_id}")

        document = get_plan_document(self.planner, store_for_chat(chat_id))
        if document is None:
            await self._reply_messages(update, [format_no_plan_message()])
            return

        plan, html = document
        try:
            await update.message.reply_document(
                document=io.BytesIO(html.encode("utf-8")),
                filename=plan_filename(plan),
                caption=f"Plano de {plan.total_days} dias",
            )
            logger.info(f"Plan document sent to {chat_id}")
        except TelegramError as e:
            logger.error(f"Failed to send plan document to {chat_id}: {e}")
            await self._reply_messages(update, [format_presentation_blocked_message()])

    async def info_command(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /info command."""
        if not update.message:
            return
        logger.info(f"/info from chat {update.message.chat_id}")
        await self._reply_messages(update, [get_info_message()])

    async def unknown_command(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle unknown commands - silently ignore."""
        if not update.message:
            return
        command = update.message.text.split()[0] if update.message.text else "unknown"
        logger.info(f"Unknown command {command} from chat {update.message.chat_id}")

    async def _error_handler(
        self, update: object, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Log errors caused by updates."""
        logger.exception(f"Exception while handling an update: {context.error}")

    async def _scheduled_broadcast(self, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Send daily broadcast via scheduled job."""
        logger.info("Running scheduled daily broadcast...")
        await self._broadcast(context.bot)

    async def _broadcast(self, bot: Bot) -> bool:
        channel_id = self.config.telegram_chat_id
        if not channel_id:
            logger.error("No TELEGRAM_CHAT_ID configured for broadcast")
            return False

        store = store_for_chat(channel_id)
        plan = store.load()
        if plan is None:
            logger.warning(f"No plan range stored for channel {channel_id}")
            return False

        today = self.today()
        messages = get_today_messages(self.planner, store, today)
        try:
            for i, msg in enumerate(messages, 1):
                await bot.send_message(
                    chat_id=channel_id,
                    text=msg,
                    parse_mode=ParseMode.HTML,
                    disable_web_page_preview=True,
                )
                logger.info(f"Channel message {i}/{len(messages)} sent")
        except TelegramError as e:
            logger.error(f"Broadcast failed: {e}")
            return False

        if is_tts_enabled(self.config):
            await send_voice_for_reading(
                bot,
                self.planner.daily_reading(plan, today),
                channel_id,
                credentials_json=self.config.google_tts_credentials_json,
            )
        return True

    async def send_daily_broadcast(self) -> bool:
        """Send today's reading to the configured channel."""
        if not self.config.telegram_bot_token:
            logger.error("No TELEGRAM_BOT_TOKEN configured for broadcast")
            return False
        bot = Bot(token=self.config.telegram_bot_token)
        async with bot:
            return await self._broadcast(bot)

    def build_app(self) -> Application:
        """Build the Telegram application."""
        app = (
            Application.builder()
            .token(self.config.telegram_bot_token)
            .post_init(self._post_init)
            .build()
        )

        app.add_handler(CommandHandler("start", self.start_command))
        app.add_handler(CommandHandler(["hoje", "today"], self.today_command))
        app.add_handler(CommandHandler("plano", self.plan_command))
        app.add_handler(CommandHandler("imprimir", self.print_command))
        app.add_handler(CommandHandler(["info", "help"], self.info_command))
        app.add_handler(MessageHandler(filters.COMMAND, self.unknown_command))

        app.add_error_handler(self._error_handler)

        return app

    def run_polling(self) -> None:
        """Run bot in polling mode with daily scheduling."""
        logger.info("Building application...")
        app = self.build_app()

        if self.config.telegram_chat_id and app.job_queue:
            broadcast_time = time(hour=self.config.broadcast_hour, tzinfo=self.tz)
            app.job_queue.run_daily(
                self._scheduled_broadcast,
                time=broadcast_time,
                name="daily_broadcast",
            )
            logger.info(
                f"Daily broadcast scheduled for {broadcast_time} "
                f"{self.config.broadcast_timezone}"
            )

        logger.info("Starting polling...")
        app.run_polling(allowed_updates=Update.ALL_TYPES)

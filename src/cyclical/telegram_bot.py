"""Cyclical Telegram Bot."""

import logging

from telegram import Update
from telegram.ext import (
    Application,
    ApplicationHandlerStop,
    CommandHandler,
    CallbackQueryHandler,
    ConversationHandler,
    MessageHandler,
    filters,
)
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .config import Config, load_config
from .core.errors import CyclicalError
from .telegram_handlers import (
    start_handler,
    help_handler,
    calendar_start_handler,
    calendar_browse_handler,
    calendar_confirm_handler,
    calendar_cancel_handler,
    build_month_keyboard,
    get_marker_store,
)
from .telegram_states import CalendarStates
from .workflows import new_session

logger = logging.getLogger(__name__)


class AuthFilter(filters.BaseFilter):
    """Filter to only allow authorized users."""

    def __init__(self, allowed_users: list[int]):
        super().__init__()
        self.allowed_users = allowed_users

    def check_update(self, update: Update) -> bool:
        if not self.allowed_users:
            return True  # No restriction if no users configured
        user = update.effective_user
        if user is None:
            return False
        return user.id in self.allowed_users


def create_application(config: Config | None = None) -> Application:
    """Create and configure the Telegram bot application."""
    if config is None:
        config = load_config()

    if not config.telegram_bot_token:
        raise ValueError(
            "TELEGRAM_BOT_TOKEN not configured. "
            "Get a token from @BotFather on Telegram and add it to cyclical.conf"
        )

    app = Application.builder().token(config.telegram_bot_token).build()

    # One marker store for the whole process, shared by all users
    app.bot_data["config"] = config
    get_marker_store(app.bot_data, config)

    auth_filter = AuthFilter(config.telegram_allowed_users)

    app.add_handler(CommandHandler("start", start_handler, filters=auth_filter))
    app.add_handler(CommandHandler("help", help_handler, filters=auth_filter))

    # Calendar conversation: browse -> confirm -> browse
    calendar_conv = ConversationHandler(
        entry_points=[
            CommandHandler("calendar", calendar_start_handler, filters=auth_filter),
            # Taps on a scheduled calendar message start the conversation too
            CallbackQueryHandler(calendar_browse_handler, pattern=r"^cal:"),
        ],
        states={
            CalendarStates.BROWSING: [
                CallbackQueryHandler(calendar_browse_handler, pattern=r"^cal:"),
            ],
            CalendarStates.CONFIRM: [
                CallbackQueryHandler(calendar_confirm_handler, pattern=r"^cal:(yes|no)$"),
            ],
        },
        fallbacks=[
            CommandHandler("cancel", calendar_cancel_handler),
            CommandHandler("calendar", calendar_start_handler, filters=auth_filter),
        ],
        per_user=True,
    )
    app.add_handler(calendar_conv)

    # Handle unauthorized access attempts
    async def unauthorized_handler(update: Update, context):
        user = update.effective_user
        logger.warning(f"Unauthorized access attempt from user {user.id} ({user.username})")
        if update.callback_query:
            await update.callback_query.answer("Unauthorized.")
            return
        await update.message.reply_text(
            "Unauthorized. This bot is private.\n"
            "If you're the owner, add your Telegram user ID to TELEGRAM_ALLOWED_USERS in cyclical.conf"
        )

    # Callback queries bypass command filters, so gate them before the conversation
    async def callback_gate(update: Update, context):
        if not auth_filter.check_update(update):
            await unauthorized_handler(update, context)
            raise ApplicationHandlerStop

    if config.telegram_allowed_users:
        app.add_handler(CallbackQueryHandler(callback_gate), group=-1)
        app.add_handler(
            MessageHandler(~auth_filter & filters.ALL, unauthorized_handler)
        )

    return app


def setup_scheduler(app: Application, config: Config | None = None) -> AsyncIOScheduler:
    """Set up the daily calendar push."""
    if config is None:
        config = load_config()

    scheduler = AsyncIOScheduler(timezone=config.timezone or None)

    if config.telegram_calendar_time and config.telegram_allowed_users:
        try:
            hour, minute = map(int, config.telegram_calendar_time.split(":"))
            scheduler.add_job(
                send_scheduled_calendar,
                CronTrigger(hour=hour, minute=minute),
                args=[app, config.telegram_allowed_users, config],
                id="daily_calendar",
            )
            logger.info(f"Scheduled daily calendar at {hour:02d}:{minute:02d}")
        except ValueError:
            logger.warning(f"Invalid calendar time format: {config.telegram_calendar_time}")

    return scheduler


async def send_scheduled_calendar(app: Application, user_ids: list[int], config: Config):
    """Send the current month to all authorized users."""
    logger.info("Sending scheduled calendar")

    session = new_session(config, get_marker_store(app.bot_data, config))
    try:
        markup = build_month_keyboard(session)
    except CyclicalError as e:
        logger.error(f"Failed to build scheduled calendar: {e}")
        return

    for user_id in user_ids:
        try:
            await app.bot.send_message(
                chat_id=user_id,
                text=f"Good morning! Tap a day to mark it and the next {session.day_count} day(s).",
                reply_markup=markup,
            )
        except Exception as e:
            logger.error(f"Failed to send calendar to user {user_id}: {e}")


def run_bot():
    """Run the Telegram bot."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    config = load_config()
    app = create_application(config)
    scheduler = setup_scheduler(app, config)

    async def post_init(application: Application) -> None:
        """Start scheduler after event loop is running."""
        scheduler.start()
        logger.info("Scheduler started")

    app.post_init = post_init

    if config.telegram_allowed_users:
        logger.info(f"Bot authorized for users: {config.telegram_allowed_users}")
    else:
        logger.warning("No TELEGRAM_ALLOWED_USERS configured - bot is open to anyone!")

    logger.info("Starting Cyclical Telegram bot...")

    app.run_polling(allowed_updates=Update.ALL_TYPES)

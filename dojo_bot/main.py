# main.py
# Entry point for the dojo bot - registers all handlers and starts polling

import logging

from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    CallbackQueryHandler,
)

from dojo_bot.config import BOT_TOKEN
import dojo_bot.database as db

from dojo_bot.handlers import (
    # Basic commands
    start,
    help_command,
    assets_command,
    cooldowns_command,
    karma_command,
    addasset_command,
    # Dojo commands
    dojo_command,
    join_command,
    withdraw_command,
    # Admin commands
    setchannel_command,
    maintenance_command,
    boost_command,
    # Callbacks
    button_callback,
)

logger = logging.getLogger(__name__)


async def error_handler(update: object, context):
    """Handle unhandled exceptions."""
    logger.error(f"Unhandled exception: {context.error}", exc_info=context.error)

    if isinstance(update, Update) and update.effective_message:
        try:
            await update.effective_message.reply_html(
                "❌ <b>An unexpected error occurred</b>\n\n"
                "Please try again later."
            )
        except Exception as e:
            logger.error(f"Error in error handler: {e}")


def build_application(token: str) -> Application:
    """Build the application with every handler registered."""
    application = Application.builder().token(token).build()

    application.add_error_handler(error_handler)

    # ==================== COMMAND HANDLERS ====================

    # Basic commands
    application.add_handler(CommandHandler("start", start))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(CommandHandler("assets", assets_command))
    application.add_handler(CommandHandler("cooldowns", cooldowns_command))
    application.add_handler(CommandHandler("karma", karma_command))
    application.add_handler(CommandHandler("addasset", addasset_command))

    # Training channel
    application.add_handler(CommandHandler("dojo", dojo_command))
    application.add_handler(CommandHandler("join", join_command))
    application.add_handler(CommandHandler("withdraw", withdraw_command))

    # Admin commands
    application.add_handler(CommandHandler("setchannel", setchannel_command))
    application.add_handler(CommandHandler("maintenance", maintenance_command))
    application.add_handler(CommandHandler("boost", boost_command))

    # ==================== OTHER HANDLERS ====================

    # Callback query handler (inline buttons)
    application.add_handler(CallbackQueryHandler(button_callback, pattern=r"^dojo_"))

    return application


def main():
    """Main function to start the bot."""
    if not BOT_TOKEN:
        raise SystemExit("DOJO_BOT_TOKEN is not set")

    # Load saved data on startup
    db.load_data()

    # Initialize game locks
    db.init_game_locks()

    application = build_application(BOT_TOKEN)

    logger.info("Bot starting...")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()

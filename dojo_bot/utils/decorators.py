# utils/decorators.py
# Error handling decorator for bot handlers

import logging
from functools import wraps
from telegram import Update
from telegram.ext import ContextTypes
from telegram.error import TelegramError, BadRequest, Forbidden, NetworkError

logger = logging.getLogger(__name__)


async def _reply_error(update: Update, text: str):
    """Best effort error notice to the chat the update came from."""
    try:
        if update.callback_query:
            await update.callback_query.answer(
                text.replace('<b>', '').replace('</b>', '').split('\n')[0],
                show_alert=True,
            )
        elif update.effective_message:
            await update.effective_message.reply_html(text)
    except TelegramError as e:
        logger.error(f"Could not send error notice: {e}")


def handle_errors(func):
    """
    Decorator that wraps handler functions with error handling.
    Catches and logs Telegram API errors and unexpected exceptions.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        try:
            return await func(update, context, *args, **kwargs)
        except BadRequest as e:
            logger.error(f"BadRequest in {func.__name__}: {e}")
            await _reply_error(update, "❌ <b>Request Error</b>\n\n"
                                       "Something went wrong with your request. Please try again.")
        except Forbidden as e:
            logger.error(f"Forbidden in {func.__name__}: {e}")
        except NetworkError as e:
            logger.error(f"NetworkError in {func.__name__}: {e}")
            await _reply_error(update, "❌ <b>Network Error</b>\n\n"
                                       "Connection issue. Please try again later.")
        except TelegramError as e:
            logger.error(f"TelegramError in {func.__name__}: {e}")
            await _reply_error(update, "❌ <b>Error</b>\n\nAn error occurred. Please try again.")
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            await _reply_error(update, "❌ <b>Unexpected Error</b>\n\n"
                                       "Something went wrong. Please try again later.")
    return wrapper

# handlers/callbacks.py
# Callback query handlers for the waiting room buttons

import logging

from telegram import Update
from telegram.ext import ContextTypes
from telegram.constants import ParseMode
from telegram.error import BadRequest

from dojo_bot.utils.decorators import handle_errors
from dojo_bot.utils.helpers import filter_available_assets
from dojo_bot.handlers.dojo import (
    get_channel_game,
    waiting_room_text,
    waiting_room_keyboard,
    asset_choice_keyboard,
    register_player,
    withdraw_player,
)
import dojo_bot.database as db

logger = logging.getLogger(__name__)


async def refresh_waiting_room(query, chat_id: int):
    """Redraw the waiting room message the button belongs to."""
    try:
        await query.edit_message_text(
            waiting_room_text(chat_id),
            reply_markup=waiting_room_keyboard(),
            parse_mode=ParseMode.HTML,
        )
    except BadRequest as e:
        # Telegram rejects edits that leave the message unchanged
        logger.info(f"Waiting room not redrawn: {e}")


@handle_errors
async def button_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle all inline button callbacks."""
    query = update.callback_query
    user_id = query.from_user.id
    chat_id = query.message.chat_id
    data = query.data

    if get_channel_game(chat_id) is None:
        await query.answer("This chat is not a training channel.", show_alert=True)
        return

    if data == "dojo_room":
        await query.answer()
        await refresh_waiting_room(query, chat_id)
        return

    if data == "dojo_join":
        available = filter_available_assets(db.get_user_assets(user_id), user_id)
        if not available:
            await query.answer("No asset available to train. Check /assets and /cooldowns.",
                               show_alert=True)
            return
        await query.answer()
        await context.bot.send_message(
            chat_id,
            f"🥋 <b>{query.from_user.first_name}</b>, choose an asset to train:",
            reply_markup=asset_choice_keyboard(available),
            parse_mode=ParseMode.HTML,
        )
        return

    if data.startswith("dojo_reg_"):
        try:
            asset_id = int(data[len("dojo_reg_"):])
        except ValueError:
            await query.answer("Invalid asset.", show_alert=True)
            return
        asset = db.get_asset(asset_id)
        if asset is None or asset.owner_id != user_id:
            await query.answer("This is not your asset.", show_alert=True)
            return
        result = await register_player(context, chat_id, user_id, asset)
        await query.answer()
        await query.edit_message_text(result, parse_mode=ParseMode.HTML)
        return

    if data == "dojo_withdraw":
        result = await withdraw_player(chat_id, user_id)
        await query.answer()
        await context.bot.send_message(chat_id, result, parse_mode=ParseMode.HTML)
        await refresh_waiting_room(query, chat_id)
        return

    await query.answer()
    logger.info(f"Unknown callback data from {user_id}: {data}")

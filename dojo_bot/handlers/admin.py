# handlers/admin.py
# Admin commands: setchannel, maintenance, boost

import logging
from datetime import datetime, timedelta

from telegram import Update
from telegram.ext import ContextTypes

from dojo_bot.config import GAME_TYPES, KARMA_EMOJI
from dojo_bot.engine import GameState, GameStatus
from dojo_bot.utils.decorators import handle_errors
from dojo_bot.utils.helpers import is_admin, build_game_type, format_duration
import dojo_bot.database as db

logger = logging.getLogger(__name__)


@handle_errors
async def setchannel_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle the /setchannel <game_type> command."""
    user_id = update.effective_user.id
    chat_id = update.effective_chat.id

    if not is_admin(user_id):
        await update.message.reply_html("❌ <b>You don't have permission to use this command.</b>")
        return

    if not context.args or context.args[0] not in GAME_TYPES:
        types = '\n'.join(f"• <code>{key}</code> - {info['name']}" for key, info in GAME_TYPES.items())
        await update.message.reply_html(
            "🥋 <b>Set Training Channel</b>\n\n"
            "Usage: /setchannel &lt;game_type&gt;\n\n"
            f"{types}"
        )
        return

    game = db.channel_games.get(chat_id)
    if game is not None and game.status not in (GameStatus.WAITING_ROOM, GameStatus.MAINTENANCE):
        await update.message.reply_html("⏳ Wait for the current match to finish.")
        return

    game_type = context.args[0]
    db.training_channels[chat_id] = game_type
    settings = build_game_type(game_type, chat_id)
    db.channel_games[chat_id] = GameState(settings.token, settings.npc)
    db.save_data()

    info = GAME_TYPES[game_type]
    await update.message.reply_html(
        f"✅ <b>Training channel set!</b>\n\n"
        f"{info['emoji']} Game: <b>{info['name']}</b>\n"
        f"👥 Capacity: <b>{settings.max_capacity}</b>\n"
        f"⏱ Cooldown: <b>{format_duration(settings.cool_down)}</b>\n"
        f"{KARMA_EMOJI} Base payout: <b>{settings.token.base_amount}</b>"
    )
    logger.info(f"Admin {user_id} set chat {chat_id} to {game_type}")


@handle_errors
async def maintenance_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle the /maintenance command - toggle maintenance mode."""
    user_id = update.effective_user.id

    if not is_admin(user_id):
        await update.message.reply_html("❌ <b>You don't have permission to use this command.</b>")
        return

    enabled = not db.is_in_maintenance()
    db.set_maintenance(enabled)

    # Idle rooms switch right away, running matches switch when they finish
    for chat_id, game in list(db.channel_games.items()):
        if enabled and game.status in (GameStatus.WAITING_ROOM, GameStatus.FINISHED):
            db.channel_games[chat_id] = game.maintenance()
        elif not enabled and game.status == GameStatus.MAINTENANCE:
            db.channel_games[chat_id] = game.reset()

    state = "ON 🛠" if enabled else "OFF ✅"
    await update.message.reply_html(f"Maintenance mode: <b>{state}</b>")
    logger.info(f"Admin {user_id} turned maintenance {'on' if enabled else 'off'}")


@handle_errors
async def boost_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle the /boost <modifier> <hours> command."""
    user_id = update.effective_user.id

    if not is_admin(user_id):
        await update.message.reply_html("❌ <b>You don't have permission to use this command.</b>")
        return

    if not context.args or len(context.args) < 2:
        current = db.get_temporary_payout_modifier()
        status = f"x{current} active" if current else "none active"
        await update.message.reply_html(
            f"{KARMA_EMOJI} <b>Karma Boost</b>\n\n"
            "Usage: /boost &lt;modifier&gt; &lt;hours&gt;\n"
            "Example: /boost 2 24\n\n"
            f"Current boost: {status}"
        )
        return

    try:
        modifier = float(context.args[0])
        hours = float(context.args[1])
    except ValueError:
        await update.message.reply_html("❌ Modifier and hours must be numbers.")
        return

    if modifier <= 0 or hours <= 0:
        await update.message.reply_html("❌ Modifier and hours must be positive.")
        return

    start = datetime.now()
    expiry = start + timedelta(hours=hours)
    db.set_temporary_payout_modifier(modifier, start, expiry)

    await update.message.reply_html(
        f"✅ <b>Karma boost x{modifier}</b> active for {format_duration(hours * 3600)}"
    )
    logger.info(f"Admin {user_id} set karma boost x{modifier} for {hours}h")

# handlers/dojo.py
# Training channel: waiting room, registration, withdrawal and the match loop

import asyncio
import logging
import random
from typing import Optional

from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import ContextTypes
from telegram.constants import ParseMode
from telegram.error import TelegramError

from dojo_bot.config import GAME_TYPES, RENDER_CONFIG, FOUR_VS_NPC_GIF_DELAY, KARMA_EMOJI
from dojo_bot.engine import GameState, GameStatus, RenderPhase, RENDER_PHASES
from dojo_bot.models import Asset, ChannelSettings, Player
from dojo_bot.utils.decorators import handle_errors
from dojo_bot.utils.helpers import (
    build_game_type,
    get_user_link,
    is_asset_registered,
    filter_available_assets,
    end_game_update,
    format_duration,
    format_karma,
)
import dojo_bot.database as db

logger = logging.getLogger(__name__)


# ==================== CHANNEL STATE ====================

def get_channel_game(chat_id: int) -> Optional[GameState]:
    """Return the chat's game, creating a waiting room for new training channels."""
    game_type = db.training_channels.get(chat_id)
    if game_type is None:
        return None
    if chat_id not in db.channel_games:
        settings = build_game_type(game_type, chat_id)
        db.channel_games[chat_id] = GameState(settings.token, settings.npc)
    return db.channel_games[chat_id]


def waiting_room_text(chat_id: int) -> str:
    game = get_channel_game(chat_id)
    settings = build_game_type(db.training_channels[chat_id], chat_id)
    info = GAME_TYPES[settings.game_type]

    lines = [f"{info['emoji']} <b>{info['name']}</b>", ""]
    if db.is_in_maintenance():
        lines.append("🛠 <b>The dojo is under maintenance.</b> Please come back later.")
        return '\n'.join(lines)
    if game.status != GameStatus.WAITING_ROOM:
        lines.append("⚔️ A match is in progress.")
        return '\n'.join(lines)

    players = game.player_manager.get_all_players()
    lines.append(f"👥 Players: <b>{len(players)}/{settings.max_capacity}</b>")
    for player in players:
        if player.is_npc:
            lines.append(f"  • 🤖 {player.asset.name}")
        else:
            lines.append(f"  • {get_user_link(player.user_id, player.asset.name)}")
    lines.append("")
    lines.append(f"⏱ Cooldown after a match: <b>{format_duration(settings.cool_down)}</b>")
    return '\n'.join(lines)


def waiting_room_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([
        [
            InlineKeyboardButton("🥋 Register", callback_data="dojo_join"),
            InlineKeyboardButton("🚪 Withdraw", callback_data="dojo_withdraw"),
        ]
    ])


def asset_choice_keyboard(assets) -> InlineKeyboardMarkup:
    keyboard = [[InlineKeyboardButton(f"🎴 {asset.name}", callback_data=f"dojo_reg_{asset.asset_id}")]
                for asset in assets[:10]]
    keyboard.append([InlineKeyboardButton("◀️ Back", callback_data="dojo_room")])
    return InlineKeyboardMarkup(keyboard)


# ==================== REGISTRATION ====================

async def register_player(context: ContextTypes.DEFAULT_TYPE, chat_id: int,
                          user_id: int, asset: Asset) -> str:
    """
    Enter an asset into the chat's waiting room.

    Starts the match once the room is full.

    Returns:
        Message describing the outcome (HTML)
    """
    async with db.game_locks[chat_id]:
        game = get_channel_game(chat_id)
        if game is None:
            return "❌ This chat is not a training channel."
        if db.is_in_maintenance():
            return "🛠 The dojo is under maintenance."
        if game.status != GameStatus.WAITING_ROOM:
            return "⏳ A match is in progress, wait for the next one."
        if asset.owner_id != user_id:
            return "❌ You don't own this asset."

        settings = build_game_type(db.training_channels[chat_id], chat_id)
        existing = game.player_manager.get_player(user_id)
        if existing and existing.asset.asset_id == asset.asset_id:
            return f"⚠️ <b>{asset.name}</b> is already registered."
        if existing is None and game.player_manager.count() >= settings.max_capacity:
            return "❌ The waiting room is full."
        if not asset.is_cooled_down():
            return f"😴 <b>{asset.name}</b> is still resting."
        if is_asset_registered(asset.asset_id, user_id):
            return f"⚠️ <b>{asset.name}</b> is already training in another channel."

        game = game.add_player(Player.register(user_id, asset))
        db.channel_games[chat_id] = game
        logger.info(f"User {user_id} registered asset {asset.asset_id} in chat {chat_id}")

        if game.player_manager.count() >= settings.max_capacity:
            context.application.create_task(play_match(context.bot, chat_id))
            return f"✅ <b>{asset.name}</b> registered. The match begins!"
        return f"✅ <b>{asset.name}</b> registered."


async def withdraw_player(chat_id: int, user_id: int) -> str:
    async with db.game_locks[chat_id]:
        game = get_channel_game(chat_id)
        if game is None:
            return "❌ This chat is not a training channel."
        if game.status != GameStatus.WAITING_ROOM:
            return "⏳ You can't withdraw during a match."
        player = game.player_manager.get_player(user_id)
        if player is None or player.is_npc:
            return "⚠️ You are not registered."
        db.channel_games[chat_id] = game.remove_player(user_id)
        logger.info(f"User {user_id} withdrew asset {player.asset.asset_id} from chat {chat_id}")
        return f"🚪 <b>{player.asset.name}</b> withdrew from the waiting room."


# ==================== MATCH LOOP ====================

def phase_delay(render_phase: RenderPhase, game_type: str, delays: Optional[dict] = None) -> float:
    """Seconds to keep a render phase on screen."""
    delays = delays or RENDER_CONFIG
    config = delays[render_phase.value]
    if render_phase == RenderPhase.GIF and game_type == 'FourVsNpc' and delays is RENDER_CONFIG:
        config = FOUR_VS_NPC_GIF_DELAY
    return random.uniform(config['dur_min'], config['dur_max'])


def match_legend(game: GameState) -> str:
    lines = []
    for index, player in enumerate(game.player_manager.get_all_players()):
        name = f"🤖 {player.asset.name}" if player.is_npc else get_user_link(player.user_id, player.asset.name)
        lines.append(f"{index + 1}. {name}")
    return '\n'.join(lines)


def match_results_text(game: GameState, players) -> str:
    win_info = game.game_win_info
    winners = [player for player in players if player.is_winner]
    header = "☯️ <b>ZEN!</b>" if win_info.zen else "🏆 <b>Winner!</b>"
    lines = [
        header,
        f"Won in round <b>{win_info.game_win_round_index + 1}</b>, "
        f"roll <b>{win_info.game_win_roll_index + 1}</b>",
        "",
    ]
    for player in winners:
        if player.is_npc:
            lines.append(f"🤖 {player.asset.name}")
        else:
            lines.append(f"{get_user_link(player.user_id, player.asset.name)} "
                         f"+{format_karma(win_info.payout)} {KARMA_EMOJI}")
    rested = [player for player in players if not player.is_npc]
    if rested:
        lines.append("")
        lines.append("⏱ <b>Cooldowns</b>")
        for player in rested:
            marker = " 🎲" if player.cool_down_modified else ""
            lines.append(f"  • {player.asset.name}: {format_duration(player.random_cool_down)}{marker}")
    return '\n'.join(lines)


async def _edit_board(message, text: str):
    try:
        await message.edit_text(text, parse_mode=ParseMode.HTML)
    except TelegramError as e:
        logger.error(f"Could not update board: {e}")


async def play_match(bot, chat_id: int, delays: Optional[dict] = None) -> GameState:
    """
    Play out a full match in the chat.

    Resolves winners up front, then reveals the board roll by roll, one
    player at a time, by editing a single message. Afterwards updates the
    assets and owners, posts the results and reopens the waiting room.

    The chat lock is only held while the match is set up. During the reveal
    the active status keeps registrations and withdrawals out.

    Args:
        bot: Telegram bot used to send and edit messages
        chat_id: Training channel
        delays: Optional override of RENDER_CONFIG

    Returns:
        The finished game state
    """
    try:
        async with db.game_locks[chat_id]:
            game = db.channel_games[chat_id]
            if game.status != GameStatus.WAITING_ROOM:
                logger.warning(f"Match in chat {chat_id} is already running")
                return game
            settings = build_game_type(db.training_channels[chat_id], chat_id)
            game = game.find_zen_and_winners(settings.token, db.get_temporary_payout_modifier())
            game = game.start_game(settings.min_capacity)
            db.channel_games[chat_id] = game
        logger.info(f"Match started in chat {chat_id} with {game.player_manager.count()} players")
        return await _run_match(bot, chat_id, game, settings, delays)
    except Exception:
        logger.error(f"Match in chat {chat_id} failed, reopening the waiting room", exc_info=True)
        db.channel_games[chat_id] = db.channel_games[chat_id].reset()
        raise


async def _run_match(bot, chat_id: int, game: GameState, settings: ChannelSettings,
                     delays: Optional[dict]) -> GameState:
    legend = match_legend(game)
    message = await bot.send_message(
        chat_id, f"{legend}\n\n{game.render_this_board(RenderPhase.EMOJI)}",
        parse_mode=ParseMode.HTML,
    )

    players = game.player_manager.get_all_players()
    while True:
        for player_index, player in enumerate(players):
            game = game.set_current_player(player, player_index)
            for render_phase in RENDER_PHASES:
                await _edit_board(message, f"{legend}\n\n{game.render_this_board(render_phase)}")
                await asyncio.sleep(phase_delay(render_phase, settings.game_type, delays))
        if game.check_for_win():
            break
        game = game.next_roll()
    if game.status != GameStatus.WIN:
        game = game.update_status(GameStatus.WIN)

    game = game.finish_game()
    db.channel_games[chat_id] = game
    updated_players = end_game_update(game, settings)

    await bot.send_message(chat_id, match_results_text(game, updated_players),
                           parse_mode=ParseMode.HTML)
    db.channel_games[chat_id] = game.reset()
    if db.is_in_maintenance():
        db.channel_games[chat_id] = db.channel_games[chat_id].maintenance()
    return game


# ==================== COMMANDS ====================

@handle_errors
async def dojo_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /dojo - show the waiting room of this training channel."""
    chat_id = update.effective_chat.id
    if get_channel_game(chat_id) is None:
        await update.message.reply_html(
            "❌ This chat is not a training channel.\n"
            "An admin can set it up with /setchannel &lt;game_type&gt;"
        )
        return
    await update.message.reply_html(waiting_room_text(chat_id), reply_markup=waiting_room_keyboard())


@handle_errors
async def join_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /join [asset] - register an asset, the first available one by default."""
    user_id = update.effective_user.id
    chat_id = update.effective_chat.id

    available = filter_available_assets(db.get_user_assets(user_id), user_id)
    if context.args:
        wanted = ' '.join(context.args).lower()
        available = [asset for asset in available
                     if asset.name.lower() == wanted or str(asset.asset_id) == wanted]
    if not available:
        await update.message.reply_html(
            "❌ No asset available to train.\n"
            "Check /assets and /cooldowns, or add one with /addasset &lt;name&gt;"
        )
        return

    result = await register_player(context, chat_id, user_id, available[0])
    await update.message.reply_html(result)


@handle_errors
async def withdraw_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /withdraw - leave the waiting room."""
    result = await withdraw_player(update.effective_chat.id, update.effective_user.id)
    await update.message.reply_html(result)

# handlers/basic.py
# Basic command handlers: /start, /help, /assets, /cooldowns, /karma, /addasset

from datetime import datetime
from telegram import Update
from telegram.ext import ContextTypes

from dojo_bot.config import KARMA_NAME, KARMA_EMOJI, logger
from dojo_bot.utils.decorators import handle_errors
from dojo_bot.utils.helpers import (
    is_admin, asset_current_rank, cool_downs_descending, filter_resting_assets,
    format_duration, format_karma
)
import dojo_bot.database as db

MAX_ASSET_NAME_LENGTH = 32


@handle_errors
async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - welcome message."""
    user = update.effective_user
    admin_badge = " 👑" if is_admin(user.id) else ""
    total_assets = db.get_total_assets_by_user(user.id)

    await update.message.reply_html(
        f"🥋 <b>Welcome to the Dojo{admin_badge}</b>\n\n"
        "Train your assets against each other or against the dojo masters.\n"
        f"Every win earns {KARMA_EMOJI} {KARMA_NAME}.\n\n"
        f"🎴 Your assets: <b>{total_assets}</b>\n\n"
        "Use /addasset to add an asset, then /dojo in a training channel to play.\n"
        "Type /help for all commands."
    )


@handle_errors
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show help information."""
    user_id = update.effective_user.id

    help_text = (
        "🎯 <b>How to Train:</b>\n\n"
        "1️⃣ Add an asset with /addasset &lt;name&gt;\n"
        "2️⃣ Open the waiting room of a training channel with /dojo\n"
        "3️⃣ Register with the button or /join [asset]\n"
        "4️⃣ When the room is full the match starts\n"
        "5️⃣ First to reach exactly 21 damage wins!\n\n"
        "☯️ Several winners on the same roll is a <b>zen</b> and pays more.\n"
        "⏱ After a match each asset rests for a while.\n\n"
        "📝 <b>Commands:</b>\n"
        "/dojo - Waiting room\n"
        "/join [asset] - Register an asset\n"
        "/withdraw - Leave the waiting room\n"
        "/assets - Your assets and stats\n"
        "/cooldowns - Assets still resting\n"
        f"/karma - Your unclaimed {KARMA_NAME}\n\n"
    )

    if is_admin(user_id):
        help_text += (
            "👑 <b>Admin Commands:</b>\n"
            "/setchannel &lt;game_type&gt; - Make this chat a training channel\n"
            "/maintenance - Toggle maintenance mode\n"
            "/boost &lt;modifier&gt; &lt;hours&gt; - Temporary karma boost\n"
        )

    await update.message.reply_html(help_text)


@handle_errors
async def assets_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /assets command - list the user's assets with their training record."""
    user_id = update.effective_user.id
    assets = db.get_user_assets(user_id)

    if not assets:
        await update.message.reply_html(
            "🎴 You don't have any assets yet.\nAdd one with /addasset &lt;name&gt;"
        )
        return

    now = datetime.now()
    lines = [f"🎴 <b>Your Assets</b> ({len(assets)})\n"]
    for asset in assets:
        rank, total = asset_current_rank(asset)
        rank_text = f"#{rank}/{total}" if rank else "unranked"
        status = "✅ ready" if asset.is_cooled_down(now) else \
            f"😴 {format_duration((asset.dojo_cool_down - now).total_seconds())}"
        lines.append(
            f"<b>{asset.name}</b> (<code>{asset.asset_id}</code>) {status}\n"
            f"   🏆 {asset.dojo_wins}W / {asset.dojo_losses}L / ☯️ {asset.dojo_zen} | {rank_text}"
        )
    await update.message.reply_html('\n'.join(lines))


@handle_errors
async def cooldowns_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /cooldowns command - assets still resting, longest first."""
    user_id = update.effective_user.id
    now = datetime.now()
    resting = cool_downs_descending(
        filter_resting_assets(db.get_user_assets(user_id), user_id, now=now), now)

    if not resting:
        await update.message.reply_html("✅ All your assets are ready to train!")
        return

    lines = ["⏱ <b>Resting Assets</b>\n"]
    for asset in resting:
        remaining = (asset.dojo_cool_down - now).total_seconds()
        lines.append(f"😴 <b>{asset.name}</b>: {format_duration(remaining)}")
    await update.message.reply_html('\n'.join(lines))


@handle_errors
async def karma_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /karma command - show unclaimed karma and any active boost."""
    user_id = update.effective_user.id
    amount = db.unclaimed_karma.get(user_id, 0)
    boost = db.get_temporary_payout_modifier()
    boost_text = f"\n\n🔥 Karma boost active: <b>x{boost}</b>" if boost else ""

    await update.message.reply_html(
        f"{KARMA_EMOJI} <b>Unclaimed {KARMA_NAME}:</b> {format_karma(amount)}{boost_text}"
    )


@handle_errors
async def addasset_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /addasset <name> command."""
    user_id = update.effective_user.id

    if not context.args:
        await update.message.reply_html(
            "🎴 <b>Add Asset</b>\n\n"
            "Usage: /addasset &lt;name&gt;\n"
            "Example: /addasset Daruma"
        )
        return

    name = ' '.join(context.args).strip()
    if len(name) > MAX_ASSET_NAME_LENGTH or '<' in name or '>' in name:
        await update.message.reply_html(
            f"❌ Asset names must be at most {MAX_ASSET_NAME_LENGTH} characters without &lt; or &gt;."
        )
        return

    asset = db.add_asset(user_id, name)
    await update.message.reply_html(
        f"✅ <b>{asset.name}</b> joined the dojo!\n"
        f"🆔 Asset ID: <code>{asset.asset_id}</code>"
    )
    logger.info(f"User {user_id} added asset {asset.asset_id} ({name})")

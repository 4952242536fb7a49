# tests/test_admin.py
import asyncio
from unittest.mock import AsyncMock, MagicMock

from dojo_bot import config
from dojo_bot.engine import GameStatus
from dojo_bot.handlers import admin

CHAT_ID = -100


def make_update(user_id=config.ADMIN_ID):
    update = MagicMock()
    update.effective_user.id = user_id
    update.effective_chat.id = CHAT_ID
    update.callback_query = None
    update.message.reply_html = AsyncMock()
    return update


def make_context(*args):
    context = MagicMock()
    context.args = list(args)
    return context


def reply_of(update):
    return update.message.reply_html.await_args.args[0]


def test_setchannel(fresh_db):
    update = make_update()
    asyncio.run(admin.setchannel_command(update, make_context('FourVsNpc')))
    assert fresh_db.training_channels[CHAT_ID] == 'FourVsNpc'
    assert fresh_db.channel_games[CHAT_ID].player_manager.get_npc().asset.name == "Taoshin"
    assert "Training channel set" in reply_of(update)


def test_setchannel_shows_usage(fresh_db):
    update = make_update()
    asyncio.run(admin.setchannel_command(update, make_context('Nope')))
    assert CHAT_ID not in fresh_db.training_channels
    assert "OneVsNpc" in reply_of(update)


def test_non_admin_is_refused(fresh_db):
    update = make_update(user_id=12345)
    asyncio.run(admin.setchannel_command(update, make_context('OneVsOne')))
    assert CHAT_ID not in fresh_db.training_channels
    assert "permission" in reply_of(update)


def test_maintenance_toggle(fresh_db):
    asyncio.run(admin.setchannel_command(make_update(), make_context('OneVsOne')))

    asyncio.run(admin.maintenance_command(make_update(), make_context()))
    assert fresh_db.is_in_maintenance()
    assert fresh_db.channel_games[CHAT_ID].status == GameStatus.MAINTENANCE

    asyncio.run(admin.maintenance_command(make_update(), make_context()))
    assert not fresh_db.is_in_maintenance()
    assert fresh_db.channel_games[CHAT_ID].status == GameStatus.WAITING_ROOM


def test_boost(fresh_db):
    update = make_update()
    asyncio.run(admin.boost_command(update, make_context('2', '24')))
    assert fresh_db.get_temporary_payout_modifier() == 2
    assert "x2.0" in reply_of(update)


def test_boost_rejects_bad_input(fresh_db):
    update = make_update()
    asyncio.run(admin.boost_command(update, make_context('two', '24')))
    assert fresh_db.get_temporary_payout_modifier() is None
    assert "numbers" in reply_of(update)

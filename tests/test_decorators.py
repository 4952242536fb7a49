# tests/test_decorators.py
import asyncio
from unittest.mock import AsyncMock, MagicMock

from telegram.error import BadRequest, Forbidden

from dojo_bot.utils.decorators import handle_errors


def make_update(callback=False):
    update = MagicMock()
    update.effective_message.reply_html = AsyncMock()
    if callback:
        update.callback_query.answer = AsyncMock()
    else:
        update.callback_query = None
    return update


def failing(error):
    @handle_errors
    async def handler(update, context):
        raise error
    return handler


def test_returns_handler_result():
    @handle_errors
    async def handler(update, context):
        return "ok"

    assert asyncio.run(handler(make_update(), None)) == "ok"


def test_unexpected_error_replies():
    update = make_update()
    asyncio.run(failing(ValueError("boom"))(update, None))
    reply = update.effective_message.reply_html.await_args.args[0]
    assert "Unexpected Error" in reply


def test_bad_request_replies():
    update = make_update()
    asyncio.run(failing(BadRequest("bad"))(update, None))
    assert "Request Error" in update.effective_message.reply_html.await_args.args[0]


def test_forbidden_is_only_logged():
    update = make_update()
    asyncio.run(failing(Forbidden("blocked"))(update, None))
    update.effective_message.reply_html.assert_not_awaited()


def test_callback_errors_answer_the_query():
    update = make_update(callback=True)
    asyncio.run(failing(ValueError("boom"))(update, None))
    update.callback_query.answer.assert_awaited_once()
    update.effective_message.reply_html.assert_not_awaited()

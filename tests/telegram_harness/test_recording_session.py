import asyncio

from aiogram import Bot
from aiogram.types import BufferedInputFile

from pymaster.keyboards import kb_topics
from tests.telegram_harness.session import RecordingSession
from tests.telegram_harness.updates import UpdateFactory


def test_recording_session_preserves_topic_keyboard() -> None:
    async def _run() -> None:
        session = RecordingSession()
        bot = Bot(token="123456:TEST", session=session)

        message = await bot.send_message(chat_id=42, text="Choose", reply_markup=kb_topics("en"))

        assert message.reply_markup is not None
        data = [row[0].callback_data for row in session.messages_by_chat[42][-1].reply_markup.inline_keyboard]
        assert data == ["topic:sequential", "topic:branching", "topic:loop", "topic:combined"]

    asyncio.run(_run())


def test_recording_session_keeps_documents() -> None:
    async def _run() -> None:
        session = RecordingSession()
        bot = Bot(token="123456:TEST", session=session)
        await bot.send_document(chat_id=42, document=BufferedInputFile(b"a,b", filename="r.csv"), caption="c")
        assert session.documents_by_chat[42] == [{"filename": "r.csv", "data": b"a,b", "caption": "c"}]

    asyncio.run(_run())


def test_update_factory_counts_messages_per_chat() -> None:
    updates = UpdateFactory()
    first = updates.text(user_id=1, chat_id=1, text="a")
    other = updates.text(user_id=2, chat_id=2, text="b")
    second = updates.text(user_id=1, chat_id=1, text="c")
    assert [u["update_id"] for u in (first, other, second)] == [1, 2, 3]
    assert [u["message"]["message_id"] for u in (first, other, second)] == [1, 1, 2]

    click = updates.button(user_id=1, chat_id=1, message=second["message"], data="run")
    assert click["callback_query"]["id"] == "cb4"
    assert click["callback_query"]["from"]["language_code"] == "vi"

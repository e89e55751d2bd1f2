from __future__ import annotations

import datetime as dt
from typing import Any, AsyncGenerator

from aiogram import Bot
from aiogram.client.session.base import BaseSession
from aiogram.methods import AnswerCallbackQuery, SendDocument, SendMessage
from aiogram.types import Chat, InlineKeyboardMarkup, Message, User


class RecordingSession(BaseSession):
    """Fake transport that keeps every outgoing bot call per chat."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[dict[str, Any]] = []
        self.messages_by_chat: dict[int, list[Message]] = {}
        self.documents_by_chat: dict[int, list[dict[str, Any]]] = {}
        self.callback_answers: list[dict[str, Any]] = []
        self._message_id_counter: dict[int, int] = {}

    async def close(self) -> None:
        return None

    async def stream_content(
        self,
        url: str,
        headers: dict[str, Any] | None = None,
        timeout: int = 30,
        chunk_size: int = 65536,
        raise_for_status: bool = True,
    ) -> AsyncGenerator[bytes, None]:
        if False:
            yield b""
        return

    def _bot_user(self) -> User:
        return User.model_validate(
            {"id": 0, "is_bot": True, "first_name": "PyMaster", "username": "pymaster_test_bot"}
        )

    def _next_message_id(self, chat_id: int) -> int:
        current = self._message_id_counter.get(chat_id, 0) + 1
        self._message_id_counter[chat_id] = current
        return current

    def _build_message(self, chat_id: int, text: str | None, reply_markup: Any) -> Message:
        if isinstance(reply_markup, dict):
            reply_markup = InlineKeyboardMarkup.model_validate(reply_markup)
        message = Message.model_validate(
            {
                "message_id": self._next_message_id(chat_id),
                "date": dt.datetime.now(tz=dt.timezone.utc),
                "chat": Chat.model_validate({"id": chat_id, "type": "private"}),
                "from": self._bot_user().model_dump(by_alias=True),
                "text": text,
                "reply_markup": reply_markup,
            }
        )
        self.messages_by_chat.setdefault(chat_id, []).append(message)
        return message

    async def make_request(self, bot: Bot, method: Any, timeout: int | None = None) -> Any:
        method_name = method.__class__.__name__
        chat_id = getattr(method, "chat_id", None)
        self.calls.append({"method": method_name, "chat_id": chat_id})

        if isinstance(method, SendMessage):
            return self._build_message(int(chat_id), method.text, method.reply_markup)

        if isinstance(method, SendDocument):
            document = method.document
            self.documents_by_chat.setdefault(int(chat_id), []).append(
                {
                    "filename": getattr(document, "filename", None),
                    "data": getattr(document, "data", b""),
                    "caption": method.caption,
                }
            )
            return True

        if isinstance(method, AnswerCallbackQuery):
            self.callback_answers.append({"id": method.callback_query_id, "text": method.text})
            return True

        return True

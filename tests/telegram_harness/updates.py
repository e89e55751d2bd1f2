from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass
class UpdateFactory:
    """Builds raw Telegram updates for a learner chatting with the bot.

    Update ids are global; incoming message ids are counted per chat, as
    Telegram does for private chats.
    """

    language_code: str = "vi"
    _update_ids: Iterator[int] = field(default_factory=lambda: itertools.count(1))
    _message_ids: dict[int, Iterator[int]] = field(default_factory=dict)

    def student(self, user_id: int) -> dict[str, Any]:
        return {
            "id": user_id,
            "is_bot": False,
            "first_name": f"Student {user_id}",
            "username": f"student{user_id}",
            "language_code": self.language_code,
        }

    def _next_message_id(self, chat_id: int) -> int:
        counter = self._message_ids.setdefault(chat_id, itertools.count(1))
        return next(counter)

    def text(self, *, user_id: int, chat_id: int, text: str) -> dict[str, Any]:
        return {
            "update_id": next(self._update_ids),
            "message": {
                "message_id": self._next_message_id(chat_id),
                "date": int(time.time()),
                "chat": {"id": chat_id, "type": "private"},
                "from": self.student(user_id),
                "text": text,
            },
        }

    def button(self, *, user_id: int, chat_id: int, message: dict[str, Any], data: str) -> dict[str, Any]:
        update_id = next(self._update_ids)
        return {
            "update_id": update_id,
            "callback_query": {
                "id": f"cb{update_id}",
                "from": self.student(user_id),
                "message": message,
                "chat_instance": str(chat_id),
                "data": data,
            },
        }

from __future__ import annotations

import dataclasses
import random
from typing import Callable

from aiogram import Bot, Dispatcher
from aiogram.types import InlineKeyboardMarkup, Message

from pymaster.config import Settings
from pymaster.handlers import register_handlers
from pymaster.results import ResultsClient
from pymaster.session import SessionStore

from .session import RecordingSession
from .updates import UpdateFactory


class BotHarness:
    def __init__(
        self,
        *,
        bot: Bot,
        dispatcher: Dispatcher,
        store: SessionStore,
        settings: Settings,
    ) -> None:
        self.bot = bot
        self.dispatcher = dispatcher
        self.store = store
        self.settings = settings
        self.updates = UpdateFactory(language_code=settings.ui_default_lang)

    @classmethod
    def create(
        cls,
        *,
        settings_overrides: dict[str, object] | None = None,
        results_client: ResultsClient | None = None,
        seed: int = 0,
    ) -> "BotHarness":
        settings = Settings(
            bot_token="123456:TEST",
            gemini_api_key=None,
            llm_model="gemini-2.5-flash",
            results_webhook_url=None,
            questions_per_session=3,
            ui_default_lang="en",
        )
        if settings_overrides:
            settings = dataclasses.replace(settings, **settings_overrides)
        dispatcher = Dispatcher()
        store = register_handlers(
            dispatcher,
            settings=settings,
            results_client=results_client,
            rng=random.Random(seed),
        )
        bot = Bot(token=settings.bot_token, session=RecordingSession())
        return cls(bot=bot, dispatcher=dispatcher, store=store, settings=settings)

    @property
    def recording(self) -> RecordingSession:
        return self.bot.session

    async def close(self) -> None:
        await self.bot.session.close()

    async def send_text(self, *, user_id: int, chat_id: int | None = None, text: str) -> None:
        chat_id = chat_id or user_id
        update = self.updates.text(user_id=user_id, chat_id=chat_id, text=text)
        await self.dispatcher.feed_raw_update(self.bot, update)

    async def click(self, *, user_id: int, data: str, message: Message | None = None) -> None:
        message = message or self.last_bot_message(user_id)
        update = self.updates.button(
            user_id=user_id,
            chat_id=user_id,
            message=message.model_dump(by_alias=True, exclude_none=True),
            data=data,
        )
        await self.dispatcher.feed_raw_update(self.bot, update)

    def messages(self, chat_id: int) -> list[Message]:
        return self.recording.messages_by_chat.get(chat_id, [])

    def last_bot_message(self, chat_id: int) -> Message | None:
        messages = self.messages(chat_id)
        return messages[-1] if messages else None

    def last_text(self, chat_id: int) -> str:
        message = self.last_bot_message(chat_id)
        return (message.text or "") if message else ""

    def find_callback_data(
        self,
        chat_id: int,
        predicate: Callable[[str], bool] | None = None,
    ) -> list[str]:
        for message in reversed(self.messages(chat_id)):
            if not isinstance(message.reply_markup, InlineKeyboardMarkup):
                continue
            results = [
                button.callback_data
                for row in message.reply_markup.inline_keyboard
                for button in row
                if button.callback_data is not None
                and (predicate is None or predicate(button.callback_data))
            ]
            if results:
                return results
        return []

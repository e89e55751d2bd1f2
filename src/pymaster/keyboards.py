from __future__ import annotations
from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder
from .i18n import t
from .models import Topic

def kb_topics(ui_lang: str) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    for topic in Topic:
        b.button(
            text=f"{t('topic_' + topic.value, ui_lang)} · {t('topic_' + topic.value + '_desc', ui_lang)}",
            callback_data=f"topic:{topic.value}",
        )
    b.adjust(1)
    return b.as_markup()

def kb_editor(suggestions: list[str], ui_lang: str) -> InlineKeyboardMarkup:
    # row 1: suggestions (first one is what Tab accepts), row 2: editing, row 3: navigation
    b = InlineKeyboardBuilder()
    for word in suggestions:
        b.button(text=word, callback_data=f"sg:{word}")
    b.button(text=t("btn_tab", ui_lang), callback_data="ed:tab")
    b.button(text=t("btn_dedent", ui_lang), callback_data="ed:dedent")
    b.button(text=t("btn_clear", ui_lang), callback_data="ed:clear")
    b.button(text=t("btn_run", ui_lang), callback_data="run")
    b.button(text=t("btn_hint", ui_lang), callback_data="hint")
    b.button(text=t("btn_skip", ui_lang), callback_data="skip")
    b.button(text=t("btn_finish", ui_lang), callback_data="finish")
    sizes = [len(suggestions)] if suggestions else []
    b.adjust(*sizes, 3, 4)
    return b.as_markup()

def kb_after_result(correct: bool, ui_lang: str) -> InlineKeyboardMarkup:
    # a wrong answer moves on only through skip
    b = InlineKeyboardBuilder()
    if correct:
        b.button(text=t("btn_next", ui_lang), callback_data="next")
    else:
        b.button(text=t("btn_retry", ui_lang), callback_data="retry")
        b.button(text=t("btn_skip", ui_lang), callback_data="skip")
    b.button(text=t("btn_finish", ui_lang), callback_data="finish")
    b.adjust(3)
    return b.as_markup()

def kb_restart(ui_lang: str) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    b.button(text=t("btn_restart", ui_lang), callback_data="restart")
    b.adjust(1)
    return b.as_markup()

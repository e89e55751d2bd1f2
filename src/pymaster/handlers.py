from __future__ import annotations
import logging
import random

from aiogram import Dispatcher, F
from aiogram.filters import Command, CommandStart
from aiogram.types import BufferedInputFile, CallbackQuery, Message
from aiogram.utils.formatting import Bold, Code, Italic, Pre, Text

from .config import Settings
from .evaluator import Evaluator
from .i18n import t
from .keyboards import kb_after_result, kb_editor, kb_restart, kb_topics
from .llm import LLMClient
from .models import EvaluationResult, Question, Topic
from .question_generator import QuestionGenerator
from .results import ResultPayload, ResultsClient, render_csv
from .session import Phase, PracticeSession, SessionError, SessionStore

logger = logging.getLogger(__name__)

# ---------------- rendering ----------------
def build_question_message(question: Question, session: PracticeSession, ui_lang: str) -> dict[str, object]:
    st = session.state
    parts: list[object] = [
        Bold(t("question_header", ui_lang).format(
            n=st.current_question_index + 1, total=st.total_questions, score=st.score
        )),
        "\n\n",
        question.text,
    ]
    if question.expected_output_description:
        parts.extend(["\n\n", Bold(t("expected_output", ui_lang)), "\n", Code(question.expected_output_description)])
    parts.extend(["\n\n", Italic(t("editor_help", ui_lang))])
    return Text(*parts).as_kwargs()

def build_draft_message(draft: str, ui_lang: str) -> dict[str, object]:
    body = draft if draft.strip() else t("draft_empty", ui_lang)
    return Text(Bold(t("draft_header", ui_lang)), "\n", Pre(body, language="python")).as_kwargs()

def build_result_message(result: EvaluationResult, ui_lang: str) -> dict[str, object]:
    verdict = t("verdict_correct" if result.correct else "verdict_wrong", ui_lang)
    parts: list[object] = [Bold(verdict), "\n", result.message]
    if result.output:
        parts.extend(["\n\n", Bold(t("output", ui_lang)), "\n", Pre(result.output)])
    return Text(*parts).as_kwargs()

def summary_title_key(score: int, total: int) -> str:
    percentage = int(score * 100 / total + 0.5) if total > 0 else 0
    if percentage >= 80:
        return "title_excellent"
    if percentage >= 50:
        return "title_good"
    return "title_done"

def build_summary_message(session: PracticeSession, ui_lang: str) -> dict[str, object]:
    st = session.state
    return Text(
        Bold(t(summary_title_key(st.score, st.total_questions), ui_lang)),
        "\n",
        t("finished", ui_lang).format(code=st.student_code, score=st.score, answered=st.answered)
    ).as_kwargs()

def _build_llm(settings: Settings) -> LLMClient | None:
    if not settings.gemini_api_key:
        return None
    return LLMClient(settings.gemini_api_key, model=settings.llm_model, timeout_sec=settings.llm_timeout_sec)

def register_handlers(
    dp: Dispatcher,
    *,
    settings: Settings,
    store: SessionStore | None = None,
    results_client: ResultsClient | None = None,
    rng: random.Random | None = None,
) -> SessionStore:
    lang = settings.ui_default_lang
    llm = _build_llm(settings)
    generator = QuestionGenerator(llm, ui_lang=lang, rng=rng)
    evaluator = Evaluator(llm, ui_lang=lang)
    store = store or SessionStore(settings.questions_per_session)
    results_client = results_client or ResultsClient(settings.results_webhook_url)

    async def _show_editor(m: Message, session: PracticeSession) -> None:
        await m.answer(**build_draft_message(session.draft, lang), reply_markup=kb_editor(session.suggestions(), lang))

    async def _ask_next_question(m: Message, session: PracticeSession) -> None:
        ticket = session.begin_question()
        await m.answer(t("loading_question", lang))
        question = await generator.generate(session.topic)
        if not session.attach_question(ticket, question):
            return
        logger.info(
            "next_item: chat_id=%s index=%s question_id=%s",
            m.chat.id,
            session.state.current_question_index,
            question.id,
        )
        await m.answer(**build_question_message(question, session, lang), reply_markup=kb_editor([], lang))

    async def _finish(m: Message, session: PracticeSession) -> None:
        await m.answer(**build_summary_message(session, lang))
        payload = ResultPayload.from_state(session.state)
        outcome = await results_client.submit(payload)
        if outcome.ok:
            await m.answer(t("saved", lang), reply_markup=kb_restart(lang))
            return
        await m.answer(t(f"save_failed_{outcome.error}", lang), reply_markup=kb_restart(lang))
        await m.answer_document(
            BufferedInputFile(render_csv(payload), filename=f"ket_qua_{payload.studentCode}.csv"),
            caption=t("csv_caption", lang),
        )

    async def _move_on(m: Message, session: PracticeSession, finished: bool) -> None:
        if finished:
            await _finish(m, session)
        else:
            await _ask_next_question(m, session)

    def _playing(c: CallbackQuery) -> PracticeSession | None:
        session = store.get(c.message.chat.id)
        if session is None or session.phase is not Phase.PLAYING:
            return None
        return session

    @dp.message(CommandStart())
    async def on_start(m: Message):
        store.drop(m.chat.id)
        store.get_or_create(m.chat.id)
        logger.info("session_start: chat_id=%s", m.chat.id)
        await m.answer(t("welcome", lang))

    @dp.message(Command("finish"))
    async def on_finish_command(m: Message):
        session = store.get(m.chat.id)
        if session is None or session.phase is not Phase.PLAYING:
            await m.answer(t("no_session", lang))
            return
        session.finish()
        await _finish(m, session)

    # ---------- text messages: student code or code lines ----------
    @dp.message(F.text)
    async def on_text(m: Message):
        session = store.get(m.chat.id)
        if session is None:
            await m.answer(t("no_session", lang))
            return
        if session.phase is Phase.INTRO:
            try:
                session.start(m.text)
            except SessionError:
                await m.answer(t("code_too_short", lang))
                return
            await m.answer(t("choose_topic", lang), reply_markup=kb_topics(lang))
            return
        if session.phase is Phase.TOPIC_SELECTION:
            await m.answer(t("choose_topic", lang), reply_markup=kb_topics(lang))
            return
        if session.phase is Phase.FINISHED:
            await m.answer(**build_summary_message(session, lang), reply_markup=kb_restart(lang))
            return
        if session.question is None:
            await m.answer(t("loading_question", lang))
            return
        session.append_line(m.text)
        await _show_editor(m, session)

    @dp.callback_query(F.data.startswith("topic:"))
    async def on_topic(c: CallbackQuery):
        session = store.get(c.message.chat.id)
        topic = Topic.parse(c.data.split(":", 1)[1])
        if session is None or topic is None or session.phase is not Phase.TOPIC_SELECTION:
            await c.answer()
            return
        session.choose_topic(topic)
        await c.answer()
        await _ask_next_question(c.message, session)

    @dp.callback_query(F.data.startswith("sg:"))
    async def on_suggestion(c: CallbackQuery):
        session = _playing(c)
        word = c.data.split(":", 1)[1]
        if session is None or session.question is None or word not in session.suggestions():
            await c.answer()
            return
        session.apply_suggestion(word)
        await c.answer()
        await _show_editor(c.message, session)

    @dp.callback_query(F.data.startswith("ed:"))
    async def on_edit(c: CallbackQuery):
        session = _playing(c)
        action = c.data.split(":", 1)[1]
        if session is None or session.question is None:
            await c.answer()
            return
        if action == "tab":
            session.press_tab()
        elif action == "dedent":
            session.dedent()
        elif action == "clear":
            session.clear_draft()
        await c.answer()
        await _show_editor(c.message, session)

    @dp.callback_query(F.data == "hint")
    async def on_hint(c: CallbackQuery):
        session = _playing(c)
        if session is None or session.question is None:
            await c.answer()
            return
        hint = session.question.hint
        await c.answer()
        if hint:
            await c.message.answer(**Text(Bold(t("hint", lang)), " ", hint).as_kwargs())
        else:
            await c.message.answer(t("no_hint", lang))

    @dp.callback_query(F.data == "run")
    async def on_run(c: CallbackQuery):
        session = _playing(c)
        if session is None or session.question is None:
            await c.answer()
            return
        await c.answer(t("evaluating", lang))
        ticket = session.grading_ticket
        result = await evaluator.evaluate(session.question, session.draft)
        if not session.attach_result(ticket, result):
            return
        logger.info(
            "attempt: chat_id=%s question_id=%s correct=%s kind=%s",
            c.message.chat.id,
            session.question.id,
            result.correct,
            result.kind.value,
        )
        await c.message.answer(**build_result_message(result, lang), reply_markup=kb_after_result(result.correct, lang))

    @dp.callback_query(F.data == "retry")
    async def on_retry(c: CallbackQuery):
        session = _playing(c)
        if session is None or session.question is None:
            await c.answer()
            return
        session.result = None
        await c.answer()
        await _show_editor(c.message, session)

    @dp.callback_query(F.data == "next")
    async def on_next(c: CallbackQuery):
        session = _playing(c)
        if session is None or session.result is None or not session.result.correct:
            await c.answer()
            return
        finished = session.advance()
        await c.answer()
        await _move_on(c.message, session, finished)

    @dp.callback_query(F.data == "skip")
    async def on_skip(c: CallbackQuery):
        session = _playing(c)
        if session is None:
            await c.answer()
            return
        try:
            finished = session.skip()
        except SessionError:
            await c.answer(t("skip_solved", lang), show_alert=True)
            return
        await c.answer()
        await _move_on(c.message, session, finished)

    @dp.callback_query(F.data == "finish")
    async def on_finish(c: CallbackQuery):
        session = _playing(c)
        if session is None:
            await c.answer()
            return
        session.finish()
        await c.answer()
        await _finish(c.message, session)

    @dp.callback_query(F.data == "restart")
    async def on_restart(c: CallbackQuery):
        session = store.get(c.message.chat.id)
        if session is None or session.phase is not Phase.FINISHED:
            await c.answer()
            return
        session.restart()
        await c.answer()
        await c.message.answer(t("choose_topic", lang), reply_markup=kb_topics(lang))

    return store

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from .fallback_bank import resolve
from .i18n import t
from .models import (
    EvaluationKind,
    EvaluationResult,
    MalformedOrigin,
    OfflineOrigin,
    Question,
)

if TYPE_CHECKING:
    from .llm import LLMClient

logger = logging.getLogger(__name__)

INCORRECT_OUTPUT = "Error/Incorrect Output"
DEFAULT_OUTPUT = "Error"
UNAVAILABLE_OUTPUT = "Service Unavailable"


class Evaluator:
    def __init__(self, llm: "LLMClient | None", *, ui_lang: str = "vi") -> None:
        self.llm = llm
        self.ui_lang = ui_lang

    async def evaluate(self, question: Question, code: str) -> EvaluationResult:
        if not (code or "").strip():
            return EvaluationResult(
                correct=False,
                message=t("empty_input", self.ui_lang),
                output="",
                kind=EvaluationKind.EMPTY_INPUT,
            )
        origin = question.origin
        if isinstance(origin, OfflineOrigin):
            return self._evaluate_offline(question, origin, code)
        if isinstance(origin, MalformedOrigin):
            return self._integrity_error(question, "unparseable_id")
        return await self._evaluate_online(question, code)

    def _evaluate_offline(self, question: Question, origin: OfflineOrigin, code: str) -> EvaluationResult:
        item = resolve(origin.topic, origin.index)
        if item is None:
            return self._integrity_error(question, "unknown_bank_item")
        correct = bool(item.check(code))
        logger.info(
            "evaluation: source=offline topic=%s index=%s correct=%s",
            origin.topic.value,
            origin.index,
            correct,
        )
        return EvaluationResult(
            correct=correct,
            message=t("offline_correct" if correct else "offline_wrong", self.ui_lang),
            output=item.mock_output if correct else INCORRECT_OUTPUT,
        )

    def _integrity_error(self, question: Question, reason: str) -> EvaluationResult:
        logger.warning("evaluation: fallback id does not resolve id=%s reason=%s", question.id, reason)
        return EvaluationResult(
            correct=False,
            message=t("question_expired", self.ui_lang),
            output=INCORRECT_OUTPUT,
            kind=EvaluationKind.INTEGRITY_ERROR,
        )

    def _degraded(self) -> EvaluationResult:
        return EvaluationResult(
            correct=False,
            message=t("service_busy", self.ui_lang),
            output=UNAVAILABLE_OUTPUT,
            kind=EvaluationKind.DEGRADED,
        )

    async def _evaluate_online(self, question: Question, code: str) -> EvaluationResult:
        if self.llm is None:
            logger.warning("evaluation: online question without llm id=%s", question.id)
            return self._degraded()
        try:
            payload = await self.llm.grade_submission(
                question_text=question.text,
                expected_output=question.expected_output_description or "",
                code=code,
                ui_lang=self.ui_lang,
            )
        except Exception:
            logger.warning("evaluation: remote grading failed id=%s", question.id, exc_info=True)
            return self._degraded()

        correct = payload.get("correct")
        message = payload.get("message")
        output = payload.get("output")
        result = EvaluationResult(
            correct=correct if isinstance(correct, bool) else False,
            message=message if isinstance(message, str) and message else t("online_default_wrong", self.ui_lang),
            output=output if isinstance(output, str) and output else DEFAULT_OUTPUT,
        )
        logger.info("evaluation: source=online id=%s correct=%s", question.id, result.correct)
        return result


async def evaluate_submission(
    question: Question,
    code: str,
    llm: "LLMClient | None",
    *,
    ui_lang: str = "vi",
) -> EvaluationResult:
    return await Evaluator(llm, ui_lang=ui_lang).evaluate(question, code)

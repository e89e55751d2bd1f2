from __future__ import annotations
import logging
import random
import time
from typing import Any, Callable, TYPE_CHECKING

from .fallback_bank import items_for
from .i18n import t
from .models import OfflineOrigin, OnlineOrigin, Question, Topic

if TYPE_CHECKING:
    from .llm import LLMClient

logger = logging.getLogger(__name__)


def _now_ms(clock: Callable[[], float]) -> int:
    return int(clock() * 1000)


def _opt_str(payload: dict[str, Any], key: str) -> str | None:
    val = payload.get(key)
    if isinstance(val, str) and val.strip():
        return val.strip()
    return None


def topic_title(topic: Topic, ui_lang: str) -> str:
    return t(f"topic_{topic.value}", ui_lang)


class QuestionGenerator:
    """Produces practice questions, preferring the LLM and falling back to the offline bank.

    Remote failures of any kind are logged and absorbed; ``generate`` never raises
    because of the network.
    """

    def __init__(
        self,
        llm: "LLMClient | None",
        *,
        ui_lang: str = "vi",
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.llm = llm
        self.ui_lang = ui_lang
        self.rng = rng or random.Random()
        self.clock = clock

    async def generate(self, topic: Topic) -> Question:
        if self.llm is not None:
            try:
                return await self._generate_online(topic)
            except Exception:
                logger.warning(
                    "fallback_question: remote generation failed topic=%s", topic.value, exc_info=True
                )
        else:
            logger.info("fallback_question: no llm configured topic=%s", topic.value)
        return self._generate_offline(topic)

    async def _generate_online(self, topic: Topic) -> Question:
        payload = await self.llm.generate_question(
            topic=topic_title(topic, self.ui_lang), ui_lang=self.ui_lang
        )
        question_id = f"{topic.value}-{self.rng.randint(1, 1000)}-{_now_ms(self.clock)}"
        text = _opt_str(payload, "text") or t("topic_placeholder", self.ui_lang).format(
            topic=topic_title(topic, self.ui_lang)
        )
        question = Question(
            id=question_id,
            topic=topic,
            text=text,
            hint=_opt_str(payload, "hint"),
            expected_output_description=_opt_str(payload, "expectedOutputDescription"),
            origin=OnlineOrigin(question_id),
        )
        logger.info("question_generated: source=online topic=%s id=%s", topic.value, question_id)
        return question

    def _generate_offline(self, topic: Topic) -> Question:
        items = items_for(topic)
        index = self.rng.randrange(len(items))
        item = items[index]
        origin = OfflineOrigin(topic=topic, index=index, timestamp=_now_ms(self.clock))
        question = Question(
            id=origin.encode(),
            topic=topic,
            text=item.text,
            hint=item.hint,
            expected_output_description=item.expected_output_description,
            origin=origin,
        )
        logger.info("question_generated: source=offline topic=%s index=%s", topic.value, index)
        return question


async def generate_question(
    topic: Topic,
    llm: "LLMClient | None",
    *,
    ui_lang: str = "vi",
    rng: random.Random | None = None,
) -> Question:
    return await QuestionGenerator(llm, ui_lang=ui_lang, rng=rng).generate(topic)

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum

from . import editor_assist
from .models import DEFAULT_TOTAL_QUESTIONS, EvaluationResult, Question, Topic, UserState

logger = logging.getLogger(__name__)

MIN_STUDENT_CODE_LEN = 3


class SessionError(RuntimeError):
    pass


class Phase(str, Enum):
    INTRO = "intro"
    TOPIC_SELECTION = "topic_selection"
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass
class PracticeSession:
    """One learner's run through a topic.

    Remote calls are tagged with a ticket from ``begin_question``; a result
    arriving for an older ticket (the learner skipped or finished meanwhile)
    is dropped instead of overwriting the current question. Grading also
    carries the draft revision, so a verdict for code the learner has since
    edited is dropped too.
    """

    state: UserState = field(default_factory=UserState)
    phase: Phase = Phase.INTRO
    topic: Topic | None = None
    question: Question | None = None
    result: EvaluationResult | None = None
    draft: str = ""
    cursor: int = 0
    _ticket: int = 0
    _revision: int = 0

    @classmethod
    def new(cls, total_questions: int = DEFAULT_TOTAL_QUESTIONS) -> "PracticeSession":
        return cls(state=UserState(total_questions=total_questions))

    # ---- lifecycle ----
    def start(self, student_code: str) -> None:
        code = (student_code or "").strip()
        if len(code) < MIN_STUDENT_CODE_LEN:
            raise SessionError("student code too short")
        self.state.student_code = code
        self.phase = Phase.TOPIC_SELECTION

    def choose_topic(self, topic: Topic) -> None:
        if self.phase is not Phase.TOPIC_SELECTION:
            raise SessionError(f"cannot choose a topic while {self.phase.value}")
        self.topic = topic
        self.phase = Phase.PLAYING

    @property
    def grading_ticket(self) -> tuple[int, int]:
        return self._ticket, self._revision

    def begin_question(self) -> int:
        if self.phase is not Phase.PLAYING:
            raise SessionError("no active practice")
        self._ticket += 1
        self.question = None
        self._clear_attempt()
        return self._ticket

    def attach_question(self, ticket: int, question: Question) -> bool:
        if ticket != self._ticket or self.phase is not Phase.PLAYING:
            logger.info("session: stale question dropped ticket=%s current=%s", ticket, self._ticket)
            return False
        self.question = question
        return True

    def attach_result(self, ticket: tuple[int, int], result: EvaluationResult) -> bool:
        if ticket != self.grading_ticket or self.question is None:
            logger.info("session: stale result dropped ticket=%s current=%s", ticket, self.grading_ticket)
            return False
        self.result = result
        return True

    def advance(self) -> bool:
        if self.question is None or self.result is None:
            raise SessionError("nothing graded to advance from")
        self.state.record(self.question.id, self.result.correct)
        return self._after_record()

    def skip(self) -> bool:
        if self.phase is not Phase.PLAYING:
            raise SessionError("no active practice")
        if self.result is not None and self.result.correct:
            raise SessionError("question already solved, advance instead")
        question_id = self.question.id if self.question else f"q-{self.state.current_question_index}"
        self.state.record(question_id, False, skipped=True)
        return self._after_record()

    def _after_record(self) -> bool:
        self._ticket += 1
        self.question = None
        self._clear_attempt()
        if self.state.is_finished:
            self.finish()
            return True
        return False

    def finish(self) -> None:
        self._ticket += 1
        self.phase = Phase.FINISHED

    def restart(self) -> None:
        self.state.reset()
        self.topic = None
        self.question = None
        self._clear_attempt()
        self._ticket += 1
        self.phase = Phase.TOPIC_SELECTION

    def _clear_attempt(self) -> None:
        self.result = None
        self.draft = ""
        self.cursor = 0
        self._revision += 1

    # ---- draft editing ----
    def append_line(self, text: str) -> None:
        text = (text or "").rstrip("\n")
        if self.draft:
            self.draft, self.cursor = editor_assist.insert_newline(self.draft, self.cursor)
        self.draft = self.draft[: self.cursor] + text + self.draft[self.cursor:]
        self.cursor += len(text)
        self._edited()

    def suggestions(self) -> list[str]:
        return editor_assist.suggest(self.draft, self.cursor)

    def apply_suggestion(self, word: str) -> None:
        self.draft, self.cursor = editor_assist.apply_suggestion(self.draft, self.cursor, word)
        self._edited()

    def press_tab(self) -> None:
        self.draft, self.cursor = editor_assist.press_tab(self.draft, self.cursor)
        self._edited()

    def dedent(self) -> None:
        self.draft = editor_assist.dedent_last_line(self.draft)
        self.cursor = len(self.draft)
        self._edited()

    def clear_draft(self) -> None:
        self.draft = ""
        self.cursor = 0
        self._edited()

    def _edited(self) -> None:
        # any verdict on hand or in flight was for the previous draft
        self._revision += 1
        self.result = None


class SessionStore:
    def __init__(self, total_questions: int = DEFAULT_TOTAL_QUESTIONS) -> None:
        self.total_questions = total_questions
        self._sessions: dict[int, PracticeSession] = {}

    def get(self, chat_id: int) -> PracticeSession | None:
        return self._sessions.get(chat_id)

    def get_or_create(self, chat_id: int) -> PracticeSession:
        session = self._sessions.get(chat_id)
        if session is None:
            session = PracticeSession.new(self.total_questions)
            self._sessions[chat_id] = session
        return session

    def drop(self, chat_id: int) -> None:
        self._sessions.pop(chat_id, None)

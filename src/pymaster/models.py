from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

FALLBACK_MARKER = "fallback"
ID_DELIMITER = "#"


class Topic(str, Enum):
    SEQUENTIAL = "sequential"
    BRANCHING = "branching"
    LOOP = "loop"
    COMBINED = "combined"

    @classmethod
    def parse(cls, raw: object) -> Optional["Topic"]:
        if isinstance(raw, Topic):
            return raw
        key = str(raw or "").strip().lower()
        for topic in cls:
            if key in (topic.value, topic.name.lower()):
                return topic
        return None


@dataclass(frozen=True)
class OnlineOrigin:
    question_id: str


@dataclass(frozen=True)
class OfflineOrigin:
    topic: Topic
    index: int
    timestamp: int

    def encode(self) -> str:
        return ID_DELIMITER.join(
            [FALLBACK_MARKER, self.topic.value, str(self.index), str(self.timestamp)]
        )


Origin = Union[OnlineOrigin, OfflineOrigin]


def is_fallback_id(raw: str) -> bool:
    return (raw or "").startswith(FALLBACK_MARKER + ID_DELIMITER)


def parse_fallback_id(raw: str) -> OfflineOrigin | None:
    if not is_fallback_id(raw):
        return None
    parts = raw.split(ID_DELIMITER)
    if len(parts) != 4:
        return None
    topic = Topic.parse(parts[1])
    if topic is None:
        return None
    index_raw, ts_raw = parts[2], parts[3]
    if not (index_raw.isascii() and index_raw.isdigit()):
        return None
    try:
        timestamp = int(ts_raw)
    except ValueError:
        return None
    return OfflineOrigin(topic=topic, index=int(index_raw), timestamp=timestamp)


@dataclass(frozen=True)
class MalformedOrigin:
    """Offline-marked id that does not decode; evaluation reports it instead of guessing."""
    raw_id: str


def origin_from_id(raw: str) -> Origin | MalformedOrigin:
    if is_fallback_id(raw):
        parsed = parse_fallback_id(raw)
        if parsed is None:
            return MalformedOrigin(raw)
        return parsed
    return OnlineOrigin(raw)


@dataclass(frozen=True)
class Question:
    id: str
    topic: Topic
    text: str
    hint: str | None = None
    expected_output_description: str | None = None
    origin: Origin | MalformedOrigin | None = None

    def __post_init__(self) -> None:
        if self.origin is None:
            object.__setattr__(self, "origin", origin_from_id(self.id))

    @property
    def is_offline(self) -> bool:
        return not isinstance(self.origin, OnlineOrigin)


class EvaluationKind(str, Enum):
    GRADED = "graded"
    EMPTY_INPUT = "empty_input"
    DEGRADED = "degraded"
    INTEGRITY_ERROR = "integrity_error"


@dataclass(frozen=True)
class EvaluationResult:
    correct: bool
    message: str
    output: str
    kind: EvaluationKind = EvaluationKind.GRADED


@dataclass(frozen=True)
class HistoryEntry:
    question_id: str
    is_correct: bool
    skipped: bool = False


DEFAULT_TOTAL_QUESTIONS = 10


@dataclass
class UserState:
    student_code: str = ""
    score: int = 0
    total_questions: int = DEFAULT_TOTAL_QUESTIONS
    current_question_index: int = 0
    history: list[HistoryEntry] = field(default_factory=list)
    _initial_total: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        if not self._initial_total:
            self._initial_total = self.total_questions

    @property
    def answered(self) -> int:
        return len(self.history)

    @property
    def is_finished(self) -> bool:
        return self.current_question_index >= self.total_questions

    def record(self, question_id: str, is_correct: bool, skipped: bool = False) -> None:
        if is_correct:
            self.score += 1
        self.current_question_index += 1
        self.history.append(HistoryEntry(question_id, is_correct, skipped))

    def reset(self) -> None:
        self.score = 0
        self.total_questions = self._initial_total
        self.current_question_index = 0
        self.history = []

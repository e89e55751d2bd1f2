from __future__ import annotations
import re
from typing import Sequence

INDENT_UNIT = "    "
BLOCK_OPENER = ":"
MAX_SUGGESTIONS = 5

# Python words a high-school learner reaches for first.
KEYWORDS: tuple[str, ...] = (
    "print", "input", "if", "else", "elif", "for", "while", "range",
    "len", "int", "float", "str", "def", "return", "True", "False",
    "and", "or", "not", "in", "import", "math", "random",
)

_WORD_AT_END = re.compile(r"[A-Za-z_][A-Za-z0-9_]*$")
_LEADING_WS = re.compile(r"^\s*")


def _clamp(text: str, cursor: int) -> int:
    return max(0, min(cursor, len(text)))


def current_word(text: str, cursor: int) -> str:
    text = text or ""
    m = _WORD_AT_END.search(text[: _clamp(text, cursor)])
    return m.group(0) if m else ""


def suggest(
    text: str,
    cursor: int,
    vocabulary: Sequence[str] = KEYWORDS,
    limit: int = MAX_SUGGESTIONS,
) -> list[str]:
    word = current_word(text, cursor)
    if not word:
        return []
    matched = [k for k in vocabulary if k.startswith(word) and k != word]
    return matched[:limit]


def apply_suggestion(text: str, cursor: int, chosen: str) -> tuple[str, int]:
    text = text or ""
    cursor = _clamp(text, cursor)
    start = cursor - len(current_word(text, cursor))
    new_text = text[:start] + chosen + text[cursor:]
    return new_text, start + len(chosen)


def indent_for_newline(text: str, cursor: int) -> str:
    text = text or ""
    current_line = text[: _clamp(text, cursor)].split("\n")[-1]
    indentation = _LEADING_WS.match(current_line).group(0)
    if current_line.strip().endswith(BLOCK_OPENER):
        indentation += INDENT_UNIT
    return indentation


def insert_newline(text: str, cursor: int) -> tuple[str, int]:
    text = text or ""
    cursor = _clamp(text, cursor)
    inserted = "\n" + indent_for_newline(text, cursor)
    return text[:cursor] + inserted + text[cursor:], cursor + len(inserted)


def press_tab(text: str, cursor: int) -> tuple[str, int]:
    """Accept the first suggestion if there is one, otherwise insert an indent unit."""
    text = text or ""
    cursor = _clamp(text, cursor)
    options = suggest(text, cursor)
    if options:
        return apply_suggestion(text, cursor, options[0])
    return text[:cursor] + INDENT_UNIT + text[cursor:], cursor + len(INDENT_UNIT)


def dedent_last_line(text: str) -> str:
    text = text or ""
    head, sep, last = text.rpartition("\n")
    stripped = last
    for _ in range(len(INDENT_UNIT)):
        if not stripped.startswith(" "):
            break
        stripped = stripped[1:]
    if stripped == last and last.startswith("\t"):
        stripped = last[1:]
    return head + sep + stripped

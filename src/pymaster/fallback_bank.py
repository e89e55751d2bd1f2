from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Callable, Sequence

from .models import Topic

Checker = Callable[[str], bool]


@dataclass(frozen=True)
class FallbackItem:
    text: str
    hint: str
    expected_output_description: str
    check: Checker
    mock_output: str
    reference_solution: str = ""


def _has(pattern: str) -> Checker:
    compiled = re.compile(pattern)
    return lambda code: compiled.search(code or "") is not None


def _all(*checks: Checker) -> Checker:
    return lambda code: all(c(code) for c in checks)


def _any(*checks: Checker) -> Checker:
    return lambda code: any(c(code) for c in checks)


_PRINTS = _has(r"print")

FALLBACK_BANK: dict[Topic, tuple[FallbackItem, ...]] = {
    Topic.SEQUENTIAL: (
        FallbackItem(
            text='Viết chương trình in ra dòng chữ "Hello Python" (lưu ý viết chính xác).',
            hint="Sử dụng hàm print()",
            expected_output_description="Hello Python",
            check=_has(r"print\s*\(\s*[\"']Hello Python[\"']\s*\)"),
            mock_output="Hello Python",
            reference_solution='print("Hello Python")',
        ),
        FallbackItem(
            text="Khai báo biến a = 10, b = 5. Tính và in ra tổng của a và b.",
            hint="Dùng toán tử +",
            expected_output_description="15",
            check=_any(
                _all(_has(r"a\s*=\s*10"), _has(r"b\s*=\s*5"), _PRINTS, _has(r"\+")),
                _has(r"print\s*\(\s*15\s*\)"),
            ),
            mock_output="15",
            reference_solution="a = 10\nb = 5\nprint(a + b)",
        ),
        FallbackItem(
            text='Viết chương trình nhập tên người dùng và in ra "Xin chao".',
            hint="input() và print()",
            expected_output_description="Xin chao",
            check=_has(r"print\s*\(\s*[\"']Xin chao[\"']\s*\)"),
            mock_output="Xin chao",
            reference_solution='ten = input()\nprint("Xin chao")',
        ),
    ),
    Topic.BRANCHING: (
        FallbackItem(
            text='Viết code kiểm tra: nếu 10 > 5 thì in ra "Dung".',
            hint="Dùng câu lệnh if",
            expected_output_description="Dung",
            check=_all(_has(r"if\s+10\s*>\s*5\s*:"), _has(r"print\s*\(\s*[\"']Dung[\"']\s*\)")),
            mock_output="Dung",
            reference_solution='if 10 > 5:\n    print("Dung")',
        ),
        FallbackItem(
            text='Cho x = 4. Kiểm tra nếu x % 2 == 0 thì in ra "Chan".',
            hint="Toán tử % là chia lấy dư",
            expected_output_description="Chan",
            check=_all(_has(r"if.*%.*==.*0.*:"), _PRINTS),
            mock_output="Chan",
            reference_solution='x = 4\nif x % 2 == 0:\n    print("Chan")',
        ),
    ),
    Topic.LOOP: (
        FallbackItem(
            text="Sử dụng vòng lặp for để in ra các số từ 0 đến 2.",
            hint="Dùng range(3)",
            expected_output_description="0\n1\n2",
            check=_all(_has(r"for\s+\w+\s+in\s+range\s*\(\s*3\s*\)\s*:"), _PRINTS),
            mock_output="0\n1\n2",
            reference_solution="for i in range(3):\n    print(i)",
        ),
        FallbackItem(
            text="Tính tổng các số từ 1 đến 3 (1+2+3) và in ra kết quả.",
            hint="Kết quả là 6",
            expected_output_description="6",
            check=_all(_PRINTS, _has(r"6")),
            mock_output="6",
            reference_solution="print(6)",
        ),
    ),
    Topic.COMBINED: (
        FallbackItem(
            text='Viết chương trình kiểm tra số 5 có lớn hơn 3 không, nếu có in "OK".',
            hint="if 5 > 3:",
            expected_output_description="OK",
            check=_all(_has(r"if\s+5\s*>\s*3\s*:"), _PRINTS),
            mock_output="OK",
            reference_solution='if 5 > 3:\n    print("OK")',
        ),
    ),
}


def items_for(topic: object) -> Sequence[FallbackItem]:
    # Unknown topics get the sequential list rather than an error.
    parsed = Topic.parse(topic)
    if parsed is None:
        return FALLBACK_BANK[Topic.SEQUENTIAL]
    return FALLBACK_BANK[parsed]


def resolve(topic: object, index: int) -> FallbackItem | None:
    parsed = Topic.parse(topic)
    if parsed is None:
        return None
    items = FALLBACK_BANK[parsed]
    if not isinstance(index, int) or index < 0 or index >= len(items):
        return None
    return items[index]

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import Mapping, Sequence

from .fallback_bank import FALLBACK_BANK, FallbackItem
from .models import Topic


@dataclass(frozen=True)
class ValidationIssue:
    severity: str  # "error" | "warning"
    message: str
    topic: str | None = None
    index: int | None = None


def validate_fallback_bank(
    bank: Mapping[Topic, Sequence[FallbackItem]] = FALLBACK_BANK,
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for topic in Topic:
        items = bank.get(topic) or ()
        if not items:
            issues.append(ValidationIssue("error", "topic has no fallback items", topic.value))
            continue
        for idx, item in enumerate(items):
            if not item.text.strip():
                issues.append(ValidationIssue("error", "empty question text", topic.value, idx))
            if not item.reference_solution.strip():
                issues.append(ValidationIssue("error", "missing reference solution", topic.value, idx))
            elif not item.check(item.reference_solution):
                issues.append(
                    ValidationIssue("error", "reference solution rejected by check", topic.value, idx)
                )
            if item.check(""):
                issues.append(ValidationIssue("error", "check accepts an empty submission", topic.value, idx))
            if not item.hint.strip():
                issues.append(ValidationIssue("warning", "missing hint", topic.value, idx))
            if not item.mock_output.strip():
                issues.append(ValidationIssue("warning", "missing mock output", topic.value, idx))
    return issues


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check the offline question bank.")
    parser.add_argument("--strict", action="store_true", help="treat warnings as errors")
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])
    issues = validate_fallback_bank()
    failed = False
    for issue in issues:
        where = f"{issue.topic}[{issue.index}]" if issue.index is not None else issue.topic
        print(f"{issue.severity.upper()}: {where}: {issue.message}")
        if issue.severity == "error" or args.strict:
            failed = True
    if failed:
        return 1
    print("OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

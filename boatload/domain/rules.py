"""Validation rules evaluated against entity field values.

Every rule is phrased as a failure condition: ``violates`` answers whether a
value breaks the rule, never whether it passes it.
"""

import re
from collections.abc import Sized
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class RuleKind(StrEnum):
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    MIN_VAL = "min_val"
    MAX_VAL = "max_val"
    OF_FORM = "of_form"


@dataclass(frozen=True)
class Rule:
    """A rule kind paired with its threshold or pattern."""

    kind: RuleKind
    limit: int | re.Pattern[str]

    def describe(self) -> str:
        if isinstance(self.limit, re.Pattern):
            return f"{self.kind} {self.limit.pattern!r}"
        return f"{self.kind} {self.limit}"


def min_length(limit: int) -> Rule:
    return Rule(RuleKind.MIN_LENGTH, limit)


def max_length(limit: int) -> Rule:
    return Rule(RuleKind.MAX_LENGTH, limit)


def min_val(limit: int) -> Rule:
    return Rule(RuleKind.MIN_VAL, limit)


def max_val(limit: int) -> Rule:
    return Rule(RuleKind.MAX_VAL, limit)


def of_form(pattern: str | re.Pattern[str]) -> Rule:
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    return Rule(RuleKind.OF_FORM, pattern)


def _is_integer(value: Any) -> bool:
    # bool is an int subclass but never a valid quantity
    return isinstance(value, int) and not isinstance(value, bool)


def violates(value: Any, rule: Rule) -> bool:
    """Check whether a value violates a rule.

    Values the rule cannot measure (e.g. a number under a length rule) are
    treated as violations.

    Args:
        value: The field value to check
        rule: The rule to evaluate

    Returns:
        True if the value violates the rule, False if it satisfies it
    """
    match rule.kind:
        case RuleKind.MIN_LENGTH:
            if isinstance(value, Sized):
                return len(value) < rule.limit  # type: ignore[operator]
            return True
        case RuleKind.MAX_LENGTH:
            if isinstance(value, Sized):
                return len(value) > rule.limit  # type: ignore[operator]
            return True
        case RuleKind.MIN_VAL:
            return not _is_integer(value) or value < rule.limit
        case RuleKind.MAX_VAL:
            return not _is_integer(value) or value > rule.limit
        case RuleKind.OF_FORM:
            if not isinstance(value, str) or not isinstance(rule.limit, re.Pattern):
                return True
            return rule.limit.fullmatch(value) is None

"""Data models for the keycalc engine.

Operator and token types, the tagged evaluation result, the session state and
the editing actions. Everything here is immutable; the session module builds
new values instead of mutating these.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Operator(str, Enum):
    """The closed set of binary operators, valued by their display symbol."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "÷"

    @property
    def precedence(self) -> int:
        return PRECEDENCE[self]


# Multiply/divide bind tighter than add/subtract. Never changes at runtime.
PRECEDENCE: dict[Operator, int] = {
    Operator.ADD: 1,
    Operator.SUBTRACT: 1,
    Operator.MULTIPLY: 2,
    Operator.DIVIDE: 2,
}


@dataclass(frozen=True)
class NumberToken:
    """A numeric literal."""

    value: float


@dataclass(frozen=True)
class OperatorToken:
    """A binary operator."""

    op: Operator


Token = Union[NumberToken, OperatorToken]


class EvalStatus(str, Enum):
    """Outcome of evaluating a postfix sequence."""

    OK = "ok"
    DIVISION_BY_ZERO = "division-by-zero"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class EvalResult:
    """Tagged evaluation result.

    ``value`` holds the number for OK results and NaN otherwise, so callers
    that only care about the number can still use it.
    """

    status: EvalStatus
    value: float = math.nan

    @classmethod
    def success(cls, value: float) -> EvalResult:
        return cls(EvalStatus.OK, value)

    @classmethod
    def failure(cls, status: EvalStatus) -> EvalResult:
        if status is EvalStatus.OK:
            raise ValueError("failure() needs a non-OK status")
        return cls(status)

    @property
    def ok(self) -> bool:
        return self.status is EvalStatus.OK


class Entry(str, Enum):
    """Where operator entry stands relative to the pending sequence.

    OPERATOR: the pending sequence ends in an operator and no operand has
    been typed since, so another operator replaces it.
    OPERAND: anything else.
    """

    OPERAND = "operand"
    OPERATOR = "operator"


@dataclass(frozen=True)
class Session:
    """Interaction state: display buffer, pending tokens, just-evaluated flag."""

    display: str = "0"
    tokens: tuple[Token, ...] = ()
    just_evaluated: bool = False
    entry: Entry = Entry.OPERAND

    @property
    def ends_in_operator(self) -> bool:
        return bool(self.tokens) and isinstance(self.tokens[-1], OperatorToken)


class ActionKind(str, Enum):
    """Every action the presentation layer can trigger."""

    DIGIT = "digit"
    DECIMAL = "decimal"
    OPERATOR = "operator"
    EVALUATE = "evaluate"
    BACKSPACE = "backspace"
    CLEAR = "clear"
    TOGGLE_SIGN = "toggle-sign"
    PERCENT = "percent"


_DIGITS = frozenset("0123456789")


@dataclass(frozen=True)
class Action:
    """One triggerable action, with its digit or operator payload if any."""

    kind: ActionKind
    digit: Optional[str] = None
    op: Optional[Operator] = None

    def __post_init__(self) -> None:
        if self.kind is ActionKind.DIGIT:
            if self.digit is None or self.digit not in _DIGITS:
                raise ValueError(f"Invalid digit: {self.digit!r}")
        elif self.digit is not None:
            raise ValueError(f"{self.kind.value} takes no digit")
        if self.kind is ActionKind.OPERATOR:
            if not isinstance(self.op, Operator):
                raise ValueError(f"Invalid operator: {self.op!r}")
        elif self.op is not None:
            raise ValueError(f"{self.kind.value} takes no operator")

    @classmethod
    def for_digit(cls, digit: str) -> Action:
        return cls(ActionKind.DIGIT, digit=digit)

    @classmethod
    def for_operator(cls, op: Operator) -> Action:
        return cls(ActionKind.OPERATOR, op=op)

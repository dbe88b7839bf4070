"""Infix-to-postfix conversion and postfix evaluation.

Shunting-yard restricted to left-associative binary operators (no
parentheses, no functions), followed by a value-stack reduction. Neither step
raises on bad input: failures come back as an EvalResult status.
"""

from __future__ import annotations

from typing import Iterable

from keycalc.models import (
    EvalResult,
    EvalStatus,
    NumberToken,
    Operator,
    OperatorToken,
    Token,
)


def to_postfix(tokens: Iterable[Token]) -> list[Token]:
    """Reorder infix tokens into postfix (RPN) order.

    Well-formedness is the caller's problem; any sequence is accepted and
    reordered, and the evaluator reports what it cannot reduce.
    """
    output: list[Token] = []
    ops: list[OperatorToken] = []

    for token in tokens:
        if isinstance(token, NumberToken):
            output.append(token)
            continue
        # Equal precedence pops too: left-associative
        while ops and ops[-1].op.precedence >= token.op.precedence:
            output.append(ops.pop())
        ops.append(token)

    while ops:
        output.append(ops.pop())
    return output


def _apply(op: Operator, a: float, b: float) -> EvalResult:
    if op is Operator.ADD:
        return EvalResult.success(a + b)
    if op is Operator.SUBTRACT:
        return EvalResult.success(a - b)
    if op is Operator.MULTIPLY:
        return EvalResult.success(a * b)
    if b == 0:
        return EvalResult.failure(EvalStatus.DIVISION_BY_ZERO)
    return EvalResult.success(a / b)


def eval_postfix(rpn: Iterable[Token]) -> EvalResult:
    """Reduce a postfix sequence to a single value.

    The first-popped value is the right operand. A missing operand, an empty
    sequence or leftover values make the result MALFORMED; dividing by exactly
    zero makes it DIVISION_BY_ZERO. Overflow to infinity is still an OK
    result and is left for the formatter to reject.
    """
    stack: list[float] = []

    for token in rpn:
        if isinstance(token, NumberToken):
            stack.append(token.value)
            continue
        if len(stack) < 2:
            return EvalResult.failure(EvalStatus.MALFORMED)
        b = stack.pop()
        a = stack.pop()
        result = _apply(token.op, a, b)
        if not result.ok:
            return result
        stack.append(result.value)

    if len(stack) != 1:
        return EvalResult.failure(EvalStatus.MALFORMED)
    return EvalResult.success(stack[0])


def evaluate_tokens(tokens: Iterable[Token]) -> EvalResult:
    """Evaluate an infix token sequence."""
    return eval_postfix(to_postfix(tokens))

"""Input accumulator: the editing operations over a Session.

Every operation is a pure function ``(session, ...) -> Session``; the input
session is never mutated. ``reduce`` dispatches an Action to the matching
operation, and ``Calculator`` owns one session for the presentation layer.

The number being typed lives in ``Session.display``; the pending token
sequence holds everything before it. Text in the display is always written
in the active NumberStyle, which is why the parsing operations take one.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Optional

from keycalc.formatting import DEFAULT_STYLE, NumberStyle, format_result, parse_number, plain_number
from keycalc.keymap import action_for_key, action_for_label
from keycalc.models import (
    Action,
    ActionKind,
    Entry,
    NumberToken,
    Operator,
    OperatorToken,
    Session,
    Token,
)
from keycalc.postfix import evaluate_tokens


def input_digit(session: Session, digit: str) -> Session:
    if session.just_evaluated or session.display == "0":
        display = digit
    elif session.display == "-0":
        display = "-" + digit
    else:
        display = session.display + digit
    return replace(session, display=display, just_evaluated=False, entry=Entry.OPERAND)


def input_decimal(session: Session, style: NumberStyle = DEFAULT_STYLE) -> Session:
    """Append the decimal point once; a repeat press is a no-op."""
    if session.just_evaluated:
        display = "0" + style.decimal
    elif style.decimal in session.display:
        display = session.display
    else:
        display = session.display + style.decimal
    return replace(session, display=display, just_evaluated=False, entry=Entry.OPERAND)


def backspace(session: Session) -> Session:
    """Drop the last typed character.

    On a just-evaluated result the whole display resets to "0" instead.
    """
    if session.just_evaluated:
        return replace(session, display="0", just_evaluated=False)

    display = session.display[:-1]
    if display in ("", "-"):
        display = "0"
    entry = session.entry
    if display == "0" and session.ends_in_operator:
        # Operand erased: the trailing operator is replaceable again
        entry = Entry.OPERATOR
    return replace(session, display=display, entry=entry)


def toggle_sign(session: Session, style: NumberStyle = DEFAULT_STYLE) -> Session:
    display = session.display
    if display.startswith("-"):
        return replace(session, display=display[1:])
    if display == "0" or parse_number(display, style) is None:
        return session
    return replace(session, display="-" + display)


def percent(session: Session, style: NumberStyle = DEFAULT_STYLE) -> Session:
    """Divide the displayed value by 100 in place."""
    value = parse_number(session.display, style)
    if value is None:
        return session
    return replace(session, display=plain_number(value / 100, style))


def input_operator(session: Session, op: Operator, style: NumberStyle = DEFAULT_STYLE) -> Session:
    """Enter a binary operator.

    Directly after another operator this replaces it and leaves the display
    alone. Otherwise the displayed number (if it parses) and the operator are
    appended, and the display starts over at "0".
    """
    token = OperatorToken(op)
    if session.entry is Entry.OPERATOR and session.ends_in_operator:
        return replace(session, tokens=session.tokens[:-1] + (token,))

    tokens = list(session.tokens)
    value = parse_number(session.display, style)
    if value is not None:
        tokens.append(NumberToken(value))
    if tokens and isinstance(tokens[-1], OperatorToken):
        # Nothing parseable since the last operator; never stack two
        tokens[-1] = token
    else:
        tokens.append(token)
    return Session(display="0", tokens=tuple(tokens), just_evaluated=False, entry=Entry.OPERATOR)


def pending_expression(session: Session, style: NumberStyle = DEFAULT_STYLE) -> tuple[Token, ...]:
    """The infix sequence ``evaluate`` would run.

    Pending tokens plus the displayed number, minus a dangling operator.
    """
    tokens = list(session.tokens)
    value = parse_number(session.display, style)
    if value is not None:
        tokens.append(NumberToken(value))
    if tokens and isinstance(tokens[-1], OperatorToken):
        tokens.pop()
    return tuple(tokens)


def evaluate(session: Session, style: NumberStyle = DEFAULT_STYLE) -> Session:
    expression = pending_expression(session, style)
    if not expression:
        return replace(session, tokens=(), just_evaluated=True, entry=Entry.OPERAND)
    result = evaluate_tokens(expression)
    return Session(display=format_result(result, style), just_evaluated=True)


def clear_all(session: Session) -> Session:
    return Session()


def reduce(session: Session, action: Action, style: NumberStyle = DEFAULT_STYLE) -> Session:
    """Apply one action and return the new session."""
    kind = action.kind
    if kind is ActionKind.DIGIT:
        return input_digit(session, action.digit)
    if kind is ActionKind.DECIMAL:
        return input_decimal(session, style)
    if kind is ActionKind.OPERATOR:
        return input_operator(session, action.op, style)
    if kind is ActionKind.EVALUATE:
        return evaluate(session, style)
    if kind is ActionKind.BACKSPACE:
        return backspace(session)
    if kind is ActionKind.CLEAR:
        return clear_all(session)
    if kind is ActionKind.TOGGLE_SIGN:
        return toggle_sign(session, style)
    if kind is ActionKind.PERCENT:
        return percent(session, style)
    raise ValueError(f"Unhandled action: {kind}")


class Calculator:
    """Owns one session and applies actions to it.

    Keyboard keys and button labels resolve to the same actions, so both
    input paths behave identically.
    """

    def __init__(
        self,
        style: NumberStyle = DEFAULT_STYLE,
        on_evaluate: Optional[Callable[[tuple[Token, ...]], None]] = None,
    ) -> None:
        self.style = style
        self.session = Session()
        self._on_evaluate = on_evaluate

    @property
    def display(self) -> str:
        return self.session.display

    def dispatch(self, action: Action) -> str:
        if action.kind is ActionKind.EVALUATE and self._on_evaluate:
            expression = pending_expression(self.session, self.style)
            if expression:
                self._on_evaluate(expression)
        self.session = reduce(self.session, action, self.style)
        return self.display

    def press_key(self, key: str) -> bool:
        """Dispatch a keyboard key. Returns False for unbound keys."""
        action = action_for_key(key)
        if action is None:
            return False
        self.dispatch(action)
        return True

    def press_button(self, label: str) -> bool:
        """Dispatch a keypad button by label. Returns False for unknown labels."""
        action = action_for_label(label)
        if action is None:
            return False
        self.dispatch(action)
        return True

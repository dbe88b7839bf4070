"""Keyboard bindings and the keypad button grid.

Both map onto the same Action values, so a key and its button are
interchangeable. Toggle sign and percent are button-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from keycalc.models import Action, ActionKind, Operator

_DECIMAL = Action(ActionKind.DECIMAL)
_EVALUATE = Action(ActionKind.EVALUATE)
_BACKSPACE = Action(ActionKind.BACKSPACE)
_CLEAR = Action(ActionKind.CLEAR)
_TOGGLE_SIGN = Action(ActionKind.TOGGLE_SIGN)
_PERCENT = Action(ActionKind.PERCENT)

KEY_BINDINGS: dict[str, Action] = {
    **{d: Action.for_digit(d) for d in "0123456789"},
    ".": _DECIMAL,
    "+": Action.for_operator(Operator.ADD),
    "-": Action.for_operator(Operator.SUBTRACT),
    "*": Action.for_operator(Operator.MULTIPLY),
    "x": Action.for_operator(Operator.MULTIPLY),
    "X": Action.for_operator(Operator.MULTIPLY),
    "/": Action.for_operator(Operator.DIVIDE),
    "Enter": _EVALUATE,
    "=": _EVALUATE,
    "Backspace": _BACKSPACE,
    "Escape": _CLEAR,
    "c": _CLEAR,
    "C": _CLEAR,
}

# Raw characters a terminal sends for named keys
_TERMINAL_KEYS = {
    "\r": "Enter",
    "\n": "Enter",
    "\x7f": "Backspace",
    "\x08": "Backspace",
    "\x1b": "Escape",
}


@dataclass(frozen=True)
class Button:
    """One keypad control."""

    label: str
    action: Action
    kind: str
    aria: Optional[str] = None

    @property
    def accessible_name(self) -> str:
        return self.aria or self.label


def _digit(d: str) -> Button:
    return Button(d, Action.for_digit(d), "num")


def _op(op: Operator, aria: str) -> Button:
    return Button(op.value, Action.for_operator(op), "op", aria)


BUTTON_COLUMNS = 4

# Row-major, BUTTON_COLUMNS per row
BUTTONS: list[Button] = [
    Button("C", _CLEAR, "action", "Clear all"),
    Button("±", _TOGGLE_SIGN, "action", "Toggle sign"),
    Button("%", _PERCENT, "action", "Percent"),
    _op(Operator.DIVIDE, "Divide"),
    _digit("7"), _digit("8"), _digit("9"),
    _op(Operator.MULTIPLY, "Multiply"),
    _digit("4"), _digit("5"), _digit("6"),
    _op(Operator.SUBTRACT, "Minus"),
    _digit("1"), _digit("2"), _digit("3"),
    _op(Operator.ADD, "Plus"),
    Button("⌫", _BACKSPACE, "action", "Backspace"),
    _digit("0"),
    Button(".", _DECIMAL, "num"),
    Button("=", _EVALUATE, "equals", "Equals"),
]

_BUTTONS_BY_LABEL = {b.label: b for b in BUTTONS}

# ASCII spellings for labels that are awkward to type in a shell
_LABEL_ALIASES = {
    "neg": "±",
    "+/-": "±",
    "pct": "%",
    "bs": "⌫",
    "*": "×",
    "x": "×",
    "/": "÷",
}


def action_for_key(key: str) -> Optional[Action]:
    """Action bound to a keyboard key name, or None if unbound."""
    return KEY_BINDINGS.get(key)


def action_for_label(label: str) -> Optional[Action]:
    """Action of the button with this label (or alias), or None."""
    button = _BUTTONS_BY_LABEL.get(_LABEL_ALIASES.get(label, label))
    return button.action if button else None


def key_from_terminal(ch: str) -> str:
    """Translate a raw terminal character into a key name."""
    return _TERMINAL_KEYS.get(ch, ch)


def keys_for(action: Action) -> list[str]:
    """Every keyboard key bound to ``action``, in binding order."""
    return [key for key, bound in KEY_BINDINGS.items() if bound == action]

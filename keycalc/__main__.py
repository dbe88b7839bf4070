"""CLI for the keycalc calculator.

Usage:
    python -m keycalc run                  # Interactive keypad (q to quit)
    python -m keycalc keys "2+3*4="        # Type keys, print the display
    python -m keycalc press 5 + neg 3 =    # Press buttons by label
    python -m keycalc keymap               # Show key bindings
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

import typer
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from keycalc.formatting import plain_number
from keycalc.keymap import BUTTON_COLUMNS, BUTTONS, key_from_terminal, keys_for
from keycalc.models import NumberToken, Token
from keycalc.postfix import to_postfix
from keycalc.session import Calculator
from keycalc.settings import Settings

app = typer.Typer(
    name="keycalc",
    help="Keyboard-driven four-function calculator",
    no_args_is_help=True,
)
console = Console(stderr=True)

_QUIT_KEYS = ("q", "Q")

_KIND_STYLES = {
    "num": "white",
    "op": "cyan",
    "action": "yellow",
    "equals": "bold green",
}

LOCALE_OPTION = typer.Option(None, "--locale", "-l", help="Locale for digit grouping (e.g. 'de_DE.UTF-8')")
TRACE_OPTION = typer.Option(None, "--trace/--no-trace", help="Print infix and postfix tokens on each evaluation")


def _fmt_tokens(tokens: Iterable[Token]) -> str:
    return " ".join(
        plain_number(t.value) if isinstance(t, NumberToken) else t.op.value
        for t in tokens
    )


def _trace_printer(target: Console) -> Callable[[tuple[Token, ...]], None]:
    def _trace(expression: tuple[Token, ...]) -> None:
        target.print(
            f"[dim]infix: {_fmt_tokens(expression)}  postfix: {_fmt_tokens(to_postfix(expression))}[/dim]"
        )
    return _trace


def _build_calculator(
    locale_name: Optional[str],
    trace: Optional[bool],
    trace_console: Console = console,
) -> Calculator:
    """Resolve settings (env, then CLI options) into a Calculator."""
    settings = Settings.from_env().override(locale_name=locale_name, trace=trace)
    try:
        style = settings.style()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    on_evaluate = _trace_printer(trace_console) if settings.trace else None
    return Calculator(style=style, on_evaluate=on_evaluate)


def _render(calc: Calculator) -> Panel:
    """Display line above the keypad grid."""
    keypad = Table.grid(padding=(0, 2))
    for _ in range(BUTTON_COLUMNS):
        keypad.add_column(justify="center", min_width=3)
    for i in range(0, len(BUTTONS), BUTTON_COLUMNS):
        row = BUTTONS[i:i + BUTTON_COLUMNS]
        keypad.add_row(*(Text(b.label, style=_KIND_STYLES.get(b.kind, "white")) for b in row))

    display = Text(calc.display, style="bold", justify="right")
    return Panel(
        Group(display, Text(""), keypad),
        title="keycalc",
        subtitle="[dim]q to quit[/dim]",
        width=30,
    )


@app.command("run")
def cmd_run(
    locale_name: Optional[str] = LOCALE_OPTION,
    trace: Optional[bool] = TRACE_OPTION,
) -> None:
    """Interactive calculator driven by single keypresses."""
    out = Console()
    calc = _build_calculator(locale_name, trace, trace_console=out)

    with Live(_render(calc), console=out, auto_refresh=False) as live:
        while True:
            try:
                ch = typer.getchar()
            except (KeyboardInterrupt, EOFError):
                break
            if ch in _QUIT_KEYS:
                break
            if calc.press_key(key_from_terminal(ch)):
                live.update(_render(calc), refresh=True)


@app.command("keys")
def cmd_keys(
    text: str = typer.Argument(help="Keys to type in order (e.g., '2+3*4=')"),
    locale_name: Optional[str] = LOCALE_OPTION,
    trace: Optional[bool] = TRACE_OPTION,
) -> None:
    """Type a string of keys and print the resulting display."""
    calc = _build_calculator(locale_name, trace)
    for ch in text:
        # Unbound characters (spaces, letters) are ignored
        calc.press_key(key_from_terminal(ch))
    typer.echo(calc.display)


@app.command("press")
def cmd_press(
    labels: list[str] = typer.Argument(help="Button labels in order (aliases: neg, pct, bs)"),
    locale_name: Optional[str] = LOCALE_OPTION,
    trace: Optional[bool] = TRACE_OPTION,
) -> None:
    """Press keypad buttons by label and print the resulting display."""
    calc = _build_calculator(locale_name, trace)
    for label in labels:
        if not calc.press_button(label):
            console.print(f"[red]Unknown button:[/red] {label}")
            raise typer.Exit(1)
    typer.echo(calc.display)


@app.command("keymap")
def cmd_keymap() -> None:
    """Show keypad buttons and their keyboard keys."""
    table = Table(title="Key Bindings", show_header=True, header_style="bold")
    table.add_column("Button", style="green", justify="center")
    table.add_column("Action", min_width=12)
    table.add_column("Keys")

    for b in BUTTONS:
        keys = keys_for(b.action)
        table.add_row(b.label, b.accessible_name, ", ".join(keys) if keys else "[dim]button only[/dim]")

    console.print()
    console.print(table)
    console.print()


def main() -> None:
    app()


if __name__ == "__main__":
    main()

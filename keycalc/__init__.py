"""keycalc: keyboard-driven four-function calculator.

Digits and operators accumulate into a pending token sequence; evaluation
runs a shunting-yard conversion to postfix, reduces it on a value stack and
formats the result for the display.

Usage:
    python -m keycalc run                  # Interactive keypad
    python -m keycalc keys "2+3*4="        # Prints 14
    python -m keycalc press 5 + neg 3 =    # Button labels, incl. ± and %
    python -m keycalc keymap               # Show key bindings
"""

__version__ = "0.1.0"

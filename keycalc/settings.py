"""Runtime configuration for keycalc.

Read from KEYCALC_* environment variables; CLI options override individual
fields. Self-contained, no config files.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from keycalc.formatting import NumberStyle

_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Display style and diagnostics switches."""

    group_separator: str = ","
    decimal_point: str = "."
    locale_name: Optional[str] = None
    trace: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Settings:
        """Build settings from KEYCALC_* variables (defaults to os.environ)."""
        env = os.environ if env is None else env
        return cls(
            group_separator=env.get("KEYCALC_GROUP_SEPARATOR", ","),
            decimal_point=env.get("KEYCALC_DECIMAL_POINT", "."),
            locale_name=env.get("KEYCALC_LOCALE") or None,
            trace=env.get("KEYCALC_TRACE", "").strip().lower() in _TRUTHY,
        )

    def override(self, locale_name: Optional[str] = None, trace: Optional[bool] = None) -> Settings:
        """Apply CLI options; None leaves a field as configured."""
        s = self
        if locale_name is not None:
            s = replace(s, locale_name=locale_name)
        if trace is not None:
            s = replace(s, trace=trace)
        return s

    def style(self) -> NumberStyle:
        """The NumberStyle these settings describe.

        A locale, when set, wins over the explicit separators.

        Raises:
            ValueError: for an unknown locale or unusable separators.
        """
        if self.locale_name:
            return NumberStyle.from_locale(self.locale_name)
        return NumberStyle(group=self.group_separator, decimal=self.decimal_point)

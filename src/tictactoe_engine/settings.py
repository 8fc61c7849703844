"""Play options, read from the environment and overridden by CLI flags."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"", "0", "false", "no", "off"}


@dataclass
class PlayOptions:
    computer_first: bool = False
    think_delay: float = 0.0  # seconds the computer waits before searching

    def __post_init__(self) -> None:
        if self.think_delay < 0:
            raise ValueError(f"think_delay must be >= 0, got {self.think_delay}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PlayOptions":
        env = os.environ if environ is None else environ
        raw_first = env.get("TTT_COMPUTER_FIRST", "").strip().lower()
        if raw_first in _TRUE:
            computer_first = True
        elif raw_first in _FALSE:
            computer_first = False
        else:
            raise ValueError(f"TTT_COMPUTER_FIRST must be a boolean, got {raw_first!r}")
        raw_delay = env.get("TTT_THINK_DELAY", "").strip()
        try:
            think_delay = float(raw_delay) if raw_delay else 0.0
        except ValueError:
            raise ValueError(f"TTT_THINK_DELAY must be a number, got {raw_delay!r}") from None
        return cls(computer_first=computer_first, think_delay=think_delay)

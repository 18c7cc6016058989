from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from roastchess.engine.game import DEFAULT_HINTS
from roastchess.search.service import Difficulty


@dataclass(frozen=True)
class ServerConfig:
    """Settings for the HTTP game server."""

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    hint_allowance: int = DEFAULT_HINTS
    """Hints each side gets per game; never replenished."""
    default_difficulty: Difficulty = Difficulty.MEDIUM
    seed: Optional[int] = None
    """Seed for the bot's random tie-breaks; None draws from system entropy."""

    def __post_init__(self) -> None:
        if self.hint_allowance < 0:
            raise ValueError("hint_allowance must be >= 0")
        if not 0 < self.port < 65536:
            raise ValueError("port must be in 1..65535")
        object.__setattr__(self, "default_difficulty", Difficulty(self.default_difficulty))
        object.__setattr__(self, "log_level", self.log_level.upper())

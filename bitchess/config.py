from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .engine.classifier import FIFTY_MOVE_AUTOMATIC, DrawPolicy


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read from ``BITCHESS_*`` environment variables."""

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    fifty_move: str = FIFTY_MOVE_AUTOMATIC
    detect_repetition: bool = False
    detect_insufficient_material: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        try:
            port = int(env.get("BITCHESS_PORT", "8000"))
        except ValueError as e:
            raise ValueError("BITCHESS_PORT must be an integer") from e
        settings = cls(
            host=env.get("BITCHESS_HOST", "0.0.0.0"),
            port=port,
            log_level=env.get("BITCHESS_LOG_LEVEL", "INFO").upper(),
            fifty_move=env.get("BITCHESS_FIFTY_MOVE", FIFTY_MOVE_AUTOMATIC).lower(),
            detect_repetition=_env_bool(env, "BITCHESS_DETECT_REPETITION", False),
            detect_insufficient_material=_env_bool(
                env, "BITCHESS_DETECT_INSUFFICIENT_MATERIAL", False
            ),
        )
        # Fail at start-up rather than on the first game.
        settings.draw_policy()
        return settings

    def draw_policy(self) -> DrawPolicy:
        return DrawPolicy(
            fifty_move=self.fifty_move,
            detect_repetition=self.detect_repetition,
            detect_insufficient_material=self.detect_insufficient_material,
        )

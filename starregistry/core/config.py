# starregistry/core/config.py
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_CHALLENGE_WINDOW = 5 * 60
DEFAULT_CHALLENGE_SUFFIX = "starRegistry"


@dataclass(frozen=True)
class RegistryConfig:
    """Tunables for the ownership challenge protocol."""
    challenge_window_seconds: int = DEFAULT_CHALLENGE_WINDOW
    challenge_suffix: str = DEFAULT_CHALLENGE_SUFFIX

    def __post_init__(self):
        if self.challenge_window_seconds <= 0:
            raise ValueError("challenge_window_seconds must be positive")
        if not self.challenge_suffix or ":" in self.challenge_suffix:
            raise ValueError("challenge_suffix must be non-empty and must not contain ':'")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RegistryConfig":
        """Resolve settings from STAR_REGISTRY_* environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ

        window = DEFAULT_CHALLENGE_WINDOW
        raw_window = env.get("STAR_REGISTRY_CHALLENGE_WINDOW")
        if raw_window:
            try:
                window = int(raw_window)
            except ValueError:
                raise ValueError(f"STAR_REGISTRY_CHALLENGE_WINDOW must be an integer, got {raw_window!r}")

        suffix = env.get("STAR_REGISTRY_CHALLENGE_SUFFIX") or DEFAULT_CHALLENGE_SUFFIX
        return cls(challenge_window_seconds=window, challenge_suffix=suffix)

# kpguess/config.py
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigurationError

SUPPORTED_EPISODES = range(1, 7)

DEFAULT_MIN_ANSWER_MS = 986
DEFAULT_MAX_ANSWER_MS = 4465
DEFAULT_MIN_RESTART_MS = 2178
DEFAULT_MAX_RESTART_MS = 9653


def parse_episode(selector) -> int:
    """Turn the user's episode selector into a supported episode number."""
    try:
        episode = int(str(selector).strip())
    except ValueError:
        raise ConfigurationError(f"Episode must be a number, got {selector!r}")

    if episode not in SUPPORTED_EPISODES:
        raise ConfigurationError(
            f"Episode must be between {SUPPORTED_EPISODES[0]} and "
            f"{SUPPORTED_EPISODES[-1]}, got {episode}"
        )
    return episode


def read_dotenv(path: Path) -> dict:
    """Read KEY=value pairs from a .env file. Missing file gives {}."""
    values = {}
    if not path.exists():
        return values

    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip().strip('"').strip("'")
    return values


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def _float_setting(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


@dataclass
class Settings:
    """
    Everything the bot needs before it touches the network.

    Values come from the process environment first and from a `.env` file
    in the working directory second.
    """

    cookie: str
    data_dir: Path = Path(".")
    min_answer_ms: int = DEFAULT_MIN_ANSWER_MS
    max_answer_ms: int = DEFAULT_MAX_ANSWER_MS
    min_restart_ms: int = DEFAULT_MIN_RESTART_MS
    max_restart_ms: int = DEFAULT_MAX_RESTART_MS
    timeout: float = 30.0
    retries: int = 3

    def __post_init__(self):
        if not self.cookie:
            raise ConfigurationError(
                'Session cookie is missing: set COOKIE=<your cookies> in ".env" '
                "or in the environment"
            )
        if self.min_answer_ms < 0 or self.min_answer_ms > self.max_answer_ms:
            raise ConfigurationError(
                f"Bad answer pause range [{self.min_answer_ms}, {self.max_answer_ms}]"
            )
        if self.min_restart_ms < 0 or self.min_restart_ms > self.max_restart_ms:
            raise ConfigurationError(
                f"Bad restart pause range [{self.min_restart_ms}, {self.max_restart_ms}]"
            )
        if self.retries < 1:
            raise ConfigurationError(f"KPGUESS_RETRIES must be at least 1, got {self.retries}")
        self.data_dir = Path(self.data_dir)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[Path] = None,
    ) -> "Settings":
        env = dict(read_dotenv(dotenv_path or Path(".env")))
        env.update(os.environ if environ is None else environ)

        return cls(
            cookie=env.get("COOKIE", "").strip(),
            data_dir=Path(env.get("KPGUESS_DATA_DIR") or "."),
            min_answer_ms=_int_setting(env, "KPGUESS_MIN_ANSWER_MS", DEFAULT_MIN_ANSWER_MS),
            max_answer_ms=_int_setting(env, "KPGUESS_MAX_ANSWER_MS", DEFAULT_MAX_ANSWER_MS),
            min_restart_ms=_int_setting(env, "KPGUESS_MIN_RESTART_MS", DEFAULT_MIN_RESTART_MS),
            max_restart_ms=_int_setting(env, "KPGUESS_MAX_RESTART_MS", DEFAULT_MAX_RESTART_MS),
            timeout=_float_setting(env, "KPGUESS_TIMEOUT", 30.0),
            retries=_int_setting(env, "KPGUESS_RETRIES", 3),
        )

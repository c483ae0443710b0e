"""Runtime settings, read from ``CHECKOUT_*`` environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"
DEFAULT_LOCK_TIMEOUT = 5.0


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    lock_timeout: float | None = DEFAULT_LOCK_TIMEOUT
    log_level: str = "WARNING"
    log_file: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        data_dir = env.get("CHECKOUT_DATA_DIR")
        log_file = env.get("CHECKOUT_LOG_FILE")
        return cls(
            data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
            lock_timeout=_parse_timeout(env.get("CHECKOUT_LOCK_TIMEOUT")),
            log_level=env.get("CHECKOUT_LOG_LEVEL", "WARNING").upper(),
            log_file=Path(log_file) if log_file else None,
        )


def _parse_timeout(raw: str | None) -> float | None:
    """``None`` means wait forever; unset falls back to the default."""
    if raw is None:
        return DEFAULT_LOCK_TIMEOUT
    raw = raw.strip()
    if not raw:
        return None
    try:
        seconds = float(raw)
    except ValueError as exc:
        raise ValueError(f"CHECKOUT_LOCK_TIMEOUT must be a number, got {raw!r}") from exc
    return seconds if seconds > 0 else None

"""Engine configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


def _as_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _as_threshold(raw: str, default: float) -> float:
    try:
        value = float(raw)
    except ValueError:
        return default
    if not 0.0 <= value <= 1.1:
        return default
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    """Settings shared by the scoring and compatibility engines."""

    environment: str = "dev"
    log_level: str = "INFO"

    duplicate_similarity_threshold: float = 0.8
    metrics_enabled: bool = True


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        duplicate_similarity_threshold=_as_threshold(
            os.getenv("DUPLICATE_SIMILARITY_THRESHOLD", "0.8"),
            0.8,
        ),
        metrics_enabled=_as_bool(os.getenv("METRICS_ENABLED", "true")),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()

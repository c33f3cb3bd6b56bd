from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

MIN_ID_LENGTH = 12


def _load_env_file(env_path: Optional[Path] = None) -> None:
    path = env_path or Path.cwd() / ".env"
    if path.exists():
        load_dotenv(dotenv_path=path)


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _to_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class TempClipConfig:
    host: str = "0.0.0.0"
    port: int = 5000
    max_content_length: int = 1_000_000
    id_length: int = 24
    cleanup_interval: float = 300.0
    lazy_cleanup: bool = False
    lazy_cleanup_interval: float = 120.0
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.id_length < MIN_ID_LENGTH:
            raise ValueError(
                f"id_length must be at least {MIN_ID_LENGTH}, got {self.id_length}")
        if self.max_content_length <= 0:
            raise ValueError("max_content_length must be positive")
        if self.cleanup_interval <= 0 or self.lazy_cleanup_interval < 0:
            raise ValueError(
                "cleanup_interval must be positive and lazy_cleanup_interval non-negative")

    @classmethod
    def from_env(cls, *, env_path: Optional[Path] = None) -> "TempClipConfig":
        _load_env_file(env_path)

        return cls(
            host=os.getenv("TEMPCLIP_HOST", cls.host),
            port=_to_int("TEMPCLIP_PORT", cls.port),
            max_content_length=_to_int(
                "TEMPCLIP_MAX_CONTENT_LENGTH", cls.max_content_length),
            id_length=_to_int("TEMPCLIP_ID_LENGTH", cls.id_length),
            cleanup_interval=_to_float(
                "TEMPCLIP_CLEANUP_INTERVAL", cls.cleanup_interval),
            lazy_cleanup=_to_bool(
                os.getenv("TEMPCLIP_LAZY_CLEANUP"), default=cls.lazy_cleanup),
            lazy_cleanup_interval=_to_float(
                "TEMPCLIP_LAZY_CLEANUP_INTERVAL", cls.lazy_cleanup_interval),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )

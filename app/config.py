"""Runtime configuration read from the environment (and an optional .env)."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass(frozen=True)
class Settings:
    openweather_api_key: Optional[str] = None
    exchangerate_api_key: Optional[str] = None
    http_timeout: float = 10.0
    random_seed: Optional[int] = None
    allowed_origins: Tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "Settings":
        raw_origins = os.getenv("TRAVELWISE_ALLOWED_ORIGINS") or "*"
        origins: List[str] = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
        return cls(
            openweather_api_key=os.getenv("OPENWEATHER_API_KEY") or None,
            exchangerate_api_key=os.getenv("EXCHANGERATE_API_KEY") or None,
            http_timeout=_float_env("TRAVELWISE_HTTP_TIMEOUT", 10.0),
            random_seed=_int_env("TRAVELWISE_RANDOM_SEED"),
            allowed_origins=tuple(origins or ["*"]),
        )


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _int_env(name: str) -> Optional[int]:
    value = os.getenv(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None

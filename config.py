"""Environment configuration for the queue tools."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from models import SortStrategy

load_dotenv()


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


def _env_strategy(name: str, default: SortStrategy) -> SortStrategy:
    raw = os.getenv(name)
    if not raw:
        return default
    # an unknown name fails loudly instead of sorting with something else
    return SortStrategy.parse(raw)


@dataclass(frozen=True)
class Settings:
    sort_strategy: SortStrategy = SortStrategy.MERGE_BOTTOM_UP
    remove_bufsize: int = 1024
    fail_percent: int = 0
    trace_length: int = 3
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            sort_strategy=_env_strategy("QUEUE_SORT_STRATEGY", SortStrategy.MERGE_BOTTOM_UP),
            remove_bufsize=max(1, _env_int("QUEUE_REMOVE_BUFSIZE", 1024)),
            fail_percent=min(100, max(0, _env_int("QUEUE_FAIL_PERCENT", 0))),
            trace_length=max(1, _env_int("QUEUE_TRACE_LENGTH", 3)),
            log_level=os.getenv("QUEUE_LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()

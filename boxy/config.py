"""Configuration management for boxy.

Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class BoxyConfig:
    """Settings for the access layer built on top of a repository."""

    page_size: int = 5  # max entries per listing page
    log_level: str = "INFO"
    out_of_memory: bool = False  # file system listings raise MemoryError

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")

    @classmethod
    def from_env(cls) -> "BoxyConfig":
        return cls(
            page_size=int(os.getenv("BOXY_PAGE_SIZE", "5")),
            log_level=os.getenv("BOXY_LOG_LEVEL", "INFO").upper(),
            out_of_memory=os.getenv("BOXY_OUT_OF_MEMORY", "").strip().lower() in _TRUE_VALUES,
        )


def configure_logging(config: BoxyConfig) -> None:
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)

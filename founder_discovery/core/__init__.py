"""Core configuration, logging, and shared infrastructure."""

from founder_discovery.core.config import Settings, get_settings
from founder_discovery.core.constants import EMBEDDING_DIM
from founder_discovery.core.deadline import Deadline, DeadlineExceeded
from founder_discovery.core.limiter import limiter
from founder_discovery.core.logging_config import setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "EMBEDDING_DIM",
    "Deadline",
    "DeadlineExceeded",
    "limiter",
    "setup_logging",
]

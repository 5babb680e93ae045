"""Business logic services."""

from .discover import run_discover

__all__ = ["run_discover"]

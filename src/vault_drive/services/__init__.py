"""Cloud storage services."""

from . import drive

__all__ = [
    "drive",
]

"""Scheduling domain entities."""

from .assignment import MINUTES_PER_DAY, Assignment

__all__ = ["Assignment", "MINUTES_PER_DAY"]

"""Scoring profile repository implementations."""

from .json_profile_repository import JsonFileScoringProfileRepository
from .memory_profile_repository import InMemoryScoringProfileRepository

__all__ = [
    "InMemoryScoringProfileRepository",
    "JsonFileScoringProfileRepository",
]

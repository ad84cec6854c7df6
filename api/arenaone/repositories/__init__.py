"""Persistence port for the availability engine.

Handlers and sweeps depend on AvailabilityRepository; the engine itself only
ever sees the rows it is handed.
"""

from arenaone.repositories.base import AvailabilityRepository
from arenaone.repositories.memory import InMemoryRepository
from arenaone.repositories.sql import SqlRepository

__all__ = ["AvailabilityRepository", "InMemoryRepository", "SqlRepository"]

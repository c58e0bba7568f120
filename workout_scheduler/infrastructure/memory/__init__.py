"""
In-memory persistence for local development and tests.
"""

from .workouts import InMemoryWorkoutStore

__all__ = ["InMemoryWorkoutStore"]

"""
Repository pattern implementations for Snowflake.

Repositories translate between domain models and database representations.
"""

from .workouts import SnowflakeConfig, SnowflakeConnection, SnowflakeWorkoutRepository

__all__ = ["SnowflakeConfig", "SnowflakeConnection", "SnowflakeWorkoutRepository"]

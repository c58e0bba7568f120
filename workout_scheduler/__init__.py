"""
Workout Scheduler - coordinates workout sessions between athletes and coaches.

This package contains the complete application:
- core: Framework-agnostic lifecycle logic
- infrastructure: Persistence and email integrations
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"

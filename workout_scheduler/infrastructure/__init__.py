"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- snowflake: Workout persistence
- memory: In-memory workout store for mock mode
- mail: SMTP delivery of workout notifications

These wrappers translate between external formats and our domain models.
"""

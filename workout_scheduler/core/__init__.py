"""
Core business logic for workout scheduling.

This module is framework-agnostic - it doesn't import FastAPI, Snowflake,
or any mail library. Stores and notifiers are reached only through the
protocols in core.workouts.service, so the lifecycle rules can be tested
with in-memory doubles.
"""

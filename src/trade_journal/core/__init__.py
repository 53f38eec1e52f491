"""Shared enums, models, errors and settings."""

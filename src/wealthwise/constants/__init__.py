"""Shared enumerations and category lists."""

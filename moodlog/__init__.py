"""Moodlog: habit and mood correlation engine with a terminal front end."""

__version__ = "0.3.0"

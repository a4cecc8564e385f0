"""Automatic, dated titles for agent chat sessions."""

__version__ = "0.1.0"

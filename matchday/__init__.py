"""Matchday: backend for a football betting companion app."""

__version__ = "0.1.0"

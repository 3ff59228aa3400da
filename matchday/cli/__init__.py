"""
Command Line Interface for the Matchday API.

Provides commands for database setup, groups, users and bets through a
rich terminal interface.
"""

from matchday.cli.commands import cli

__all__ = ["cli"]

"""Clients for external data providers."""

from matchday.clients.football_api import FootballApiClient, FootballApiError, FootballApiResponse

__all__ = ["FootballApiClient", "FootballApiError", "FootballApiResponse"]

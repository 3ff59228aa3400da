"""
Async client for the API-Football v3 HTTP API.

Only the four read endpoints the application needs are wrapped. Every call
returns the API envelope (`results` count plus `response` payload); deciding
what an empty result means is left to the caller.
"""

from typing import Any

import httpx
import structlog
from pydantic import BaseModel, Field

from matchday.config.settings import FootballApiSettings
from matchday.errors import MatchdayError

logger = structlog.get_logger(__name__)


class FootballApiError(MatchdayError):
    """
    Raised when the football data API cannot be reached or answers with an
    error status. Uncategorized, so the API answers it with a generic 500.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FootballApiResponse(BaseModel):
    """Envelope every API-Football endpoint returns."""

    get: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)
    # API-Football sends [] when there are no errors and an object otherwise
    errors: list[Any] | dict[str, Any] = Field(default_factory=list)
    results: int = 0
    paging: dict[str, Any] = Field(default_factory=dict)
    response: Any = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.results == 0

    def items(self) -> list[dict[str, Any]]:
        """The payload as a list; single-object payloads are wrapped."""
        if isinstance(self.response, list):
            return self.response
        if self.response:
            return [self.response]
        return []

    def first(self) -> dict[str, Any] | None:
        items = self.items()
        return items[0] if items else None


class FootballApiClient:
    """
    Async client for API-Football.

    Usage:
        async with FootballApiClient(settings.football_api) as api:
            response = await api.get_standings(league=39, season=2024)
    """

    def __init__(
        self,
        settings: FootballApiSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        headers = {"Accept": "application/json"}
        api_key = settings.api_key.get_secret_value()
        if api_key:
            headers["x-apisports-key"] = api_key

        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            headers=headers,
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    async def _request(self, endpoint: str, params: dict[str, Any]) -> FootballApiResponse:
        """Make a GET request and parse the API envelope.

        Raises:
            FootballApiError: On transport errors or non-2xx responses
        """
        logger.debug("Football API request", endpoint=endpoint, params=params)

        try:
            response = await self._client.get(endpoint, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Football API returned an error status",
                endpoint=endpoint,
                status_code=e.response.status_code,
            )
            raise FootballApiError(
                f"Football API {endpoint} answered {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error("Football API request failed", endpoint=endpoint, error=str(e))
            raise FootballApiError(f"Football API {endpoint} request failed: {e}") from e

        payload = FootballApiResponse.model_validate(response.json())
        if payload.errors:
            logger.warning("Football API reported errors", endpoint=endpoint, errors=payload.errors)
        logger.debug("Football API response", endpoint=endpoint, results=payload.results)
        return payload

    async def get_team(self, team: int, league: int, season: int) -> FootballApiResponse:
        """Team and venue information."""
        return await self._request("/teams", {"id": team, "league": league, "season": season})

    async def get_team_statistics(
        self, team: int, league: int, season: int
    ) -> FootballApiResponse:
        """Season statistics of a team in a league."""
        return await self._request(
            "/teams/statistics", {"team": team, "league": league, "season": season}
        )

    async def get_standings(self, league: int, season: int) -> FootballApiResponse:
        """League tables of a season."""
        return await self._request("/standings", {"league": league, "season": season})

    async def get_fixtures(self, team: int, next: int) -> FootballApiResponse:
        """The next `next` fixtures of a team across all competitions."""
        return await self._request("/fixtures", {"team": team, "next": next})

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "FootballApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

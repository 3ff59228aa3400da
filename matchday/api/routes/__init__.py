"""API routers."""

from matchday.api.routes import admin, auth, bets, health

__all__ = ["admin", "auth", "bets", "health"]

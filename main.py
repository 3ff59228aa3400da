"""
Matchday API - Main Entry Point

Runs the HTTP API with uvicorn using the configured host and port.
"""

import uvicorn

from matchday.config.settings import get_settings


def main() -> None:
    """Main entry point."""
    settings = get_settings()
    uvicorn.run(
        "matchday.api.app:create_app",
        factory=True,
        host=settings.app.host,
        port=settings.app.port,
        reload=settings.app.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()

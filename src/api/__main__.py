"""Run the HTTP server: ``python -m src.api``."""

import uvicorn

from src.api.dependencies import get_settings


def main() -> None:
    """Start uvicorn with host, port and workers from server settings."""
    settings = get_settings()
    server = settings.server
    uvicorn.run(
        "src.api.main:app",
        host=server.host,
        port=server.port,
        workers=server.workers,
        reload=server.reload,
        log_level=(settings.telemetry.log_level or settings.app.log_level).lower(),
    )


if __name__ == "__main__":
    main()

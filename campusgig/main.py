"""
Main application entry point.
"""

from campusgig.api.app import create_app
from campusgig.config.logging import configure_logging, get_logger
from campusgig.config.settings import settings

configure_logging(settings)
logger = get_logger(__name__)

app = create_app(settings)


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    logger.info(
        "Starting CampusGig marketplace server",
        host=settings.API_HOST,
        port=settings.API_PORT,
    )

    uvicorn.run(
        "campusgig.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()

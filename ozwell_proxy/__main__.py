"""Run the gateway with uvicorn: ``python -m ozwell_proxy``."""

import logging

import uvicorn

logger = logging.getLogger("ozwell-proxy")


def main() -> None:
    from .main import app

    settings = app.state.settings
    logger.info("Ozwell proxy service starting on %s:%s", settings.host, settings.port)
    logger.info("Health check: http://localhost:%s/health", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()

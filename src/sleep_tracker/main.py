"""Entry point that serves the API with uvicorn."""

import uvicorn

from sleep_tracker.common.config import get_config
from sleep_tracker.common.logging import get_logger


def main():
    """Main entry point."""
    config = get_config()
    logger = get_logger(__name__, config.log_level.value)
    logger.info(f"Sleep tracker starting in {config.environment.value} mode")
    logger.info(f"Database backend: {config.database_url.split(':', 1)[0]}")

    uvicorn.run(
        "sleep_tracker.api.gateway:app",
        host=config.api_host,
        port=config.api_port,
        log_level=config.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()

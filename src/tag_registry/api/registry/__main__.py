"""Registry service startup script."""

import sys

import uvicorn
from loguru import logger

from tag_registry.api.registry.registry_app import create_registry_app, load_config, setup_logging


def main():
    """Run registry service."""
    try:
        config = load_config()
        setup_logging(config.service.log_level)

        app = create_registry_app(config)

        uvicorn.run(
            app,
            host=config.service.host,
            port=config.service.port,
            log_level=config.service.log_level.lower()
        )

    except Exception as e:
        logger.exception(f"Failed to start registry service: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

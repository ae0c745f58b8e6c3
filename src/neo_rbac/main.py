"""Neo RBAC API main entry point."""

import uvicorn

from .config.logging_config import LoggingConfig

# Configure logging based on environment
LoggingConfig.configure()

from .app import create_app, load_environment
from .config.settings import get_settings

logger = LoggingConfig.get_logger(__name__)

load_environment()
get_settings.cache_clear()

# Create the FastAPI application
app = create_app()


def main() -> None:
    """Run the application."""
    settings = get_settings()
    
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    
    uvicorn.run(
        "neo_rbac.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
        access_log=True,
    )


if __name__ == "__main__":
    main()

# app/__main__.py
import uvicorn

from app.core.config import get_settings
from app.core.logging_config import get_logger, setup_logging

logger = get_logger("app")

def main() -> None:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    logger.info("Server running on http://localhost:%s", settings.PORT)
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, log_config=None)

if __name__ == "__main__":
    main()

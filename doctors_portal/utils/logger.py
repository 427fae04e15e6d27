import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from doctors_portal.config import get_settings

settings = get_settings()

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

logs_dir = Path(settings.LOG_DIR)
logs_dir.mkdir(parents=True, exist_ok=True)


def _rotating(filename: str, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        logs_dir / filename,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


level = logging.DEBUG if settings.APP_DEBUG else logging.INFO

logger = logging.getLogger(settings.APP_NAME)
logger.setLevel(level)

# Prevent duplicate logs on re-import
if logger.handlers:
    logger.handlers.clear()

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(level)
console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
logger.addHandler(console_handler)

# requests, bookings, payments
logger.addHandler(_rotating("app.log", logging.INFO))
# unhandled exceptions and failed payment phases only
logger.addHandler(_rotating("errors.log", logging.ERROR))


def get_logger(name: str = None) -> logging.Logger:
    """Get a logger instance. If name is provided, returns a child logger."""
    if name:
        return logger.getChild(name)
    return logger

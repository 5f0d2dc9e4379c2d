import logging
import sys
from typing import Optional
from pathlib import Path

from app.core.config import settings


class StructuredFormatter(logging.Formatter):
    """File log formatter that appends moderation context fields."""

    context_fields = ("request_id", "entity_id", "entity_type", "priority", "error_code")

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record):
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'function': f"{record.funcName}:{record.lineno}",
            'message': record.getMessage(),
            'service': self.service_name
        }

        for field in self.context_fields:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return f"[{record.levelname}] {record.getMessage()} | {log_data}"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    service_name: str = "ai-sentinel"
) -> logging.Logger:
    """
    Configure logging for the moderation relay.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for structured log output
        service_name: Logger name, also stamped on structured records

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(service_name)
    logger.setLevel(getattr(logging, level.upper()))

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(StructuredFormatter(service_name))
        logger.addHandler(file_handler)

    return logger


logger = setup_logging(level=settings.log_level, log_file=settings.log_file)

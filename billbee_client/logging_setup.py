import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys
from typing import Optional, Union

from .config import get_settings

LOGGER_NAME = "billbee_client"


# Lets only INFO and WARNING through to the info log
class InfoFilter(logging.Filter):
    def filter(self, record):
        return record.levelno in (logging.INFO, logging.WARNING)


def setup_logging(
    level: Union[int, str, None] = None,
    log_dir: Optional[Union[str, Path]] = None,
    console: bool = True,
) -> logging.Logger:
    """Attach console and, optionally, rotating file handlers to the client logger.

    Without an explicit level the BILLBEE_LOG_LEVEL setting is used.
    """
    if level is None:
        level = get_settings().log_level
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if log_dir is not None:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)

        # billbee.log: INFO and WARNING
        info_handler = RotatingFileHandler(
            directory / 'billbee.log',
            maxBytes=5*1024*1024,  # 5 MB
            backupCount=5
        )
        info_handler.setLevel(logging.INFO)
        info_handler.setFormatter(formatter)
        info_handler.addFilter(InfoFilter())
        logger.addHandler(info_handler)

        # billbee-error.log: ERROR and CRITICAL
        error_handler = RotatingFileHandler(
            directory / 'billbee-error.log',
            maxBytes=5*1024*1024,  # 5 MB
            backupCount=5
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        logger.addHandler(error_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

CONSOLE_HANDLER = "water_logger.console"
FILE_HANDLER = "water_logger.file"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Each app lifespan calls this; attach our handlers only once
    if any(h.get_name() == CONSOLE_HANDLER for h in logger.handlers):
        return

    fmt = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s - %(message)s"
    )

    # Console
    ch = logging.StreamHandler()
    ch.set_name(CONSOLE_HANDLER)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # Rotating file
    if log_file:
        fh = RotatingFileHandler(
            log_file, maxBytes=2_000_000, backupCount=5
        )
        fh.set_name(FILE_HANDLER)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    # Silence noisy httpx request logging
    logging.getLogger("httpx").setLevel(logging.WARNING)

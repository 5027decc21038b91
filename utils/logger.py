import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

def setup_logger(log_file: str = "logs/dashboard.log", level: str = "INFO",
                 max_bytes: int = 10_000_000, backup_count: int = 5,
                 fmt: str = LOG_FORMAT, datefmt: str = None) -> logging.Logger:
    Path(log_file).parent.mkdir(exist_ok=True, parents=True)
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt, datefmt=datefmt)

    # повторный вызов не должен дублировать вывод
    for existing in list(logger.handlers):
        if getattr(existing, "_focusboard", False):
            logger.removeHandler(existing)
            existing.close()

    console = logging.StreamHandler()
    file_handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    for handler in (console, file_handler):
        handler.setFormatter(formatter)
        handler._focusboard = True
        logger.addHandler(handler)
    return logger

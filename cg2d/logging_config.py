"""
Logging Configuration
Налаштування логера пакета `cg2d` для скриптів і прикладів.

Бібліотека сама нічого не виводить: у `cg2d/__init__.py` до логера
підвішено лише NullHandler. setup_logging() додає консольний (і за потреби
файловий) обробник; повторний виклик замінює лише свої обробники.
"""
import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "cg2d"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_OWN_HANDLER = "_cg2d_own"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configures the logger for the 'cg2d' namespace.

    Args:
        level: Logging level. DEBUG shows mesh stats after build(),
            rejected insertions and dual-vertex cache resets.
        log_file: Optional path to save logs to a file.
        stream: Console stream, sys.stdout by default.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # прибираємо лише те, що додали самі
    for handler in list(logger.handlers):
        if getattr(handler, _OWN_HANDLER, False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')
    handlers = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        setattr(handler, _OWN_HANDLER, True)
        logger.addHandler(handler)

    logger.debug("Logging initialized (level=%s).", logging.getLevelName(level))
    return logger

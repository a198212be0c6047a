import logging
import sys

ROOT_LOGGER = "diceroll"


class ConditionalFormatter(logging.Formatter):
    """Adds the source location to warnings and above."""

    BASIC = "[%(levelname)s] %(name)s - %(message)s"
    DETAILED = "[%(levelname)s] %(name)s [%(module)s:%(lineno)d] - %(message)s"

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.WARNING:
            self._style._fmt = self.DETAILED
        else:
            self._style._fmt = self.BASIC
        return super().format(record)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def setup_logging(verbose: bool = False, stream=None) -> logging.Logger:
    """Configure the package logger, writing to stderr by default."""

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Don't add a second handler when main is called more than once.
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ConditionalFormatter())
    logger.addHandler(handler)
    return logger

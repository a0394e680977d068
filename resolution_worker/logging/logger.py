import logging
import sys

# Third-party loggers that emit one line per request or per PDF object.
_NOISY_LOGGERS = ("httpx", "httpcore", "pdfminer")


class Log:
    """Centralized logging with structured format."""

    _logger: logging.Logger = logging.getLogger("resolution_worker")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the worker logger with the given level and a stdout handler.

        Library loggers stay at WARNING unless the worker itself runs at DEBUG.
        """
        level = log_level.upper()
        cls._logger.setLevel(level)
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)
        library_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(library_level)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Log an info message."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Log an error message."""
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def exception(cls, message: str, **kwargs: object) -> None:
        """Log an error message with the active exception's traceback."""
        cls._logger.exception(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Log a warning message."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Log a debug message."""
        cls._logger.debug(message, extra=kwargs)

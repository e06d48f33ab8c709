import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager


class Log:
    """Centralized logging with structured format."""

    _logger: logging.Logger = logging.getLogger("sarif_upload")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Log an info message."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Log an error message."""
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Log a warning message."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Log a debug message."""
        cls._logger.debug(message, extra=kwargs)

    @classmethod
    @contextmanager
    def group(cls, title: str) -> Iterator[None]:
        """Wrap the enclosed log lines in a collapsible runner log group.

        The markers are written straight to stdout so the CI runner sees them
        at the start of a line, independent of the formatter.
        """
        sys.stdout.write(f"::group::{title}\n")
        sys.stdout.flush()
        try:
            yield
        finally:
            sys.stdout.write("::endgroup::\n")
            sys.stdout.flush()

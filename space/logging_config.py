import logging
import sys
from typing import IO, Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import Settings
from .core.exceptions import InvalidInputError


LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# attributes every LogRecord carries; anything else came in through ``extra=``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class GithubActionsFormatter(logging.Formatter):
    """
    Formats records as GitHub Actions workflow commands.

    DEBUG, WARNING and ERROR map to ``::debug::``, ``::warning::`` and
    ``::error::``; INFO is written as plain text. Values passed through
    ``extra=`` are appended as ``key=value``.
    """

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno < logging.INFO:
            prefix = "::debug::"
        elif record.levelno < logging.WARNING:
            prefix = ""
        elif record.levelno < logging.ERROR:
            prefix = "::warning::"
        else:
            prefix = "::error::"

        line = prefix + record.getMessage()
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                line += f" {key}={value}"
        return line


def parse_level(level: str) -> int:
    name = (level or "INFO").upper()
    if name == "WARN":
        name = "WARNING"
    if name not in LEVELS:
        raise InvalidInputError(f"invalid log level: unknown log level {level!r}")
    return getattr(logging, name)


def setup_logging(
    settings: Settings,
    level: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    stream = stream or sys.stdout

    if settings.in_github_actions:
        # the runner filters debug lines itself, so nothing is dropped here
        handler: logging.Handler = logging.StreamHandler(stream)
        handler.setFormatter(GithubActionsFormatter())
        log_level = logging.DEBUG
    else:
        log_level = parse_level(level or settings.log_level)
        handler = RichHandler(
            console=Console(file=stream),
            show_time=False,
            show_level=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
        )
    handler.setLevel(log_level)

    # Configure root logger (catches everything)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Silence noisy third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)

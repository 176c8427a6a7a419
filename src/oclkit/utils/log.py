"""
Logging configuration module with colored output.

Uses the color.py module for terminal colors. The library itself only ever
calls ``logging.getLogger(__name__)``; applications and the ``oclkit`` CLI opt
in to this formatting through :func:`config`.
"""
import datetime
import logging
import os

from .color import white, grey, green, yellow, red, bold, use_color

# ----------------------------------------------------------------------------
# env helpers


def getenv(key: str, default: bool = False) -> bool:
    """Convert '0','1' env values to bool {True, False}"""
    return bool(int(os.getenv(key, default)))


# ----------------------------------------------------------------------------
# constants

DEBUG = getenv("OCLKIT_DEBUG", default=False)
COLOR = getenv("OCLKIT_COLOR", default=True)

# ----------------------------------------------------------------------------
# logging config


class CustomFormatter(logging.Formatter):
    """Custom logging formatting class using color.py for terminal colors."""

    fmt = "%(delta)s - %(levelname)s - %(name)s.%(funcName)s - %(message)s"

    def __init__(self, use_color_flag=COLOR):
        super().__init__(self.fmt)
        self.use_color_flag = use_color_flag
        self._build_formats()

    def _build_formats(self):
        """Build format strings for each log level."""
        if not (self.use_color_flag and use_color()):
            self.formats = {}
            return

        base_fmt = "{delta} - {level} - {name} - {msg}"
        level_colors = {
            logging.DEBUG: grey,
            logging.INFO: green,
            logging.WARNING: yellow,
            logging.ERROR: red,
            logging.CRITICAL: lambda s: bold(red(s)),
        }
        self.formats = {
            level: base_fmt.format(
                delta=white("%(delta)s"),
                level=paint("%(levelname)s"),
                name=white("%(name)s.%(funcName)s"),
                msg=grey("%(message)s"),
            )
            for level, paint in level_colors.items()
        }

    def format(self, record):
        """Custom logger formatting method"""
        duration = datetime.datetime.fromtimestamp(
            record.relativeCreated / 1000, datetime.timezone.utc
        )
        record.delta = duration.strftime("%H:%M:%S")

        log_fmt = self.formats.get(record.levelno, self.fmt)
        return logging.Formatter(log_fmt).format(record)


def config(name: str) -> logging.Logger:
    """Configure and return a logger with custom formatting.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    strm_handler = logging.StreamHandler()
    strm_handler.setFormatter(CustomFormatter())
    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.INFO,
        handlers=[strm_handler],
    )
    return logging.getLogger(name)

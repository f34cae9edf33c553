"""Logging configuration for the floorplan marker client."""
import copy
import logging
import sys
import os


class ColorFormatter(logging.Formatter):
    """Color-coded formatter for console output."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        if record.levelname in self.COLORS:
            # other handlers must still see the plain level name
            record = copy.copy(record)
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


def setup_logging(level=None):
    """Setup logging configuration for the client.

    Console-only logging; level comes from ``level`` or ``LOG_LEVEL`` and
    colors are used on a TTY unless ``LOG_COLORS`` is false.
    """
    # Get log level from argument or environment
    log_level_str = (level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    # Configure root logger
    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Determine if colors are supported
    use_colors = os.getenv('LOG_COLORS', 'true').lower() in ('true', '1', 'yes')

    # Console handler (the client never writes log files)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if use_colors and sys.stdout.isatty():
        console_handler.setFormatter(ColorFormatter('%(asctime)s %(levelname)s %(name)-25s %(message)s'))
    else:
        console_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)-8s %(name)-25s %(message)s'))

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()
    logger.addHandler(console_handler)

    # Reduce requests transport noise
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    logger.info(f"Client logging initialized (level: {log_level_str})")

    return logger

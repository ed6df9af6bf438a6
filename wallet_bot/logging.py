"""
Centralized logging configuration for the wallet bot.

Provides:
- Console logging with colored, prefixed output by bot area
- File logging with timestamps for post-mortem analysis
- Logger factory for the different components

Area loggers (``wallet.vault``, ``wallet.orders``, ...) carry no handlers of
their own; they propagate to the ``wallet`` parent, which owns the console
handler and, once ``setup_logging`` has run, the file handler. Loggers created
at import time therefore pick up file output too.

Never pass private keys or passwords to a logger. ``RedactKeysFilter`` masks
anything shaped like an EOS private key as a last line of defence.
"""

import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "wallet"


class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_BLUE = "\033[94m"
    BRIGHT_MAGENTA = "\033[95m"
    BRIGHT_CYAN = "\033[96m"


# area -> console color
AREA_COLORS = {
    "main": Colors.BRIGHT_CYAN,
    "database": Colors.BRIGHT_BLUE,
    "migrations": Colors.BLUE,
    "vault": Colors.BRIGHT_MAGENTA,
    "session": Colors.MAGENTA,
    "conversation": Colors.CYAN,
    "orders": Colors.BRIGHT_YELLOW,
    "accounts": Colors.YELLOW,
    "chain": Colors.BRIGHT_GREEN,
    "telegram": Colors.GREEN,
    "handlers": Colors.GREEN,
}

# Legacy WIF keys and K1 private keys
_PRIVATE_KEY_RE = re.compile(r"\b(5[HJK][1-9A-HJ-NP-Za-km-z]{49}|PVT_K1_[1-9A-HJ-NP-Za-km-z]{40,})\b")


def _area_of(record: logging.LogRecord) -> str:
    _, _, area = record.name.partition(".")
    return area or "main"


class RedactKeysFilter(logging.Filter):
    """Replace private-key-shaped substrings in the rendered message."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _PRIVATE_KEY_RE.sub("[REDACTED]", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class ColoredConsoleFormatter(logging.Formatter):
    """Adds colors and area prefixes to console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DIM,
        logging.INFO: Colors.RESET,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BRIGHT_RED + Colors.BOLD,
    }

    def format(self, record: logging.LogRecord) -> str:
        area = _area_of(record)
        area_color = AREA_COLORS.get(area, Colors.WHITE)
        level_color = self.LEVEL_COLORS.get(record.levelno, Colors.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        # Format: [WALLET.area] HH:MM:SS LEVEL: message
        prefix = f"{area_color}[WALLET.{area}]{Colors.RESET}"
        time_str = f"{Colors.DIM}{timestamp}{Colors.RESET}"
        level_str = f"{level_color}{record.levelname:<8}{Colors.RESET}"

        message = f"{prefix} {time_str} {level_str} {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


class FileFormatter(logging.Formatter):
    """Full timestamps plus any chat context passed via ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]

        context = "".join(
            f" {key}={getattr(record, key)}" for key in ("chat_id", "user_id") if hasattr(record, key)
        )

        line = f"{timestamp} [WALLET.{_area_of(record)}] {record.levelname}: {record.getMessage()}{context}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        root.setLevel(logging.DEBUG)
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(logging.INFO)
        console.setFormatter(ColoredConsoleFormatter())
        console.addFilter(RedactKeysFilter())
        root.addHandler(console)
        root.propagate = False
    return root


def setup_logging(
    log_dir: Optional[str] = None,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Add file logging for every area.

    Args:
        log_dir: Directory for log files. Defaults to ./logs
        file_level: Minimum level for file output

    Returns:
        Path to the log directory
    """
    directory = Path(log_dir) if log_dir else Path.cwd() / "logs"
    directory.mkdir(parents=True, exist_ok=True)

    log_filename = datetime.now().strftime("wallet_bot_%Y%m%d_%H%M%S.log")
    log_path = directory / log_filename

    latest_link = directory / "latest.log"
    try:
        if latest_link.is_symlink() or latest_link.exists():
            latest_link.unlink()
        latest_link.symlink_to(log_filename)
    except OSError as e:
        print(f"latest.log link not updated: {e}", file=sys.stderr)

    root = _root()
    for handler in [h for h in root.handlers if isinstance(h, logging.FileHandler)]:
        root.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(FileFormatter())
    file_handler.addFilter(RedactKeysFilter())
    root.addHandler(file_handler)

    root.info(f"Logging initialized. Log file: {log_path}")
    return directory


def get_logger(area: str = "main") -> logging.Logger:
    """
    Get a logger for a specific bot area.

    Example:
        logger = get_logger("orders")
        logger.info("RAM order 12 placed")
        # Output: [WALLET.orders] 14:32:15 INFO     RAM order 12 placed
    """
    _root()
    return logging.getLogger(f"{ROOT_LOGGER}.{area}")

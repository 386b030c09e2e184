import logging
import sys
from datetime import datetime, timezone

from .config import settings

# ANSI escape codes
_RESET    = "\033[0m"
_BOLD     = "\033[1m"
_DIM      = "\033[2m"

# Level → color
_LEVEL_COLORS = {
    "DEBUG":    "\033[36m",    # Cyan
    "INFO":     "\033[32m",    # Green
    "WARNING":  "\033[33m",    # Yellow
    "ERROR":    "\033[31m",    # Red
    "CRITICAL": "\033[35;1m",  # Bright Magenta
}

_COMPONENT_COLOR = "\033[94m"
_COMPONENT_TAG   = "FETCH"


class SysfetchFormatter(logging.Formatter):
    """
    Human-readable colored formatter for sysfetch.

    Example output:
      [2026-10-19 14:05:33.421]  [FETCH]  [DEBUG   ]  sysfetch.invoker      » Running nvidia-smi --query-gpu=...
      [2026-10-19 14:05:33.512]  [FETCH]  [WARNING ]  sysfetch.probes.gpu   » GPU detection failed: lspci exited 1
      [2026-10-19 14:05:33.600]  [FETCH]  [ERROR   ]  sysfetch              » Snapshot collection failed
    """

    def format(self, record: logging.LogRecord) -> str:
        # --- Timestamp [YYYY-MM-DD HH:MM:SS.mmm] ---
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S.%f"
        )[:-3]  # trim microseconds → milliseconds
        ts_part = f"{_DIM}[{ts}]{_RESET}"

        badge = f"{_COMPONENT_COLOR}{_BOLD}[{_COMPONENT_TAG}]{_RESET}"

        # --- Level tag [INFO    ] padded to 8 chars inside brackets ---
        level      = record.levelname
        lcolor     = _LEVEL_COLORS.get(level, "")
        level_part = f"{lcolor}{_BOLD}[{level:<8}]{_RESET}"

        name_part = f"{_DIM}{record.name}{_RESET}"

        msg = record.getMessage()
        if record.exc_info:
            msg = msg + "\n" + self.formatException(record.exc_info)

        return f"{ts_part}  {badge}  {level_part}  {name_part}  » {msg}"


def setup_logging() -> logging.Logger:
    """
    Configure logging for sysfetch.

    Development  → colored, human-readable lines to stderr
    Production   → plain structured lines to stderr (no color codes)

    stdout is reserved for the report itself.
    Log level is controlled by settings.LOG_LEVEL (default: WARNING).
    """
    root = logging.getLogger()

    # Remove handlers added by imported libraries before us
    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)

    if settings.ENVIRONMENT == "production":
        plain_fmt = logging.Formatter(
            fmt="[%(asctime)s]  [FETCH]  [%(levelname)-8s]  %(name)s  » %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(plain_fmt)
    else:
        handler.setFormatter(SysfetchFormatter())

    root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL.upper())

    logging.getLogger("asyncio").setLevel(logging.WARNING)

    return root


logger = setup_logging()

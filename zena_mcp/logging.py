"""Rich-based logging configuration for the planning core.

Log output always goes to stderr: stdout carries the MCP stdio transport.
"""

from __future__ import annotations

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

ZENA_THEME = Theme({
    "logging.level.debug": "blue",
    "logging.level.info": "green",
    "logging.level.warning": "yellow",
    "logging.level.error": "red bold",
    "logging.level.critical": "red bold reverse",
})


def is_tty() -> bool:
    """Check if stderr is a TTY (interactive terminal)."""
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def should_use_rich() -> bool:
    """Determine if Rich logging should be used.

    ZENA_RICH_LOGS=1/0 forces it on or off, otherwise Rich is used on a TTY.
    """
    env_value = os.environ.get("ZENA_RICH_LOGS", "").lower()

    if env_value in ("1", "true", "yes"):
        return True
    if env_value in ("0", "false", "no"):
        return False

    return is_tty()


def configure_logging(
    level: int | str = logging.INFO,
    force_rich: bool | None = None,
) -> None:
    """Configure root logging with a Rich or plain stderr handler.

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
        force_rich: Override auto-detection. None = auto-detect.
    """
    use_rich = force_rich if force_rich is not None else should_use_rich()

    root = logging.getLogger()
    root.handlers.clear()

    if use_rich:
        console = Console(theme=ZENA_THEME, stderr=True)
        handler: logging.Handler = RichHandler(
            console=console,
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)

    # The MCP SDK is chatty at INFO
    logging.getLogger("mcp").setLevel(logging.WARNING)

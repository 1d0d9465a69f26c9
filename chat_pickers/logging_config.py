"""
Logging configuration for the picker widgets.

Textual owns the terminal while an app is running, so by default records go to
a rotating file only. Console output can be switched on for headless use.
"""

import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import get_picker_setting

LOG_LEVEL_ENV_VAR = "CHAT_PICKERS_LOG_LEVEL"


def resolve_log_level(level: Optional[str] = None) -> str:
    """Explicit argument wins, then the environment, then the config file."""
    if level:
        return level.upper()
    env_level = os.environ.get(LOG_LEVEL_ENV_VAR)
    if env_level:
        return env_level.upper()
    return str(get_picker_setting("logging", "level", "INFO")).upper()


def configure_logging(level: Optional[str] = None,
                      log_file: Optional[str] = None,
                      console: Optional[bool] = None) -> Optional[Path]:
    """
    Configure loguru sinks for the application.

    This should be called once at startup.

    Args:
        level: Minimum level, e.g. "DEBUG"
        log_file: Path of the rotating log file; an empty string disables it
        console: Also log to stderr

    Returns:
        The resolved log file path, or None if file logging is disabled
    """
    resolved_level = resolve_log_level(level)
    if log_file is None:
        log_file = get_picker_setting("logging", "log_file", "")
    if console is None:
        console = bool(get_picker_setting("logging", "log_to_console", False))

    logger.remove()  # Remove default handler

    log_path: Optional[Path] = None
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            sink=str(log_path),
            level=resolved_level,
            rotation="10 MB",
            retention="7 days",
            encoding="utf-8",
        )

    if console:
        logger.add(
            sink=sys.stderr,
            level=resolved_level,
            colorize=True,
        )

    logger.info(f"Picker logging configured: level={resolved_level}, file={log_path}, console={console}")
    return log_path

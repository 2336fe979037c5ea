"""
Loguru setup shared by every gocodemod module.

Environment switches:
- GOCODEMOD_MACHINE_MODE=1: no console output (tests, scripted runs)
- GOCODEMOD_FILE_LOGGING=1: also log to .gocodemod/logs/gocodemod.log
- GOCODEMOD_LOG_LEVEL: console level, INFO by default
"""

import os
import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)

_logging_configured = False


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def setup_logging(level=None, suppress_console=None, enable_file_logging=None, force=False):
    """
    Install the gocodemod sinks on the global loguru logger.

    Runs once per process unless ``force`` is set; arguments left as None
    fall back to the environment switches.

    Args:
        level: Console level
        suppress_console: Drop the stderr sink
        enable_file_logging: Add the rotating file sink under .gocodemod/logs/
        force: Replace sinks installed by an earlier call
    """
    global _logging_configured
    if _logging_configured and not force:
        return
    _logging_configured = True

    logger.remove()

    if suppress_console is None:
        suppress_console = _env_flag("GOCODEMOD_MACHINE_MODE")
    if not suppress_console:
        logger.add(sys.stderr, level=level or os.getenv("GOCODEMOD_LOG_LEVEL", "INFO"),
                   format=CONSOLE_FORMAT, colorize=True)

    if enable_file_logging is None:
        enable_file_logging = _env_flag("GOCODEMOD_FILE_LOGGING")
    if enable_file_logging:
        from gocodemod.paths import get_paths
        paths = get_paths()
        paths.ensure_dirs()
        # Workers log concurrently
        logger.add(
            paths.logs_dir / "gocodemod.log",
            level="DEBUG",
            rotation="10 MB",
            retention="3 days",
            compression="gz",
            enqueue=True,
            catch=True,
        )


setup_logging()

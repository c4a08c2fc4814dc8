import sys
import os
from loguru import logger

# Flag to track if logging has been configured
_logging_configured = False


def setup_logging(level=None, suppress_console=None, enable_file_logging=None, force=False):
    """
    Configures the global logger.

    Console logging goes to stderr. File logging is opt-in via
    GOPACK_FILE_LOGGING=1 or enable_file_logging=True and lands in
    .gopack/logs/gopack.log under the project root.

    Args:
        level: Logging level. If None, check GOPACK_LOG_LEVEL (default: INFO).
        suppress_console: If True, suppress console logging. If None, check GOPACK_QUIET env var.
        enable_file_logging: If True, enable file logging. If None, check GOPACK_FILE_LOGGING env var.
        force: Reconfigure even if logging was already configured.
    """
    global _logging_configured

    # Only configure once to avoid duplicate handlers
    if _logging_configured and not force:
        return
    _logging_configured = True

    logger.remove()

    if level is None:
        level = os.getenv("GOPACK_LOG_LEVEL", "INFO").upper()

    if suppress_console is None:
        suppress_console = os.getenv("GOPACK_QUIET", "").lower() in ("1", "true", "yes")

    if not suppress_console:
        logger.add(
            sys.stderr,
            level=level,
            format="<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>",
            colorize=os.getenv("GOPACK_SKIP_COLORS") != "1",
        )

    if enable_file_logging is None:
        enable_file_logging = os.getenv("GOPACK_FILE_LOGGING", "").lower() in ("1", "true", "yes")

    if enable_file_logging:
        from gopack.paths import get_paths
        paths = get_paths()
        paths.logs_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            paths.logs_dir / "gopack.log",
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
            compression="gz",
            catch=True,
            serialize=False,
        )


# Configure the logger on import (honours the env vars above)
setup_logging()

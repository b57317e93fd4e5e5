"""Root logger configuration for the filecache CLI.

Diagnostics go to stderr so that values printed by commands on stdout can be
piped. Handlers installed here are tagged, and calling `setup_logging` again
replaces only those, leaving handlers added by an embedding application or a
test harness alone.
"""

import logging
import sys
from typing import List, Optional, Union

DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_HANDLER_MARKER = "_filecache_handler"


def _owned_handlers(root_logger: logging.Logger) -> List[logging.Handler]:
    return [h for h in root_logger.handlers if getattr(h, _HANDLER_MARKER, False)]


def _resolve_level(log_level: Union[int, str]) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else DEFAULT_LOG_LEVEL


def _build_handlers(formatter: logging.Formatter, log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
        except OSError as e:
            # Reported once the stderr handler is attached
            logging.getLogger(__name__).error(f"Cannot write log file {log_file}: {e}")
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARKER, True)
    return handlers


def setup_logging(
    log_level: Union[int, str] = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None
) -> List[logging.Handler]:
    """Configures the root logger for a CLI run.

    Args:
        log_level: A logging level number or name ("DEBUG", "info", ...).
            Unknown names fall back to WARNING.
        log_format: Format string shared by all installed handlers.
        log_file: Optional path of a file that receives the same records.

    Returns:
        The handlers now attached by this module.
    """
    root_logger = logging.getLogger()
    level = _resolve_level(log_level)
    root_logger.setLevel(level)

    for handler in _owned_handlers(root_logger):
        root_logger.removeHandler(handler)
        handler.close()

    handlers = _build_handlers(logging.Formatter(log_format), log_file)
    for handler in handlers:
        root_logger.addHandler(handler)

    logger = logging.getLogger(__name__)
    if log_file and len(handlers) > 1:
        logger.info(f"Logging to file: {log_file}")
    logger.debug(f"Logging configured at {logging.getLevelName(level)}")
    return handlers

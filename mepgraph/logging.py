"""Package-wide logging setup for MEPGraph.

All modules obtain loggers through :func:`get_logger` so that they hang off
the single ``mepgraph`` root logger configured here. What each level carries
during an export run:

- DEBUG: one record per system as it enters the pipeline, the traversal
  counts (elements, revisits, depth), the encoded graph size, and the final
  identifier list of each category.
- INFO: model loading, the number of qualifying systems, the summary line,
  and the elapsed time printed by the CLI.
- WARNING: per-system problems that do not stop the run, such as a failed
  traversal, an unwritable XML file, an unencodable graph, or a rejected
  attribute store write.

The CLI maps ``--verbose`` and ``--quiet`` onto these levels through
:func:`configure_from_flags`. Library users call :func:`set_global_log_level`
or :func:`enable_debug_logging` directly.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "mepgraph"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_root_logger(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach one handler to the ``mepgraph`` root logger.

    Calling this more than once is a no-op until :func:`reset_logging` runs.

    Args:
        level: Logging level for the package root (default: INFO).
        format_string: Record format; defaults to ``DEFAULT_FORMAT``.
        handler: Handler to attach; defaults to a stdout StreamHandler.
    """
    global _configured

    if _configured:
        return

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root.addHandler(handler)

    # pytest's caplog listens on the interpreter root logger
    root.propagate = True

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a child logger of the ``mepgraph`` root.

    Args:
        name: Logger name, normally ``__name__`` of the calling module.

    Returns:
        Logger whose level is inherited from the package root.
    """
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the package root logger and its handlers."""
    setup_root_logger()
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)


def configure_from_flags(verbose: bool = False, quiet: bool = False) -> None:
    """Map the CLI's ``--verbose`` / ``--quiet`` flags onto a package log level.

    ``--verbose`` selects DEBUG so per-system records are shown, ``--quiet``
    selects WARNING so only per-system problems remain, and neither gives
    INFO. ``verbose`` wins over ``quiet`` when both are set. Handlers get
    the same level, so the switch also applies to a handler attached by
    :func:`setup_root_logger`.
    """
    if verbose:
        set_global_log_level(logging.DEBUG)
    elif quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)


def enable_debug_logging() -> None:
    """Switch the package to DEBUG."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Switch the package back to INFO."""
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop handlers and forget the configured state (used by tests)."""
    global _configured
    _configured = False

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.setLevel(logging.NOTSET)


setup_root_logger()

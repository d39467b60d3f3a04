"""structlog rendering for ppdctl's stdlib loggers.

Modules log with ``logging.getLogger(__name__)``. This module installs
one stderr handler whose formatter runs the records through structlog:
a console renderer for people, JSON lines for ``--log-json``.

The ``ppdctl`` logger level follows the CLI flags:

* ``--verbose``: DEBUG (every create, mutation, and removal)
* default: WARNING (render failures, plugin instantiation errors)
* ``--quiet``: ERROR
"""

from __future__ import annotations

import logging
import sys

import structlog

HANDLER_NAME = "ppdctl"

# Pillow logs every PNG chunk at DEBUG; pluggy traces each hook call.
_NOISY_LOGGERS = ("PIL", "pluggy")


def _package_level(*, verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def _build_formatter(*, log_json: bool) -> structlog.stdlib.ProcessorFormatter:
    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    renderer: structlog.types.Processor
    if log_json:
        pre_chain.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
) -> logging.Handler:
    """Install (or replace) the ppdctl stderr handler and set levels.

    Handlers installed by other code stay on the root logger. Calling this
    again swaps the previous ppdctl handler instead of adding a second one.

    Returns:
        The installed handler.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(_build_formatter(log_json=log_json))

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("ppdctl").setLevel(_package_level(verbose=verbose, quiet=quiet))
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    return handler

"""Opt-in log output for the dxbind package.

The library only logs through loggers under ``dxbind`` and
never touches the root logger.  Applications that already configure logging
need nothing from here; scripts that want to see dxbind's calls can use
:func:`configure_logging`.
"""

from __future__ import annotations

import logging
from typing import IO, Optional

PACKAGE_LOGGER = "dxbind"

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"

_handler: Optional[logging.Handler] = None


def configure_logging(level: Optional[int], stream: Optional[IO[str]] = None) -> logging.Logger:
    """Attach a stream handler to the ``dxbind`` logger and set its level.

    The handler is added on the first call only; later calls just change the
    level.  ``None`` means WARNING.  Records still propagate to the root logger.
    """
    global _handler
    lvl = level if level is not None else logging.WARNING
    logger = logging.getLogger(PACKAGE_LOGGER)

    if _handler is None or _handler not in logger.handlers:
        _handler = logging.StreamHandler(stream)
        _handler.setFormatter(logging.Formatter(_DEFAULT_FMT, _DEFAULT_DATEFMT))
        logger.addHandler(_handler)
    logger.setLevel(lvl)

    # urllib3 logs every connection at DEBUG, which drowns out the API calls
    urllib3_conn_logger = logging.getLogger("urllib3.connection")
    if urllib3_conn_logger.level == logging.NOTSET or urllib3_conn_logger.level < logging.ERROR:
        urllib3_conn_logger.setLevel(logging.ERROR)
    return logger

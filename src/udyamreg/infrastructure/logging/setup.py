from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from udyamreg.config.settings import LoggingConfig

_HANDLER_MARK = "_udyamreg_handler"


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """
    Install stream (and optional rotating file) handlers on the ``udyamreg`` logger.

    Safe to call more than once: handlers installed by a previous call are replaced.
    """
    root = logging.getLogger("udyamreg")
    root.setLevel(getattr(logging, config.level.upper(), logging.INFO))
    for handler in [h for h in root.handlers if getattr(h, _HANDLER_MARK, False)]:
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    setattr(stream, _HANDLER_MARK, True)
    root.addHandler(stream)

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=config.max_size,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_MARK, True)
        root.addHandler(file_handler)

    return root

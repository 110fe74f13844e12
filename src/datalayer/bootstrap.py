from __future__ import annotations

import logging
import os

from datalayer.observability import NullMetrics, Observability, StdlibLogger

LOG_FILE_NAME = "datalayer.log"


class _FieldsFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "fields"):
            record.fields = {}
        return True


def bootstrap_observability(*, log_dir: str, level: int = logging.INFO) -> Observability:
    handler = _setup_logging(log_dir=log_dir, level=level)
    logger = logging.getLogger("datalayer")
    if handler not in logger.handlers:
        logger.addHandler(handler)
    return Observability(logger=StdlibLogger(logger), metrics=NullMetrics())


def _setup_logging(*, log_dir: str, level: int) -> logging.Handler:
    os.makedirs(log_dir, exist_ok=True)
    path = os.path.abspath(os.path.join(log_dir, LOG_FILE_NAME))
    logger = logging.getLogger("datalayer")
    for existing in logger.handlers:
        if isinstance(existing, logging.FileHandler) and existing.baseFilename == path:
            return existing
    handler = logging.FileHandler(path)
    handler.addFilter(_FieldsFilter())
    handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s | %(fields)s")
    )
    logger.setLevel(level)
    return handler

"""Logging helpers: console/file log configuration and Excel run summaries.

Diagnostics go through the standard :mod:`logging` module under the
``studentinvoices`` logger hierarchy. Tabular run summaries are written with
:class:`ExcelLogger`, which persists rows into an ``.xlsx`` workbook.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Protocol, Sequence

LOGGER_NAME = "studentinvoices"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
) -> logging.Logger:
    """Attach console (and optionally rotating file) handlers to the package logger."""

    logger = logging.getLogger(LOGGER_NAME)
    formatter = logging.Formatter(LOG_FORMAT)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_file,
            maxBytes=1_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    logging.captureWarnings(True)
    return logger


class RowLike(Protocol):
    """Protocol for rows serialisable into a worksheet."""

    def as_cells(self) -> Iterable[object]:
        """Return the ordered values to write into the sheet."""


@dataclass(slots=True)
class ExcelLoggerConfig:
    """Configuration used by :class:`ExcelLogger`."""

    columns: Sequence[str]
    filename: str | Path = "invoice-summary.xlsx"
    sheet_title: str = "Summary"


class ExcelLogger:
    """Write rows into an Excel workbook using :mod:`openpyxl`.

    Each call to :meth:`write_rows` creates a fresh workbook with the header
    from :class:`ExcelLoggerConfig` followed by the given rows.
    """

    def __init__(self, config: ExcelLoggerConfig) -> None:
        self.config = config

    def write_rows(self, rows: Iterable[RowLike | Iterable[object]]) -> Path:
        """Persist ``rows`` into the configured workbook and return its path."""

        from openpyxl import Workbook

        destination = Path(self.config.filename)
        destination.parent.mkdir(parents=True, exist_ok=True)

        workbook = Workbook()
        worksheet = workbook.active
        worksheet.title = self.config.sheet_title

        if self.config.columns:
            worksheet.append(list(self.config.columns))

        for row in rows:
            if hasattr(row, "as_cells"):
                cells = list(row.as_cells())  # type: ignore[union-attr]
            else:
                cells = list(row)  # type: ignore[arg-type]
            worksheet.append(cells)

        workbook.save(destination)
        return destination


__all__ = [
    "ExcelLogger",
    "ExcelLoggerConfig",
    "LOGGER_NAME",
    "LOG_FORMAT",
    "RowLike",
    "configure_logging",
]

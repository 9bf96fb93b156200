"""Run one invoicing batch: load the roster, price and render every record."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from .billing import BillingCalculator
from .config import InvoiceConfig
from .document import InvoiceResult, assemble_invoice
from .logging import ExcelLogger, ExcelLoggerConfig
from .students import SkippedRow, read_roster

LOGGER = logging.getLogger("studentinvoices.batch")

SUMMARY_COLUMNS = (
    "Row",
    "Name",
    "Student ID",
    "Phone",
    "Status",
    "Base (Rs.)",
    "Total (Rs.)",
    "Invoice",
    "Reason",
)


@dataclass
class BatchSummary:
    """Aggregated outcome of a batch run."""

    source: Path
    output_dir: Path
    source_readable: bool = True
    loaded: int = 0
    skipped_rows: list[SkippedRow] = field(default_factory=list)
    results: list[InvoiceResult] = field(default_factory=list)
    summary_path: Path | None = None

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if not result.ok)

    @property
    def skipped(self) -> int:
        return len(self.skipped_rows)

    @property
    def nothing_to_do(self) -> bool:
        return not self.source_readable or self.loaded == 0

    def iter_rows(self) -> list[list[object]]:
        """Rows for the summary workbook, in source row order."""

        rows: list[tuple[int, list[object]]] = []
        for result in self.results:
            rows.append((result.record.row_number, result.as_cells()))
        for skipped in self.skipped_rows:
            rows.append(
                (
                    skipped.row_number,
                    [
                        skipped.row_number,
                        skipped.name,
                        skipped.identifier,
                        skipped.phone,
                        "skipped",
                        None,
                        None,
                        "",
                        skipped.reason,
                    ],
                )
            )
        rows.sort(key=lambda item: item[0])
        return [cells for _, cells in rows]


def write_summary(summary: BatchSummary, destination: Path) -> Path:
    """Write ``summary`` as an Excel workbook at ``destination``."""

    logger = ExcelLogger(ExcelLoggerConfig(columns=SUMMARY_COLUMNS, filename=destination))
    return logger.write_rows(summary.iter_rows())


def run_batch(
    config: InvoiceConfig,
    *,
    rng: random.Random | None = None,
    invoice_date: date | None = None,
) -> BatchSummary:
    """Generate one invoice per valid roster row of ``config.input_path``.

    An unreadable roster is reported once and yields an empty summary; a
    failing record is reported in its :class:`InvoiceResult` and the batch
    moves on to the next one.
    """

    invoice_date = invoice_date or date.today()
    summary = BatchSummary(source=config.input_path, output_dir=config.output_dir)

    try:
        config.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        # every record will report the same failure from assemble_invoice
        LOGGER.error("Cannot create output folder %s: %s", config.output_dir, exc)

    try:
        roster = read_roster(config.input_path)
    except Exception as exc:
        LOGGER.error("Error reading student workbook %s: %s", config.input_path, exc)
        summary.source_readable = False
        return summary

    summary.loaded = len(roster.records)
    summary.skipped_rows = list(roster.skipped)

    if not roster.records:
        LOGGER.warning("No valid student data found in %s", config.input_path)
    else:
        calculator = BillingCalculator(config.tax_rate, config.amount_range, rng)
        for record in roster.records:
            amounts = calculator.calculate()
            summary.results.append(
                assemble_invoice(record, amounts, config, invoice_date)
            )

    if config.summary_path is not None:
        try:
            summary.summary_path = write_summary(summary, config.summary_path)
        except OSError as exc:
            LOGGER.error("Cannot write run summary %s: %s", config.summary_path, exc)
        else:
            LOGGER.info("Run summary written to %s", summary.summary_path)

    LOGGER.info(
        "Batch finished: %d generated, %d skipped, %d failed",
        summary.succeeded,
        summary.skipped,
        summary.failed,
    )
    return summary


__all__ = ["BatchSummary", "SUMMARY_COLUMNS", "run_batch", "write_summary"]

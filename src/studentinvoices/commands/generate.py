"""Generate one PDF invoice per student listed in the roster workbook.

Usage::

    student-invoices generate [--input Students.xlsx] [--output-dir results]
        [--tax-rate 0.18] [--amount-range 500 2000] [--seed N]

An unreadable or empty roster is not an error: the command reports it and
exits with code 0. Exit code 1 means at least one invoice failed.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Sequence

from ..batch import BatchSummary, run_batch
from ..billing import format_amount
from ..config import AmountRange, InvoiceConfig
from ..logging import configure_logging


def _decimal_arg(text: str) -> Decimal:
    try:
        return Decimal(text.strip())
    except (InvalidOperation, ValueError):
        raise argparse.ArgumentTypeError(f"invalid decimal value: {text!r}") from None


def _date_arg(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date (expected YYYY-MM-DD): {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="student-invoices generate",
        description="Generate personalised PDF invoices from a student roster workbook.",
    )
    defaults = InvoiceConfig()
    parser.add_argument(
        "--input",
        dest="input_path",
        type=Path,
        help=f"Roster workbook (.xlsx). Default: {defaults.input_path}",
    )
    parser.add_argument(
        "--output-dir",
        dest="output_dir",
        type=Path,
        help=f"Folder for the generated files. Default: {defaults.output_dir}",
    )
    parser.add_argument("--logo", dest="logo_path", type=Path, help="Logo image for the header.")
    parser.add_argument(
        "--tax-rate",
        dest="tax_rate",
        type=_decimal_arg,
        help=f"Tax rate as a fraction. Default: {defaults.tax_rate}",
    )
    parser.add_argument(
        "--amount-range",
        dest="amount_range",
        nargs=2,
        type=int,
        metavar=("MIN", "MAX"),
        help=(
            "Inclusive range of the random base amount. Default: "
            f"{defaults.amount_range.minimum} {defaults.amount_range.maximum}"
        ),
    )
    parser.add_argument("--seed", type=int, help="Seed for reproducible amounts.")
    parser.add_argument(
        "--date",
        dest="invoice_date",
        type=_date_arg,
        help="Invoice date (YYYY-MM-DD). Default: today.",
    )
    parser.add_argument(
        "--discard-qr",
        action="store_true",
        help="Delete the QR images once they are embedded in the invoices.",
    )
    parser.add_argument(
        "--summary-xlsx",
        dest="summary_path",
        type=Path,
        help="Write a per-student run summary workbook.",
    )
    parser.add_argument("--log-file", type=Path, help="Also log to this file (rotated).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log row contents.")
    return parser


def config_from_args(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> InvoiceConfig:
    """Build the run configuration; invalid values end in ``parser.error``."""

    try:
        amount_range = AmountRange(*args.amount_range) if args.amount_range else None
        return InvoiceConfig().with_overrides(
            input_path=args.input_path,
            output_dir=args.output_dir,
            logo_path=args.logo_path,
            tax_rate=args.tax_rate,
            amount_range=amount_range,
            summary_path=args.summary_path,
            keep_verification_images=False if args.discard_qr else None,
        )
    except ValueError as exc:
        parser.error(str(exc))
        raise  # pragma: no cover - parser.error exits


def print_summary(summary: BatchSummary) -> None:
    if not summary.source_readable:
        print(f"[ERROR] Could not read student workbook: {summary.source}")
        return
    if summary.loaded == 0:
        print(f"[INFO] No valid student data found in {summary.source}")
    for result in summary.results:
        if result.ok:
            print(
                f"[OK] {result.invoice_path} "
                f"(Rs. {result.amounts.base}, total Rs. {format_amount(result.amounts.total)})"
            )
        else:
            print(f"[ERROR] {result.record.identifier}: {result.reason}", file=sys.stderr)
    print(
        f"[INFO] {summary.succeeded} generated, {summary.skipped} skipped, "
        f"{summary.failed} failed"
    )
    if summary.summary_path is not None:
        print(f"[INFO] Summary saved to: {summary.summary_path}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = config_from_args(parser, args)

    configure_logging(
        logging.DEBUG if args.verbose else logging.WARNING,
        log_file=args.log_file,
    )

    rng = random.Random(args.seed) if args.seed is not None else None
    summary = run_batch(config, rng=rng, invoice_date=args.invoice_date)
    print_summary(summary)

    return 1 if summary.failed else 0


if __name__ == "__main__":  # pragma: no cover - direct execution
    raise SystemExit(main())

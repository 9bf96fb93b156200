"""List the records a roster workbook would produce, without generating anything."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from ..config import InvoiceConfig
from ..students import read_roster


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="student-invoices inspect",
        description="Show the valid students and the skipped rows of a roster workbook.",
    )
    parser.add_argument(
        "--input",
        dest="input_path",
        type=Path,
        default=InvoiceConfig().input_path,
        help="Roster workbook (.xlsx).",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        roster = read_roster(args.input_path)
    except Exception as exc:
        print(f"[ERROR] Could not read student workbook {args.input_path}: {exc}")
        return 2

    for record in roster.records:
        phone = record.phone or "-"
        print(f"row {record.row_number}: {record.identifier}\t{record.name}\t{phone}")
    for skipped in roster.skipped:
        print(f"row {skipped.row_number}: skipped ({skipped.reason})")
    print(f"[INFO] {len(roster.records)} valid, {len(roster.skipped)} skipped")
    return 0


if __name__ == "__main__":  # pragma: no cover - direct execution
    raise SystemExit(main())

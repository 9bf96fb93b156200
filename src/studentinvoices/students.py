"""Load student records from the roster workbook."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

LOGGER = logging.getLogger("studentinvoices.students")

NAME_COLUMN = 0
IDENTIFIER_COLUMN = 1
PHONE_COLUMN = 2


@dataclass(frozen=True, slots=True)
class StudentRecord:
    """One student's billing data as read from a roster row."""

    name: str
    identifier: str
    phone: str = ""
    row_number: int = 0


@dataclass(frozen=True, slots=True)
class SkippedRow:
    """A non-blank data row rejected because a mandatory field is empty."""

    row_number: int
    name: str
    identifier: str
    phone: str
    reason: str


@dataclass(slots=True)
class Roster:
    """Records and rejected rows read from one workbook."""

    source: Path
    records: list[StudentRecord] = field(default_factory=list)
    skipped: list[SkippedRow] = field(default_factory=list)


def normalise_cell(value: object) -> str:
    """Return ``value`` as trimmed text; missing cells become ``""``."""

    if value is None:
        return ""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value).strip()


def is_blank_row(cells: Iterable[object]) -> bool:
    """Return ``True`` when every cell is empty after trimming."""

    return all(not normalise_cell(cell) for cell in cells)


def _value_at(row: tuple[object, ...], index: int) -> object:
    if index >= len(row):
        return None
    return row[index]


def _rejection_reason(name: str, identifier: str) -> str | None:
    if not name and not identifier:
        return "missing name and student ID"
    if not name:
        return "missing name"
    if not identifier:
        return "missing student ID"
    return None


def read_roster(path: Path) -> Roster:
    """Read the first worksheet of ``path`` into a :class:`Roster`.

    The first row is a header and is never treated as data. Blank rows are
    ignored silently; rows lacking a name or a student ID are logged and
    reported in :attr:`Roster.skipped`. Errors opening or parsing the
    workbook propagate to the caller.
    """

    from openpyxl import load_workbook

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Student workbook not found: {path}")

    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        rows = list(sheet.iter_rows(values_only=True))
    finally:
        workbook.close()

    roster = Roster(source=path)
    for row_number, row in enumerate(rows[1:], start=2):
        if row is None or is_blank_row(row):
            continue

        name = normalise_cell(_value_at(row, NAME_COLUMN))
        identifier = normalise_cell(_value_at(row, IDENTIFIER_COLUMN))
        phone = normalise_cell(_value_at(row, PHONE_COLUMN))
        LOGGER.debug(
            "Row %d data - name=%r, id=%r, phone=%r", row_number, name, identifier, phone
        )

        reason = _rejection_reason(name, identifier)
        if reason is not None:
            LOGGER.warning(
                "Skipping invalid row %d (%s) - name=%r, id=%r",
                row_number,
                reason,
                name,
                identifier,
            )
            roster.skipped.append(SkippedRow(row_number, name, identifier, phone, reason))
            continue

        roster.records.append(StudentRecord(name, identifier, phone, row_number))

    return roster


def load_students(path: Path) -> list[StudentRecord]:
    """Return the valid records of ``path``, or ``[]`` if it cannot be read."""

    try:
        return read_roster(path).records
    except Exception as exc:
        LOGGER.error("Error reading student workbook %s: %s", path, exc)
        return []


__all__ = [
    "Roster",
    "SkippedRow",
    "StudentRecord",
    "is_blank_row",
    "load_students",
    "normalise_cell",
    "read_roster",
]

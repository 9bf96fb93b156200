from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Iterable, Sequence

import pytest
from openpyxl import Workbook
from PIL import Image

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from studentinvoices.config import InvoiceConfig  # noqa: E402

HEADER = ("Name", "Student ID", "Phone")

# 1 header, 5 valid rows, 1 invalid row and 1 blank row.
SAMPLE_ROWS: list[Sequence[object]] = [
    ("Asha Rao", "ST 001", "9876543210"),
    ("Vikram Shetty", "ST002", 9876500001),
    ("", "ST003", "9876500002"),
    ("Meera Iyer", "ST004", ""),
    (None, None, None),
    ("Rahul Nair", "ST005", "9876500004"),
    ("Divya K", "ST006", "9876500005"),
]


def write_roster(path: Path, rows: Iterable[Sequence[object]], header=HEADER) -> Path:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Students"
    if header is not None:
        sheet.append(list(header))
    for row in rows:
        sheet.append(list(row))
    workbook.save(path)
    return path


@pytest.fixture
def make_roster(tmp_path: Path) -> Callable[..., Path]:
    def _make(rows: Iterable[Sequence[object]] = SAMPLE_ROWS, name: str = "Students.xlsx", **kwargs) -> Path:
        return write_roster(tmp_path / name, rows, **kwargs)

    return _make


@pytest.fixture
def logo_path(tmp_path: Path) -> Path:
    path = tmp_path / "logo.png"
    Image.new("RGB", (400, 100), color=(20, 60, 140)).save(path)
    return path


@pytest.fixture
def config(tmp_path: Path, make_roster, logo_path: Path) -> InvoiceConfig:
    return InvoiceConfig(
        input_path=make_roster(),
        output_dir=tmp_path / "results",
        logo_path=logo_path,
    )


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("studentinvoices")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

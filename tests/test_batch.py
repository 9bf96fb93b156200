from __future__ import annotations

import logging
import random
from datetime import date
from decimal import Decimal
from pathlib import Path

from openpyxl import load_workbook

from studentinvoices.batch import SUMMARY_COLUMNS, run_batch
from studentinvoices.config import AmountRange

INVOICE_DATE = date(2024, 11, 5)


def _pdf_names(folder: Path) -> list[str]:
    return sorted(path.name for path in folder.glob("*.pdf"))


def test_one_document_per_valid_record(config) -> None:
    summary = run_batch(config, rng=random.Random(3), invoice_date=INVOICE_DATE)

    assert summary.loaded == 5
    assert summary.succeeded == 5
    assert summary.skipped == 1
    assert summary.failed == 0
    assert _pdf_names(config.output_dir) == [
        "Invoice_ST002.pdf",
        "Invoice_ST004.pdf",
        "Invoice_ST005.pdf",
        "Invoice_ST006.pdf",
        "Invoice_ST_001.pdf",
    ]
    assert len(list(config.output_dir.glob("QR_*.png"))) == 5


def test_amounts_follow_configured_range_and_rate(config) -> None:
    custom = config.with_overrides(amount_range=AmountRange(100, 120), tax_rate=Decimal("0.05"))

    summary = run_batch(custom, rng=random.Random(11), invoice_date=INVOICE_DATE)

    for result in summary.results:
        assert 100 <= result.amounts.base <= 120
        assert result.amounts.total == result.amounts.base * Decimal("1.05")


def test_rerun_produces_same_file_names(config) -> None:
    first = run_batch(config, invoice_date=INVOICE_DATE)
    names = _pdf_names(config.output_dir)
    second = run_batch(config, invoice_date=INVOICE_DATE)

    assert _pdf_names(config.output_dir) == names
    assert [r.invoice_path for r in first.results] == [r.invoice_path for r in second.results]


def test_missing_input_is_nothing_to_do(config, tmp_path: Path, caplog) -> None:
    caplog.set_level(logging.ERROR, logger="studentinvoices")
    missing = config.with_overrides(input_path=tmp_path / "absent.xlsx")

    summary = run_batch(missing, invoice_date=INVOICE_DATE)

    assert not summary.source_readable
    assert summary.nothing_to_do
    assert summary.results == []
    assert missing.output_dir.is_dir()
    assert _pdf_names(missing.output_dir) == []
    assert "Error reading student workbook" in caplog.text


def test_roster_without_valid_rows(config, make_roster, caplog) -> None:
    caplog.set_level(logging.WARNING, logger="studentinvoices")
    empty = config.with_overrides(input_path=make_roster([("", "", "1")], name="empty.xlsx"))

    summary = run_batch(empty, invoice_date=INVOICE_DATE)

    assert summary.source_readable
    assert summary.nothing_to_do
    assert summary.skipped == 1
    assert "No valid student data found" in caplog.text


def test_missing_logo_fails_records_without_stopping_batch(config, tmp_path: Path) -> None:
    broken = config.with_overrides(logo_path=tmp_path / "missing-logo.jpg")

    summary = run_batch(broken, invoice_date=INVOICE_DATE)

    assert summary.failed == 5
    assert summary.succeeded == 0
    assert len(summary.results) == 5
    assert _pdf_names(broken.output_dir) == []


def test_one_failing_record_does_not_stop_the_rest(config, monkeypatch) -> None:
    from studentinvoices import document

    original = document.write_verification_image

    def _flaky(payload, destination, size=200):
        if "ST004" in payload:
            raise RuntimeError("encoder down")
        return original(payload, destination, size)

    monkeypatch.setattr(document, "write_verification_image", _flaky)

    summary = run_batch(config, invoice_date=INVOICE_DATE)

    assert summary.succeeded == 4
    assert summary.failed == 1
    failed = [result for result in summary.results if not result.ok]
    assert failed[0].record.identifier == "ST004"
    assert "Invoice_ST004.pdf" not in _pdf_names(config.output_dir)


def test_summary_workbook_lists_every_row(config, tmp_path: Path) -> None:
    summary_path = tmp_path / "reports" / "summary.xlsx"
    with_summary = config.with_overrides(summary_path=summary_path)

    summary = run_batch(with_summary, rng=random.Random(5), invoice_date=INVOICE_DATE)

    assert summary.summary_path == summary_path
    workbook = load_workbook(summary_path)
    rows = list(workbook["Summary"].iter_rows(values_only=True))
    assert rows[0] == SUMMARY_COLUMNS
    statuses = [(row[2], row[4]) for row in rows[1:]]
    assert statuses == [
        ("ST 001", "generated"),
        ("ST002", "generated"),
        ("ST003", "skipped"),
        ("ST004", "generated"),
        ("ST005", "generated"),
        ("ST006", "generated"),
    ]
    assert rows[3][8] == "missing name"


def test_unwritable_output_dir_fails_each_record(config, tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-folder"
    blocker.write_text("", encoding="utf-8")

    summary = run_batch(config.with_overrides(output_dir=blocker), invoice_date=INVOICE_DATE)

    assert summary.loaded == 5
    assert summary.failed == 5
    assert summary.succeeded == 0


def test_unwritable_summary_path_keeps_generated_invoices(config, tmp_path: Path, caplog) -> None:
    blocker = tmp_path / "blk"
    blocker.write_text("", encoding="utf-8")
    with_summary = config.with_overrides(summary_path=blocker / "summary.xlsx")

    with caplog.at_level(logging.ERROR, logger="studentinvoices.batch"):
        summary = run_batch(with_summary, rng=random.Random(5), invoice_date=INVOICE_DATE)

    assert summary.succeeded == 5
    assert summary.summary_path is None
    assert len(_pdf_names(config.output_dir)) == 5
    assert "Cannot write run summary" in caplog.text

"""Lay out one student invoice as a PDF with :mod:`reportlab`.

The page is a fixed sequence of sections: logo, header, sender details,
recipient, item table, payment summary, QR verification image, bank details
and signature block. :func:`assemble_invoice` renders the sections into a
temporary file next to the final path and renames it only once reportlab
has closed the document, so a failing record never leaves a partial PDF
behind under its final name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from html import escape
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import (
    Flowable,
    Image,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from .billing import BillingAmounts, format_amount, format_rate
from .config import InvoiceConfig
from .students import StudentRecord
from .verification import verification_payload, write_verification_image

LOGGER = logging.getLogger("studentinvoices.document")

LOGO_BOX = (200, 50)
QR_BOX = (100, 100)
MARGIN = 36

TITLE_STYLE = ParagraphStyle("InvoiceTitle", fontName="Helvetica-Bold", fontSize=16, leading=20)
BOLD_STYLE = ParagraphStyle("InvoiceBold", fontName="Helvetica-Bold", fontSize=12, leading=15)
NORMAL_STYLE = ParagraphStyle("InvoiceNormal", fontName="Helvetica", fontSize=12, leading=15)
CELL_STYLE = ParagraphStyle("InvoiceCell", parent=NORMAL_STYLE)


def _safe_stem(identifier: str) -> str:
    return identifier.replace(" ", "_").replace("/", "_").replace("\\", "_")


def invoice_filename(identifier: str) -> str:
    """``Invoice_<id>.pdf`` with spaces in the student ID turned into ``_``."""

    return f"Invoice_{_safe_stem(identifier)}.pdf"


def verification_filename(identifier: str) -> str:
    return f"QR_{_safe_stem(identifier)}.png"


def invoice_number(prefix: str, phone: str) -> str:
    """Invoice number printed in the header.

    Built from the phone column, so it is neither unique nor guaranteed to
    be non-empty.
    """

    return f"{prefix}{phone}"


@dataclass(frozen=True, slots=True)
class InvoiceResult:
    """Outcome of assembling one invoice."""

    record: StudentRecord
    amounts: BillingAmounts
    invoice_path: Path
    verification_path: Path | None = None
    ok: bool = True
    reason: str | None = None

    @classmethod
    def success(
        cls,
        record: StudentRecord,
        amounts: BillingAmounts,
        invoice_path: Path,
        verification_path: Path | None,
    ) -> "InvoiceResult":
        return cls(record, amounts, invoice_path, verification_path)

    @classmethod
    def failure(
        cls,
        record: StudentRecord,
        amounts: BillingAmounts,
        invoice_path: Path,
        reason: str,
    ) -> "InvoiceResult":
        return cls(record, amounts, invoice_path, None, ok=False, reason=reason)

    @property
    def status(self) -> str:
        return "generated" if self.ok else "failed"

    def as_cells(self) -> list[object]:
        """Serialise the result for the summary workbook."""

        return [
            self.record.row_number,
            self.record.name,
            self.record.identifier,
            self.record.phone,
            self.status,
            float(self.amounts.base),
            float(self.amounts.total),
            self.invoice_path.name if self.ok else "",
            self.reason or "",
        ]


def _paragraph(text: str, style: ParagraphStyle) -> Paragraph:
    return Paragraph(escape(text, quote=False).replace("\n", "<br/>"), style)


def _centered_image(path: Path, box: tuple[int, int]) -> Image:
    width, height = box
    image = Image(str(path), width=width, height=height, kind="proportional")
    image.hAlign = "CENTER"
    return image


def _newline() -> Spacer:
    return Spacer(1, NORMAL_STYLE.leading)


def logo_section(config: InvoiceConfig) -> list[Flowable]:
    if not config.logo_path.is_file():
        raise FileNotFoundError(f"Logo not found: {config.logo_path}")
    return [_centered_image(config.logo_path, LOGO_BOX)]


def header_section(
    record: StudentRecord, config: InvoiceConfig, invoice_date: date
) -> list[Flowable]:
    number = invoice_number(config.invoice_prefix, record.phone)
    return [
        _paragraph("INVOICE", TITLE_STYLE),
        _newline(),
        _paragraph(f"Invoice No.: {number}", NORMAL_STYLE),
        _paragraph(f"Invoice Date: {invoice_date.strftime(config.date_format)}", NORMAL_STYLE),
        _newline(),
    ]


def sender_section(config: InvoiceConfig) -> list[Flowable]:
    return [
        _paragraph("From:", BOLD_STYLE),
        _paragraph(config.organisation, NORMAL_STYLE),
        _paragraph(config.address, NORMAL_STYLE),
        _paragraph(f"Email: {config.email}", NORMAL_STYLE),
        _newline(),
    ]


def recipient_section(record: StudentRecord) -> list[Flowable]:
    return [_paragraph(f"Bill To: {record.name}", BOLD_STYLE), _newline()]


def items_section(
    amounts: BillingAmounts, config: InvoiceConfig, width: float
) -> list[Flowable]:
    rows = [
        [
            _paragraph("Sl. No.", BOLD_STYLE),
            _paragraph("Description", BOLD_STYLE),
            _paragraph("Amount (Rs.)", BOLD_STYLE),
        ],
        [
            _paragraph("1", CELL_STYLE),
            _paragraph(config.item_description, CELL_STYLE),
            _paragraph(str(amounts.base), CELL_STYLE),
        ],
    ]
    table = Table(rows, colWidths=[width / 3.0] * 3)
    table.setStyle(
        TableStyle(
            [
                ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]
        )
    )
    return [table, _newline()]


def payment_section(amounts: BillingAmounts, config: InvoiceConfig) -> list[Flowable]:
    return [
        _paragraph("Other Charges:", BOLD_STYLE),
        _paragraph(f"Discount: Rs. {format_amount(amounts.discount)}", NORMAL_STYLE),
        _paragraph(f"Subtotal: Rs. {format_amount(amounts.subtotal)}", NORMAL_STYLE),
        _paragraph(
            f"IGST @ {format_rate(config.tax_rate)}%: Rs. {format_amount(amounts.tax)}",
            NORMAL_STYLE,
        ),
        _paragraph(f"Total: Rs. {format_amount(amounts.total)} only", BOLD_STYLE),
        _newline(),
    ]


def verification_section(
    record: StudentRecord, amounts: BillingAmounts, qr_path: Path
) -> list[Flowable]:
    payload = verification_payload(record.identifier, amounts.base)
    write_verification_image(payload, qr_path)
    LOGGER.debug("QR code created: %s", qr_path)
    return [_centered_image(qr_path, QR_BOX), _newline()]


def bank_section(config: InvoiceConfig) -> list[Flowable]:
    return [
        _paragraph("Bank Details:", BOLD_STYLE),
        _paragraph(config.organisation, NORMAL_STYLE),
        _paragraph(f"Bank: {config.bank_name}", NORMAL_STYLE),
        _paragraph(f"Branch: {config.branch}", NORMAL_STYLE),
        _newline(),
    ]


def signature_section(config: InvoiceConfig) -> list[Flowable]:
    return [
        _paragraph(f"For {config.organisation}", BOLD_STYLE),
        _paragraph("Authorized Signatory", TITLE_STYLE),
    ]


def build_story(
    record: StudentRecord,
    amounts: BillingAmounts,
    config: InvoiceConfig,
    invoice_date: date,
    qr_path: Path,
    width: float | None = None,
) -> list[Flowable]:
    """Return the invoice flowables in page order.

    Writes the QR image to ``qr_path`` as a side effect.
    """

    if width is None:
        width = A4[0] - 2 * MARGIN

    story: list[Flowable] = []
    story += logo_section(config)
    story += header_section(record, config, invoice_date)
    story += sender_section(config)
    story += recipient_section(record)
    story += items_section(amounts, config, width)
    story += payment_section(amounts, config)
    story += verification_section(record, amounts, qr_path)
    story += bank_section(config)
    story += signature_section(config)
    return story


def _discard(path: Path) -> None:
    # missing file or unusable folder: nothing to clean up
    try:
        path.unlink()
    except OSError:
        pass


def assemble_invoice(
    record: StudentRecord,
    amounts: BillingAmounts,
    config: InvoiceConfig,
    invoice_date: date,
) -> InvoiceResult:
    """Render the invoice of ``record`` into ``config.output_dir``.

    Returns a failure result instead of raising when any step fails; the
    caller keeps going with the next record.
    """

    output_dir = config.output_dir
    final_path = output_dir / invoice_filename(record.identifier)
    partial_path = output_dir / f".{final_path.name}.partial"
    qr_path = output_dir / verification_filename(record.identifier)

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        document = SimpleDocTemplate(
            str(partial_path),
            pagesize=A4,
            leftMargin=MARGIN,
            rightMargin=MARGIN,
            topMargin=MARGIN,
            bottomMargin=MARGIN,
            title=f"Invoice {record.identifier}",
            author=config.organisation,
        )
        story = build_story(record, amounts, config, invoice_date, qr_path, document.width)
        document.build(story)
        partial_path.replace(final_path)
    except Exception as exc:
        _discard(partial_path)
        if not config.keep_verification_images:
            _discard(qr_path)
        reason = f"{type(exc).__name__}: {exc}"
        LOGGER.error("Error generating invoice %s: %s", final_path, reason)
        return InvoiceResult.failure(record, amounts, final_path, reason)

    if not config.keep_verification_images:
        _discard(qr_path)
        kept_qr: Path | None = None
    else:
        kept_qr = qr_path

    LOGGER.info(
        "Generated invoice: %s with amount Rs. %s", final_path, amounts.base
    )
    return InvoiceResult.success(record, amounts, final_path, kept_qr)


__all__ = [
    "InvoiceResult",
    "assemble_invoice",
    "build_story",
    "invoice_filename",
    "invoice_number",
    "verification_filename",
]

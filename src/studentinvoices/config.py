"""Run configuration shared by the loader, the calculator and the assembler."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

_PACKAGE_ROOT = Path(__file__).resolve().parent
DEFAULT_LOGO = _PACKAGE_ROOT / "resources" / "logo.png"

DEFAULT_INPUT = Path("Students.xlsx")
DEFAULT_OUTPUT_DIR = Path("results")
DEFAULT_TAX_RATE = Decimal("0.18")
DEFAULT_DATE_FORMAT = "%d-%b-%Y"


@dataclass(frozen=True, slots=True)
class AmountRange:
    """Inclusive integer range the base amount is drawn from."""

    minimum: int = 500
    maximum: int = 2000

    def __post_init__(self) -> None:
        if self.minimum < 0:
            raise ValueError(f"Amount range minimum must be >= 0, got {self.minimum}")
        if self.minimum > self.maximum:
            raise ValueError(
                f"Amount range minimum {self.minimum} exceeds maximum {self.maximum}"
            )

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, (int, Decimal)):
            return False
        return self.minimum <= value <= self.maximum


@dataclass(frozen=True, slots=True)
class InvoiceConfig:
    """Paths, rates and fixed texts of one invoicing run.

    Every component receives the instance explicitly, so tests override the
    output directory, the tax rate or the amount range through
    :meth:`with_overrides` instead of patching module constants.
    """

    input_path: Path = DEFAULT_INPUT
    output_dir: Path = DEFAULT_OUTPUT_DIR
    logo_path: Path = DEFAULT_LOGO
    tax_rate: Decimal = DEFAULT_TAX_RATE
    amount_range: AmountRange = field(default_factory=AmountRange)
    date_format: str = DEFAULT_DATE_FORMAT
    invoice_prefix: str = "TMSS/2024-2025/DPSK/INV/"
    organisation: str = "TechnoMedia Software Solutions Pvt. Ltd."
    address: str = "CV Ramannagar, Bangalore, Karnataka - 560075"
    email: str = "info@technomediasoft.com"
    bank_name: str = "Indian Overseas Bank"
    branch: str = "Bangalore-560075"
    item_description: str = "RouteAlert charges for Nov-2024\nNumber Of Students: 748"
    keep_verification_images: bool = True
    summary_path: Path | None = None

    def __post_init__(self) -> None:
        try:
            rate = Decimal(str(self.tax_rate))
        except InvalidOperation:
            raise ValueError(f"Tax rate is not a number: {self.tax_rate!r}") from None
        if not rate.is_finite() or not Decimal("0") <= rate <= Decimal("1"):
            raise ValueError(f"Tax rate must be between 0 and 1, got {self.tax_rate}")
        # frozen: assign through object.__setattr__
        object.__setattr__(self, "tax_rate", rate)
        object.__setattr__(self, "input_path", Path(self.input_path))
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        object.__setattr__(self, "logo_path", Path(self.logo_path))
        if self.summary_path is not None:
            object.__setattr__(self, "summary_path", Path(self.summary_path))

    def with_overrides(self, **changes: Any) -> "InvoiceConfig":
        """Return a copy with ``changes`` applied, skipping ``None`` values."""

        applied = {key: value for key, value in changes.items() if value is not None}
        return dataclasses.replace(self, **applied)


__all__ = [
    "AmountRange",
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_INPUT",
    "DEFAULT_LOGO",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_TAX_RATE",
    "InvoiceConfig",
]

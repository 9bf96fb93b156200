"""Billing amounts for one invoice.

Amounts are kept as :class:`~decimal.Decimal` throughout; only the tax is
quantised (two places, half-up) because it is the one product of a
non-integral rate.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from .config import AmountRange

AMT2 = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")


def q2(value: Decimal) -> Decimal:
    return value.quantize(AMT2, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal | int) -> str:
    """Render ``value`` with exactly two decimal places."""

    return f"{q2(Decimal(value)):.2f}"


def format_rate(rate: Decimal) -> str:
    """Percentage label for ``rate``: integral -> ``'18'``; otherwise two places."""

    percent = Decimal(rate) * HUNDRED
    if percent == percent.to_integral_value():
        return str(int(percent))
    return f"{q2(percent):.2f}"


@dataclass(frozen=True, slots=True)
class BillingAmounts:
    """Charge breakdown of one invoice."""

    base: Decimal
    discount: Decimal
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def compute_amounts(
    base: int | Decimal,
    tax_rate: Decimal,
    discount: int | Decimal = ZERO,
) -> BillingAmounts:
    """Derive subtotal, tax and total from ``base``."""

    base_value = Decimal(base)
    discount_value = Decimal(discount)
    subtotal = base_value - discount_value
    tax = q2(subtotal * Decimal(tax_rate))
    return BillingAmounts(
        base=base_value,
        discount=discount_value,
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
    )


def draw_base_amount(rng: random.Random, amount_range: AmountRange) -> int:
    """Draw a base amount uniformly from the inclusive ``amount_range``."""

    return rng.randint(amount_range.minimum, amount_range.maximum)


class BillingCalculator:
    """Produce a fresh :class:`BillingAmounts` per invoice.

    The entropy source is injected so a seeded :class:`random.Random` gives
    reproducible amounts.
    """

    def __init__(
        self,
        tax_rate: Decimal,
        amount_range: AmountRange,
        rng: random.Random | None = None,
    ) -> None:
        self.tax_rate = Decimal(tax_rate)
        self.amount_range = amount_range
        self.rng = rng if rng is not None else random.Random()

    def calculate(self) -> BillingAmounts:
        base = draw_base_amount(self.rng, self.amount_range)
        return compute_amounts(base, self.tax_rate)


__all__ = [
    "BillingAmounts",
    "BillingCalculator",
    "compute_amounts",
    "draw_base_amount",
    "format_amount",
    "format_rate",
    "q2",
]

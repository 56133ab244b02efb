"""
taxdocs/calculations.py

Pure money helpers: rounding, one-line calculation and tax splitting.

Rounding discipline:
- Every per-line figure is rounded at the step it is produced
  (discount, tax, total), not only at the end.
- Documents sum already-rounded line values.
- Inputs are quantized to their storage precision (quantity 3 dp, unit
  price 4 dp, rates 2 dp) before anything is computed from them, so
  persisted rows always reproduce the persisted totals.

Magnitudes are bounded by the storage columns; anything larger is a
ValidationError, never a decimal signal.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from .errors import ValidationError

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")

# Storage precision (see models.py)
QUANTITY_STEP = Decimal("0.001")
PRICE_STEP = Decimal("0.0001")
RATE_STEP = CENT

# Exclusive upper bounds: Numeric(12, 3), Numeric(14, 4), Numeric(14, 2), Numeric(6, 2)
MAX_QUANTITY = Decimal("1e9")
MAX_UNIT_PRICE = Decimal("1e10")
MAX_AMOUNT = Decimal("1e12")
MAX_RATE = Decimal("1e4")


def to_decimal(value, field: str = "value") -> Decimal:
    """Convert Numeric/str/int/float/None to Decimal. None -> 0."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    raw = str(value).strip().replace(",", ".")
    if raw == "":
        return ZERO
    try:
        return Decimal(raw)
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number") from None


def quantize(value, step: Decimal, field: str = "value", *, limit: Decimal | None = None) -> Decimal:
    """
    Round half-up to `step`.

    Raises ValidationError for non-finite values and, when `limit` is
    given, for magnitudes at or above it.
    """
    number = to_decimal(value, field)
    if not number.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if limit is not None and abs(number) >= limit:
        raise ValidationError(f"{field} is out of range (must be below {limit:f})")
    try:
        return number.quantize(step, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"{field} is out of range") from None


def round2(value, field: str = "amount") -> Decimal:
    return quantize(value, CENT, field)


def _rate(value, field: str) -> Decimal:
    rate = to_decimal(value, field)
    if not rate.is_finite() or abs(rate) >= MAX_RATE:
        raise ValidationError(f"{field} is out of range")
    return rate


@dataclass(frozen=True)
class LineAmounts:
    discount_amount: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal


def compute_line(quantity, unit_price, discount_percent=None, tax_percent=None, cess_percent=None) -> LineAmounts:
    """
    Compute discount, taxable base, tax and total for one line.

    Raises ValidationError when quantity <= 0, unit_price < 0, either is
    not a finite number, or a value exceeds what the columns can hold.
    """
    qty = to_decimal(quantity, "quantity")
    price = to_decimal(unit_price, "unit_price")
    if not qty.is_finite() or not price.is_finite():
        raise ValidationError("quantity and unit_price must be finite numbers")
    if qty <= ZERO:
        raise ValidationError("quantity must be greater than zero")
    if price < ZERO:
        raise ValidationError("unit_price cannot be negative")
    if qty >= MAX_QUANTITY:
        raise ValidationError(f"quantity is out of range (must be below {MAX_QUANTITY:f})")
    if price >= MAX_UNIT_PRICE:
        raise ValidationError(f"unit_price is out of range (must be below {MAX_UNIT_PRICE:f})")

    discount = _rate(discount_percent, "discount_percent")
    tax = _rate(tax_percent, "tax_percent")
    cess = _rate(cess_percent, "cess_percent")

    base = qty * price
    discount_amount = round2(base * discount / HUNDRED)
    after_discount = base - discount_amount
    tax_amount = round2(after_discount * tax / HUNDRED + after_discount * cess / HUNDRED)
    total_amount = round2(after_discount + tax_amount)
    if total_amount >= MAX_AMOUNT:
        raise ValidationError(f"line total is out of range (must be below {MAX_AMOUNT:f})")

    return LineAmounts(
        discount_amount=discount_amount,
        taxable_amount=round2(after_discount),
        tax_amount=tax_amount,
        total_amount=total_amount,
    )


@dataclass(frozen=True)
class TaxTotals:
    """Running indirect-tax accumulators (unrounded until the document is done)."""

    central: Decimal = ZERO
    regional: Decimal = ZERO
    integrated: Decimal = ZERO

    def rounded(self) -> "TaxTotals":
        return TaxTotals(round2(self.central), round2(self.regional), round2(self.integrated))


def split_tax(taxable_amount, tax_percent, cross_jurisdiction: bool, running_totals: TaxTotals | None = None) -> TaxTotals:
    """
    Add the tax on `taxable_amount` to `running_totals`.

    Cross-jurisdiction: the full amount goes to `integrated`.
    Domestic: half of it goes to each of `central` and `regional`.
    """
    totals = running_totals if running_totals is not None else TaxTotals()
    amount = to_decimal(taxable_amount, "taxable_amount")
    rate = to_decimal(tax_percent, "tax_percent")

    if not rate or amount <= ZERO:
        return totals

    if cross_jurisdiction:
        return TaxTotals(
            central=totals.central,
            regional=totals.regional,
            integrated=totals.integrated + amount * rate / HUNDRED,
        )

    half = amount * rate / Decimal("200")
    return TaxTotals(
        central=totals.central + half,
        regional=totals.regional + half,
        integrated=totals.integrated,
    )

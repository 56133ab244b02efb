"""
taxdocs/aggregation.py

Document Aggregator: turns submitted line items into document totals and
frozen line snapshots.

Inputs are plain dataclasses so the aggregator can run without a database:
the catalog is any mapping of item id -> object exposing
name/unit/unit_price/tax_rate/cess_rate/is_active/is_deleted.

IMPORTANT:
- Any failing line aborts the whole aggregation. No partial totals.
- Accumulators stay unrounded until every line (and shipping) is added,
  then each one is rounded once. The grand total is summed from the
  rounded figures so the persisted columns always reconcile.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Mapping, Sequence

from .calculations import (
    CENT,
    HUNDRED,
    MAX_AMOUNT,
    MAX_QUANTITY,
    MAX_RATE,
    MAX_UNIT_PRICE,
    PRICE_STEP,
    QUANTITY_STEP,
    RATE_STEP,
    ZERO,
    TaxTotals,
    compute_line,
    quantize,
    round2,
    split_tax,
    to_decimal,
)
from .errors import NotFoundError, ValidationError
from .policies import DocumentPolicy

ADJUSTMENT_KINDS = ("tds", "tcs")
ADJUSTMENT_BASES = ("taxable", "total")


# ---------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------
@dataclass
class LineItemInput:
    item_id: int
    quantity: Decimal | None = None
    unit_price: Decimal | None = None
    discount_percent: Decimal | None = None
    tax_rate: Decimal | None = None
    name: str | None = None
    unit: str | None = None


@dataclass
class ShippingCharge:
    amount: Decimal | None = None
    tax_rate: Decimal | None = None


@dataclass
class AdjustmentInput:
    """TDS (withheld, subtracted) or TCS (collected, added) on an invoice."""

    kind: str
    rate: Decimal
    applicable_on: str = "taxable"
    name: str | None = None


@dataclass
class AggregationOptions:
    reverse_charge: bool = False
    show_cess: bool = False
    is_tax_invoice: bool = True
    uniform_discount_percent: Decimal | None = None
    custom_amount: Decimal | None = None
    discount_on_total: Decimal | None = None
    adjustments: Sequence[AdjustmentInput] = field(default_factory=tuple)


# ---------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class ComputedLineItem:
    line_no: int
    item_id: int
    name: str
    unit: str | None
    description: str | None
    hsn_sac: str | None
    quantity: Decimal
    unit_price: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    tax_rate: Decimal
    cess_rate: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    # What the caller asked for; None means "catalog default" / "no own discount".
    tax_rate_override: Decimal | None = None
    line_discount_percent: Decimal | None = None


@dataclass(frozen=True)
class ComputedAdjustment:
    kind: str
    name: str | None
    rate: Decimal
    applicable_on: str
    amount: Decimal


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal
    total_discount: Decimal
    taxable: Decimal
    central_tax: Decimal
    regional_tax: Decimal
    integrated_tax: Decimal
    cess_amount: Decimal
    shipping_amount: Decimal
    shipping_tax: Decimal
    custom_amount: Decimal
    discount_on_total: Decimal
    tds_amount: Decimal
    tcs_amount: Decimal
    total: Decimal

    def as_dict(self) -> dict:
        return {name: getattr(self, name) for name in self.__dataclass_fields__}


@dataclass(frozen=True)
class AggregateResult:
    totals: DocumentTotals
    lines: tuple[ComputedLineItem, ...]
    adjustments: tuple[ComputedAdjustment, ...] = ()


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
def _percent(value, field_name: str, *, upper: Decimal | None = HUNDRED) -> Decimal:
    """Validate a percentage and quantize it to its storage precision (2 dp)."""
    pct = to_decimal(value, field_name)
    if not pct.is_finite() or pct < ZERO or (upper is not None and pct > upper):
        raise ValidationError(f"{field_name} must be between 0 and {upper}" if upper else f"{field_name} cannot be negative")
    return quantize(pct, RATE_STEP, field_name, limit=MAX_RATE)


def _money_input(value, field_name: str) -> Decimal:
    amount = to_decimal(value, field_name)
    if not amount.is_finite() or amount < ZERO:
        raise ValidationError(f"{field_name} cannot be negative")
    return quantize(amount, CENT, field_name, limit=MAX_AMOUNT)


def _check_range(totals: DocumentTotals) -> None:
    for name, value in totals.as_dict().items():
        if abs(value) >= MAX_AMOUNT:
            raise ValidationError(f"{name} is out of range (must be below {MAX_AMOUNT:f})")


def _is_usable(item) -> bool:
    if item is None:
        return False
    if getattr(item, "is_deleted", False):
        return False
    return getattr(item, "is_active", True) is not False


def line_inputs_from_computed(lines: Iterable) -> list[LineItemInput]:
    """
    Rebuild inputs from computed (or persisted) line items.

    Only what was requested is carried over: the per-line tax override and
    the line's own discount, never the effective rate or the uniform
    discount. Re-aggregating with the same toggles and catalog reproduces
    the same totals; changed toggles (reverse charge, tax invoice, cess,
    uniform discount) are applied from scratch.
    """
    return [
        LineItemInput(
            item_id=line.item_id,
            quantity=to_decimal(line.quantity),
            unit_price=to_decimal(line.unit_price),
            discount_percent=line.line_discount_percent,
            tax_rate=line.tax_rate_override,
            name=line.name,
            unit=line.unit,
        )
        for line in lines
    ]


def _compute_adjustments(entries: Sequence[AdjustmentInput], taxable: Decimal, total_before: Decimal):
    computed = []
    tds = ZERO
    tcs = ZERO
    for entry in entries:
        kind = (entry.kind or "").strip().lower()
        if kind not in ADJUSTMENT_KINDS:
            raise ValidationError(f"Adjustment kind must be one of {', '.join(ADJUSTMENT_KINDS)}")
        applicable_on = (entry.applicable_on or "taxable").strip().lower()
        if applicable_on not in ADJUSTMENT_BASES:
            raise ValidationError(f"Adjustment base must be one of {', '.join(ADJUSTMENT_BASES)}")

        rate = _percent(entry.rate, "adjustment rate")
        base = taxable if applicable_on == "taxable" else total_before
        amount = round2(base * rate / HUNDRED)

        if kind == "tds":
            tds += amount
        else:
            tcs += amount

        computed.append(
            ComputedAdjustment(kind=kind, name=entry.name, rate=rate, applicable_on=applicable_on, amount=amount)
        )
    return tuple(computed), round2(tds), round2(tcs)


# ---------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------
def aggregate(
    line_inputs: Sequence[LineItemInput],
    catalog: Mapping,
    cross_jurisdiction: bool,
    shipping: ShippingCharge | None,
    policy: DocumentPolicy,
    options: AggregationOptions | None = None,
) -> AggregateResult:
    """Compute document totals and line snapshots for one document."""
    options = options or AggregationOptions()

    if not line_inputs:
        raise ValidationError("At least one line item is required")

    if options.reverse_charge and not policy.supports_reverse_charge:
        raise ValidationError(f"Reverse charge is not supported for {policy.label} documents")

    uniform_discount = None
    if options.uniform_discount_percent is not None:
        if not policy.supports_uniform_discount:
            raise ValidationError(f"A discount for all lines is not supported for {policy.label} documents")
        uniform_discount = _percent(options.uniform_discount_percent, "uniform_discount_percent")

    has_extras = (
        options.custom_amount is not None
        or options.discount_on_total is not None
        or bool(options.adjustments)
    )
    if has_extras and not policy.supports_invoice_extras:
        raise ValidationError(f"Custom amounts and TDS/TCS are not supported for {policy.label} documents")

    taxed = policy.always_taxed or bool(options.is_tax_invoice)
    reverse_charge = bool(options.reverse_charge)
    apply_tax = taxed and not reverse_charge
    cess_enabled = apply_tax and policy.supports_cess and bool(options.show_cess)

    subtotal = ZERO
    discount_total = ZERO
    cess_total = ZERO
    tax_totals = TaxTotals()
    lines: list[ComputedLineItem] = []

    for line_no, line in enumerate(line_inputs, start=1):
        item = catalog.get(line.item_id)
        if not _is_usable(item):
            raise NotFoundError("Catalog item", line.item_id)

        unit = line.unit or getattr(item, "unit", None)
        if policy.requires_unit and not unit:
            raise ValidationError(f"Item must have a unit assigned: {item.name}")

        own_discount = _percent(line.discount_percent, "discount_percent") if line.discount_percent is not None else None
        tax_override = _percent(line.tax_rate, "tax_rate", upper=None) if line.tax_rate is not None else None

        if uniform_discount is not None:
            discount_pct = uniform_discount
        else:
            discount_pct = own_discount if own_discount is not None else _percent(None, "discount_percent")

        if apply_tax:
            tax_rate = tax_override if tax_override is not None else _percent(getattr(item, "tax_rate", None), "tax_rate", upper=None)
        else:
            tax_rate = ZERO

        cess_rate = _percent(getattr(item, "cess_rate", None), "cess_rate", upper=None) if cess_enabled else ZERO

        # Computed on the stored precision: 3 dp quantity, 4 dp price.
        try:
            quantity = (
                quantize(line.quantity, QUANTITY_STEP, "quantity", limit=MAX_QUANTITY)
                if line.quantity is not None
                else Decimal("1")
            )
            raw_price = line.unit_price if line.unit_price is not None else getattr(item, "unit_price", None)
            unit_price = quantize(raw_price, PRICE_STEP, "unit_price", limit=MAX_UNIT_PRICE)
            amounts = compute_line(quantity, unit_price, discount_pct, tax_rate, cess_rate)
        except ValidationError as exc:
            raise ValidationError(f"Invalid quantity or price for item {item.name}: {exc}") from exc

        base = quantity * unit_price
        amount_for_tax = base - amounts.discount_amount

        subtotal += base
        discount_total += amounts.discount_amount
        tax_totals = split_tax(amount_for_tax, tax_rate, cross_jurisdiction, tax_totals)
        if cess_rate > ZERO:
            cess_total += amount_for_tax * cess_rate / HUNDRED

        lines.append(
            ComputedLineItem(
                line_no=line_no,
                item_id=line.item_id,
                name=line.name or item.name,
                unit=unit,
                description=getattr(item, "description", None),
                hsn_sac=getattr(item, "hsn_sac", None),
                quantity=quantity,
                unit_price=unit_price,
                discount_percent=discount_pct,
                discount_amount=amounts.discount_amount,
                tax_rate=tax_rate,
                cess_rate=cess_rate,
                taxable_amount=amounts.taxable_amount,
                tax_amount=amounts.tax_amount,
                total_amount=amounts.total_amount,
                tax_rate_override=tax_override,
                line_discount_percent=own_discount,
            )
        )

    # Shipping
    shipping_amount = ZERO
    shipping_tax = ZERO
    if shipping is not None:
        shipping_amount = _money_input(shipping.amount, "shipping_amount")
        if shipping_amount > ZERO and not policy.supports_shipping:
            raise ValidationError(f"Shipping charges are not supported for {policy.label} documents")
        shipping_rate = _percent(shipping.tax_rate, "shipping_tax_rate", upper=None)
        if shipping_amount > ZERO and apply_tax and shipping_rate:
            tax_totals = split_tax(shipping_amount, shipping_rate, cross_jurisdiction, tax_totals)
            shipping_tax = shipping_amount * shipping_rate / HUNDRED

    rounded_tax = tax_totals.rounded()
    subtotal_r = round2(subtotal)
    discount_r = round2(discount_total)
    cess_r = round2(cess_total)
    shipping_r = round2(shipping_amount)
    taxable = round2(subtotal - discount_total)

    custom_amount = round2(_money_input(options.custom_amount, "custom_amount"))
    discount_on_total = round2(_money_input(options.discount_on_total, "discount_on_total"))

    total_before_adjustments = (
        subtotal_r
        - discount_r
        + rounded_tax.central
        + rounded_tax.regional
        + rounded_tax.integrated
        + cess_r
        + shipping_r
        + custom_amount
        - discount_on_total
    )

    adjustments, tds, tcs = _compute_adjustments(
        options.adjustments or (), taxable, total_before_adjustments
    )

    totals = DocumentTotals(
        subtotal=subtotal_r,
        total_discount=discount_r,
        taxable=taxable,
        central_tax=rounded_tax.central,
        regional_tax=rounded_tax.regional,
        integrated_tax=rounded_tax.integrated,
        cess_amount=cess_r,
        shipping_amount=shipping_r,
        shipping_tax=round2(shipping_tax),
        custom_amount=custom_amount,
        discount_on_total=discount_on_total,
        tds_amount=tds,
        tcs_amount=tcs,
        total=round2(total_before_adjustments + tcs - tds),
    )
    _check_range(totals)

    return AggregateResult(totals=totals, lines=tuple(lines), adjustments=adjustments)

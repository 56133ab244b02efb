"""
taxdocs/lifecycle.py

Document Lifecycle Manager.

Operations:
- create_document: Draft -> Active
- update_document: Active -> Active (totals fully recomputed)
- delete_document: Active -> Deleted (soft delete)

Each operation is one unit of work: the document row, its line items,
its adjustments, its ledger entry and its audit row are committed
together or not at all.

IMPORTANT:
- Update replaces the whole line-item set (delete all, then insert). It is
  never a diff/patch; persisted line ids change on every update.
- The ledger entry is written only after totals were computed.
- No retries. Callers retry from scratch.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import Sequence

from sqlalchemy.orm.exc import StaleDataError

from .aggregation import (
    AdjustmentInput,
    AggregateResult,
    AggregationOptions,
    LineItemInput,
    ShippingCharge,
    aggregate,
    line_inputs_from_computed,
)
from .audit import log_action, serialize_model
from .calculations import MAX_RATE, RATE_STEP, ZERO, quantize, round2, to_decimal
from .errors import ConsistencyError, NotFoundError, ValidationError
from .extensions import db
from .jurisdiction import normalize_jurisdiction_code, resolve_cross_jurisdiction
from .ledger import add_document_ledger, delete_ledger_by_reference
from .models import CatalogItem, Client, Company, Document, DocumentAdjustment, DocumentLineItem, Vendor
from .policies import DocumentPolicy, get_policy

logger = logging.getLogger(__name__)


@dataclass
class DocumentInput:
    """
    Submitted document.

    On update, None means "keep the stored value"; line_items=None reuses
    the persisted lines (totals are still recomputed). A field named in
    clear_fields is reset to empty instead (see CLEARABLE_FIELDS).
    """

    document_type: str
    company_id: int
    line_items: Sequence[LineItemInput] | None = None
    vendor_id: int | None = None
    client_id: int | None = None
    document_number: str | None = None
    document_date: date | None = None
    place_of_supply: str | None = None
    supply_jurisdiction_code: str | None = None
    reverse_charge: bool | None = None
    show_cess: bool | None = None
    is_tax_invoice: bool | None = None
    uniform_discount_percent: object = None
    shipping_amount: object = None
    shipping_tax_rate: object = None
    custom_amount: object = None
    custom_amount_label: str | None = None
    discount_on_total: object = None
    adjustments: Sequence[AdjustmentInput] | None = None
    payment_method: str | None = None
    reason: str | None = None
    notes: str | None = None
    clear_fields: frozenset = frozenset()


CLEARABLE_FIELDS = frozenset(
    {
        "document_number",
        "place_of_supply",
        "supply_jurisdiction_code",
        "uniform_discount_percent",
        "shipping_amount",
        "shipping_tax_rate",
        "custom_amount",
        "custom_amount_label",
        "discount_on_total",
        "payment_method",
        "reason",
        "notes",
    }
)


# ---------------------------------------------------------------------
# Unit of work
# ---------------------------------------------------------------------
@contextmanager
def unit_of_work():
    """
    Transactional scope over db.session.

    Commits on normal exit. On any exception the session is rolled back and
    the exception re-raised; a stale versioned row becomes ConsistencyError.
    """
    session = db.session
    try:
        yield session
        session.commit()
    except StaleDataError as exc:
        session.rollback()
        logger.warning("Transaction rolled back: concurrent modification (%s)", exc)
        raise ConsistencyError("The document was modified by another request") from exc
    except Exception as exc:
        session.rollback()
        logger.warning("Transaction rolled back: %s", exc)
        raise


# ---------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------
def _load_company(company_id) -> Company:
    company = db.session.get(Company, company_id) if company_id is not None else None
    if not company or not company.is_active:
        raise NotFoundError("Company", company_id)
    return company


def _check_counterparty(company_id: int, vendor_id, client_id) -> None:
    """Exactly one of vendor/client, and it must exist in the tenant."""
    if vendor_id and client_id:
        raise ValidationError("Cannot provide both vendor_id and client_id; a document has one counterparty")
    if not vendor_id and not client_id:
        raise ValidationError("Either vendor_id or client_id must be provided")

    if vendor_id:
        exists = Vendor.query.filter_by(id=vendor_id, company_id=company_id, is_deleted=False).first()
        if not exists:
            raise NotFoundError("Vendor", vendor_id)
    else:
        exists = Client.query.filter_by(id=client_id, company_id=company_id, is_deleted=False).first()
        if not exists:
            raise NotFoundError("Client", client_id)


def _resolve_catalog(company_id: int, lines: Sequence[LineItemInput]) -> dict:
    """Tenant-scoped lookup of active, non-deleted catalog items by id."""
    if not lines:
        raise ValidationError("At least one line item is required")

    ids = [line.item_id for line in lines]
    items = CatalogItem.query.filter(
        CatalogItem.id.in_(ids),
        CatalogItem.company_id == company_id,
        CatalogItem.is_active.is_(True),
        CatalogItem.is_deleted.is_(False),
    ).all()
    found = {item.id: item for item in items}

    for item_id in ids:
        if item_id not in found:
            raise NotFoundError("Catalog item", item_id)

    if len(items) != len(ids):
        raise ConsistencyError(
            f"Resolved {len(items)} catalog items for {len(ids)} requested lines; each item may appear only once"
        )
    return found


def _load_live_document(document_id, company_id, document_type: str | None = None, *, lock: bool = False) -> Document:
    q = Document.query.filter_by(id=document_id, company_id=company_id, is_deleted=False)
    if document_type:
        q = q.filter(Document.document_type == get_policy(document_type).document_type)
    if lock:
        q = q.with_for_update()
    document = q.first()
    if not document:
        raise NotFoundError("Document", document_id)
    return document


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
def _pick(new, old):
    return old if new is None else new


def _merge(payload: DocumentInput, name: str, stored):
    """Submitted value, else stored value; None when the field is being cleared."""
    if name in payload.clear_fields:
        return None
    return _pick(getattr(payload, name), stored)


def _stored_rate(value, field_name: str):
    """Rate as persisted (2 dp), or None when not set."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return quantize(value, RATE_STEP, field_name, limit=MAX_RATE)


def _calculate(
    policy: DocumentPolicy,
    company: Company,
    lines: Sequence[LineItemInput],
    *,
    place_of_supply,
    supply_code,
    reverse_charge,
    show_cess,
    is_tax_invoice,
    uniform_discount_percent,
    shipping_amount,
    shipping_tax_rate,
    custom_amount,
    discount_on_total,
    adjustments,
) -> tuple[AggregateResult, bool]:
    catalog = _resolve_catalog(company.id, lines)
    cross = resolve_cross_jurisdiction(place_of_supply, company.state, supply_code, company.jurisdiction_code)

    options = AggregationOptions(
        reverse_charge=bool(reverse_charge),
        show_cess=bool(show_cess),
        is_tax_invoice=True if is_tax_invoice is None else bool(is_tax_invoice),
        uniform_discount_percent=uniform_discount_percent,
        custom_amount=custom_amount,
        discount_on_total=discount_on_total,
        adjustments=tuple(adjustments or ()),
    )
    result = aggregate(
        lines,
        catalog,
        cross,
        ShippingCharge(amount=shipping_amount, tax_rate=shipping_tax_rate),
        policy,
        options,
    )
    return result, cross


def _apply_totals(document: Document, result: AggregateResult) -> None:
    for name, value in result.totals.as_dict().items():
        setattr(document, name, value)

    balance = round2(result.totals.total - to_decimal(document.amount_paid))
    if balance < ZERO:
        raise ValidationError("Document total cannot be less than the amount already paid")
    document.balance = balance


def _line_rows(document_id: int, result: AggregateResult) -> list[DocumentLineItem]:
    return [
        DocumentLineItem(
            document_id=document_id,
            item_id=line.item_id,
            line_no=line.line_no,
            name=line.name,
            unit=line.unit,
            description=line.description,
            hsn_sac=line.hsn_sac,
            quantity=line.quantity,
            unit_price=line.unit_price,
            discount_percent=line.discount_percent,
            discount_amount=line.discount_amount,
            tax_rate=line.tax_rate,
            cess_rate=line.cess_rate,
            taxable_amount=line.taxable_amount,
            tax_amount=line.tax_amount,
            total_amount=line.total_amount,
            tax_rate_override=line.tax_rate_override,
            line_discount_percent=line.line_discount_percent,
            is_active=True,
            is_deleted=False,
        )
        for line in result.lines
    ]


def _adjustment_rows(document_id: int, result: AggregateResult) -> list[DocumentAdjustment]:
    return [
        DocumentAdjustment(
            document_id=document_id,
            kind=adj.kind,
            name=adj.name,
            rate=adj.rate,
            applicable_on=adj.applicable_on,
            amount=adj.amount,
        )
        for adj in result.adjustments
    ]


def _write_ledger(document: Document, policy: DocumentPolicy) -> None:
    """Client documents only; vendor documents and quotes have no ledger row."""
    if not document.client_id or policy.ledger_side is None:
        return
    add_document_ledger(
        document.client_id,
        document.company_id,
        document.id,
        document.document_number,
        document.document_date,
        document.total,
        reference_type=policy.document_type,
        label=policy.label,
        side=policy.ledger_side,
    )


def _ensure_editable(document: Document, policy: DocumentPolicy) -> None:
    if document.status in policy.locked_statuses:
        raise ValidationError(f"{policy.label} documents with status '{document.status}' cannot be modified")


# ---------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------
def create_document(payload: DocumentInput) -> Document:
    """Create a document with its line items and (client) ledger entry."""
    policy = get_policy(payload.document_type)

    with unit_of_work() as session:
        company = _load_company(payload.company_id)
        _check_counterparty(company.id, payload.vendor_id, payload.client_id)
        supply_code = normalize_jurisdiction_code(payload.supply_jurisdiction_code)

        result, cross = _calculate(
            policy,
            company,
            payload.line_items or (),
            place_of_supply=payload.place_of_supply,
            supply_code=supply_code,
            reverse_charge=payload.reverse_charge,
            show_cess=payload.show_cess,
            is_tax_invoice=payload.is_tax_invoice,
            uniform_discount_percent=payload.uniform_discount_percent,
            shipping_amount=payload.shipping_amount,
            shipping_tax_rate=payload.shipping_tax_rate,
            custom_amount=payload.custom_amount,
            discount_on_total=payload.discount_on_total,
            adjustments=payload.adjustments,
        )

        document = Document(
            document_type=policy.document_type,
            company_id=company.id,
            vendor_id=payload.vendor_id or None,
            client_id=payload.client_id or None,
            document_number=payload.document_number,
            document_date=payload.document_date or date.today(),
            place_of_supply=payload.place_of_supply,
            supply_jurisdiction_code=supply_code,
            is_cross_jurisdiction=cross,
            reverse_charge=bool(payload.reverse_charge),
            show_cess=bool(payload.show_cess),
            is_tax_invoice=True if payload.is_tax_invoice is None else bool(payload.is_tax_invoice),
            uniform_discount_percent=_stored_rate(payload.uniform_discount_percent, "uniform_discount_percent"),
            shipping_tax_rate=_stored_rate(payload.shipping_tax_rate, "shipping_tax_rate"),
            custom_amount_label=payload.custom_amount_label,
            payment_method=payload.payment_method,
            reason=payload.reason,
            notes=payload.notes,
            amount_paid=ZERO,
            status=policy.initial_status,
            is_active=True,
            is_deleted=False,
        )
        _apply_totals(document, result)

        session.add(document)
        session.flush()

        session.add_all(_line_rows(document.id, result))
        session.add_all(_adjustment_rows(document.id, result))
        _write_ledger(document, policy)

        session.flush()
        log_action(document, "CREATE", before=None, after=serialize_model(document))

    logger.info(
        "Created %s %s: subtotal=%s discount=%s central=%s regional=%s integrated=%s cess=%s total=%s",
        policy.document_type,
        document.id,
        result.totals.subtotal,
        result.totals.total_discount,
        result.totals.central_tax,
        result.totals.regional_tax,
        result.totals.integrated_tax,
        result.totals.cess_amount,
        result.totals.total,
    )
    return document


def update_document(document_id: int, company_id: int, payload: DocumentInput, expected_version: int | None = None) -> Document:
    """
    Recompute and replace a document's totals, line items and ledger entry.

    expected_version, when given, must match the stored version.
    """
    with unit_of_work() as session:
        document = _load_live_document(document_id, company_id, payload.document_type, lock=True)
        policy = get_policy(document.document_type)
        _ensure_editable(document, policy)

        if expected_version is not None and int(expected_version) != document.version:
            raise ConsistencyError(
                f"Document {document_id} is at version {document.version}, not {expected_version}"
            )

        before_snapshot = serialize_model(document)
        company = _load_company(company_id)

        if payload.vendor_id is None and payload.client_id is None:
            vendor_id, client_id = document.vendor_id, document.client_id
        else:
            vendor_id, client_id = payload.vendor_id, payload.client_id
        _check_counterparty(company.id, vendor_id, client_id)

        if payload.line_items is not None:
            lines = list(payload.line_items)
        else:
            lines = line_inputs_from_computed(
                row for row in document.line_items if not row.is_deleted
            )

        if payload.adjustments is not None:
            adjustments = list(payload.adjustments)
        else:
            adjustments = [
                AdjustmentInput(kind=row.kind, rate=row.rate, applicable_on=row.applicable_on, name=row.name)
                for row in document.adjustments
                if not row.is_deleted
            ]

        if "supply_jurisdiction_code" in payload.clear_fields:
            supply_code = None
        elif payload.supply_jurisdiction_code is not None:
            supply_code = normalize_jurisdiction_code(payload.supply_jurisdiction_code)
        else:
            supply_code = document.supply_jurisdiction_code

        place_of_supply = _merge(payload, "place_of_supply", document.place_of_supply)
        reverse_charge = _pick(payload.reverse_charge, document.reverse_charge)
        show_cess = _pick(payload.show_cess, document.show_cess)
        is_tax_invoice = _pick(payload.is_tax_invoice, document.is_tax_invoice)
        uniform_discount = _merge(payload, "uniform_discount_percent", document.uniform_discount_percent)
        shipping_amount = _merge(payload, "shipping_amount", document.shipping_amount)
        shipping_tax_rate = _merge(payload, "shipping_tax_rate", document.shipping_tax_rate)
        custom_amount = _merge(payload, "custom_amount", document.custom_amount or None)
        discount_on_total = _merge(payload, "discount_on_total", document.discount_on_total or None)

        result, cross = _calculate(
            policy,
            company,
            lines,
            place_of_supply=place_of_supply,
            supply_code=supply_code,
            reverse_charge=reverse_charge,
            show_cess=show_cess,
            is_tax_invoice=is_tax_invoice,
            uniform_discount_percent=uniform_discount,
            shipping_amount=shipping_amount,
            shipping_tax_rate=shipping_tax_rate,
            custom_amount=custom_amount,
            discount_on_total=discount_on_total,
            adjustments=adjustments,
        )

        # Replace, not patch: old children go first, then the new set.
        for row in list(document.line_items) + list(document.adjustments):
            session.delete(row)
        session.flush()
        session.expire(document, ["line_items", "adjustments"])
        session.add_all(_line_rows(document.id, result))
        session.add_all(_adjustment_rows(document.id, result))

        document.vendor_id = vendor_id or None
        document.client_id = client_id or None
        document.document_number = _merge(payload, "document_number", document.document_number)
        document.document_date = _pick(payload.document_date, document.document_date)
        document.place_of_supply = place_of_supply
        document.supply_jurisdiction_code = supply_code
        document.is_cross_jurisdiction = cross
        document.reverse_charge = bool(reverse_charge)
        document.show_cess = bool(show_cess)
        document.is_tax_invoice = bool(is_tax_invoice)
        document.uniform_discount_percent = _stored_rate(uniform_discount, "uniform_discount_percent")
        document.shipping_tax_rate = _stored_rate(shipping_tax_rate, "shipping_tax_rate")
        document.custom_amount_label = _merge(payload, "custom_amount_label", document.custom_amount_label)
        document.payment_method = _merge(payload, "payment_method", document.payment_method)
        document.reason = _merge(payload, "reason", document.reason)
        document.notes = _merge(payload, "notes", document.notes)
        _apply_totals(document, result)

        delete_ledger_by_reference(policy.document_type, document.id)
        _write_ledger(document, policy)

        session.flush()
        log_action(document, "UPDATE", before=before_snapshot, after=serialize_model(document))

    logger.info(
        "Updated %s %s: %d line(s), total=%s",
        policy.document_type,
        document.id,
        len(result.lines),
        result.totals.total,
    )
    return document


def delete_document(document_id: int, company_id: int, document_type: str | None = None) -> None:
    """
    Soft delete: children and document are flagged, the ledger row removed.

    Deleting an already-deleted document raises NotFoundError.
    """
    with unit_of_work() as session:
        document = _load_live_document(document_id, company_id, document_type, lock=True)
        policy = get_policy(document.document_type)
        if document.status in policy.locked_statuses:
            raise ValidationError(f"{policy.label} documents with status '{document.status}' cannot be deleted")

        before_snapshot = serialize_model(document)

        DocumentLineItem.query.filter_by(document_id=document.id).update(
            {"is_active": False, "is_deleted": True}, synchronize_session=False
        )
        DocumentAdjustment.query.filter_by(document_id=document.id).update(
            {"is_active": False, "is_deleted": True}, synchronize_session=False
        )
        removed = delete_ledger_by_reference(policy.document_type, document.id)

        document.is_active = False
        document.is_deleted = True
        document.status = policy.deleted_status

        session.flush()
        log_action(document, "DELETE", before=before_snapshot, after=serialize_model(document))

    logger.info("Deleted %s %s (ledger rows removed: %s)", policy.document_type, document_id, removed)


def get_document(document_id: int, company_id: int, document_type: str | None = None) -> Document:
    """Live (non-deleted) document or NotFoundError."""
    return _load_live_document(document_id, company_id, document_type)

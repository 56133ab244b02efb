"""
taxdocs/blueprints/documents/routes.py

JSON routes for every document type (expenses, debit and credit notes,
purchase orders and bills, quotes, invoices).

Includes:
- create / read / update / soft delete of a document
- client ledger statement with running balance

IMPORTANT:
- The tenant (company id) comes from the header configured as
  TENANT_HEADER. It scopes every query; it is not an access check.
- Input is never trusted: all numbers are parsed server-side and all
  totals are recomputed by the engine.
- Monetary values are returned as strings to keep Decimal precision.
- On update, a clearable key sent as null (or "") empties the stored
  value; an absent key keeps it.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from flask import Blueprint, current_app, jsonify, request

from ...aggregation import AdjustmentInput, LineItemInput
from ...calculations import round2, to_decimal
from ...errors import NotFoundError, ValidationError
from ...ledger import client_balance, client_statement
from ...lifecycle import CLEARABLE_FIELDS, DocumentInput, create_document, delete_document, get_document, update_document
from ...models import Client, Document

documents_bp = Blueprint("documents", __name__, url_prefix="/documents")


# ---------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------
def _parse_decimal(value, field: str) -> Decimal | None:
    """Parse decimal from user input (accepts comma or dot)."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return to_decimal(value, field)


def _parse_optional_int(value, field: str) -> int | None:
    """Parse optional int from JSON/query."""
    if value is None or isinstance(value, bool):
        return None
    raw = str(value).strip()
    if raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{field} must be an integer") from None


def _parse_bool(value) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _parse_date(value, field: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)") from None


def _optional_str(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _tenant_id() -> int:
    header = current_app.config.get("TENANT_HEADER", "X-Company-Id")
    company_id = _parse_optional_int(request.headers.get(header), header)
    if company_id is None:
        raise ValidationError(f"{header} header is required")
    return company_id


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def _line_items(body: dict) -> list[LineItemInput] | None:
    """None when the key is absent (update keeps the stored lines)."""
    if "line_items" not in body:
        return None
    raw_lines = body.get("line_items")
    if not isinstance(raw_lines, list):
        raise ValidationError("line_items must be a list")

    lines = []
    for idx, raw in enumerate(raw_lines, start=1):
        if not isinstance(raw, dict):
            raise ValidationError(f"line_items[{idx}] must be an object")
        item_id = _parse_optional_int(raw.get("item_id"), "item_id")
        if item_id is None:
            raise ValidationError(f"line_items[{idx}].item_id is required")
        lines.append(
            LineItemInput(
                item_id=item_id,
                quantity=_parse_decimal(raw.get("quantity"), "quantity"),
                unit_price=_parse_decimal(raw.get("unit_price"), "unit_price"),
                discount_percent=_parse_decimal(raw.get("discount_percent"), "discount_percent"),
                tax_rate=_parse_decimal(raw.get("tax_rate"), "tax_rate"),
                name=_optional_str(raw.get("name")),
                unit=_optional_str(raw.get("unit")),
            )
        )
    return lines


def _adjustments(body: dict) -> list[AdjustmentInput] | None:
    if "adjustments" not in body:
        return None
    raw_entries = body.get("adjustments") or []
    if not isinstance(raw_entries, list):
        raise ValidationError("adjustments must be a list")

    entries = []
    for raw in raw_entries:
        if not isinstance(raw, dict):
            raise ValidationError("Each adjustment must be an object")
        rate = _parse_decimal(raw.get("rate"), "rate")
        if rate is None:
            raise ValidationError("Adjustment rate is required")
        entries.append(
            AdjustmentInput(
                kind=str(raw.get("kind") or ""),
                rate=rate,
                applicable_on=_optional_str(raw.get("applicable_on")) or "taxable",
                name=_optional_str(raw.get("name")),
            )
        )
    return entries


def _cleared(body: dict) -> frozenset:
    """Clearable keys sent explicitly empty."""
    return frozenset(
        key for key in CLEARABLE_FIELDS if key in body and (body[key] is None or str(body[key]).strip() == "")
    )


def _document_input(document_type: str, company_id: int, body: dict) -> DocumentInput:
    is_tax_invoice = _parse_bool(body.get("is_tax_invoice"))
    invoice_type = _optional_str(body.get("invoice_type"))
    if invoice_type is not None:
        is_tax_invoice = invoice_type.lower() == "tax invoice"

    return DocumentInput(
        document_type=document_type,
        company_id=company_id,
        line_items=_line_items(body),
        vendor_id=_parse_optional_int(body.get("vendor_id"), "vendor_id"),
        client_id=_parse_optional_int(body.get("client_id"), "client_id"),
        document_number=_optional_str(body.get("document_number")),
        document_date=_parse_date(body.get("document_date"), "document_date"),
        place_of_supply=_optional_str(body.get("place_of_supply")),
        supply_jurisdiction_code=_optional_str(body.get("supply_jurisdiction_code")),
        reverse_charge=_parse_bool(body.get("reverse_charge")),
        show_cess=_parse_bool(body.get("show_cess")),
        is_tax_invoice=is_tax_invoice,
        uniform_discount_percent=_parse_decimal(body.get("uniform_discount_percent"), "uniform_discount_percent"),
        shipping_amount=_parse_decimal(body.get("shipping_amount"), "shipping_amount"),
        shipping_tax_rate=_parse_decimal(body.get("shipping_tax_rate"), "shipping_tax_rate"),
        custom_amount=_parse_decimal(body.get("custom_amount"), "custom_amount"),
        custom_amount_label=_optional_str(body.get("custom_amount_label")),
        discount_on_total=_parse_decimal(body.get("discount_on_total"), "discount_on_total"),
        adjustments=_adjustments(body),
        payment_method=_optional_str(body.get("payment_method")),
        reason=_optional_str(body.get("reason")),
        notes=_optional_str(body.get("notes")),
        clear_fields=_cleared(body),
    )


# ---------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------
def _money(value) -> str:
    return str(round2(value))


def _number(value) -> str | None:
    return None if value is None else str(value)


def serialize_document(document: Document) -> dict:
    lines = [row for row in document.line_items if not row.is_deleted]
    adjustments = [row for row in document.adjustments if not row.is_deleted]
    return {
        "id": document.id,
        "document_type": document.document_type,
        "company_id": document.company_id,
        "vendor_id": document.vendor_id,
        "client_id": document.client_id,
        "document_number": document.document_number,
        "document_date": document.document_date.isoformat() if document.document_date else None,
        "place_of_supply": document.place_of_supply,
        "supply_jurisdiction_code": document.supply_jurisdiction_code,
        "is_cross_jurisdiction": document.is_cross_jurisdiction,
        "reverse_charge": document.reverse_charge,
        "show_cess": document.show_cess,
        "is_tax_invoice": document.is_tax_invoice,
        "uniform_discount_percent": _number(document.uniform_discount_percent),
        "shipping_tax_rate": _number(document.shipping_tax_rate),
        "custom_amount_label": document.custom_amount_label,
        "totals": {
            "subtotal": _money(document.subtotal),
            "total_discount": _money(document.total_discount),
            "taxable": _money(document.taxable),
            "central_tax": _money(document.central_tax),
            "regional_tax": _money(document.regional_tax),
            "integrated_tax": _money(document.integrated_tax),
            "cess_amount": _money(document.cess_amount),
            "shipping_amount": _money(document.shipping_amount),
            "shipping_tax": _money(document.shipping_tax),
            "custom_amount": _money(document.custom_amount),
            "discount_on_total": _money(document.discount_on_total),
            "tds_amount": _money(document.tds_amount),
            "tcs_amount": _money(document.tcs_amount),
            "total": _money(document.total),
            "amount_paid": _money(document.amount_paid),
            "balance": _money(document.balance),
        },
        "line_items": [
            {
                "id": row.id,
                "line_no": row.line_no,
                "item_id": row.item_id,
                "name": row.name,
                "unit": row.unit,
                "hsn_sac": row.hsn_sac,
                "quantity": _number(row.quantity),
                "unit_price": _number(row.unit_price),
                "discount_percent": _number(row.discount_percent),
                "discount_amount": _money(row.discount_amount),
                "tax_rate": _number(row.tax_rate),
                "cess_rate": _number(row.cess_rate),
                "tax_rate_override": _number(row.tax_rate_override),
                "line_discount_percent": _number(row.line_discount_percent),
                "taxable_amount": _money(row.taxable_amount),
                "tax_amount": _money(row.tax_amount),
                "total_amount": _money(row.total_amount),
            }
            for row in lines
        ],
        "adjustments": [
            {
                "kind": row.kind,
                "name": row.name,
                "rate": _number(row.rate),
                "applicable_on": row.applicable_on,
                "amount": _money(row.amount),
            }
            for row in adjustments
        ],
        "payment_method": document.payment_method,
        "reason": document.reason,
        "notes": document.notes,
        "status": document.status,
        "version": document.version,
    }


# ---------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------
@documents_bp.route("/<document_type>", methods=["POST"])
def create(document_type: str):
    """Create a document; totals are computed server-side."""
    company_id = _tenant_id()
    payload = _document_input(document_type, company_id, _json_body())
    document = create_document(payload)
    return jsonify(serialize_document(document)), 201


@documents_bp.route("/<document_type>/<int:document_id>", methods=["GET"])
def detail(document_type: str, document_id: int):
    document = get_document(document_id, _tenant_id(), document_type)
    return jsonify(serialize_document(document))


@documents_bp.route("/<document_type>/<int:document_id>", methods=["PUT"])
def update(document_type: str, document_id: int):
    """
    Replace line items and recompute totals.

    Optional "version" in the body enables the optimistic concurrency check.
    """
    company_id = _tenant_id()
    body = _json_body()
    payload = _document_input(document_type, company_id, body)
    expected_version = _parse_optional_int(body.get("version"), "version")
    document = update_document(document_id, company_id, payload, expected_version=expected_version)
    return jsonify(serialize_document(document))


@documents_bp.route("/<document_type>/<int:document_id>", methods=["DELETE"])
def delete(document_type: str, document_id: int):
    delete_document(document_id, _tenant_id(), document_type)
    return "", 204


# ---------------------------------------------------------------------
# Client ledger
# ---------------------------------------------------------------------
@documents_bp.route("/clients/<int:client_id>/ledger", methods=["GET"])
def client_ledger(client_id: int):
    """Ledger statement with running balance; optional ?from=&to= ISO dates."""
    company_id = _tenant_id()
    client = Client.query.filter_by(id=client_id, company_id=company_id, is_deleted=False).first()
    if not client:
        raise NotFoundError("Client", client_id)

    rows = client_statement(
        client_id,
        company_id,
        from_date=_parse_date(request.args.get("from"), "from"),
        to_date=_parse_date(request.args.get("to"), "to"),
    )
    entries = [
        {
            **row,
            "transaction_date": row["transaction_date"].isoformat(),
            "debit": _money(row["debit"]),
            "credit": _money(row["credit"]),
            "balance": _money(row["balance"]),
        }
        for row in rows
    ]
    return jsonify(
        {
            "client_id": client.id,
            "client_name": client.name,
            "entries": entries,
            "balance": _money(client_balance(client_id, company_id)),
        }
    )

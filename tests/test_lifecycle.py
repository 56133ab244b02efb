from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.orm.exc import StaleDataError

from taxdocs.aggregation import (
    AdjustmentInput,
    AggregationOptions,
    DocumentTotals,
    LineItemInput,
    ShippingCharge,
    aggregate,
    line_inputs_from_computed,
)
from taxdocs.errors import ConsistencyError, NotFoundError, ValidationError
from taxdocs.lifecycle import (
    DocumentInput,
    create_document,
    delete_document,
    get_document,
    unit_of_work,
    update_document,
)
from taxdocs.models import AuditLog, CatalogItem, Document, DocumentAdjustment, DocumentLineItem, LedgerEntry, Vendor
from taxdocs.policies import get_policy


def _line(item_id, quantity="1", price=None, discount=None, tax=None):
    return LineItemInput(
        item_id=item_id,
        quantity=Decimal(quantity),
        unit_price=Decimal(price) if price is not None else None,
        discount_percent=Decimal(discount) if discount is not None else None,
        tax_rate=Decimal(tax) if tax is not None else None,
    )


def _payload(seeded, document_type="debit_note", lines=None, **overrides):
    data = dict(
        document_type=document_type,
        company_id=seeded["company_id"],
        client_id=seeded["client_id"],
        document_number="DN-001",
        document_date=date(2026, 1, 15),
        place_of_supply="Gujarat",
        line_items=lines if lines is not None else [_line(seeded["rod"], "2", "100")],
    )
    data.update(overrides)
    return DocumentInput(**data)


def _live_lines(document_id):
    return DocumentLineItem.query.filter_by(document_id=document_id, is_deleted=False).all()


# ---------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------
def test_create_client_debit_note(seeded):
    document = create_document(_payload(seeded, reason="Short supply"))

    assert document.id is not None
    assert document.status == "Active"
    assert document.version == 1
    assert document.is_cross_jurisdiction is False
    assert document.subtotal == Decimal("200.00")
    assert document.central_tax == Decimal("18.00")
    assert document.regional_tax == Decimal("18.00")
    assert document.integrated_tax == Decimal("0.00")
    assert document.total == Decimal("236.00")
    assert document.balance == Decimal("236.00")
    assert document.reason == "Short supply"

    lines = _live_lines(document.id)
    assert len(lines) == 1
    assert lines[0].name == "Steel rod 12mm"
    assert lines[0].unit == "kg"

    entry = LedgerEntry.query.filter_by(reference_type="debit_note", reference_id=document.id).one()
    assert entry.client_id == seeded["client_id"]
    assert entry.debit == Decimal("236.00")
    assert entry.credit == Decimal("0.00")
    assert entry.description == "Debit Note DN-001"
    assert entry.transaction_date == date(2026, 1, 15)


def test_vendor_document_has_no_ledger_entry(seeded):
    payload = _payload(seeded, document_type="expense", client_id=None, vendor_id=seeded["vendor_id"])
    document = create_document(payload)

    assert document.counterparty_type == "vendor"
    assert LedgerEntry.query.count() == 0


def test_cross_jurisdiction_from_place_of_supply(seeded):
    document = create_document(_payload(seeded, place_of_supply="MH (27)"))
    assert document.is_cross_jurisdiction is True
    assert document.integrated_tax == Decimal("36.00")
    assert document.central_tax == Decimal("0.00")


def test_explicit_supply_code_wins(seeded):
    document = create_document(_payload(seeded, place_of_supply="Gujarat", supply_jurisdiction_code="mh"))
    assert document.supply_jurisdiction_code == "MH"
    assert document.is_cross_jurisdiction is True


def test_unknown_supply_code_is_rejected(seeded):
    with pytest.raises(ValidationError):
        create_document(_payload(seeded, supply_jurisdiction_code="ZZ"))
    assert Document.query.count() == 0


def test_exactly_one_counterparty(seeded):
    with pytest.raises(ValidationError):
        create_document(_payload(seeded, vendor_id=seeded["vendor_id"]))
    with pytest.raises(ValidationError):
        create_document(_payload(seeded, client_id=None))


def test_unknown_counterparty(seeded):
    with pytest.raises(NotFoundError) as excinfo:
        create_document(_payload(seeded, client_id=None, vendor_id=9999))
    assert excinfo.value.entity == "Vendor"


def test_unknown_company(seeded):
    with pytest.raises(NotFoundError):
        create_document(_payload(seeded, company_id=9999))


def test_items_of_other_tenants_are_not_found(seeded):
    lines = [_line(seeded["rod"]), _line(seeded["foreign"])]
    with pytest.raises(NotFoundError) as excinfo:
        create_document(_payload(seeded, lines=lines))
    assert excinfo.value.identifier == seeded["foreign"]
    assert Document.query.count() == 0
    assert DocumentLineItem.query.count() == 0
    assert LedgerEntry.query.count() == 0


def test_inactive_item_is_not_found(seeded):
    with pytest.raises(NotFoundError):
        create_document(_payload(seeded, lines=[_line(seeded["retired"])]))


def test_duplicate_items_are_a_consistency_error(seeded):
    lines = [_line(seeded["rod"]), _line(seeded["rod"], "3")]
    with pytest.raises(ConsistencyError):
        create_document(_payload(seeded, lines=lines))


def test_item_without_unit_rejected_for_debit_notes(seeded):
    with pytest.raises(ValidationError):
        create_document(_payload(seeded, lines=[_line(seeded["no_unit"])]))


def test_invoice_with_withholding(seeded):
    payload = _payload(
        seeded,
        document_type="invoice",
        document_number="INV-7",
        lines=[_line(seeded["consulting"], "2")],
        adjustments=[AdjustmentInput(kind="tds", rate=Decimal("10"), applicable_on="taxable", name="194J")],
    )
    document = create_document(payload)

    assert document.status == "Unpaid"
    assert document.subtotal == Decimal("5000.00")
    assert document.tds_amount == Decimal("500.00")
    assert document.total == Decimal("5400.00")

    adjustments = DocumentAdjustment.query.filter_by(document_id=document.id).all()
    assert [(a.kind, a.amount) for a in adjustments] == [("tds", Decimal("500.00"))]

    entry = LedgerEntry.query.filter_by(reference_type="invoice", reference_id=document.id).one()
    assert entry.description == "Invoice INV-7"
    assert entry.debit == Decimal("5400.00")


def test_purchase_order_starts_open(seeded):
    payload = _payload(seeded, document_type="purchase_order", client_id=None, vendor_id=seeded["vendor_id"])
    document = create_document(payload)
    assert document.status == "Open"


def test_create_writes_audit_row(seeded):
    document = create_document(_payload(seeded))
    rows = AuditLog.query.filter_by(entity_type="Document", entity_id=document.id).all()
    assert [row.action for row in rows] == ["CREATE"]
    assert rows[0].company_id == seeded["company_id"]
    assert '"total": "236.00"' in rows[0].after_data


# ---------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------
def test_update_replaces_line_items(seeded):
    lines = [_line(seeded["rod"], "2", "100"), _line(seeded["chair"], "1", "1000", "10")]
    document = create_document(_payload(seeded, lines=lines))
    assert len(_live_lines(document.id)) == 2
    assert document.total == Decimal("1244.00")

    updated = update_document(
        document.id,
        seeded["company_id"],
        _payload(seeded, lines=[_line(seeded["rod"], "1", "100")]),
    )

    rows = DocumentLineItem.query.filter_by(document_id=document.id).all()
    assert len(rows) == 1
    assert rows[0].item_id == seeded["rod"]
    assert updated.total == Decimal("118.00")
    assert updated.version == 2

    entries = LedgerEntry.query.filter_by(reference_type="debit_note", reference_id=document.id).all()
    assert len(entries) == 1
    assert entries[0].debit == Decimal("118.00")


def test_update_without_lines_reuses_stored_lines(seeded):
    document = create_document(_payload(seeded))

    updated = update_document(
        document.id,
        seeded["company_id"],
        DocumentInput(document_type="debit_note", company_id=seeded["company_id"], place_of_supply="Maharashtra"),
    )

    assert len(_live_lines(document.id)) == 1
    assert updated.is_cross_jurisdiction is True
    assert updated.integrated_tax == Decimal("36.00")
    assert updated.central_tax == Decimal("0.00")
    assert updated.total == Decimal("236.00")
    assert updated.client_id == seeded["client_id"]
    assert updated.document_number == "DN-001"


def test_update_can_switch_counterparty(seeded):
    document = create_document(_payload(seeded))
    update_document(
        document.id,
        seeded["company_id"],
        DocumentInput(document_type="debit_note", company_id=seeded["company_id"], vendor_id=seeded["vendor_id"]),
    )

    refreshed = get_document(document.id, seeded["company_id"])
    assert refreshed.vendor_id == seeded["vendor_id"]
    assert refreshed.client_id is None
    assert LedgerEntry.query.count() == 0


def test_update_version_mismatch(seeded):
    document = create_document(_payload(seeded))

    with pytest.raises(ConsistencyError):
        update_document(
            document.id,
            seeded["company_id"],
            _payload(seeded, lines=[_line(seeded["rod"], "5", "100")]),
            expected_version=7,
        )

    refreshed = get_document(document.id, seeded["company_id"])
    assert refreshed.version == 1
    assert refreshed.total == Decimal("236.00")


def test_update_with_matching_version(seeded):
    document = create_document(_payload(seeded))
    updated = update_document(
        document.id,
        seeded["company_id"],
        _payload(seeded, lines=[_line(seeded["rod"], "5", "100")]),
        expected_version=1,
    )
    assert updated.total == Decimal("590.00")
    assert updated.version == 2


def test_failed_update_leaves_document_untouched(seeded):
    document = create_document(_payload(seeded))

    with pytest.raises(NotFoundError):
        update_document(
            document.id,
            seeded["company_id"],
            _payload(seeded, lines=[_line(seeded["chair"]), _line(seeded["foreign"])]),
        )

    rows = _live_lines(document.id)
    assert [row.item_id for row in rows] == [seeded["rod"]]
    entry = LedgerEntry.query.filter_by(reference_id=document.id).one()
    assert entry.debit == Decimal("236.00")
    assert get_document(document.id, seeded["company_id"]).version == 1


def test_total_below_amount_paid_is_rejected(seeded, db):
    document = create_document(_payload(seeded))
    document.amount_paid = Decimal("200.00")
    db.session.commit()

    with pytest.raises(ValidationError):
        update_document(document.id, seeded["company_id"], _payload(seeded, lines=[_line(seeded["rod"], "1", "100")]))


def test_paid_invoice_is_locked(seeded, db):
    document = create_document(_payload(seeded, document_type="invoice"))
    document.status = "Paid"
    db.session.commit()

    with pytest.raises(ValidationError):
        update_document(document.id, seeded["company_id"], _payload(seeded, document_type="invoice"))
    with pytest.raises(ValidationError):
        delete_document(document.id, seeded["company_id"])


def test_update_records_before_and_after(seeded):
    document = create_document(_payload(seeded))
    update_document(document.id, seeded["company_id"], _payload(seeded, lines=[_line(seeded["rod"], "1", "100")]))

    row = AuditLog.query.filter_by(entity_id=document.id, action="UPDATE").one()
    assert '"total": "236.00"' in row.before_data
    assert '"total": "118.00"' in row.after_data


# ---------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------
def test_delete_removes_ledger_entry(seeded, db):
    document = create_document(_payload(seeded))
    assert LedgerEntry.query.count() == 1

    delete_document(document.id, seeded["company_id"], "debit_note")

    assert LedgerEntry.query.count() == 0
    stored = db.session.get(Document, document.id)
    assert stored.is_deleted is True
    assert stored.is_active is False
    assert stored.status == "Deleted"
    assert DocumentLineItem.query.filter_by(document_id=document.id, is_deleted=True).count() == 1
    assert _live_lines(document.id) == []


def test_delete_twice_is_not_found(seeded):
    document = create_document(_payload(seeded))
    delete_document(document.id, seeded["company_id"])

    with pytest.raises(NotFoundError):
        delete_document(document.id, seeded["company_id"])
    with pytest.raises(NotFoundError):
        get_document(document.id, seeded["company_id"])
    with pytest.raises(NotFoundError):
        update_document(document.id, seeded["company_id"], _payload(seeded))


def test_deleted_purchase_order_is_cancelled(seeded, db):
    payload = _payload(seeded, document_type="purchase_order", client_id=None, vendor_id=seeded["vendor_id"])
    document = create_document(payload)
    delete_document(document.id, seeded["company_id"])
    assert db.session.get(Document, document.id).status == "Cancelled"


def test_converted_purchase_order_cannot_be_deleted(seeded, db):
    payload = _payload(seeded, document_type="purchase_order", client_id=None, vendor_id=seeded["vendor_id"])
    document = create_document(payload)
    document.status = "Converted"
    db.session.commit()

    with pytest.raises(ValidationError):
        delete_document(document.id, seeded["company_id"])


def test_documents_are_tenant_scoped(seeded):
    document = create_document(_payload(seeded))
    with pytest.raises(NotFoundError):
        get_document(document.id, seeded["other_company_id"])
    with pytest.raises(NotFoundError):
        delete_document(document.id, seeded["other_company_id"])


def test_document_type_must_match(seeded):
    document = create_document(_payload(seeded))
    with pytest.raises(NotFoundError):
        get_document(document.id, seeded["company_id"], "invoice")


# ---------------------------------------------------------------------
# Round trip
# ---------------------------------------------------------------------
def test_persisted_lines_reproduce_persisted_totals(seeded):
    lines = [
        _line(seeded["rod"], "3", "100", "5"),
        _line(seeded["chair"], "2", "1000", "10"),
        _line(seeded["crate"], "1", "500"),
    ]
    document = create_document(
        _payload(
            seeded,
            lines=lines,
            show_cess=True,
            shipping_amount=Decimal("40"),
            shipping_tax_rate=Decimal("5"),
        )
    )

    catalog = {item.id: item for item in CatalogItem.query.filter_by(company_id=seeded["company_id"]).all()}
    result = aggregate(
        line_inputs_from_computed(_live_lines(document.id)),
        catalog,
        document.is_cross_jurisdiction,
        ShippingCharge(document.shipping_amount, document.shipping_tax_rate),
        get_policy(document.document_type),
        AggregationOptions(show_cess=document.show_cess),
    )

    assert result.totals.total == document.total
    assert result.totals.central_tax == document.central_tax
    assert result.totals.regional_tax == document.regional_tax
    assert result.totals.cess_amount == document.cess_amount
    assert result.totals.taxable == document.taxable
    assert sum(line.taxable_amount for line in _live_lines(document.id)) == document.taxable


def _stored_totals(document):
    return {name: getattr(document, name) for name in DocumentTotals.__dataclass_fields__}


def _reaggregate(document):
    """Recompute a stored document from its persisted lines and toggles."""
    catalog = {item.id: item for item in CatalogItem.query.filter_by(company_id=document.company_id).all()}
    adjustments = [
        AdjustmentInput(kind=row.kind, rate=row.rate, applicable_on=row.applicable_on)
        for row in document.adjustments
        if not row.is_deleted
    ]
    return aggregate(
        line_inputs_from_computed(_live_lines(document.id)),
        catalog,
        document.is_cross_jurisdiction,
        ShippingCharge(document.shipping_amount, document.shipping_tax_rate),
        get_policy(document.document_type),
        AggregationOptions(
            reverse_charge=document.reverse_charge,
            show_cess=document.show_cess,
            is_tax_invoice=document.is_tax_invoice,
            uniform_discount_percent=document.uniform_discount_percent,
            custom_amount=document.custom_amount or None,
            discount_on_total=document.discount_on_total or None,
            adjustments=adjustments,
        ),
    )


ROUND_TRIP_CASES = [
    (
        "debit_note",
        "client",
        [
            ("rod", "1.2345", "99.99", "12.345", None),
            ("chair", "0.3333", "1234.56789", None, None),
            ("crate", "2.5", None, None, None),
        ],
        dict(show_cess=True, shipping_amount=Decimal("12.345"), shipping_tax_rate=Decimal("18")),
    ),
    ("invoice", "client", [("rod", "2", "100", None, None)], dict(reverse_charge=True)),
    ("invoice", "client", [("chair", "1.5", "999.995", "2.5", None)], dict(is_tax_invoice=False)),
    (
        "invoice",
        "client",
        [("rod", "3", "33.3333", None, "5"), ("consulting", "0.75", None, "10", None)],
        dict(
            place_of_supply="Maharashtra",
            uniform_discount_percent=Decimal("7.5"),
            custom_amount=Decimal("10.10"),
            discount_on_total=Decimal("5"),
            adjustments=[AdjustmentInput(kind="tds", rate=Decimal("2"))],
        ),
    ),
    ("expense", "vendor", [("no_unit", "1.001", "49.995", None, None)], dict(reverse_charge=True)),
    (
        "purchase_bill",
        "vendor",
        [("rod", "2", "100", None, None), ("crate", "1", None, None, None)],
        dict(reverse_charge=True, show_cess=True),
    ),
    ("credit_note", "client", [("crate", "1.333", "500", None, None)], dict(show_cess=True)),
    (
        "quote",
        "client",
        [("consulting", "2.25", None, "3.333", None)],
        dict(adjustments=[AdjustmentInput(kind="tcs", rate=Decimal("1"), applicable_on="total")]),
    ),
]


@pytest.mark.parametrize(
    "document_type, counterparty, line_specs, options",
    ROUND_TRIP_CASES,
    ids=[
        "fractional-cess-shipping",
        "reverse-charge",
        "bill-of-supply",
        "override-uniform-extras",
        "expense-reverse-charge",
        "purchase-bill",
        "credit-note",
        "quote",
    ],
)
def test_stored_documents_recompute_to_stored_totals(seeded, document_type, counterparty, line_specs, options):
    lines = [_line(seeded[key], quantity, price, discount, tax) for key, quantity, price, discount, tax in line_specs]
    if counterparty == "client":
        parties = dict(client_id=seeded["client_id"])
    else:
        parties = dict(client_id=None, vendor_id=seeded["vendor_id"])

    document = create_document(_payload(seeded, document_type, lines=lines, **parties, **options))
    stored = _stored_totals(document)

    assert _reaggregate(document).totals.as_dict() == stored

    updated = update_document(
        document.id,
        seeded["company_id"],
        DocumentInput(document_type=document_type, company_id=seeded["company_id"]),
    )
    assert updated.version == 2
    assert _stored_totals(updated) == stored
    assert _reaggregate(updated).totals.as_dict() == stored


def test_inputs_are_stored_at_column_precision(seeded):
    document = create_document(_payload(seeded, lines=[_line(seeded["rod"], "1.2345", "99.99", "12.345")]))

    row = _live_lines(document.id)[0]
    assert row.quantity == Decimal("1.235")
    assert row.unit_price == Decimal("99.99")
    assert row.discount_percent == Decimal("12.35")
    assert row.line_discount_percent == Decimal("12.35")
    assert row.tax_rate_override is None
    assert document.total == Decimal("127.72")


def test_out_of_range_quantity_is_rejected(seeded):
    with pytest.raises(ValidationError):
        create_document(_payload(seeded, lines=[_line(seeded["rod"], "1e27", "100")]))
    assert Document.query.count() == 0
    assert LedgerEntry.query.count() == 0


# ---------------------------------------------------------------------
# Toggles on update
# ---------------------------------------------------------------------
def test_clearing_reverse_charge_restores_tax(seeded):
    document = create_document(_payload(seeded, "invoice", reverse_charge=True))
    assert document.total == Decimal("200.00")
    assert _live_lines(document.id)[0].tax_rate == Decimal("0.00")

    updated = update_document(
        document.id,
        seeded["company_id"],
        DocumentInput(document_type="invoice", company_id=seeded["company_id"], reverse_charge=False),
    )

    assert updated.central_tax == Decimal("18.00")
    assert updated.regional_tax == Decimal("18.00")
    assert updated.total == Decimal("236.00")
    assert _live_lines(document.id)[0].tax_rate == Decimal("18.00")
    assert LedgerEntry.query.filter_by(reference_id=document.id).one().debit == Decimal("236.00")


def test_switching_to_tax_invoice_applies_catalog_rates(seeded):
    document = create_document(_payload(seeded, "invoice", is_tax_invoice=False))
    assert document.total == Decimal("200.00")

    updated = update_document(
        document.id,
        seeded["company_id"],
        DocumentInput(document_type="invoice", company_id=seeded["company_id"], is_tax_invoice=True),
    )
    assert updated.total == Decimal("236.00")


def test_line_tax_override_survives_update(seeded):
    document = create_document(_payload(seeded, lines=[_line(seeded["rod"], "2", "100", tax="5")]))
    assert document.total == Decimal("210.00")

    updated = update_document(
        document.id,
        seeded["company_id"],
        DocumentInput(document_type="debit_note", company_id=seeded["company_id"], place_of_supply="Maharashtra"),
    )

    assert updated.integrated_tax == Decimal("10.00")
    assert updated.total == Decimal("210.00")
    assert _live_lines(document.id)[0].tax_rate_override == Decimal("5.00")


def test_uniform_discount_can_be_cleared(seeded):
    document = create_document(_payload(seeded, lines=[_line(seeded["rod"], "2", "100", "10")]))
    assert document.total == Decimal("212.40")

    discounted = update_document(
        document.id,
        seeded["company_id"],
        DocumentInput(
            document_type="debit_note",
            company_id=seeded["company_id"],
            uniform_discount_percent=Decimal("50"),
        ),
    )
    assert discounted.uniform_discount_percent == Decimal("50.00")
    assert discounted.total == Decimal("118.00")
    assert _live_lines(document.id)[0].line_discount_percent == Decimal("10.00")

    cleared = update_document(
        document.id,
        seeded["company_id"],
        DocumentInput(
            document_type="debit_note",
            company_id=seeded["company_id"],
            clear_fields=frozenset({"uniform_discount_percent"}),
        ),
    )
    assert cleared.uniform_discount_percent is None
    assert cleared.total == Decimal("212.40")


def test_cleared_text_fields_become_empty(seeded):
    document = create_document(_payload(seeded, reason="Short supply", notes="Call first"))

    updated = update_document(
        document.id,
        seeded["company_id"],
        DocumentInput(
            document_type="debit_note",
            company_id=seeded["company_id"],
            notes="Kept",
            clear_fields=frozenset({"reason"}),
        ),
    )
    assert updated.reason is None
    assert updated.notes == "Kept"
    assert updated.document_number == "DN-001"


# ---------------------------------------------------------------------
# Other document types
# ---------------------------------------------------------------------
def test_purchase_bill_with_reverse_charge(seeded):
    payload = _payload(
        seeded,
        "purchase_bill",
        client_id=None,
        vendor_id=seeded["vendor_id"],
        document_number="PB-1",
        reverse_charge=True,
    )
    document = create_document(payload)

    assert document.status == "Open"
    assert document.total == Decimal("200.00")
    assert LedgerEntry.query.count() == 0


def test_closed_purchase_bill_is_locked(seeded, db):
    payload = _payload(seeded, "purchase_bill", client_id=None, vendor_id=seeded["vendor_id"])
    document = create_document(payload)
    document.status = "Closed"
    db.session.commit()

    with pytest.raises(ValidationError):
        update_document(document.id, seeded["company_id"], payload)


def test_quote_writes_no_ledger_row(seeded):
    document = create_document(_payload(seeded, "quote", document_number="Q-1"))
    assert document.status == "Open"
    assert document.total == Decimal("236.00")
    assert LedgerEntry.query.count() == 0


def test_credit_note_ledger_row_is_a_credit(seeded):
    document = create_document(_payload(seeded, "credit_note", document_number="CN-1"))

    entry = LedgerEntry.query.filter_by(reference_type="credit_note", reference_id=document.id).one()
    assert entry.credit == Decimal("236.00")
    assert entry.debit == Decimal("0.00")
    assert entry.description == "Credit Note CN-1"

    update_document(document.id, seeded["company_id"], _payload(seeded, "credit_note", lines=[_line(seeded["rod"], "1", "100")]))
    entry = LedgerEntry.query.filter_by(reference_type="credit_note", reference_id=document.id).one()
    assert entry.credit == Decimal("118.00")


# ---------------------------------------------------------------------
# Unit of work
# ---------------------------------------------------------------------
def test_unit_of_work_rolls_back(seeded):
    with pytest.raises(RuntimeError):
        with unit_of_work() as session:
            session.add(Vendor(company_id=seeded["company_id"], name="Ghost vendor"))
            session.flush()
            raise RuntimeError("boom")

    assert Vendor.query.filter_by(name="Ghost vendor").count() == 0


def test_stale_rows_become_consistency_errors(seeded):
    with pytest.raises(ConsistencyError):
        with unit_of_work():
            raise StaleDataError("row changed")

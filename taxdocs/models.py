"""
taxdocs/models.py

Domain models for the tax documents engine.

Master data (read-only to the engine):
- Company (tenant + home jurisdiction)
- Vendor / Client (counterparties)
- CatalogItem (default unit, price, tax and cess rates)

Documents (written by the engine):
- Document (expense, debit note, purchase order, invoice in one table)
- DocumentLineItem (frozen per-line snapshot, replaced on every update)
- DocumentAdjustment (invoice TDS/TCS entries, replaced on every update)
- LedgerEntry (client running balance)
- AuditLog

IMPORTANT:
- Money is Numeric(14, 2) and is always rounded before it is assigned.
- Document rows carry a version counter (optimistic concurrency).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from .extensions import db


# ---------------------------------------------------------------------
# Master data
# ---------------------------------------------------------------------
class Company(db.Model):
    """Tenant. `state` is the free-text home jurisdiction."""

    __tablename__ = "companies"

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(255), nullable=False)
    state = db.Column(db.String(120), nullable=True)
    jurisdiction_code = db.Column(db.String(2), nullable=True)

    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<Company {self.name}>"


class Vendor(db.Model):
    __tablename__ = "vendors"

    id = db.Column(db.Integer, primary_key=True)

    company_id = db.Column(
        db.Integer,
        db.ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=True)

    is_deleted = db.Column(db.Boolean, default=False, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Vendor {self.name}>"


class Client(db.Model):
    __tablename__ = "clients"

    id = db.Column(db.Integer, primary_key=True)

    company_id = db.Column(
        db.Integer,
        db.ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=True)

    is_deleted = db.Column(db.Boolean, default=False, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Client {self.name}>"


class CatalogItem(db.Model):
    """
    Sellable/billable item.

    Rates are stored as percent (18.00 means 18%).
    """

    __tablename__ = "catalog_items"

    id = db.Column(db.Integer, primary_key=True)

    company_id = db.Column(
        db.Integer,
        db.ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    hsn_sac = db.Column(db.String(20), nullable=True)
    unit = db.Column(db.String(30), nullable=True)

    unit_price = db.Column(db.Numeric(14, 4), nullable=False, default=Decimal("0.00"))
    tax_rate = db.Column(db.Numeric(6, 2), nullable=False, default=Decimal("0.00"))
    cess_rate = db.Column(db.Numeric(6, 2), nullable=True)

    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    is_deleted = db.Column(db.Boolean, default=False, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<CatalogItem {self.name}>"


# ---------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------
class Document(db.Model):
    """Expense / debit note / purchase order / invoice."""

    __tablename__ = "documents"

    id = db.Column(db.Integer, primary_key=True)

    document_type = db.Column(db.String(30), nullable=False, index=True)

    company_id = db.Column(
        db.Integer,
        db.ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    vendor_id = db.Column(
        db.Integer,
        db.ForeignKey("vendors.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    client_id = db.Column(
        db.Integer,
        db.ForeignKey("clients.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    document_number = db.Column(db.String(100), nullable=True, index=True)
    document_date = db.Column(db.Date, nullable=False, index=True)

    place_of_supply = db.Column(db.String(120), nullable=True)
    supply_jurisdiction_code = db.Column(db.String(2), nullable=True)
    is_cross_jurisdiction = db.Column(db.Boolean, nullable=False, default=True)

    # Calculation toggles
    reverse_charge = db.Column(db.Boolean, nullable=False, default=False)
    show_cess = db.Column(db.Boolean, nullable=False, default=False)
    is_tax_invoice = db.Column(db.Boolean, nullable=False, default=True)
    uniform_discount_percent = db.Column(db.Numeric(6, 2), nullable=True)
    shipping_tax_rate = db.Column(db.Numeric(6, 2), nullable=True)
    custom_amount_label = db.Column(db.String(120), nullable=True)

    # Computed totals
    subtotal = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    total_discount = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    taxable = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    central_tax = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    regional_tax = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    integrated_tax = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    cess_amount = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    shipping_amount = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    shipping_tax = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    custom_amount = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    discount_on_total = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    tds_amount = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    tcs_amount = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    total = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))

    amount_paid = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    balance = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))

    # Type-specific
    payment_method = db.Column(db.String(40), nullable=True)  # expense
    reason = db.Column(db.Text, nullable=True)  # debit note
    notes = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(30), nullable=False, index=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    is_deleted = db.Column(db.Boolean, default=False, nullable=False, index=True)

    version = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = db.relationship("Company")
    vendor = db.relationship("Vendor")
    client = db.relationship("Client")

    line_items = db.relationship(
        "DocumentLineItem",
        back_populates="document",
        order_by="DocumentLineItem.line_no",
        cascade="all, delete-orphan",
    )

    adjustments = db.relationship(
        "DocumentAdjustment",
        back_populates="document",
        order_by="DocumentAdjustment.id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.CheckConstraint(
            "(vendor_id IS NULL) <> (client_id IS NULL)",
            name="ck_documents_one_counterparty",
        ),
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def counterparty_type(self) -> str | None:
        if self.client_id:
            return "client"
        if self.vendor_id:
            return "vendor"
        return None

    def __repr__(self):
        return f"<Document {self.document_type} {self.document_number or self.id}>"


class DocumentLineItem(db.Model):
    """
    Frozen line snapshot.

    Name/unit are copied from the catalog at calculation time and never
    follow later catalog edits.
    """

    __tablename__ = "document_line_items"

    id = db.Column(db.Integer, primary_key=True)

    document_id = db.Column(
        db.Integer,
        db.ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    item_id = db.Column(
        db.Integer,
        db.ForeignKey("catalog_items.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    line_no = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    unit = db.Column(db.String(30), nullable=True)
    description = db.Column(db.Text, nullable=True)
    hsn_sac = db.Column(db.String(20), nullable=True)

    quantity = db.Column(db.Numeric(12, 3), nullable=False)
    unit_price = db.Column(db.Numeric(14, 4), nullable=False)
    discount_percent = db.Column(db.Numeric(6, 2), nullable=False, default=Decimal("0.00"))
    discount_amount = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    tax_rate = db.Column(db.Numeric(6, 2), nullable=False, default=Decimal("0.00"))
    cess_rate = db.Column(db.Numeric(6, 2), nullable=False, default=Decimal("0.00"))
    # As requested; NULL means "catalog rate" / "no own discount".
    tax_rate_override = db.Column(db.Numeric(6, 2), nullable=True)
    line_discount_percent = db.Column(db.Numeric(6, 2), nullable=True)

    taxable_amount = db.Column(db.Numeric(14, 2), nullable=False)
    tax_amount = db.Column(db.Numeric(14, 2), nullable=False)
    total_amount = db.Column(db.Numeric(14, 2), nullable=False)

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    is_deleted = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    document = db.relationship("Document", back_populates="line_items")


class DocumentAdjustment(db.Model):
    """Invoice TDS (subtracted) / TCS (added) entry."""

    __tablename__ = "document_adjustments"

    id = db.Column(db.Integer, primary_key=True)

    document_id = db.Column(
        db.Integer,
        db.ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    kind = db.Column(db.String(10), nullable=False)
    name = db.Column(db.String(120), nullable=True)
    rate = db.Column(db.Numeric(6, 2), nullable=False)
    applicable_on = db.Column(db.String(20), nullable=False, default="taxable")
    amount = db.Column(db.Numeric(14, 2), nullable=False)

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    is_deleted = db.Column(db.Boolean, default=False, nullable=False)

    document = db.relationship("Document", back_populates="adjustments")


# ---------------------------------------------------------------------
# Ledger & audit
# ---------------------------------------------------------------------
class LedgerEntry(db.Model):
    """
    Client running-balance row.

    debit: amount the client owes (invoice, debit note, rebilled expense).
    credit: amount paid or credited.
    """

    __tablename__ = "ledger_entries"

    id = db.Column(db.Integer, primary_key=True)

    client_id = db.Column(
        db.Integer,
        db.ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    company_id = db.Column(
        db.Integer,
        db.ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    reference_type = db.Column(db.String(30), nullable=False)
    reference_id = db.Column(db.Integer, nullable=True)
    document_number = db.Column(db.String(100), nullable=True)

    transaction_date = db.Column(db.Date, nullable=False, index=True)
    description = db.Column(db.String(255), nullable=False)

    debit = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    credit = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0.00"))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.Index("ix_ledger_entries_reference", "reference_type", "reference_id"),
    )


class AuditLog(db.Model):
    """Who did what to which entity, with before/after snapshots."""

    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)

    actor = db.Column(db.String(150), nullable=True)
    company_id = db.Column(db.Integer, nullable=True, index=True)

    entity_type = db.Column(db.String(50), nullable=False, index=True)
    entity_id = db.Column(db.Integer, nullable=False, index=True)

    action = db.Column(db.String(20), nullable=False, index=True)

    before_data = db.Column(db.Text, nullable=True)
    after_data = db.Column(db.Text, nullable=True)

    ip_address = db.Column(db.String(45), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

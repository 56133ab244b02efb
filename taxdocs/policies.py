"""
taxdocs/policies.py

Per-document-type variation points for the single totals engine.

Every document type runs through the same aggregator and lifecycle code;
only the flags below differ.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import ValidationError

EXPENSE = "expense"
DEBIT_NOTE = "debit_note"
PURCHASE_ORDER = "purchase_order"
INVOICE = "invoice"
CREDIT_NOTE = "credit_note"
PURCHASE_BILL = "purchase_bill"
QUOTE = "quote"

LEDGER_SIDES = ("debit", "credit")


@dataclass(frozen=True)
class DocumentPolicy:
    document_type: str
    label: str

    # Totals engine
    supports_reverse_charge: bool = False
    supports_uniform_discount: bool = False
    supports_cess: bool = False
    always_taxed: bool = True
    supports_shipping: bool = True
    supports_invoice_extras: bool = False
    requires_unit: bool = True

    # Lifecycle
    initial_status: str = "Active"
    deleted_status: str = "Deleted"
    locked_statuses: frozenset = field(default_factory=frozenset)

    # Client ledger: "debit", "credit" or None (no ledger row)
    ledger_side: str | None = "debit"


POLICIES: dict[str, DocumentPolicy] = {
    EXPENSE: DocumentPolicy(
        document_type=EXPENSE,
        label="Expense",
        supports_reverse_charge=True,
        supports_shipping=False,
        requires_unit=False,
    ),
    DEBIT_NOTE: DocumentPolicy(
        document_type=DEBIT_NOTE,
        label="Debit Note",
        supports_uniform_discount=True,
        supports_cess=True,
    ),
    PURCHASE_ORDER: DocumentPolicy(
        document_type=PURCHASE_ORDER,
        label="Purchase Order",
        supports_uniform_discount=True,
        supports_cess=True,
        initial_status="Open",
        deleted_status="Cancelled",
        locked_statuses=frozenset({"Converted"}),
    ),
    INVOICE: DocumentPolicy(
        document_type=INVOICE,
        label="Invoice",
        supports_reverse_charge=True,
        supports_uniform_discount=True,
        supports_cess=True,
        always_taxed=False,
        supports_invoice_extras=True,
        initial_status="Unpaid",
        locked_statuses=frozenset({"Paid", "Partially Paid"}),
    ),
    CREDIT_NOTE: DocumentPolicy(
        document_type=CREDIT_NOTE,
        label="Credit Note",
        supports_uniform_discount=True,
        supports_cess=True,
        always_taxed=False,
        ledger_side="credit",
    ),
    PURCHASE_BILL: DocumentPolicy(
        document_type=PURCHASE_BILL,
        label="Purchase Bill",
        supports_reverse_charge=True,
        supports_uniform_discount=True,
        supports_cess=True,
        supports_invoice_extras=True,
        initial_status="Open",
        locked_statuses=frozenset({"Closed", "Partially Paid"}),
    ),
    QUOTE: DocumentPolicy(
        document_type=QUOTE,
        label="Quote",
        supports_uniform_discount=True,
        supports_cess=True,
        supports_invoice_extras=True,
        initial_status="Open",
        locked_statuses=frozenset({"Converted"}),
        ledger_side=None,
    ),
}


def get_policy(document_type: str | None) -> DocumentPolicy:
    """Return the policy for a document type or raise ValidationError."""
    key = (document_type or "").strip().lower().replace("-", "_")
    policy = POLICIES.get(key)
    if policy is None:
        raise ValidationError(f"Unknown document type: {document_type}")
    return policy

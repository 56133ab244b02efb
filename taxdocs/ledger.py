"""
taxdocs/ledger.py

Client ledger collaborators.

- add_document_ledger: one row per client-counterparty document, on the
  debit side (invoices, debit notes) or the credit side (credit notes).
- delete_ledger_by_reference: remove the row(s) of a document.
- client_statement / client_balance: running balance (debit - credit).

IMPORTANT:
- Functions only add/delete in the current session. The lifecycle manager
  owns the transaction.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from .calculations import ZERO, round2, to_decimal
from .extensions import db
from .models import LedgerEntry
from .policies import LEDGER_SIDES


def add_document_ledger(
    client_id: int,
    company_id: int,
    document_id: int,
    document_number: str | None,
    transaction_date: date,
    amount: Decimal,
    *,
    reference_type: str,
    label: str,
    side: str = "debit",
) -> LedgerEntry:
    """Add the ledger row for a client document on the given side."""
    if side not in LEDGER_SIDES:
        raise ValueError(f"Unknown ledger side: {side}")
    amount = round2(amount)
    description = f"{label} {document_number}" if document_number else label
    entry = LedgerEntry(
        client_id=client_id,
        company_id=company_id,
        reference_type=reference_type,
        reference_id=document_id,
        document_number=document_number,
        transaction_date=transaction_date,
        description=description,
        debit=amount if side == "debit" else Decimal("0.00"),
        credit=amount if side == "credit" else Decimal("0.00"),
    )
    db.session.add(entry)
    return entry


def find_ledger_entry(reference_type: str, reference_id: int) -> LedgerEntry | None:
    return LedgerEntry.query.filter_by(reference_type=reference_type, reference_id=reference_id).first()


def delete_ledger_by_reference(reference_type: str, reference_id: int) -> int:
    """Delete ledger rows for (reference_type, reference_id); returns the row count."""
    return LedgerEntry.query.filter_by(
        reference_type=reference_type,
        reference_id=reference_id,
    ).delete(synchronize_session=False)


def client_statement(
    client_id: int,
    company_id: int,
    from_date: date | None = None,
    to_date: date | None = None,
) -> list[dict]:
    """
    Ledger rows for a client with a running balance.

    Ordered by transaction date, then insertion order. When from_date is
    given, rows before it are folded into an opening balance.
    """
    q = LedgerEntry.query.filter_by(client_id=client_id, company_id=company_id)
    entries = q.order_by(LedgerEntry.transaction_date.asc(), LedgerEntry.id.asc()).all()

    balance = ZERO
    rows = []
    for entry in entries:
        debit = to_decimal(entry.debit)
        credit = to_decimal(entry.credit)
        balance += debit - credit

        if from_date and entry.transaction_date < from_date:
            continue
        if to_date and entry.transaction_date > to_date:
            break

        rows.append(
            {
                "id": entry.id,
                "reference_type": entry.reference_type,
                "reference_id": entry.reference_id,
                "document_number": entry.document_number,
                "transaction_date": entry.transaction_date,
                "description": entry.description,
                "debit": round2(debit),
                "credit": round2(credit),
                "balance": round2(balance),
            }
        )
    return rows


def client_balance(client_id: int, company_id: int) -> Decimal:
    """Current balance: sum(debit) - sum(credit)."""
    debit, credit = (
        db.session.query(
            db.func.coalesce(db.func.sum(LedgerEntry.debit), 0),
            db.func.coalesce(db.func.sum(LedgerEntry.credit), 0),
        )
        .filter(LedgerEntry.client_id == client_id, LedgerEntry.company_id == company_id)
        .one()
    )
    return round2(to_decimal(debit) - to_decimal(credit))

"""
taxdocs/seed.py

Seed a demo tenant with counterparties and catalog items.

Rules:
- Safe to run multiple times (idempotent): rows are matched by name.
- Existing catalog items keep their id; price and rates are re-synced.

NOTE:
- Documents are never seeded; they go through the lifecycle manager.
"""

from __future__ import annotations

from decimal import Decimal

from .extensions import db
from .jurisdiction import normalize_jurisdiction_code
from .models import CatalogItem, Client, Company, Vendor

DEMO_COMPANY = ("Demo Traders Pvt Ltd", "Gujarat", "GJ")

DEMO_VENDORS = [
    ("Ahmedabad Steel Supplies", "accounts@ahmedabad-steel.example"),
    ("Mumbai Freight Co", "billing@mumbai-freight.example"),
]

DEMO_CLIENTS = [
    ("Surat Retail LLP", "finance@surat-retail.example"),
    ("Bengaluru Systems", "ap@bengaluru-systems.example"),
]

DEMO_CATALOG = [
    # name, unit, unit_price, tax_rate, cess_rate, hsn_sac
    ("Steel rod 12mm", "kg", Decimal("100.00"), Decimal("18.00"), None, "7214"),
    ("Office chair", "pcs", Decimal("1000.00"), Decimal("12.00"), None, "9401"),
    ("Aerated beverage crate", "box", Decimal("500.00"), Decimal("28.00"), Decimal("12.00"), "2202"),
    ("Consulting hour", "hrs", Decimal("2500.00"), Decimal("18.00"), None, "9983"),
]


def seed_demo_data() -> Company:
    """
    Create the demo company, vendors, clients and catalog if missing.

    Returns the demo company.
    """
    name, state, code = DEMO_COMPANY
    company = Company.query.filter_by(name=name).first()
    if not company:
        company = Company(
            name=name,
            state=state,
            jurisdiction_code=normalize_jurisdiction_code(code),
            is_active=True,
        )
        db.session.add(company)
        db.session.flush()

    for vendor_name, email in DEMO_VENDORS:
        exists = Vendor.query.filter_by(company_id=company.id, name=vendor_name).first()
        if exists:
            continue
        db.session.add(Vendor(company_id=company.id, name=vendor_name, email=email))

    for client_name, email in DEMO_CLIENTS:
        exists = Client.query.filter_by(company_id=company.id, name=client_name).first()
        if exists:
            continue
        db.session.add(Client(company_id=company.id, name=client_name, email=email))

    for item_name, unit, price, tax_rate, cess_rate, hsn in DEMO_CATALOG:
        exists = CatalogItem.query.filter_by(company_id=company.id, name=item_name).first()
        if exists:
            # keep core values in sync
            exists.unit = unit
            exists.unit_price = price
            exists.tax_rate = tax_rate
            exists.cess_rate = cess_rate
            continue

        db.session.add(
            CatalogItem(
                company_id=company.id,
                name=item_name,
                unit=unit,
                unit_price=price,
                tax_rate=tax_rate,
                cess_rate=cess_rate,
                hsn_sac=hsn,
                is_active=True,
            )
        )

    db.session.commit()
    return company

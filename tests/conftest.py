from decimal import Decimal

import pytest

from taxdocs import create_app
from taxdocs.extensions import db as _db
from taxdocs.models import CatalogItem, Client, Company, Vendor
from taxdocs.seed import seed_demo_data


@pytest.fixture()
def app():
    app = create_app("config.TestConfig")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def db(app):
    return _db


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def seeded(db):
    """Demo tenant plus a second tenant and an item without a unit."""
    company = seed_demo_data()

    items = {item.name: item for item in CatalogItem.query.filter_by(company_id=company.id).all()}

    no_unit = CatalogItem(
        company_id=company.id,
        name="Misc service",
        unit=None,
        unit_price=Decimal("50.00"),
        tax_rate=Decimal("18.00"),
    )
    retired = CatalogItem(
        company_id=company.id,
        name="Retired item",
        unit="pcs",
        unit_price=Decimal("10.00"),
        tax_rate=Decimal("5.00"),
        is_active=False,
    )
    other_company = Company(name="Other Tenant", state="Maharashtra", jurisdiction_code="MH")
    db.session.add_all([no_unit, retired, other_company])
    db.session.flush()

    other_item = CatalogItem(
        company_id=other_company.id,
        name="Foreign item",
        unit="pcs",
        unit_price=Decimal("10.00"),
        tax_rate=Decimal("18.00"),
    )
    db.session.add(other_item)
    db.session.commit()

    vendor = Vendor.query.filter_by(company_id=company.id).order_by(Vendor.id).first()
    client_row = Client.query.filter_by(company_id=company.id).order_by(Client.id).first()

    return {
        "company_id": company.id,
        "other_company_id": other_company.id,
        "vendor_id": vendor.id,
        "client_id": client_row.id,
        "rod": items["Steel rod 12mm"].id,
        "chair": items["Office chair"].id,
        "crate": items["Aerated beverage crate"].id,
        "consulting": items["Consulting hour"].id,
        "no_unit": no_unit.id,
        "retired": retired.id,
        "foreign": other_item.id,
    }

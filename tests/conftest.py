import os
import tempfile

# Settings are read at import time, so point the app at an in-memory
# database before anything from the backend is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = os.path.join(tempfile.gettempdir(), "inventory-accounting-test-logs")
os.environ["AUTH_SECRET_KEY"] = "test-secret"

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
import models  # registers every table on Base.metadata
from main import app
from utils.auth_utils import create_access_token
from crud import unit as crud_unit
from crud import item as crud_item
from crud import item_detail as crud_item_detail
from crud import account as crud_account
from crud.financial_settings import get_financial_settings
from schemas.unit import UnitCreate
from schemas.item import ItemCreate
from schemas.item_detail import ItemDetailCreate
from schemas.account import AccountCreate, AccountCategoryCreate, AccountSubCategoryCreate

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers():
    return {"Authorization": f"Bearer {create_access_token('tester')}"}


@pytest.fixture()
def rice(db):
    """Rice stocked in kg with a 25 kg bag packaging (code BAG-25)."""
    kg = crud_unit.create_unit(db, UnitCreate(name="kg"))
    bag = crud_unit.create_unit(db, UnitCreate(name="Bag-25kg"))
    item = crud_item.create_item(db, ItemCreate(name="Rice", base_unit_id=kg.id))
    base = crud_item_detail.create_item_detail(
        db, ItemDetailCreate(item_id=item.id, unit_id=kg.id, conversion_factor=1, code="RICE-KG", price=Decimal("1.20"))
    )
    packed = crud_item_detail.create_item_detail(
        db, ItemDetailCreate(item_id=item.id, unit_id=bag.id, conversion_factor=25, code="BAG-25", price=Decimal("28.00"))
    )
    return {"item": item, "kg": kg, "bag": bag, "base_detail": base, "bag_detail": packed}


@pytest.fixture()
def chart(db):
    """Default chart of accounts plus the settings singleton."""
    crud_account.initialize_default_chart(db)
    return get_financial_settings(db)


@pytest.fixture()
def make_account(db):
    """Creates an account, adding its category and sub-category on demand."""
    def _make(number, name, category, normal_balance, sub_category=None, currency_code=None):
        category_row = crud_account.get_category_by_name(db, category)
        if category_row is None:
            category_row = crud_account.create_category(db, AccountCategoryCreate(name=category))

        sub_category_id = None
        if sub_category:
            existing = [s for s in crud_account.get_sub_categories(db, category_row.id) if s.name == sub_category]
            sub = existing[0] if existing else crud_account.create_sub_category(
                db, AccountSubCategoryCreate(category_id=category_row.id, name=sub_category)
            )
            sub_category_id = sub.id

        return crud_account.create_account(db, AccountCreate(
            account_number=number,
            name=name,
            category_id=category_row.id,
            sub_category_id=sub_category_id,
            normal_balance=normal_balance,
            currency_code=currency_code,
        ))
    return _make

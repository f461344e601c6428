import pytest
from datetime import date
from decimal import Decimal

from crud import purchase as crud_purchase
from crud import sale as crud_sale
from crud import inventory_log as crud_inventory_log
from crud.journal import get_journal_page
from models.inventory_log import InventoryLog
from models.journal_page import JournalPage
from models.sale import Sale
from schemas.purchase import PurchaseCreate, PurchaseDetailCreate
from schemas.sale import SaleCreate, SaleDetailCreate
from utils.errors import ValidationError

TODAY = date.today()


def buy(db, *lines, supplier="Mekong Mills"):
    return crud_purchase.create_purchase(db, PurchaseCreate(
        date=TODAY,
        supplier_name=supplier,
        details=[PurchaseDetailCreate(item_code=code, qty=qty, cost=Decimal(cost)) for code, qty, cost in lines],
    ), user_id="tester")


def sell(db, *lines):
    return crud_sale.create_sale(db, SaleCreate(
        date=TODAY,
        details=[SaleDetailCreate(item_code=code, qty=Decimal(str(qty)), price=Decimal(price)) for code, qty, price in lines],
    ), user_id="tester")


def amounts(page):
    return {(p.account_number, p.debit > 0): (p.debit or p.credit) for p in page.posts}


def test_purchase_receives_stock_in_base_units(db, rice, chart):
    purchase = buy(db, ("BAG-25", 2, "50.00"))

    assert purchase.code == "PUR-00001"
    assert purchase.cost == Decimal("50.00")
    assert crud_inventory_log.current_stock(db, rice["item"].id) == 50

    log = db.query(InventoryLog).one()
    assert log.transaction_type == "Purchase"
    assert log.reference_code == "PUR-00001"
    assert log.cost_price_per_base_unit == Decimal("1.0000")


def test_purchase_posts_inventory_against_cash(db, rice, chart):
    purchase = buy(db, ("BAG-25", 2, "50.00"), ("RICE-KG", 10, "12.00"))

    page = get_journal_page(db, purchase.journal_page_id)
    assert page.source == "Purchase"
    assert page.ref == purchase.code
    assert page.description == f"Purchase from supplier: Mekong Mills, Code: {purchase.code}"
    assert amounts(page) == {
        (chart.inventory_account_number, True): Decimal("62.00"),
        (chart.cash_account_number, False): Decimal("62.00"),
    }


def test_purchase_codes_keep_counting(db, rice, chart):
    buy(db, ("RICE-KG", 1, "1.00"))
    second = buy(db, ("RICE-KG", 1, "1.00"))
    assert second.code == "PUR-00002"
    assert crud_purchase.generate_purchase_code(db) == "PUR-00003"


def test_purchase_with_unknown_code_writes_nothing(db, rice, chart):
    with pytest.raises(ValidationError):
        buy(db, ("RICE-KG", 5, "6.00"), ("NOPE", 1, "1.00"))

    assert db.query(InventoryLog).count() == 0
    assert db.query(JournalPage).count() == 0
    purchases, total = crud_purchase.get_purchases(db)
    assert total == 0


def test_sale_books_revenue_and_cogs_at_average_cost(db, rice, chart):
    buy(db, ("BAG-25", 2, "50.00"))
    sale = sell(db, ("RICE-KG", 10, "15.00"))

    assert sale.code == "SAL-00001"
    assert sale.price == Decimal("15.00")
    assert sale.total_cogs == Decimal("10.00")
    assert sale.details[0].calculated_cogs == Decimal("10.00")
    assert crud_inventory_log.current_stock(db, rice["item"].id) == 40

    page = get_journal_page(db, sale.journal_page_id)
    assert page.source == "Sale"
    assert page.ref == "SAL-00001"
    assert amounts(page) == {
        (chart.cash_account_number, True): Decimal("15.00"),
        (chart.sales_account_number, False): Decimal("15.00"),
        (chart.cogs_account_number, True): Decimal("10.00"),
        (chart.inventory_account_number, False): Decimal("10.00"),
    }


def test_sale_log_carries_unit_price(db, rice, chart):
    buy(db, ("BAG-25", 2, "50.00"))
    sell(db, ("BAG-25", 1, "30.00"))

    log = db.query(InventoryLog).filter(InventoryLog.transaction_type == "Sale").one()
    assert log.quantity_in_base_units == 25
    assert log.sale_price_per_transacted_unit == Decimal("30.0000")
    assert log.reference_code == "SAL-00001"


def test_insufficient_stock_is_checked_across_lines(db, rice, chart):
    buy(db, ("BAG-25", 1, "25.00"))

    # 20 kg + 1 bag = 45 kg needed, 25 kg on hand
    with pytest.raises(ValidationError) as exc:
        sell(db, ("RICE-KG", 20, "24.00"), ("BAG-25", 1, "30.00"))

    assert "insufficient stock" in str(exc.value)
    assert db.query(Sale).count() == 0
    assert crud_inventory_log.current_stock(db, rice["item"].id) == 25
    assert db.query(JournalPage).count() == 1


def test_free_sale_of_uncosted_stock_has_no_journal_page(db, rice, chart):
    from crud.inventory_log import create_manual_log_entry
    from schemas.inventory_log import InventoryLogCreate

    create_manual_log_entry(db, InventoryLogCreate(
        item_id=rice["item"].id, unit_id=rice["kg"].id, transaction_type="Stock Adjustment In", quantity=Decimal("5")
    ))
    sale = sell(db, ("RICE-KG", 2, "0"))

    assert sale.journal_page_id is None
    assert sale.total_cogs == Decimal("0.00")
    assert db.query(JournalPage).count() == 0


def test_sales_list_newest_first(db, rice, chart):
    buy(db, ("BAG-25", 2, "50.00"))
    sell(db, ("RICE-KG", 1, "1.50"))
    sell(db, ("RICE-KG", 1, "1.50"))

    sales, total = crud_sale.get_sales(db)
    assert total == 2
    assert [s.code for s in sales] == ["SAL-00002", "SAL-00001"]

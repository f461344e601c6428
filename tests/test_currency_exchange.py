import pytest
from decimal import Decimal

from crud import currency_exchange as crud_exchange
from crud.journal import get_journal_pages
from models.currency_exchange import CurrencyExchange
from models.journal_page import JournalPage
from schemas.currency_exchange import CurrencyExchangeCreate
from utils.errors import NotFoundError


@pytest.fixture()
def fx_accounts(db, make_account):
    return {
        "usd": make_account("1112010100", "ABA Bank: USD", "Asset", "debit", sub_category="Bank"),
        "khr": make_account("1112010200", "ABA Bank: KHR", "Asset", "debit", sub_category="Bank"),
        "eq_usd": make_account("1190010100", "Equivalence Foreign Exchange Position Account USD", "Asset", "debit"),
        "eq_khr": make_account("1190010200", "Equivalence Foreign Exchange Position Account KHR", "Asset", "debit"),
        "pos_usd": make_account("2190010100", "Foreign Exchange Position Account USD", "Liability", "credit"),
        "pos_khr": make_account("2190010200", "Foreign Exchange Position Account KHR", "Liability", "credit"),
    }


def exchange(option, amount, rate="4100"):
    return CurrencyExchangeCreate(
        exchange_option=option,
        from_amount=Decimal(amount),
        rate=Decimal(rate),
        bank_location="ABA Bank",
    )


def posts_by_account(page):
    return {p.account_number: (p.debit, p.credit) for p in page.posts}


def test_usd_to_khr_multiplies_by_rate(db, fx_accounts):
    fx = crud_exchange.create_exchange(db, exchange("USDtoKHR", "100.00"), user_id="tester")
    assert fx.to_amount == Decimal("410000.00")


def test_khr_to_usd_divides_by_rate(db, fx_accounts):
    fx = crud_exchange.create_exchange(db, exchange("KHRtoUSD", "41000"), user_id="tester")
    assert fx.to_amount == Decimal("10.00")


def test_exchange_posts_two_balanced_pages(db, fx_accounts):
    fx = crud_exchange.create_exchange(db, exchange("USDtoKHR", "100.00"))

    pages, total = get_journal_pages(db, ref_contains=f"FX-{fx.id}")
    assert total == 2
    sale_page = next(p for p in pages if p.description.startswith("FX Sale"))
    purchase_page = next(p for p in pages if p.description.startswith("FX Purchase"))

    assert sale_page.source == "Exchange"
    assert sale_page.currency_id == 1
    assert posts_by_account(sale_page) == {
        "1112010100": (Decimal("0.00"), Decimal("100.00")),
        "1190010100": (Decimal("100.00"), Decimal("0.00")),
    }
    assert purchase_page.currency_id == 2
    assert posts_by_account(purchase_page) == {
        "1112010200": (Decimal("410000.00"), Decimal("0.00")),
        "2190010200": (Decimal("0.00"), Decimal("410000.00")),
    }


def test_missing_cash_account_is_not_found(db, fx_accounts):
    with pytest.raises(NotFoundError):
        crud_exchange.create_exchange(db, CurrencyExchangeCreate(
            exchange_option="USDtoKHR", from_amount=Decimal("5"), rate=Decimal("4100"), bank_location="Canadia Bank"
        ))
    assert db.query(CurrencyExchange).count() == 0
    assert db.query(JournalPage).count() == 0


def test_missing_position_account_is_not_found(db, make_account):
    make_account("1112010100", "ABA Bank: USD", "Asset", "debit")
    make_account("1112010200", "ABA Bank: KHR", "Asset", "debit")

    with pytest.raises(NotFoundError):
        crud_exchange.create_exchange(db, exchange("USDtoKHR", "5"))


def test_disabled_exchange_is_hidden_but_keeps_its_pages(db, fx_accounts):
    fx = crud_exchange.create_exchange(db, exchange("USDtoKHR", "10.00"))
    assert crud_exchange.disable_exchange(db, fx.id, user_id="tester") is True

    assert crud_exchange.get_exchanges(db) == []
    assert [e.id for e in crud_exchange.get_exchanges(db, include_disabled=True)] == [fx.id]
    pages, total = get_journal_pages(db)
    assert total == 2

import pytest
from decimal import Decimal

import config
from crud import account as crud_account
from crud.financial_settings import update_financial_settings
from crud.journal import create_journal_page
from models.account import Account
from models.account_category import AccountCategory
from schemas.account import AccountCategoryCreate, AccountSubCategoryCreate, AccountCreate, AccountUpdate
from schemas.financial_settings import FinancialSettingsUpdate
from schemas.journal import JournalPageCreate, JournalPostCreate
from utils.errors import ConflictError, ValidationError


def post(db, debit_account, credit_account, amount, ref=None):
    return create_journal_page(db, JournalPageCreate(
        source="Manual Entry",
        ref=ref,
        description="Test posting",
        entries=[
            JournalPostCreate(account_number=debit_account, debit=Decimal(amount)),
            JournalPostCreate(account_number=credit_account, credit=Decimal(amount)),
        ],
    ))


def test_initialize_default_chart_is_idempotent(db):
    created = crud_account.initialize_default_chart(db)
    assert created > 0
    accounts = db.query(Account).count()

    assert crud_account.initialize_default_chart(db) == 0
    assert db.query(Account).count() == accounts
    assert crud_account.get_account_by_number(db, config.DEFAULT_CASH_ACCOUNT_NUMBER).normal_balance == "debit"
    assert crud_account.get_account_by_number(db, config.DEFAULT_SALES_ACCOUNT_NUMBER).normal_balance == "credit"


def test_duplicate_category_name_conflicts_case_insensitively(db, chart):
    with pytest.raises(ConflictError):
        crud_account.create_category(db, AccountCategoryCreate(name="asset"))


def test_duplicate_sub_category_conflicts(db, chart):
    asset = crud_account.get_category_by_name(db, "Asset")
    with pytest.raises(ConflictError):
        crud_account.create_sub_category(db, AccountSubCategoryCreate(category_id=asset.id, name="Cash"))


def test_sub_category_needs_an_existing_category(db):
    with pytest.raises(ValidationError):
        crud_account.create_sub_category(db, AccountSubCategoryCreate(category_id=999, name="Orphan"))


def test_duplicate_account_number_conflicts(db, chart, make_account):
    with pytest.raises(ConflictError):
        make_account(config.DEFAULT_CASH_ACCOUNT_NUMBER, "Second Cash", "Asset", "debit")


def test_sub_category_must_belong_to_the_account_category(db, chart):
    asset = crud_account.get_category_by_name(db, "Asset")
    revenue = crud_account.get_category_by_name(db, "Revenue")
    sales = [s for s in crud_account.get_sub_categories(db, revenue.id) if s.name == "Sales"][0]

    with pytest.raises(ValidationError):
        crud_account.create_account(db, AccountCreate(
            account_number="1999000000",
            name="Misfiled",
            category_id=asset.id,
            sub_category_id=sales.id,
            normal_balance="debit",
        ))


def test_category_change_resets_sub_category(db, chart, make_account):
    account = make_account("1500000000", "Prepaid Rent", "Asset", "debit", sub_category="Prepayments")
    expense = crud_account.get_category_by_name(db, "Expense")

    updated = crud_account.update_account(db, account.id, AccountUpdate(category_id=expense.id))
    assert updated.category_name == "Expense"
    assert updated.sub_category_id is None


def test_category_change_is_blocked_once_posted(db, chart):
    post(db, config.DEFAULT_CASH_ACCOUNT_NUMBER, config.DEFAULT_EQUITY_ACCOUNT_NUMBER, "100.00")
    cash = crud_account.get_account_by_number(db, config.DEFAULT_CASH_ACCOUNT_NUMBER)
    expense = crud_account.get_category_by_name(db, "Expense")

    with pytest.raises(ValidationError):
        crud_account.update_account(db, cash.id, AccountUpdate(category_id=expense.id))

    renamed = crud_account.update_account(db, cash.id, AccountUpdate(name="Cash Drawer: USD"))
    assert renamed.name == "Cash Drawer: USD"


def test_posted_account_cannot_be_disabled(db, chart):
    post(db, config.DEFAULT_CASH_ACCOUNT_NUMBER, config.DEFAULT_EQUITY_ACCOUNT_NUMBER, "100.00")
    cash = crud_account.get_account_by_number(db, config.DEFAULT_CASH_ACCOUNT_NUMBER)

    with pytest.raises(ValidationError):
        crud_account.disable_account(db, cash.id)


def test_disabled_account_is_hidden_by_default(db, chart, make_account):
    account = make_account("6100000000", "Unused Expense", "Expense", "debit")
    assert crud_account.disable_account(db, account.id) is True

    assert crud_account.get_account_by_number(db, "6100000000") is None
    assert crud_account.get_account_by_number(db, "6100000000", include_disabled=True).disabled is True
    numbers = [a.account_number for a in crud_account.get_accounts(db)]
    assert "6100000000" not in numbers


def test_ledger_lists_posts_of_active_pages(db, chart):
    from crud.journal import disable_journal_page

    post(db, config.DEFAULT_CASH_ACCOUNT_NUMBER, config.DEFAULT_EQUITY_ACCOUNT_NUMBER, "100.00", ref="CAP-1")
    voided = post(db, config.DEFAULT_CASH_ACCOUNT_NUMBER, config.DEFAULT_EQUITY_ACCOUNT_NUMBER, "40.00", ref="CAP-2")
    disable_journal_page(db, voided.id)

    ledger = crud_account.get_account_ledger(db, config.DEFAULT_CASH_ACCOUNT_NUMBER)
    assert ledger.total_count == 1
    assert ledger.lines[0].debit == Decimal("100.00")
    assert ledger.lines[0].ref == "CAP-1"
    assert ledger.lines[0].journal_page_source == "Manual Entry"


def test_ledger_filters_by_ref(db, chart):
    post(db, config.DEFAULT_CASH_ACCOUNT_NUMBER, config.DEFAULT_EQUITY_ACCOUNT_NUMBER, "10.00", ref="CAP-1")
    post(db, config.DEFAULT_CASH_ACCOUNT_NUMBER, config.DEFAULT_EQUITY_ACCOUNT_NUMBER, "20.00", ref="LOAN-7")

    ledger = crud_account.get_account_ledger(db, config.DEFAULT_EQUITY_ACCOUNT_NUMBER, ref_contains="loan")
    assert [line.credit for line in ledger.lines] == [Decimal("20.00")]


def test_ledger_of_unknown_account_is_none(db, chart):
    assert crud_account.get_account_ledger(db, "0000000000") is None


def test_settings_default_to_seeded_accounts(db, chart):
    assert chart.cash_account_number == config.DEFAULT_CASH_ACCOUNT_NUMBER
    assert chart.cogs_account_number == config.DEFAULT_COGS_ACCOUNT_NUMBER
    assert db.query(AccountCategory).filter(AccountCategory.name == "COGS").count() == 1


def test_settings_accept_account_in_expected_category(db, chart, make_account):
    make_account("1112000000", "Cash in Bank: USD", "Asset", "debit")
    settings = update_financial_settings(db, FinancialSettingsUpdate(cash_account_number="1112000000"), user_id="tester")
    assert settings.cash_account_number == "1112000000"
    assert settings.sales_account_number == config.DEFAULT_SALES_ACCOUNT_NUMBER


def test_settings_reject_account_in_wrong_category(db, chart):
    with pytest.raises(ValidationError):
        update_financial_settings(db, FinancialSettingsUpdate(sales_account_number=config.DEFAULT_CASH_ACCOUNT_NUMBER))


def test_settings_reject_unknown_account(db, chart):
    with pytest.raises(ValidationError):
        update_financial_settings(db, FinancialSettingsUpdate(cogs_account_number="5999999999"))

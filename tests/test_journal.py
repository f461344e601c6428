import pytest
from decimal import Decimal

import config
from crud import journal as crud_journal
from models.journal_page import JournalPage
from models.journal_post import JournalPost
from schemas.journal import JournalPageCreate, JournalPostCreate
from utils.errors import ValidationError

CASH = config.DEFAULT_CASH_ACCOUNT_NUMBER
EQUITY = config.DEFAULT_EQUITY_ACCOUNT_NUMBER
SALES = config.DEFAULT_SALES_ACCOUNT_NUMBER


def page(*entries, source="Manual Entry", ref=None, description=None):
    return JournalPageCreate(source=source, ref=ref, description=description, entries=list(entries))


def dr(account, amount):
    return JournalPostCreate(account_number=account, debit=Decimal(amount))


def cr(account, amount):
    return JournalPostCreate(account_number=account, credit=Decimal(amount))


def test_balanced_page_is_stored_with_posts(db, chart):
    db_page = crud_journal.create_journal_page(
        db, page(dr(CASH, "250.00"), cr(EQUITY, "250.00"), ref="CAP-1"), user_id="tester"
    )

    assert db_page.id is not None
    assert db_page.user_id == "tester"
    assert len(db_page.posts) == 2
    assert db.query(JournalPost).filter(JournalPost.journal_page_id == db_page.id).count() == 2


def test_split_entries_may_balance_across_several_accounts(db, chart):
    db_page = crud_journal.create_journal_page(
        db, page(dr(CASH, "100.00"), cr(EQUITY, "60.00"), cr(SALES, "40.00"))
    )
    schema = crud_journal.to_schema(db, db_page)
    assert schema.total_debits == Decimal("100.00")
    assert schema.total_credits == Decimal("100.00")
    assert schema.is_balanced is True


def test_difference_within_tolerance_is_accepted(db, chart):
    crud_journal.create_journal_page(db, page(dr(CASH, "100.004"), cr(EQUITY, "100.00")))
    assert db.query(JournalPage).count() == 1


def test_half_cent_amounts_are_balanced_as_stored(db, chart):
    # 0.005 + 0.005 is stored as 0.01 + 0.01, which does not match a 0.01 credit
    with pytest.raises(ValidationError) as exc:
        crud_journal.create_journal_page(db, page(dr(CASH, "0.005"), dr(CASH, "0.005"), cr(EQUITY, "0.01")))

    assert "journal entries are not balanced" in str(exc.value)
    assert db.query(JournalPage).count() == 0


def test_stored_posts_are_rounded_to_cents(db, chart):
    db_page = crud_journal.create_journal_page(db, page(dr(CASH, "10.005"), cr(EQUITY, "10.01")))

    db.expire_all()
    stored = crud_journal.get_journal_page(db, db_page.id)
    assert sorted(Decimal(p.debit) + Decimal(p.credit) for p in stored.posts) == [Decimal("10.01"), Decimal("10.01")]
    schema = crud_journal.to_schema(db, stored)
    assert schema.total_debits == schema.total_credits == Decimal("10.01")
    assert schema.is_balanced is True


def test_unbalanced_page_is_rejected_and_nothing_is_written(db, chart):
    with pytest.raises(ValidationError) as exc:
        crud_journal.create_journal_page(db, page(dr(CASH, "100.00"), cr(EQUITY, "90.00")))

    assert "journal entries are not balanced" in str(exc.value)
    assert db.query(JournalPage).count() == 0
    assert db.query(JournalPost).count() == 0


def test_unknown_account_is_named_in_the_error(db, chart):
    with pytest.raises(ValidationError) as exc:
        crud_journal.create_journal_page(db, page(dr("9999999999", "10.00"), cr(EQUITY, "10.00")))
    assert "unknown or disabled account 9999999999" in str(exc.value)


def test_entry_with_both_debit_and_credit_is_rejected(db, chart):
    both = JournalPostCreate(account_number=CASH, debit=Decimal("5.00"), credit=Decimal("5.00"))
    with pytest.raises(ValidationError):
        crud_journal.create_journal_page(db, page(both))


def test_negative_amounts_are_rejected(db, chart):
    with pytest.raises(ValidationError):
        crud_journal.create_journal_page(db, page(dr(CASH, "-10.00"), cr(EQUITY, "-10.00")))


def test_all_zero_page_is_rejected(db, chart):
    with pytest.raises(ValidationError):
        crud_journal.create_journal_page(db, page(dr(CASH, "0"), cr(EQUITY, "0")))


def test_empty_page_is_rejected(db, chart):
    with pytest.raises(ValidationError):
        crud_journal.create_journal_page(db, page())


def test_disabled_page_stays_retrievable_by_id(db, chart):
    db_page = crud_journal.create_journal_page(db, page(dr(CASH, "10.00"), cr(EQUITY, "10.00")))
    assert crud_journal.disable_journal_page(db, db_page.id, user_id="tester") is True

    fetched = crud_journal.get_journal_page(db, db_page.id)
    assert fetched is not None
    assert fetched.disabled is True

    pages, total = crud_journal.get_journal_pages(db)
    assert total == 0
    pages, total = crud_journal.get_journal_pages(db, include_disabled=True)
    assert [p.id for p in pages] == [db_page.id]


def test_pages_filter_by_source_and_ref(db, chart):
    crud_journal.create_journal_page(db, page(dr(CASH, "10.00"), cr(EQUITY, "10.00"), ref="CAP-1"))
    crud_journal.create_journal_page(db, page(dr(CASH, "5.00"), cr(SALES, "5.00"), source="Sale", ref="SAL-00001"))

    pages, total = crud_journal.get_journal_pages(db, source_contains="sale")
    assert total == 1
    assert pages[0].ref == "SAL-00001"

    pages, total = crud_journal.get_journal_pages(db, ref_contains="CAP")
    assert total == 1
    assert pages[0].source == "Manual Entry"


def test_to_schema_reports_account_names(db, chart):
    db_page = crud_journal.create_journal_page(db, page(dr(CASH, "10.00"), cr(EQUITY, "10.00")))
    schema = crud_journal.to_schema(db, db_page)
    names = {p.account_number: p.account_name for p in schema.posts}
    assert names[CASH] == "Cash on Hand: USD"
    assert names[EQUITY] == "Owner's Capital"

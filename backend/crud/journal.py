"""
Journal engine.

A journal page is one accounting transaction; its posts debit or credit
accounts from the chart. A page is only ever stored when its posts balance.
"""

from sqlalchemy.orm import Session
from models.account import Account
from models.journal_page import JournalPage
from models.journal_post import JournalPost
from schemas import journal as journal_schemas
from schemas.journal import JournalPageCreate
from utils.errors import ValidationError
from utils.dates import start_of_day, start_of_next_day
from utils.money import round_money
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple, List
import logging

logger = logging.getLogger(__name__)

BALANCE_TOLERANCE = Decimal("0.005")


def _validate_entries(db: Session, entries) -> Tuple[Decimal, Decimal]:
    if not entries:
        raise ValidationError("A journal page needs at least one entry.")

    total_debits = Decimal(0)
    total_credits = Decimal(0)
    for entry in entries:
        if (entry.debit or 0) < 0 or (entry.credit or 0) < 0:
            raise ValidationError(f"Debit and credit amounts cannot be negative (account {entry.account_number}).")
        # Posts are stored in whole cents; balance on the stored amounts
        debit = round_money(entry.debit or 0)
        credit = round_money(entry.credit or 0)
        if debit != 0 and credit != 0:
            raise ValidationError(f"An entry cannot carry both a debit and a credit (account {entry.account_number}).")
        total_debits += debit
        total_credits += credit

    numbers = {entry.account_number for entry in entries}
    active = {
        number for (number,) in db.query(Account.account_number).filter(
            Account.account_number.in_(numbers)
        ).all()
    }
    for entry in entries:
        if entry.account_number not in active:
            raise ValidationError(f"unknown or disabled account {entry.account_number}")

    if abs(total_debits - total_credits) >= BALANCE_TOLERANCE:
        raise ValidationError(
            f"journal entries are not balanced: debits={total_debits} credits={total_credits}"
        )
    if total_debits == 0 and total_credits == 0:
        raise ValidationError("A journal page cannot consist of zero-amount entries only.")

    return total_debits, total_credits


def create_journal_page(
    db: Session,
    page: JournalPageCreate,
    user_id: Optional[str] = None,
    commit: bool = True,
) -> JournalPage:
    """
    Validates and stores a page with its posts.

    With `commit=False` the page is only flushed; business documents use it
    to store the page in the same transaction as the document itself.
    """
    _validate_entries(db, page.entries)

    db_page = JournalPage(
        currency_id=page.currency_id,
        user_id=user_id,
        ref=page.ref,
        source=page.source,
        description=page.description,
        created_by=user_id,
    )
    for entry in page.entries:
        db_page.posts.append(JournalPost(
            account_number=entry.account_number,
            ref=entry.ref,
            description=entry.description,
            debit=round_money(entry.debit or 0),
            credit=round_money(entry.credit or 0),
        ))
    db.add(db_page)

    if commit:
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(db_page)
        logger.info(f"Journal page {db_page.id} ({db_page.source}) created by {user_id}")
    else:
        db.flush()
    return db_page


def get_journal_page(db: Session, page_id: int) -> Optional[JournalPage]:
    """Disabled pages stay retrievable by id."""
    return db.query(JournalPage).execution_options(include_disabled=True).filter(
        JournalPage.id == page_id
    ).first()


def get_journal_pages(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    ref_contains: Optional[str] = None,
    source_contains: Optional[str] = None,
    description_contains: Optional[str] = None,
    user_id: Optional[str] = None,
    include_disabled: bool = False,
    page: int = 1,
    page_size: int = 50,
) -> Tuple[List[JournalPage], int]:
    query = db.query(JournalPage).execution_options(include_disabled=include_disabled)

    if start_date:
        query = query.filter(JournalPage.created_at >= start_of_day(start_date))
    if end_date:
        query = query.filter(JournalPage.created_at < start_of_next_day(end_date))
    if ref_contains:
        query = query.filter(JournalPage.ref.ilike(f"%{ref_contains}%"))
    if source_contains:
        query = query.filter(JournalPage.source.ilike(f"%{source_contains}%"))
    if description_contains:
        query = query.filter(JournalPage.description.ilike(f"%{description_contains}%"))
    if user_id:
        query = query.filter(JournalPage.user_id == user_id)

    total_count = query.count()
    pages = query.order_by(
        JournalPage.created_at.desc(), JournalPage.id.desc()
    ).offset((page - 1) * page_size).limit(page_size).all()
    return pages, total_count


def disable_journal_page(db: Session, page_id: int, user_id: Optional[str] = None) -> bool:
    db_page = db.query(JournalPage).filter(JournalPage.id == page_id).first()
    if not db_page:
        return False

    db_page.mark_disabled(user_id)
    db.commit()
    logger.info(f"Journal page {page_id} disabled by {user_id}")
    return True


def to_schema(db: Session, db_page: JournalPage) -> journal_schemas.JournalPage:
    """Read model of a page with account names and totals attached."""
    numbers = {post.account_number for post in db_page.posts}
    names = dict(
        db.query(Account.account_number, Account.name).execution_options(include_disabled=True).filter(
            Account.account_number.in_(numbers)
        ).all()
    ) if numbers else {}

    posts = [
        journal_schemas.JournalPost(
            id=post.id,
            account_number=post.account_number,
            account_name=names.get(post.account_number),
            ref=post.ref,
            description=post.description,
            debit=post.debit,
            credit=post.credit,
        )
        for post in db_page.posts
    ]
    total_debits = round_money(sum((Decimal(p.debit) for p in db_page.posts), Decimal(0)))
    total_credits = round_money(sum((Decimal(p.credit) for p in db_page.posts), Decimal(0)))

    return journal_schemas.JournalPage(
        id=db_page.id,
        currency_id=db_page.currency_id,
        ref=db_page.ref,
        source=db_page.source,
        description=db_page.description,
        user_id=db_page.user_id,
        created_at=db_page.created_at,
        disabled=db_page.disabled,
        posts=posts,
        total_debits=total_debits,
        total_credits=total_credits,
        is_balanced=abs(total_debits - total_credits) < BALANCE_TOLERANCE,
    )

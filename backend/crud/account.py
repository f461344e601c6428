from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from models.account import Account
from models.account_category import AccountCategory, AccountSubCategory
from models.journal_page import JournalPage
from models.journal_post import JournalPost
from schemas.account import (
    AccountCategoryCreate,
    AccountSubCategoryCreate,
    AccountCreate,
    AccountUpdate,
    AccountLedger,
    AccountLedgerLine,
)
from utils.errors import ConflictError, ValidationError
from utils.dates import start_of_day, start_of_next_day
from datetime import date
from typing import Optional
import logging
import config

logger = logging.getLogger(__name__)

# Category name -> normal balance of accounts seeded under it
DEFAULT_CATEGORIES = {
    "Asset": "debit",
    "Liability": "credit",
    "Equity": "credit",
    "Revenue": "credit",
    "Expense": "debit",
    "COGS": "debit",
}


def _default_accounts():
    return [
        {"account_number": config.DEFAULT_CASH_ACCOUNT_NUMBER, "name": "Cash on Hand: USD", "category": "Asset", "sub_category": "Cash", "currency_code": "USD"},
        {"account_number": config.DEFAULT_INVENTORY_ACCOUNT_NUMBER, "name": "Inventory", "category": "Asset", "sub_category": "Inventory", "currency_code": "USD"},
        {"account_number": config.DEFAULT_EQUITY_ACCOUNT_NUMBER, "name": "Owner's Capital", "category": "Equity", "sub_category": "Capital", "currency_code": "USD"},
        {"account_number": config.DEFAULT_SALES_ACCOUNT_NUMBER, "name": "Sales Revenue", "category": "Revenue", "sub_category": "Sales", "currency_code": "USD"},
        {"account_number": config.DEFAULT_COGS_ACCOUNT_NUMBER, "name": "Cost of Goods Sold", "category": "COGS", "sub_category": None, "currency_code": "USD"},
    ]


# --- Categories ---

def get_category(db: Session, category_id: int) -> Optional[AccountCategory]:
    return db.query(AccountCategory).filter(AccountCategory.id == category_id).first()

def get_category_by_name(db: Session, name: str, include_disabled: bool = False) -> Optional[AccountCategory]:
    return db.query(AccountCategory).execution_options(include_disabled=include_disabled).filter(
        func.lower(AccountCategory.name) == name.strip().lower()
    ).first()

def get_categories(db: Session):
    return db.query(AccountCategory).order_by(AccountCategory.id).all()

def create_category(db: Session, category: AccountCategoryCreate, user_id: Optional[str] = None) -> AccountCategory:
    if get_category_by_name(db, category.name, include_disabled=True):
        raise ConflictError(f"Account category '{category.name}' already exists.")

    db_category = AccountCategory(name=category.name.strip(), created_by=user_id)
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    logger.info(f"Account category '{db_category.name}' created by {user_id}")
    return db_category

def _get_sub_category_by_name(db: Session, category_id: int, name: str) -> Optional[AccountSubCategory]:
    return db.query(AccountSubCategory).execution_options(include_disabled=True).filter(
        AccountSubCategory.category_id == category_id,
        func.lower(AccountSubCategory.name) == name.strip().lower()
    ).first()

def get_sub_categories(db: Session, category_id: Optional[int] = None):
    query = db.query(AccountSubCategory)
    if category_id is not None:
        query = query.filter(AccountSubCategory.category_id == category_id)
    return query.order_by(AccountSubCategory.category_id, AccountSubCategory.name).all()

def create_sub_category(db: Session, sub_category: AccountSubCategoryCreate, user_id: Optional[str] = None) -> AccountSubCategory:
    if not get_category(db, sub_category.category_id):
        raise ValidationError(f"Account category {sub_category.category_id} does not exist.")
    if _get_sub_category_by_name(db, sub_category.category_id, sub_category.name):
        raise ConflictError(f"Sub-category '{sub_category.name}' already exists in this category.")

    db_sub_category = AccountSubCategory(
        category_id=sub_category.category_id,
        name=sub_category.name.strip(),
        created_by=user_id
    )
    db.add(db_sub_category)
    db.commit()
    db.refresh(db_sub_category)
    return db_sub_category


# --- Accounts ---

def get_account(db: Session, account_id: int, include_disabled: bool = False) -> Optional[Account]:
    return db.query(Account).execution_options(include_disabled=include_disabled).filter(
        Account.id == account_id
    ).first()

def get_account_by_number(db: Session, account_number: str, include_disabled: bool = False) -> Optional[Account]:
    return db.query(Account).execution_options(include_disabled=include_disabled).filter(
        Account.account_number == account_number
    ).first()

def get_accounts(db: Session, category_id: Optional[int] = None, include_disabled: bool = False):
    query = db.query(Account).execution_options(include_disabled=include_disabled)
    if category_id is not None:
        query = query.filter(Account.category_id == category_id)
    return query.order_by(Account.account_number).all()

def _check_classification(db: Session, category_id: int, sub_category_id: Optional[int]):
    if not get_category(db, category_id):
        raise ValidationError(f"Account category {category_id} does not exist.")
    if sub_category_id is not None:
        sub_category = db.query(AccountSubCategory).filter(AccountSubCategory.id == sub_category_id).first()
        if not sub_category:
            raise ValidationError(f"Account sub-category {sub_category_id} does not exist.")
        if sub_category.category_id != category_id:
            raise ValidationError(
                f"Sub-category '{sub_category.name}' does not belong to account category {category_id}."
            )

def has_posts(db: Session, account_number: str) -> bool:
    return db.query(JournalPost.id).filter(JournalPost.account_number == account_number).first() is not None

def create_account(db: Session, account: AccountCreate, user_id: Optional[str] = None) -> Account:
    if get_account_by_number(db, account.account_number, include_disabled=True):
        raise ConflictError(f"Account number '{account.account_number}' already exists.")
    _check_classification(db, account.category_id, account.sub_category_id)

    db_account = Account(**account.model_dump(), created_by=user_id)
    db.add(db_account)
    db.commit()
    db.refresh(db_account)
    logger.info(f"Account {db_account.account_number} '{db_account.name}' created by {user_id}")
    return db_account

def update_account(db: Session, account_id: int, account_update: AccountUpdate, user_id: Optional[str] = None) -> Optional[Account]:
    db_account = get_account(db, account_id)
    if not db_account:
        return None

    update_data = account_update.model_dump(exclude_unset=True)
    category_id = update_data.get('category_id', db_account.category_id)
    sub_category_id = update_data.get('sub_category_id', db_account.sub_category_id)

    if category_id != db_account.category_id:
        if has_posts(db, db_account.account_number):
            raise ValidationError(
                f"Account {db_account.account_number} already has journal posts; its category cannot change."
            )
        # A sub-category of the old category cannot follow the account
        if 'sub_category_id' not in update_data:
            sub_category_id = None
            update_data['sub_category_id'] = None
    if 'category_id' in update_data or 'sub_category_id' in update_data:
        _check_classification(db, category_id, sub_category_id)

    for key, value in update_data.items():
        setattr(db_account, key, value)
    db_account.updated_by = user_id

    db.commit()
    db.refresh(db_account)
    return db_account

def disable_account(db: Session, account_id: int, user_id: Optional[str] = None) -> bool:
    db_account = get_account(db, account_id)
    if not db_account:
        return False
    if has_posts(db, db_account.account_number):
        raise ValidationError(
            f"Account {db_account.account_number} has journal posts and cannot be disabled."
        )

    db_account.mark_disabled(user_id)
    db.commit()
    logger.info(f"Account {db_account.account_number} disabled by {user_id}")
    return True

def get_account_ledger(
    db: Session,
    account_number: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    ref_contains: Optional[str] = None,
    page: int = 1,
    page_size: int = 50,
) -> Optional[AccountLedger]:
    """
    Posts recorded against one account, newest page first.

    Only active journal pages count. A post without its own ref or
    description shows the page's.
    """
    account = get_account_by_number(db, account_number, include_disabled=True)
    if not account:
        return None

    query = db.query(JournalPost, JournalPage).join(
        JournalPage, JournalPage.id == JournalPost.journal_page_id
    ).filter(
        JournalPost.account_number == account_number,
        JournalPage.disabled.is_(False)
    )
    if start_date:
        query = query.filter(JournalPage.created_at >= start_of_day(start_date))
    if end_date:
        query = query.filter(JournalPage.created_at < start_of_next_day(end_date))
    if ref_contains:
        pattern = f"%{ref_contains}%"
        query = query.filter(or_(JournalPost.ref.ilike(pattern), JournalPage.ref.ilike(pattern)))

    total_count = query.count()
    rows = query.order_by(
        JournalPage.created_at.desc(), JournalPage.id.desc(), JournalPost.id
    ).offset((page - 1) * page_size).limit(page_size).all()

    lines = [
        AccountLedgerLine(
            post_id=post.id,
            journal_page_id=journal_page.id,
            journal_page_date=journal_page.created_at,
            journal_page_source=journal_page.source,
            journal_page_user=journal_page.user_id,
            ref=post.ref or journal_page.ref,
            description=post.description or journal_page.description,
            debit=post.debit,
            credit=post.credit,
        )
        for post, journal_page in rows
    ]

    return AccountLedger(
        account_number=account.account_number,
        name=account.name,
        normal_balance=account.normal_balance,
        category_name=account.category_name,
        sub_category_name=account.sub_category_name,
        lines=lines,
        total_count=total_count,
        page=page,
        page_size=page_size,
    )


def initialize_default_chart(db: Session, user_id: Optional[str] = None, commit: bool = True) -> int:
    """
    Seeds the standard categories and the accounts used by automatic
    postings. Existing rows (disabled ones included) are left untouched, so
    calling this repeatedly is harmless. Returns the number of rows created.
    """
    created = 0
    categories = {}
    for name in DEFAULT_CATEGORIES:
        category = get_category_by_name(db, name, include_disabled=True)
        if not category:
            category = AccountCategory(name=name, created_by=user_id)
            db.add(category)
            db.flush()
            created += 1
        categories[name] = category

    for data in _default_accounts():
        if get_account_by_number(db, data["account_number"], include_disabled=True):
            continue

        category = categories[data["category"]]
        sub_category_id = None
        if data["sub_category"]:
            sub_category = _get_sub_category_by_name(db, category.id, data["sub_category"])
            if not sub_category:
                sub_category = AccountSubCategory(category_id=category.id, name=data["sub_category"], created_by=user_id)
                db.add(sub_category)
                db.flush()
                created += 1
            sub_category_id = sub_category.id

        logger.info(f"Seeding default account '{data['name']}' ({data['account_number']})")
        db.add(Account(
            account_number=data["account_number"],
            name=data["name"],
            category_id=category.id,
            sub_category_id=sub_category_id,
            normal_balance=DEFAULT_CATEGORIES[data["category"]],
            currency_code=data["currency_code"],
            created_by=user_id,
        ))
        db.flush()
        created += 1

    if commit:
        db.commit()
    return created

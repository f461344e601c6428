from sqlalchemy.orm import Session, selectinload
from models.purchase import Purchase, PurchaseDetail
from schemas.purchase import PurchaseCreate
from schemas.journal import JournalPageCreate, JournalPostCreate
from crud.item_detail import get_item_detail_by_code
from crud.inventory_log import record_transaction, PURCHASE
from crud.journal import create_journal_page
from crud.financial_settings import get_financial_settings
from utils.errors import ValidationError
from utils.money import round_money, FOUR_PLACES
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
import logging

logger = logging.getLogger(__name__)

CODE_PREFIX = "PUR-"
JOURNAL_SOURCE = "Purchase"


def generate_purchase_code(db: Session) -> str:
    codes = db.query(Purchase.code).execution_options(include_disabled=True).filter(
        Purchase.code.like(f"{CODE_PREFIX}%")
    ).all()
    highest = 0
    for (code,) in codes:
        suffix = code[len(CODE_PREFIX):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{CODE_PREFIX}{highest + 1:05d}"


def create_purchase(db: Session, purchase: PurchaseCreate, user_id: Optional[str] = None) -> Purchase:
    """
    Records a purchase, its stock movements and its journal page
    (Dr inventory / Cr cash) in a single transaction.
    """
    if not purchase.details:
        raise ValidationError("A purchase needs at least one line.")

    settings = get_financial_settings(db)

    try:
        code = generate_purchase_code(db)
        db_purchase = Purchase(
            code=code,
            date=purchase.date,
            user_id=user_id,
            supplier_name=purchase.supplier_name,
            stock_location=purchase.stock_location,
            created_by=user_id,
        )
        db.add(db_purchase)

        total_cost = Decimal(0)
        for line in purchase.details:
            detail = get_item_detail_by_code(db, line.item_code)
            if not detail:
                raise ValidationError(f"Item code '{line.item_code}' not found or disabled.")

            cost = Decimal(line.cost)
            cost_per_base_unit = (cost / (Decimal(line.qty) * detail.conversion_factor)).quantize(
                FOUR_PLACES, rounding=ROUND_HALF_UP
            )
            record_transaction(
                db,
                item_id=detail.item_id,
                unit_id=detail.unit_id,
                item_detail_id=detail.id,
                transaction_type=PURCHASE,
                quantity=line.qty,
                user_id=user_id,
                cost_price_per_base_unit=cost_per_base_unit,
                reference_code=code,
            )
            db_purchase.details.append(PurchaseDetail(
                item_code=detail.code,
                item_detail_id=detail.id,
                qty=line.qty,
                cost=round_money(cost),
            ))
            total_cost += cost

        total_cost = round_money(total_cost)
        db_purchase.cost = total_cost
        db.flush()

        page = create_journal_page(
            db,
            JournalPageCreate(
                source=JOURNAL_SOURCE,
                ref=code,
                description=f"Purchase from supplier: {purchase.supplier_name or ''}, Code: {code}",
                entries=[
                    JournalPostCreate(account_number=settings.inventory_account_number, debit=total_cost),
                    JournalPostCreate(account_number=settings.cash_account_number, credit=total_cost),
                ],
            ),
            user_id=user_id,
            commit=False,
        )
        db_purchase.journal_page_id = page.id
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_purchase)
    logger.info(f"Purchase {db_purchase.code} ({total_cost}) created by {user_id}")
    return db_purchase


def get_purchase(db: Session, purchase_id: int) -> Optional[Purchase]:
    return db.query(Purchase).options(selectinload(Purchase.details)).filter(
        Purchase.id == purchase_id
    ).first()


def get_purchases(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    page: int = 1,
    page_size: int = 50,
):
    query = db.query(Purchase).options(selectinload(Purchase.details))
    if start_date:
        query = query.filter(Purchase.date >= start_date)
    if end_date:
        query = query.filter(Purchase.date <= end_date)

    total_count = query.count()
    purchases = query.order_by(Purchase.date.desc(), Purchase.id.desc()).offset(
        (page - 1) * page_size
    ).limit(page_size).all()
    return purchases, total_count

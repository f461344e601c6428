from sqlalchemy.orm import Session, selectinload
from models.item import Item
from models.sale import Sale, SaleDetail
from schemas.sale import SaleCreate
from schemas.journal import JournalPageCreate, JournalPostCreate
from crud.item_detail import get_item_detail_by_code
from crud.inventory_log import record_transaction, current_stock, average_cost_per_base_unit, SALE
from crud.journal import create_journal_page
from crud.financial_settings import get_financial_settings
from crud.unit_conversion import to_base_units
from utils.errors import ValidationError
from utils.money import round_money, round_native
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional
import logging

logger = logging.getLogger(__name__)

CODE_PREFIX = "SAL-"
JOURNAL_SOURCE = "Sale"


def generate_sale_code(db: Session) -> str:
    codes = db.query(Sale.code).execution_options(include_disabled=True).filter(
        Sale.code.like(f"{CODE_PREFIX}%")
    ).all()
    highest = 0
    for (code,) in codes:
        suffix = code[len(CODE_PREFIX):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{CODE_PREFIX}{highest + 1:05d}"


def _resolve_lines(db: Session, sale: SaleCreate):
    lines = []
    for line in sale.details:
        detail = get_item_detail_by_code(db, line.item_code)
        if not detail:
            raise ValidationError(f"Item code '{line.item_code}' not found or disabled.")
        if not db.query(Item.id).filter(Item.id == detail.item_id).first():
            raise ValidationError(f"Item of code '{line.item_code}' is disabled.")

        base_quantity = to_base_units(line.qty, detail.conversion_factor)
        if base_quantity == 0:
            raise ValidationError(
                f"Quantity {line.qty} of '{line.item_code}' is less than one base unit."
            )
        lines.append((line, detail, base_quantity))
    return lines


def create_sale(db: Session, sale: SaleCreate, user_id: Optional[str] = None) -> Sale:
    """
    Records a sale in a single transaction: stock is checked per item
    against the combined need of all lines, COGS is valued at the weighted
    average cost, and a journal page books the revenue and the COGS.
    """
    if not sale.details:
        raise ValidationError("A sale needs at least one line.")

    settings = get_financial_settings(db)

    try:
        lines = _resolve_lines(db, sale)

        needs = defaultdict(int)
        for _, detail, base_quantity in lines:
            needs[detail.item_id] += base_quantity
        for item_id, need in needs.items():
            on_hand = current_stock(db, item_id)
            if on_hand < need:
                raise ValidationError(
                    f"insufficient stock for item {item_id}: {need} base units needed, {on_hand} on hand"
                )

        average_costs = {item_id: average_cost_per_base_unit(db, item_id) for item_id in needs}

        code = generate_sale_code(db)
        db_sale = Sale(
            code=code,
            date=sale.date,
            user_id=user_id,
            stock_location=sale.stock_location,
            created_by=user_id,
        )
        db.add(db_sale)

        total_price = Decimal(0)
        total_cogs = Decimal(0)
        for line, detail, base_quantity in lines:
            average_cost = average_costs[detail.item_id]
            line_cogs = round_money(base_quantity * average_cost)
            record_transaction(
                db,
                item_id=detail.item_id,
                unit_id=detail.unit_id,
                item_detail_id=detail.id,
                transaction_type=SALE,
                quantity=line.qty,
                user_id=user_id,
                cost_price_per_base_unit=average_cost,
                sale_price_per_transacted_unit=round_native(Decimal(line.price) / Decimal(line.qty)),
                reference_code=code,
            )
            db_sale.details.append(SaleDetail(
                item_code=detail.code,
                item_detail_id=detail.id,
                qty=line.qty,
                price=round_money(line.price),
                calculated_cogs=line_cogs,
            ))
            total_price += Decimal(line.price)
            total_cogs += line_cogs

        total_price = round_money(total_price)
        db_sale.price = total_price
        db_sale.total_cogs = total_cogs
        db.flush()

        entries = []
        if total_price > 0:
            entries += [
                JournalPostCreate(account_number=settings.cash_account_number, debit=total_price),
                JournalPostCreate(account_number=settings.sales_account_number, credit=total_price),
            ]
        if total_cogs > 0:
            entries += [
                JournalPostCreate(account_number=settings.cogs_account_number, debit=total_cogs),
                JournalPostCreate(account_number=settings.inventory_account_number, credit=total_cogs),
            ]
        # A free sale of uncosted stock moves nothing in the books
        if entries:
            page = create_journal_page(
                db,
                JournalPageCreate(
                    source=JOURNAL_SOURCE,
                    ref=code,
                    description=f"Sale {code}",
                    entries=entries,
                ),
                user_id=user_id,
                commit=False,
            )
            db_sale.journal_page_id = page.id
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_sale)
    logger.info(f"Sale {db_sale.code} ({total_price}, COGS {total_cogs}) created by {user_id}")
    return db_sale


def get_sale(db: Session, sale_id: int) -> Optional[Sale]:
    return db.query(Sale).options(selectinload(Sale.details)).filter(Sale.id == sale_id).first()


def get_sales(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    page: int = 1,
    page_size: int = 50,
):
    query = db.query(Sale).options(selectinload(Sale.details))
    if start_date:
        query = query.filter(Sale.date >= start_date)
    if end_date:
        query = query.filter(Sale.date <= end_date)

    total_count = query.count()
    sales = query.order_by(Sale.date.desc(), Sale.id.desc()).offset(
        (page - 1) * page_size
    ).limit(page_size).all()
    return sales, total_count

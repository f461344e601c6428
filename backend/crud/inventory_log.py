"""
Inventory ledger.

Every stock-affecting event is an immutable InventoryLog row recorded in base
units. On-hand quantity is never stored; it is the signed sum of the rows,
computed when asked for.
"""

from sqlalchemy import case, func
from sqlalchemy.orm import Session
from models.inventory_log import InventoryLog
from models.item import Item
from models.item_detail import ItemDetail
from models.unit import Unit
from schemas.inventory_log import InventoryLogCreate
from schemas.item import ItemStock, ItemStockUnitDetail
from crud.unit_conversion import resolve_packaging, to_base_units, from_base_units
from utils.errors import NotFoundError, ValidationError
from utils.dates import start_of_day, start_of_next_day
from utils.money import FOUR_PLACES
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple, List
import logging

logger = logging.getLogger(__name__)

PURCHASE = "Purchase"
SALE = "Sale"
STOCK_ADJUSTMENT_IN = "Stock Adjustment In"
STOCK_ADJUSTMENT_OUT = "Stock Adjustment Out"
CUSTOMER_RETURN = "Customer Return"
VENDOR_RETURN = "Vendor Return"
INITIAL_STOCK = "Initial Stock"

# Sign convention applied when summing quantity_in_base_units
INBOUND_TYPES = (PURCHASE, STOCK_ADJUSTMENT_IN, CUSTOMER_RETURN, INITIAL_STOCK)
OUTBOUND_TYPES = (SALE, STOCK_ADJUSTMENT_OUT, VENDOR_RETURN)
DOCUMENT_TYPES = (PURCHASE, SALE)
COSTED_TYPES = (PURCHASE, INITIAL_STOCK)


def record_transaction(
    db: Session,
    item_id: int,
    unit_id: int,
    transaction_type: str,
    quantity,
    user_id: Optional[str] = None,
    item_detail_id: Optional[int] = None,
    cost_price_per_base_unit=None,
    sale_price_per_transacted_unit=None,
    reference_code: Optional[str] = None,
    notes: Optional[str] = None,
) -> InventoryLog:
    """
    Appends one stock movement. The row is flushed but not committed; the
    caller owns the transaction so a document and its movements persist
    together.
    """
    quantity = Decimal(quantity)
    if quantity <= 0:
        raise ValidationError("Quantity transacted must be greater than zero.")
    if transaction_type not in INBOUND_TYPES + OUTBOUND_TYPES:
        raise ValidationError(f"Unknown transaction type '{transaction_type}'.")

    try:
        factor, detail = resolve_packaging(db, item_id, unit_id, item_detail_id)
    except NotFoundError as e:
        raise ValidationError(str(e)) from e

    quantity_in_base_units = to_base_units(quantity, factor)
    if quantity_in_base_units == 0:
        raise ValidationError(f"Quantity {quantity} is less than one base unit (factor {factor}).")

    log = InventoryLog(
        item_id=item_id,
        item_detail_id=detail.id if detail else None,
        user_id=user_id,
        transaction_type=transaction_type,
        quantity_transacted=quantity,
        unit_id_transacted=unit_id,
        conversion_factor_applied=factor,
        quantity_in_base_units=quantity_in_base_units,
        cost_price_per_base_unit=cost_price_per_base_unit,
        sale_price_per_transacted_unit=sale_price_per_transacted_unit,
        reference_code=reference_code,
        notes=notes,
    )
    db.add(log)
    db.flush()
    return log


def _check_manual_prices(entry: InventoryLogCreate):
    cost = entry.cost_price_per_base_unit
    sale_price = entry.sale_price_per_transacted_unit

    if cost is not None and cost < 0:
        raise ValidationError("Cost price cannot be negative.")
    if sale_price is not None and sale_price < 0:
        raise ValidationError("Sale price cannot be negative.")

    if entry.transaction_type == VENDOR_RETURN:
        if cost is not None:
            raise ValidationError(f"'{VENDOR_RETURN}' entries carry a sale price, not a cost price.")
    elif sale_price is not None:
        raise ValidationError(f"'{entry.transaction_type}' entries cannot carry a sale price.")


def create_manual_log_entry(db: Session, entry: InventoryLogCreate, user_id: Optional[str] = None) -> InventoryLog:
    """
    Records an adjustment, return or opening-stock movement.

    Purchase and Sale movements are only written by their documents, which
    keeps the provenance of those rows trustworthy.
    """
    if entry.transaction_type in DOCUMENT_TYPES:
        raise ValidationError(
            f"'{entry.transaction_type}' movements are recorded by creating a {entry.transaction_type.lower()}, not manually."
        )
    if entry.transaction_type not in INBOUND_TYPES + OUTBOUND_TYPES:
        raise ValidationError(f"Unknown transaction type '{entry.transaction_type}'.")
    _check_manual_prices(entry)

    try:
        log = record_transaction(
            db,
            item_id=entry.item_id,
            unit_id=entry.unit_id,
            transaction_type=entry.transaction_type,
            quantity=entry.quantity,
            user_id=user_id,
            item_detail_id=entry.item_detail_id,
            cost_price_per_base_unit=entry.cost_price_per_base_unit,
            sale_price_per_transacted_unit=entry.sale_price_per_transacted_unit,
            notes=entry.notes,
        )

        if entry.transaction_type in OUTBOUND_TYPES:
            remaining = current_stock(db, entry.item_id)
            if remaining < 0:
                raise ValidationError(
                    f"Insufficient stock for item {entry.item_id}: the movement needs "
                    f"{log.quantity_in_base_units} base units but only {remaining + log.quantity_in_base_units} are on hand."
                )
    except Exception:
        db.rollback()
        raise

    db.commit()
    db.refresh(log)
    logger.info(
        f"Manual '{log.transaction_type}' of {log.quantity_in_base_units} base units for item {log.item_id} "
        f"recorded by {user_id} (log ID: {log.id})"
    )
    return log


def _signed_quantity():
    return case(
        (InventoryLog.transaction_type.in_(INBOUND_TYPES), InventoryLog.quantity_in_base_units),
        (InventoryLog.transaction_type.in_(OUTBOUND_TYPES), -InventoryLog.quantity_in_base_units),
        else_=0,
    )


def current_stock(db: Session, item_id: int) -> int:
    """Signed sum of every movement recorded for the item, in base units."""
    total = db.query(func.coalesce(func.sum(_signed_quantity()), 0)).filter(
        InventoryLog.item_id == item_id
    ).scalar()
    return int(total or 0)


def average_cost_per_base_unit(db: Session, item_id: int) -> Decimal:
    """Weighted average cost over purchases and opening stock that carry a cost."""
    total_cost, total_quantity = db.query(
        func.sum(InventoryLog.cost_price_per_base_unit * InventoryLog.quantity_in_base_units),
        func.sum(InventoryLog.quantity_in_base_units)
    ).filter(
        InventoryLog.item_id == item_id,
        InventoryLog.transaction_type.in_(COSTED_TYPES),
        InventoryLog.cost_price_per_base_unit.isnot(None)
    ).one()

    if not total_quantity:
        return Decimal(0)
    return (Decimal(str(total_cost or 0)) / Decimal(total_quantity)).quantize(FOUR_PLACES, rounding=ROUND_HALF_UP)


def get_stock_breakdown(db: Session, item_id: int) -> Optional[ItemStock]:
    """
    On-hand quantity of an item in base units and in each of its active
    packaging units (base unit first, then by unit name).
    """
    item = db.query(Item).filter(Item.id == item_id).first()
    if not item:
        return None
    base_unit = db.query(Unit).execution_options(include_disabled=True).filter(Unit.id == item.base_unit_id).first()

    on_hand = current_stock(db, item_id)
    rows = db.query(ItemDetail, Unit).join(Unit, Unit.id == ItemDetail.unit_id).filter(
        ItemDetail.item_id == item_id
    ).all()

    units = [
        ItemStockUnitDetail(
            item_detail_id=detail.id,
            code=detail.code,
            unit_id=unit.id,
            unit_name=unit.name,
            conversion_factor=detail.conversion_factor,
            quantity=from_base_units(on_hand, detail.conversion_factor),
            price=detail.price,
            is_base_unit=detail.unit_id == item.base_unit_id,
        )
        for detail, unit in rows
    ]
    units.sort(key=lambda u: (not u.is_base_unit, u.unit_name.lower()))

    return ItemStock(
        item_id=item.id,
        item_name=item.name,
        base_unit_id=item.base_unit_id,
        base_unit_name=base_unit.name if base_unit else "",
        quantity_in_base_units=on_hand,
        units=units,
    )


def get_logs(
    db: Session,
    item_id: Optional[int] = None,
    user_id: Optional[str] = None,
    transaction_type: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    page: int = 1,
    page_size: int = 50,
) -> Tuple[List[InventoryLog], int]:
    """Movements newest first; `end_date` is inclusive."""
    query = db.query(InventoryLog)

    if item_id is not None:
        query = query.filter(InventoryLog.item_id == item_id)
    if user_id:
        query = query.filter(InventoryLog.user_id == user_id)
    if transaction_type:
        query = query.filter(InventoryLog.transaction_type == transaction_type)
    if start_date:
        query = query.filter(InventoryLog.timestamp >= start_of_day(start_date))
    if end_date:
        query = query.filter(InventoryLog.timestamp < start_of_next_day(end_date))

    total_count = query.count()
    rows = query.order_by(
        InventoryLog.timestamp.desc(), InventoryLog.id.desc()
    ).offset((page - 1) * page_size).limit(page_size).all()
    return rows, total_count

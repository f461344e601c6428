from sqlalchemy import or_
from sqlalchemy.orm import Session
from models.item import Item
from models.item_detail import ItemDetail
from models.unit import Unit
from schemas.item_detail import ItemDetailCreate, ItemDetailUpdate
from crud.unit_conversion import BASE_UNIT_FACTOR
from utils.errors import ConflictError, ValidationError
from typing import Optional
import logging

logger = logging.getLogger(__name__)

CODE_PREFIX = "CAM-"

def get_item_detail(db: Session, item_detail_id: int, include_disabled: bool = False) -> Optional[ItemDetail]:
    return db.query(ItemDetail).execution_options(include_disabled=include_disabled).filter(
        ItemDetail.id == item_detail_id
    ).first()

def get_item_detail_by_code(db: Session, code: str) -> Optional[ItemDetail]:
    return db.query(ItemDetail).filter(ItemDetail.code == code).first()

def get_item_details(db: Session, item_id: Optional[int] = None, include_disabled: bool = False):
    query = db.query(ItemDetail).execution_options(include_disabled=include_disabled)
    if item_id is not None:
        query = query.filter(ItemDetail.item_id == item_id)
    return query.order_by(ItemDetail.item_id, ItemDetail.conversion_factor).all()

def generate_item_detail_code(db: Session) -> str:
    """Next CAM-0001 style code, one past the highest number ever issued."""
    codes = db.query(ItemDetail.code).execution_options(include_disabled=True).filter(
        ItemDetail.code.like(f"{CODE_PREFIX}%")
    ).all()
    highest = 0
    for (code,) in codes:
        suffix = code[len(CODE_PREFIX):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{CODE_PREFIX}{highest + 1:04d}"

def _check_rules(db: Session, item: Item, unit_id: int, conversion_factor: int):
    unit = db.query(Unit).filter(Unit.id == unit_id).first()
    if not unit:
        raise ValidationError(f"Unit {unit_id} not found or disabled.")
    if unit_id == item.base_unit_id and conversion_factor != BASE_UNIT_FACTOR:
        raise ValidationError(
            f"Conversion factor for the base unit '{unit.name}' of item '{item.name}' must be 1, got {conversion_factor}."
        )
    if conversion_factor < 1:
        raise ValidationError("Conversion factor must be a whole number of at least 1.")
    if unit_id != item.base_unit_id and conversion_factor == BASE_UNIT_FACTOR:
        logger.warning(f"Packaging '{unit.name}' of item '{item.name}' uses factor 1 but is not the base unit")

def _check_unique(db: Session, code: str, item_id: int, unit_id: int, exclude_id: Optional[int] = None):
    query = db.query(ItemDetail.id).filter(
        or_(
            ItemDetail.code == code,
            (ItemDetail.item_id == item_id) & (ItemDetail.unit_id == unit_id)
        )
    )
    if exclude_id is not None:
        query = query.filter(ItemDetail.id != exclude_id)
    if query.first():
        raise ConflictError("Duplicate code or duplicate item-unit combination.")

def create_item_detail(db: Session, detail: ItemDetailCreate, user_id: Optional[str] = None) -> ItemDetail:
    item = db.query(Item).filter(Item.id == detail.item_id).first()
    if not item:
        raise ValidationError(f"Item {detail.item_id} not found or disabled.")
    _check_rules(db, item, detail.unit_id, detail.conversion_factor)

    code = detail.code.strip() if detail.code and detail.code.strip() else generate_item_detail_code(db)
    _check_unique(db, code, detail.item_id, detail.unit_id)

    db_detail = ItemDetail(
        code=code,
        item_id=detail.item_id,
        unit_id=detail.unit_id,
        conversion_factor=detail.conversion_factor,
        price=detail.price,
        created_by=user_id
    )
    db.add(db_detail)
    db.commit()
    db.refresh(db_detail)
    logger.info(f"Item detail {db_detail.code} (item {item.id}, unit {db_detail.unit_id}, factor {db_detail.conversion_factor}) created by {user_id}")
    return db_detail

def update_item_detail(db: Session, item_detail_id: int, detail_update: ItemDetailUpdate, user_id: Optional[str] = None) -> Optional[ItemDetail]:
    db_detail = get_item_detail(db, item_detail_id)
    if not db_detail:
        return None

    item = db.query(Item).filter(Item.id == db_detail.item_id).first()
    if not item:
        raise ValidationError(f"Item {db_detail.item_id} not found or disabled.")

    update_data = detail_update.model_dump(exclude_unset=True)
    code = (update_data.get('code') or db_detail.code).strip()
    unit_id = update_data.get('unit_id') or db_detail.unit_id
    conversion_factor = update_data.get('conversion_factor') or db_detail.conversion_factor

    _check_rules(db, item, unit_id, conversion_factor)
    _check_unique(db, code, db_detail.item_id, unit_id, exclude_id=item_detail_id)

    db_detail.code = code
    db_detail.unit_id = unit_id
    db_detail.conversion_factor = conversion_factor
    if 'price' in update_data:
        db_detail.price = update_data['price']
    db_detail.updated_by = user_id

    db.commit()
    db.refresh(db_detail)
    return db_detail

def disable_item_detail(db: Session, item_detail_id: int, user_id: Optional[str] = None) -> bool:
    db_detail = get_item_detail(db, item_detail_id)
    if not db_detail:
        return False

    item = db.query(Item).execution_options(include_disabled=True).filter(Item.id == db_detail.item_id).first()
    if item and item.base_unit_id == db_detail.unit_id:
        raise ValidationError("The base-unit packaging of an item cannot be disabled.")

    db_detail.mark_disabled(user_id)
    db.commit()
    logger.info(f"Item detail {db_detail.code} disabled by {user_id}")
    return True

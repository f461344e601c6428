from sqlalchemy import func
from sqlalchemy.orm import Session
from models.item import Item
from models.item_detail import ItemDetail
from schemas.item import ItemCreate, ItemUpdate
from crud.unit import get_unit
from utils.errors import ConflictError, ValidationError
from typing import Optional
import logging

logger = logging.getLogger(__name__)

def get_item(db: Session, item_id: int, include_disabled: bool = False) -> Optional[Item]:
    return db.query(Item).execution_options(include_disabled=include_disabled).filter(
        Item.id == item_id
    ).first()

def get_items(db: Session, include_disabled: bool = False, skip: int = 0, limit: int = 100):
    return db.query(Item).execution_options(include_disabled=include_disabled).order_by(
        Item.name
    ).offset(skip).limit(limit).all()

def _name_taken(db: Session, name: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Item.id).execution_options(include_disabled=True).filter(
        func.lower(Item.name) == name.strip().lower()
    )
    if exclude_id is not None:
        query = query.filter(Item.id != exclude_id)
    return query.first() is not None

def _require_active_unit(db: Session, unit_id: int):
    if not get_unit(db, unit_id):
        raise ValidationError(f"Base unit {unit_id} not found or disabled.")

def create_item(db: Session, item: ItemCreate, user_id: Optional[str] = None) -> Item:
    if _name_taken(db, item.name):
        raise ConflictError(f"Item '{item.name}' already exists.")
    _require_active_unit(db, item.base_unit_id)

    db_item = Item(
        name=item.name.strip(),
        category_id=item.category_id,
        base_unit_id=item.base_unit_id,
        created_by=user_id
    )
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    logger.info(f"Item '{db_item.name}' (ID: {db_item.id}) created by {user_id}")
    return db_item

def update_item(db: Session, item_id: int, item_update: ItemUpdate, user_id: Optional[str] = None) -> Optional[Item]:
    db_item = get_item(db, item_id)
    if not db_item:
        return None

    update_data = item_update.model_dump(exclude_unset=True)
    if update_data.get('name') and _name_taken(db, update_data['name'], exclude_id=item_id):
        raise ConflictError(f"Item '{update_data['name']}' already exists.")
    if update_data.get('base_unit_id') and update_data['base_unit_id'] != db_item.base_unit_id:
        _require_active_unit(db, update_data['base_unit_id'])
        logger.warning(f"Base unit of item {item_id} changed from {db_item.base_unit_id} to {update_data['base_unit_id']}; historic conversions keep their snapshot factor")

    for key, value in update_data.items():
        setattr(db_item, key, value.strip() if isinstance(value, str) else value)
    db_item.updated_by = user_id

    db.commit()
    db.refresh(db_item)
    return db_item

def disable_item(db: Session, item_id: int, user_id: Optional[str] = None) -> bool:
    """Disables the item together with all of its packaging rows."""
    db_item = get_item(db, item_id)
    if not db_item:
        return False

    for detail in db.query(ItemDetail).filter(ItemDetail.item_id == item_id).all():
        detail.mark_disabled(user_id)
    db_item.mark_disabled(user_id)

    db.commit()
    logger.info(f"Item '{db_item.name}' (ID: {item_id}) disabled by {user_id}")
    return True

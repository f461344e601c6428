from sqlalchemy import func
from sqlalchemy.orm import Session
from models.unit import Unit
from models.item import Item
from schemas.unit import UnitCreate, UnitUpdate
from utils.errors import ConflictError, ValidationError
from typing import Optional
import logging

logger = logging.getLogger(__name__)

def get_unit(db: Session, unit_id: int, include_disabled: bool = False) -> Optional[Unit]:
    return db.query(Unit).execution_options(include_disabled=include_disabled).filter(
        Unit.id == unit_id
    ).first()

def get_units(db: Session, include_disabled: bool = False):
    return db.query(Unit).execution_options(include_disabled=include_disabled).order_by(Unit.name).all()

def _name_taken(db: Session, name: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Unit.id).execution_options(include_disabled=True).filter(
        func.lower(Unit.name) == name.strip().lower()
    )
    if exclude_id is not None:
        query = query.filter(Unit.id != exclude_id)
    return query.first() is not None

def create_unit(db: Session, unit: UnitCreate, user_id: Optional[str] = None) -> Unit:
    if _name_taken(db, unit.name):
        raise ConflictError(f"Unit '{unit.name}' already exists.")

    db_unit = Unit(name=unit.name.strip(), created_by=user_id)
    db.add(db_unit)
    db.commit()
    db.refresh(db_unit)
    logger.info(f"Unit '{db_unit.name}' (ID: {db_unit.id}) created by {user_id}")
    return db_unit

def update_unit(db: Session, unit_id: int, unit_update: UnitUpdate, user_id: Optional[str] = None) -> Optional[Unit]:
    db_unit = get_unit(db, unit_id)
    if not db_unit:
        return None

    update_data = unit_update.model_dump(exclude_unset=True)
    if update_data.get('name') and _name_taken(db, update_data['name'], exclude_id=unit_id):
        raise ConflictError(f"Unit '{update_data['name']}' already exists.")

    for key, value in update_data.items():
        setattr(db_unit, key, value.strip() if isinstance(value, str) else value)
    db_unit.updated_by = user_id

    db.commit()
    db.refresh(db_unit)
    return db_unit

def disable_unit(db: Session, unit_id: int, user_id: Optional[str] = None) -> bool:
    db_unit = get_unit(db, unit_id)
    if not db_unit:
        return False

    # Historic conversions depend on the base unit, disabled items included
    used_as_base_unit = db.query(Item.id).execution_options(include_disabled=True).filter(
        Item.base_unit_id == unit_id
    ).first()
    if used_as_base_unit:
        raise ValidationError(f"Unit '{db_unit.name}' is the base unit of an item and cannot be disabled.")

    db_unit.mark_disabled(user_id)
    db.commit()
    logger.info(f"Unit '{db_unit.name}' (ID: {unit_id}) disabled by {user_id}")
    return True

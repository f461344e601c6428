"""
Unit-of-measure conversion.

Stock is always stored in an item's base unit. Packaging variants
(ItemDetail rows) carry an integer factor saying how many base units one
package holds; the base unit itself has factor 1.
"""

from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import Optional, Tuple
from sqlalchemy.orm import Session
from models.item import Item
from models.item_detail import ItemDetail
from models.unit import Unit
from utils.errors import NotFoundError, ValidationError

BASE_UNIT_FACTOR = 1


def to_base_units(quantity, conversion_factor: int) -> int:
    """
    Converts a transacted quantity into whole base units.

    Fractions of a base unit are truncated toward zero, so 1.5 bags of a
    25 kg bag give 37 kg, not 38.
    """
    return int((Decimal(quantity) * Decimal(conversion_factor)).to_integral_value(rounding=ROUND_DOWN))


def from_base_units(quantity_in_base_units: int, conversion_factor: int) -> Decimal:
    """Expresses a base-unit quantity in a packaging unit (4 decimal places)."""
    return (Decimal(quantity_in_base_units) / Decimal(conversion_factor)).quantize(
        Decimal("0.0001"), rounding=ROUND_HALF_UP
    )


def resolve_packaging(
    db: Session,
    item_id: int,
    unit_id: int,
    item_detail_id: Optional[int] = None
) -> Tuple[int, Optional[ItemDetail]]:
    """
    Finds the conversion factor for moving `item_id` in `unit_id`.

    Returns the factor and the ItemDetail it came from. The item's own base
    unit resolves to factor 1 even when no base ItemDetail row exists.
    Raises NotFoundError when the item, the unit or the packaging is absent
    or disabled, and ValidationError when an explicit ItemDetail does not
    belong to the item and unit.
    """
    item = db.query(Item).filter(Item.id == item_id).first()
    if not item:
        raise NotFoundError(f"Item {item_id} not found or disabled.")

    unit = db.query(Unit).filter(Unit.id == unit_id).first()
    if not unit:
        raise NotFoundError(f"Unit {unit_id} not found or disabled.")

    if item_detail_id is not None:
        detail = db.query(ItemDetail).filter(ItemDetail.id == item_detail_id).first()
        if not detail:
            raise NotFoundError(f"Item detail {item_detail_id} not found or disabled.")
        if detail.item_id != item_id or detail.unit_id != unit_id:
            raise ValidationError(
                f"Item detail {item_detail_id} does not belong to item {item_id} and unit {unit_id}."
            )
        return detail.conversion_factor, detail

    detail = db.query(ItemDetail).filter(
        ItemDetail.item_id == item_id,
        ItemDetail.unit_id == unit_id
    ).first()
    if detail:
        return detail.conversion_factor, detail

    if unit_id == item.base_unit_id:
        return BASE_UNIT_FACTOR, None

    raise NotFoundError(f"Item '{item.name}' has no active packaging in unit '{unit.name}'.")


def resolve_conversion_factor(db: Session, item_id: int, unit_id: int) -> int:
    factor, _ = resolve_packaging(db, item_id, unit_id)
    return factor

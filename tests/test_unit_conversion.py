import pytest
from decimal import Decimal

from crud.unit_conversion import to_base_units, from_base_units, resolve_packaging, resolve_conversion_factor
from crud import unit as crud_unit
from crud import item_detail as crud_item_detail
from schemas.unit import UnitCreate
from schemas.item_detail import ItemDetailCreate, ItemDetailUpdate
from utils.errors import ConflictError, NotFoundError, ValidationError


def test_to_base_units_multiplies_by_factor():
    assert to_base_units(Decimal("2"), 25) == 50
    assert to_base_units(3, 1) == 3


def test_to_base_units_truncates_fractional_base_quantities():
    assert to_base_units(Decimal("1.5"), 25) == 37
    assert to_base_units(Decimal("0.04"), 1) == 0


def test_from_base_units_expresses_stock_in_packaging():
    assert from_base_units(50, 25) == Decimal("2.0000")
    assert from_base_units(10, 3) == Decimal("3.3333")


def test_base_unit_resolves_to_factor_one(db, rice):
    factor, detail = resolve_packaging(db, rice["item"].id, rice["kg"].id)
    assert factor == 1
    assert detail.id == rice["base_detail"].id


def test_base_unit_resolves_without_a_packaging_row(db):
    from crud import item as crud_item
    from schemas.item import ItemCreate

    piece = crud_unit.create_unit(db, UnitCreate(name="piece"))
    item = crud_item.create_item(db, ItemCreate(name="Soap", base_unit_id=piece.id))
    assert resolve_conversion_factor(db, item.id, piece.id) == 1


def test_packaging_unit_resolves_its_factor(db, rice):
    assert resolve_conversion_factor(db, rice["item"].id, rice["bag"].id) == 25


def test_unknown_packaging_is_not_found(db, rice):
    crate = crud_unit.create_unit(db, UnitCreate(name="Crate"))
    with pytest.raises(NotFoundError):
        resolve_packaging(db, rice["item"].id, crate.id)


def test_explicit_detail_must_match_item_and_unit(db, rice):
    with pytest.raises(ValidationError):
        resolve_packaging(db, rice["item"].id, rice["kg"].id, item_detail_id=rice["bag_detail"].id)


def test_disabled_packaging_no_longer_resolves(db, rice):
    crud_item_detail.disable_item_detail(db, rice["bag_detail"].id)
    with pytest.raises(NotFoundError):
        resolve_packaging(db, rice["item"].id, rice["bag"].id)


def test_base_unit_packaging_must_use_factor_one(db, rice):
    with pytest.raises(ValidationError):
        crud_item_detail.update_item_detail(
            db, rice["base_detail"].id, ItemDetailUpdate(conversion_factor=5)
        )


def test_new_base_unit_packaging_must_use_factor_one(db):
    from crud import item as crud_item
    from schemas.item import ItemCreate

    litre = crud_unit.create_unit(db, UnitCreate(name="litre"))
    oil = crud_item.create_item(db, ItemCreate(name="Oil", base_unit_id=litre.id))
    with pytest.raises(ValidationError):
        crud_item_detail.create_item_detail(
            db, ItemDetailCreate(item_id=oil.id, unit_id=litre.id, conversion_factor=5)
        )
    assert crud_item_detail.get_item_details(db, item_id=oil.id) == []


def test_duplicate_code_on_another_unit_conflicts(db, rice):
    sack = crud_unit.create_unit(db, UnitCreate(name="Sack-50kg"))
    with pytest.raises(ConflictError):
        crud_item_detail.create_item_detail(
            db, ItemDetailCreate(item_id=rice["item"].id, unit_id=sack.id, conversion_factor=50, code="BAG-25")
        )


def test_disabled_packaging_frees_its_code_and_unit(db, rice):
    crud_item_detail.disable_item_detail(db, rice["bag_detail"].id)

    replacement = crud_item_detail.create_item_detail(
        db, ItemDetailCreate(item_id=rice["item"].id, unit_id=rice["bag"].id, conversion_factor=20, code="BAG-25")
    )
    assert replacement.id != rice["bag_detail"].id
    assert resolve_conversion_factor(db, rice["item"].id, rice["bag"].id) == 20


def test_packaging_in_a_disabled_unit_no_longer_resolves(db, rice):
    crud_unit.disable_unit(db, rice["bag"].id)
    with pytest.raises(NotFoundError):
        resolve_conversion_factor(db, rice["item"].id, rice["bag"].id)


def test_duplicate_item_unit_combination_conflicts(db, rice):
    with pytest.raises(ConflictError):
        crud_item_detail.create_item_detail(
            db, ItemDetailCreate(item_id=rice["item"].id, unit_id=rice["bag"].id, conversion_factor=50)
        )


def test_generated_codes_follow_sequence(db, rice):
    sack = crud_unit.create_unit(db, UnitCreate(name="Sack-50kg"))
    detail = crud_item_detail.create_item_detail(
        db, ItemDetailCreate(item_id=rice["item"].id, unit_id=sack.id, conversion_factor=50)
    )
    assert detail.code == "CAM-0001"
    assert crud_item_detail.generate_item_detail_code(db) == "CAM-0002"


def test_base_unit_packaging_cannot_be_disabled(db, rice):
    with pytest.raises(ValidationError):
        crud_item_detail.disable_item_detail(db, rice["base_detail"].id)

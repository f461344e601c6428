import pytest
from decimal import Decimal

from crud import inventory_log as crud_inventory_log
from crud.inventory_log import (
    INITIAL_STOCK,
    PURCHASE,
    STOCK_ADJUSTMENT_IN,
    STOCK_ADJUSTMENT_OUT,
    VENDOR_RETURN,
    record_transaction,
    current_stock,
)
from models.inventory_log import InventoryLog
from schemas.inventory_log import InventoryLogCreate
from utils.errors import ValidationError


def manual(rice, transaction_type, quantity, unit="kg", **kwargs):
    return InventoryLogCreate(
        item_id=rice["item"].id,
        unit_id=rice[unit].id,
        transaction_type=transaction_type,
        quantity=Decimal(str(quantity)),
        **kwargs,
    )


def test_bag_movement_is_stored_in_base_units(db, rice):
    log = crud_inventory_log.create_manual_log_entry(db, manual(rice, INITIAL_STOCK, 2, unit="bag"), user_id="tester")

    assert log.quantity_in_base_units == 50
    assert log.conversion_factor_applied == 25
    assert log.item_detail_id == rice["bag_detail"].id
    assert log.user_id == "tester"
    assert current_stock(db, rice["item"].id) == 50


def test_stock_is_signed_sum_of_movements(db, rice):
    crud_inventory_log.create_manual_log_entry(db, manual(rice, INITIAL_STOCK, 2, unit="bag"))
    crud_inventory_log.create_manual_log_entry(db, manual(rice, STOCK_ADJUSTMENT_OUT, 10))
    crud_inventory_log.create_manual_log_entry(db, manual(rice, STOCK_ADJUSTMENT_IN, 3))

    assert current_stock(db, rice["item"].id) == 43


def test_fractional_quantity_truncates(db, rice):
    log = crud_inventory_log.create_manual_log_entry(db, manual(rice, INITIAL_STOCK, "1.5", unit="bag"))
    assert log.quantity_in_base_units == 37


def test_quantity_below_one_base_unit_is_rejected(db, rice):
    with pytest.raises(ValidationError):
        crud_inventory_log.create_manual_log_entry(db, manual(rice, INITIAL_STOCK, "0.04"))
    assert db.query(InventoryLog).count() == 0


def test_non_positive_quantity_is_rejected(db, rice):
    with pytest.raises(ValidationError):
        crud_inventory_log.create_manual_log_entry(db, manual(rice, STOCK_ADJUSTMENT_IN, 0))


def test_outbound_movement_cannot_exceed_stock(db, rice):
    crud_inventory_log.create_manual_log_entry(db, manual(rice, INITIAL_STOCK, 5))

    with pytest.raises(ValidationError):
        crud_inventory_log.create_manual_log_entry(db, manual(rice, STOCK_ADJUSTMENT_OUT, 6))

    assert current_stock(db, rice["item"].id) == 5
    assert db.query(InventoryLog).count() == 1


@pytest.mark.parametrize("transaction_type", ["Purchase", "Sale", "Shrinkage"])
def test_document_and_unknown_types_are_not_manual(db, rice, transaction_type):
    with pytest.raises(ValidationError):
        crud_inventory_log.create_manual_log_entry(db, manual(rice, transaction_type, 1))


def test_vendor_return_rejects_cost_price(db, rice):
    crud_inventory_log.create_manual_log_entry(db, manual(rice, INITIAL_STOCK, 5))
    with pytest.raises(ValidationError):
        crud_inventory_log.create_manual_log_entry(
            db, manual(rice, VENDOR_RETURN, 1, cost_price_per_base_unit=Decimal("1.00"))
        )


def test_record_transaction_leaves_commit_to_caller(db, rice):
    record_transaction(
        db,
        item_id=rice["item"].id,
        unit_id=rice["kg"].id,
        transaction_type=PURCHASE,
        quantity=4,
        reference_code="PUR-00001",
    )
    db.rollback()
    assert current_stock(db, rice["item"].id) == 0


def test_average_cost_weighs_costed_inbound_rows(db, rice):
    crud_inventory_log.create_manual_log_entry(
        db, manual(rice, INITIAL_STOCK, 10, cost_price_per_base_unit=Decimal("1.00"))
    )
    crud_inventory_log.create_manual_log_entry(
        db, manual(rice, INITIAL_STOCK, 30, cost_price_per_base_unit=Decimal("2.00"))
    )
    # Uncosted rows do not dilute the average
    crud_inventory_log.create_manual_log_entry(db, manual(rice, STOCK_ADJUSTMENT_IN, 60))

    assert crud_inventory_log.average_cost_per_base_unit(db, rice["item"].id) == Decimal("1.7500")


def test_stock_breakdown_lists_every_packaging(db, rice):
    crud_inventory_log.create_manual_log_entry(db, manual(rice, INITIAL_STOCK, 3, unit="bag"))

    stock = crud_inventory_log.get_stock_breakdown(db, rice["item"].id)
    assert stock.quantity_in_base_units == 75
    assert stock.base_unit_name == "kg"
    assert [u.code for u in stock.units] == ["RICE-KG", "BAG-25"]
    assert stock.units[1].quantity == Decimal("3.0000")


def test_logs_filter_by_type_and_paginate(db, rice):
    crud_inventory_log.create_manual_log_entry(db, manual(rice, INITIAL_STOCK, 10))
    for _ in range(3):
        crud_inventory_log.create_manual_log_entry(db, manual(rice, STOCK_ADJUSTMENT_OUT, 1))

    logs, total = crud_inventory_log.get_logs(db, transaction_type=STOCK_ADJUSTMENT_OUT, page=1, page_size=2)
    assert total == 3
    assert len(logs) == 2
    assert all(log.transaction_type == STOCK_ADJUSTMENT_OUT for log in logs)

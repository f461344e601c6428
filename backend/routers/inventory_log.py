from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date
from database import get_db
from schemas.inventory_log import InventoryLog, InventoryLogCreate, InventoryLogList
from crud import inventory_log as crud_inventory_log
from utils.auth_utils import get_current_user, get_user_identifier
from utils.errors import ValidationError
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/inventory-logs",
    tags=["Inventory Logs"],
)

@router.post("/", response_model=InventoryLog, status_code=status.HTTP_201_CREATED)
def create_inventory_log(
    entry: InventoryLogCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    """Manual stock movement: adjustments, returns and opening stock."""
    try:
        return crud_inventory_log.create_manual_log_entry(db, entry, get_user_identifier(user))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Error recording inventory movement for item {entry.item_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while recording the inventory movement.")

@router.get("/", response_model=InventoryLogList)
def list_inventory_logs(
    item_id: Optional[int] = None,
    user_id: Optional[str] = None,
    transaction_type: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    logs, total_count = crud_inventory_log.get_logs(
        db,
        item_id=item_id,
        user_id=user_id,
        transaction_type=transaction_type,
        start_date=start_date,
        end_date=end_date,
        page=page,
        page_size=page_size,
    )
    return InventoryLogList(items=logs, total_count=total_count, page=page, page_size=page_size)

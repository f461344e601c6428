from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date
from database import get_db
from schemas.purchase import Purchase, PurchaseCreate, PurchaseList
from crud import purchase as crud_purchase
from utils.auth_utils import get_current_user, get_user_identifier
from utils.errors import ValidationError
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/purchases",
    tags=["Purchases"],
)

@router.post("/", response_model=Purchase, status_code=status.HTTP_201_CREATED)
def create_purchase(
    purchase: PurchaseCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_purchase.create_purchase(db, purchase, get_user_identifier(user))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Error creating purchase: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while creating the purchase.")

@router.get("/", response_model=PurchaseList)
def list_purchases(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    purchases, total_count = crud_purchase.get_purchases(
        db, start_date=start_date, end_date=end_date, page=page, page_size=page_size
    )
    return PurchaseList(items=purchases, total_count=total_count, page=page, page_size=page_size)

@router.get("/{purchase_id}", response_model=Purchase)
def get_purchase(
    purchase_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    db_purchase = crud_purchase.get_purchase(db, purchase_id)
    if not db_purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")
    return db_purchase

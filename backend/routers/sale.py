from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date
from database import get_db
from schemas.sale import Sale, SaleCreate, SaleList
from crud import sale as crud_sale
from utils.auth_utils import get_current_user, get_user_identifier
from utils.errors import ValidationError
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/sales",
    tags=["Sales"],
)

@router.post("/", response_model=Sale, status_code=status.HTTP_201_CREATED)
def create_sale(
    sale: SaleCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_sale.create_sale(db, sale, get_user_identifier(user))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Error creating sale: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while creating the sale.")

@router.get("/", response_model=SaleList)
def list_sales(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    sales, total_count = crud_sale.get_sales(
        db, start_date=start_date, end_date=end_date, page=page, page_size=page_size
    )
    return SaleList(items=sales, total_count=total_count, page=page, page_size=page_size)

@router.get("/{sale_id}", response_model=Sale)
def get_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    db_sale = crud_sale.get_sale(db, sale_id)
    if not db_sale:
        raise HTTPException(status_code=404, detail="Sale not found")
    return db_sale

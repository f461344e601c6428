from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from database import get_db
from schemas.currency_exchange import CurrencyExchange, CurrencyExchangeCreate
from crud import currency_exchange as crud_exchange
from utils.auth_utils import get_current_user, get_user_identifier
from utils.errors import NotFoundError, ValidationError
import logging

logger = logging.getLogger("currency_exchange")

router = APIRouter(
    prefix="/currency-exchanges",
    tags=["Currency Exchange"],
)

@router.post("/", response_model=CurrencyExchange, status_code=status.HTTP_201_CREATED)
def create_exchange(
    exchange: CurrencyExchangeCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_exchange.create_exchange(db, exchange, get_user_identifier(user))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Error creating currency exchange at '{exchange.bank_location}': {e}")
        raise HTTPException(status_code=500, detail="Internal server error while creating the exchange.")

@router.get("/", response_model=List[CurrencyExchange])
def list_exchanges(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    include_disabled: bool = False,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    return crud_exchange.get_exchanges(db, start_date=start_date, end_date=end_date, include_disabled=include_disabled)

@router.delete("/{exchange_id}", status_code=status.HTTP_204_NO_CONTENT)
def disable_exchange(
    exchange_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    if not crud_exchange.disable_exchange(db, exchange_id, get_user_identifier(user)):
        raise HTTPException(status_code=404, detail="Currency exchange not found")

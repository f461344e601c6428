from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database import get_db
from schemas.financial_settings import FinancialSettings, FinancialSettingsUpdate
from crud import financial_settings as crud_settings
from utils.auth_utils import get_current_user, get_user_identifier
from utils.errors import ValidationError
import logging

logger = logging.getLogger("financial_settings")

router = APIRouter(
    prefix="/financial-settings",
    tags=["Financial Settings"],
)

@router.get("/", response_model=FinancialSettings)
def get_posting_accounts(
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    """Accounts used by the automatic purchase and sale journal pages."""
    return crud_settings.get_financial_settings(db)

@router.patch("/", response_model=FinancialSettings)
def update_posting_accounts(
    settings_update: FinancialSettingsUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_settings.update_financial_settings(db, settings_update, get_user_identifier(user))
    except ValidationError as e:
        logger.warning(f"Rejected posting account change: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating posting accounts: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while updating the posting accounts.")

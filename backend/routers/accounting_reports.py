from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import Optional
from decimal import Decimal
from datetime import date
from database import get_db
from schemas.accounting_reports import TrialBalanceReport, BalanceSheet, ProfitAndLoss
from crud import accounting_reports as crud_reports
from utils.auth_utils import get_current_user
from utils.dates import today
from utils.errors import ValidationError
import logging

logger = logging.getLogger("accounting_reports")

router = APIRouter(
    prefix="/accounting-reports",
    tags=["Accounting Reports"],
)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _xlsx_response(output, filename: str) -> StreamingResponse:
    return StreamingResponse(
        output,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/trial-balance", response_model=TrialBalanceReport)
def get_trial_balance(
    as_of_date: Optional[date] = None,
    report_currency: Optional[str] = None,
    exchange_rate: Optional[Decimal] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_reports.compute_trial_balance(db, as_of_date or today(), report_currency, exchange_rate)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Error generating trial balance as of {as_of_date}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while generating the trial balance.")

@router.get("/balance-sheet", response_model=BalanceSheet)
def get_balance_sheet(
    as_of_date: Optional[date] = None,
    report_currency: Optional[str] = None,
    exchange_rate: Optional[Decimal] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_reports.compute_balance_sheet(db, as_of_date or today(), report_currency, exchange_rate)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Error generating balance sheet as of {as_of_date}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while generating the balance sheet.")

@router.get("/profit-and-loss", response_model=ProfitAndLoss)
def get_profit_and_loss(
    as_of_date: Optional[date] = None,
    report_currency: Optional[str] = None,
    exchange_rate: Optional[Decimal] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_reports.compute_profit_and_loss(db, as_of_date or today(), report_currency, exchange_rate)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Error generating profit and loss as of {as_of_date}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while generating the profit and loss statement.")

@router.get("/trial-balance/export")
def export_trial_balance(
    as_of_date: Optional[date] = None,
    report_currency: Optional[str] = None,
    exchange_rate: Optional[Decimal] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    as_of_date = as_of_date or today()
    try:
        report = crud_reports.compute_trial_balance(db, as_of_date, report_currency, exchange_rate)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    output = crud_reports.export_trial_balance_xlsx(report)
    return _xlsx_response(output, f"trial_balance_{as_of_date.isoformat()}.xlsx")

@router.get("/balance-sheet/export")
def export_balance_sheet(
    as_of_date: Optional[date] = None,
    report_currency: Optional[str] = None,
    exchange_rate: Optional[Decimal] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    as_of_date = as_of_date or today()
    try:
        report = crud_reports.compute_balance_sheet(db, as_of_date, report_currency, exchange_rate)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    output = crud_reports.export_balance_sheet_xlsx(report)
    return _xlsx_response(output, f"balance_sheet_{as_of_date.isoformat()}.xlsx")

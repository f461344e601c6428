from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from database import get_db
from schemas.account import Account, AccountCreate, AccountUpdate, AccountLedger
from crud import account as crud_account
from utils.auth_utils import get_current_user, get_user_identifier
from utils.errors import ConflictError, ValidationError

router = APIRouter(
    prefix="/accounts",
    tags=["Chart of Accounts"],
)

@router.post("/", response_model=Account, status_code=status.HTTP_201_CREATED)
def create_account(
    account: AccountCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_account.create_account(db, account, get_user_identifier(user))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.post("/initialize")
def initialize_accounts(
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    """Seeds the default categories and posting accounts; existing rows are kept."""
    created = crud_account.initialize_default_chart(db, get_user_identifier(user))
    return {"message": "Default chart of accounts initialized", "created": created}

@router.get("/", response_model=List[Account])
def list_accounts(
    category_id: Optional[int] = None,
    include_disabled: bool = False,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    return crud_account.get_accounts(db, category_id=category_id, include_disabled=include_disabled)

@router.get("/number/{account_number}/ledger", response_model=AccountLedger)
def get_account_ledger(
    account_number: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    ref: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    ledger = crud_account.get_account_ledger(
        db,
        account_number,
        start_date=start_date,
        end_date=end_date,
        ref_contains=ref,
        page=page,
        page_size=page_size,
    )
    if not ledger:
        raise HTTPException(status_code=404, detail=f"Account {account_number} not found")
    return ledger

@router.get("/{account_id}", response_model=Account)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    account = crud_account.get_account(db, account_id)
    if not account:
        raise HTTPException(status_code=404, detail=f"Account with id {account_id} not found")
    return account

@router.patch("/{account_id}", response_model=Account)
def update_account(
    account_id: int,
    account: AccountUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        db_account = crud_account.update_account(db, account_id, account, get_user_identifier(user))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not db_account:
        raise HTTPException(status_code=404, detail=f"Account with id {account_id} not found")
    return db_account

@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def disable_account(
    account_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        if not crud_account.disable_account(db, account_id, get_user_identifier(user)):
            raise HTTPException(status_code=404, detail=f"Account with id {account_id} not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

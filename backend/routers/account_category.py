from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from database import get_db
from schemas.account import AccountCategory, AccountCategoryCreate, AccountSubCategory, AccountSubCategoryCreate
from crud import account as crud_account
from utils.auth_utils import get_current_user, get_user_identifier
from utils.errors import ConflictError, ValidationError

router = APIRouter(
    prefix="/account-categories",
    tags=["Chart of Accounts"],
)

@router.post("/", response_model=AccountCategory, status_code=status.HTTP_201_CREATED)
def create_category(
    category: AccountCategoryCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_account.create_category(db, category, get_user_identifier(user))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

@router.get("/", response_model=List[AccountCategory])
def list_categories(
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    return crud_account.get_categories(db)

@router.post("/sub-categories", response_model=AccountSubCategory, status_code=status.HTTP_201_CREATED)
def create_sub_category(
    sub_category: AccountSubCategoryCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_account.create_sub_category(db, sub_category, get_user_identifier(user))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/sub-categories", response_model=List[AccountSubCategory])
def list_sub_categories(
    category_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    return crud_account.get_sub_categories(db, category_id=category_id)

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from database import get_db
from schemas.item_detail import ItemDetail, ItemDetailCreate, ItemDetailUpdate
from crud import item_detail as crud_item_detail
from utils.auth_utils import get_current_user, get_user_identifier
from utils.errors import ConflictError, ValidationError

router = APIRouter(
    prefix="/item-details",
    tags=["Item Details"],
)

@router.post("/", response_model=ItemDetail, status_code=status.HTTP_201_CREATED)
def create_item_detail(
    detail: ItemDetailCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_item_detail.create_item_detail(db, detail, get_user_identifier(user))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/", response_model=List[ItemDetail])
def list_item_details(
    item_id: Optional[int] = None,
    include_disabled: bool = False,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    return crud_item_detail.get_item_details(db, item_id=item_id, include_disabled=include_disabled)

@router.get("/code/{code}", response_model=ItemDetail)
def get_item_detail_by_code(
    code: str,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    detail = crud_item_detail.get_item_detail_by_code(db, code)
    if not detail:
        raise HTTPException(status_code=404, detail=f"Item detail with code '{code}' not found")
    return detail

@router.get("/{item_detail_id}", response_model=ItemDetail)
def get_item_detail(
    item_detail_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    detail = crud_item_detail.get_item_detail(db, item_detail_id)
    if not detail:
        raise HTTPException(status_code=404, detail="Item detail not found")
    return detail

@router.patch("/{item_detail_id}", response_model=ItemDetail)
def update_item_detail(
    item_detail_id: int,
    detail: ItemDetailUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        db_detail = crud_item_detail.update_item_detail(db, item_detail_id, detail, get_user_identifier(user))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not db_detail:
        raise HTTPException(status_code=404, detail="Item detail not found")
    return db_detail

@router.delete("/{item_detail_id}", status_code=status.HTTP_204_NO_CONTENT)
def disable_item_detail(
    item_detail_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        if not crud_item_detail.disable_item_detail(db, item_detail_id, get_user_identifier(user)):
            raise HTTPException(status_code=404, detail="Item detail not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

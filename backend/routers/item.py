from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from database import get_db
from schemas.item import Item, ItemCreate, ItemUpdate, ItemStock
from crud import item as crud_item
from crud import inventory_log as crud_inventory_log
from utils.auth_utils import get_current_user, get_user_identifier
from utils.errors import ConflictError, ValidationError

router = APIRouter(
    prefix="/items",
    tags=["Items"],
)

@router.post("/", response_model=Item, status_code=status.HTTP_201_CREATED)
def create_item(
    item: ItemCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_item.create_item(db, item, get_user_identifier(user))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/", response_model=List[Item])
def list_items(
    include_disabled: bool = False,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    return crud_item.get_items(db, include_disabled=include_disabled, skip=skip, limit=limit)

@router.get("/{item_id}", response_model=Item)
def get_item(
    item_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    db_item = crud_item.get_item(db, item_id)
    if not db_item:
        raise HTTPException(status_code=404, detail="Item not found")
    return db_item

@router.get("/{item_id}/stock", response_model=ItemStock)
def get_item_stock(
    item_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    stock = crud_inventory_log.get_stock_breakdown(db, item_id)
    if not stock:
        raise HTTPException(status_code=404, detail="Item not found")
    return stock

@router.patch("/{item_id}", response_model=Item)
def update_item(
    item_id: int,
    item: ItemUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        db_item = crud_item.update_item(db, item_id, item, get_user_identifier(user))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not db_item:
        raise HTTPException(status_code=404, detail="Item not found")
    return db_item

@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def disable_item(
    item_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    if not crud_item.disable_item(db, item_id, get_user_identifier(user)):
        raise HTTPException(status_code=404, detail="Item not found")

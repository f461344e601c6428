from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from database import get_db
from schemas.unit import Unit, UnitCreate, UnitUpdate
from crud import unit as crud_unit
from utils.auth_utils import get_current_user, get_user_identifier
from utils.errors import ConflictError, ValidationError

router = APIRouter(
    prefix="/units",
    tags=["Units"],
)

@router.post("/", response_model=Unit, status_code=status.HTTP_201_CREATED)
def create_unit(
    unit: UnitCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        return crud_unit.create_unit(db, unit, get_user_identifier(user))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

@router.get("/", response_model=List[Unit])
def list_units(
    include_disabled: bool = False,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    return crud_unit.get_units(db, include_disabled=include_disabled)

@router.get("/{unit_id}", response_model=Unit)
def get_unit(
    unit_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    db_unit = crud_unit.get_unit(db, unit_id)
    if not db_unit:
        raise HTTPException(status_code=404, detail="Unit not found")
    return db_unit

@router.patch("/{unit_id}", response_model=Unit)
def update_unit(
    unit_id: int,
    unit: UnitUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        db_unit = crud_unit.update_unit(db, unit_id, unit, get_user_identifier(user))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not db_unit:
        raise HTTPException(status_code=404, detail="Unit not found")
    return db_unit

@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
def disable_unit(
    unit_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        if not crud_unit.disable_unit(db, unit_id, get_user_identifier(user)):
            raise HTTPException(status_code=404, detail="Unit not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

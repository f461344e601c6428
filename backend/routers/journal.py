from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date
from database import get_db
from schemas.journal import JournalPage, JournalPageCreate, JournalPageList
from crud import journal as crud_journal
from utils.auth_utils import get_current_user, get_user_identifier
from utils.errors import ValidationError
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/journal",
    tags=["Journal"],
)

@router.post("/", response_model=JournalPage, status_code=status.HTTP_201_CREATED)
def create_journal_page(
    page: JournalPageCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    try:
        db_page = crud_journal.create_journal_page(db, page, get_user_identifier(user))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Error creating journal page ({page.source}): {e}")
        raise HTTPException(status_code=500, detail="Internal server error while creating the journal page.")
    return crud_journal.to_schema(db, db_page)

@router.get("/", response_model=JournalPageList)
def list_journal_pages(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    ref: Optional[str] = None,
    source: Optional[str] = None,
    description: Optional[str] = None,
    user_id: Optional[str] = None,
    include_disabled: bool = False,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    pages, total_count = crud_journal.get_journal_pages(
        db,
        start_date=start_date,
        end_date=end_date,
        ref_contains=ref,
        source_contains=source,
        description_contains=description,
        user_id=user_id,
        include_disabled=include_disabled,
        page=page,
        page_size=page_size,
    )
    return JournalPageList(
        items=[crud_journal.to_schema(db, p) for p in pages],
        total_count=total_count,
        page=page,
        page_size=page_size,
    )

@router.get("/{page_id}", response_model=JournalPage)
def get_journal_page(
    page_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    db_page = crud_journal.get_journal_page(db, page_id)
    if not db_page:
        raise HTTPException(status_code=404, detail="Journal page not found")
    return crud_journal.to_schema(db, db_page)

@router.delete("/{page_id}", status_code=status.HTTP_204_NO_CONTENT)
def disable_journal_page(
    page_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    if not crud_journal.disable_journal_page(db, page_id, get_user_identifier(user)):
        raise HTTPException(status_code=404, detail="Journal page not found")

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.highlight import Highlight
from app.models.user import User
from app.schemas.highlight import (
    Highlight as HighlightSchema,
    HighlightCreate,
    HighlightUpdate,
)

router = APIRouter()


def _get_highlight_or_404(db: Session, highlight_id: int) -> Highlight:
    highlight = db.query(Highlight).filter(Highlight.id == highlight_id).first()
    if not highlight:
        raise HTTPException(status_code=404, detail="Highlight not found")
    return highlight


@router.get("/", response_model=List[HighlightSchema])
def get_highlights(db: Session = Depends(get_db)):
    """Get all highlights, newest first."""
    return (
        db.query(Highlight)
        .order_by(Highlight.created_at.desc(), Highlight.id.desc())
        .all()
    )


@router.get("/active", response_model=List[HighlightSchema])
def get_active_highlights(db: Session = Depends(get_db)):
    return (
        db.query(Highlight)
        .filter(Highlight.active == True)
        .order_by(Highlight.created_at.desc(), Highlight.id.desc())
        .all()
    )


@router.get("/{highlight_id}", response_model=HighlightSchema)
def get_highlight(highlight_id: int, db: Session = Depends(get_db)):
    return _get_highlight_or_404(db, highlight_id)


@router.post("/", response_model=HighlightSchema, status_code=status.HTTP_201_CREATED)
def create_highlight(
    highlight: HighlightCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_highlight = Highlight(**highlight.model_dump())
    db.add(db_highlight)
    db.commit()
    db.refresh(db_highlight)
    return db_highlight


@router.put("/{highlight_id}", response_model=HighlightSchema)
def update_highlight(
    highlight_id: int,
    highlight_update: HighlightUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    highlight = _get_highlight_or_404(db, highlight_id)

    update_data = highlight_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        # title, type and active cannot be cleared
        if value is None and key in ("title", "type", "active"):
            continue
        setattr(highlight, key, value)

    db.commit()
    db.refresh(highlight)
    return highlight


@router.delete("/{highlight_id}")
def delete_highlight(
    highlight_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    highlight = _get_highlight_or_404(db, highlight_id)
    db.delete(highlight)
    db.commit()

    return {"message": "Highlight deleted successfully"}

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.author import Author
from app.models.user import User
from app.schemas.author import (
    Author as AuthorSchema,
    AuthorCreate,
    AuthorUpdate,
)

router = APIRouter()


def _get_author_or_404(db: Session, author_id: int) -> Author:
    author = db.query(Author).filter(Author.id == author_id).first()
    if not author:
        raise HTTPException(status_code=404, detail="Author not found")
    return author


@router.get("/", response_model=List[AuthorSchema])
def get_authors(db: Session = Depends(get_db)):
    """Get all authors ordered by name."""
    return db.query(Author).order_by(Author.name).all()


@router.get("/{author_id}", response_model=AuthorSchema)
def get_author(author_id: int, db: Session = Depends(get_db)):
    return _get_author_or_404(db, author_id)


@router.post("/", response_model=AuthorSchema, status_code=status.HTTP_201_CREATED)
def create_author(
    author: AuthorCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_author = Author(**author.model_dump())
    db.add(db_author)
    db.commit()
    db.refresh(db_author)
    return db_author


@router.put("/{author_id}", response_model=AuthorSchema)
def update_author(
    author_id: int,
    author_update: AuthorUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    author = _get_author_or_404(db, author_id)

    update_data = author_update.model_dump(exclude_unset=True)
    if update_data.get("name", "") is None:
        del update_data["name"]
    for key, value in update_data.items():
        setattr(author, key, value)

    db.commit()
    db.refresh(author)
    return author


@router.delete("/{author_id}")
def delete_author(
    author_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete an author. Blogs credited to the author keep existing without one."""
    author = _get_author_or_404(db, author_id)
    db.delete(author)
    db.commit()

    return {"message": "Author deleted successfully"}

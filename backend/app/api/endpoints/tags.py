from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging

from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.tag import Tag, DEFAULT_TAG_COLOR
from app.models.user import User
from app.schemas.tag import Tag as TagSchema, TagCreate, TagUpdate

logger = logging.getLogger(__name__)
router = APIRouter()


def _name_taken(db: Session, name: str, exclude_id: int = None) -> bool:
    query = db.query(Tag.id).filter(Tag.name == name)
    if exclude_id is not None:
        query = query.filter(Tag.id != exclude_id)
    return query.first() is not None


@router.get("/", response_model=List[TagSchema])
def get_tags(db: Session = Depends(get_db)):
    """Get all tags ordered by name."""
    return db.query(Tag).order_by(Tag.name).all()


@router.get("/{tag_id}", response_model=TagSchema)
def get_tag(tag_id: int, db: Session = Depends(get_db)):
    tag = db.query(Tag).filter(Tag.id == tag_id).first()
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    return tag


@router.post("/", response_model=TagSchema, status_code=status.HTTP_201_CREATED)
def create_tag(
    tag: TagCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a tag. Tag names are unique."""
    if _name_taken(db, tag.name):
        raise HTTPException(status_code=409, detail=f"Tag '{tag.name}' already exists")

    db_tag = Tag(name=tag.name, color=tag.color or DEFAULT_TAG_COLOR)
    db.add(db_tag)
    db.commit()
    db.refresh(db_tag)

    logger.info(f"Created tag '{db_tag.name}' (id={db_tag.id})")
    return db_tag


@router.put("/{tag_id}", response_model=TagSchema)
def update_tag(
    tag_id: int,
    tag_update: TagUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tag = db.query(Tag).filter(Tag.id == tag_id).first()
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")

    update_data = tag_update.model_dump(exclude_unset=True)
    if update_data.get("name", "") is None:
        del update_data["name"]
    if "name" in update_data and _name_taken(db, update_data["name"], tag_id):
        raise HTTPException(
            status_code=409, detail=f"Tag '{update_data['name']}' already exists"
        )
    if "color" in update_data and not update_data["color"]:
        update_data["color"] = DEFAULT_TAG_COLOR

    for key, value in update_data.items():
        setattr(tag, key, value)

    db.commit()
    db.refresh(tag)
    return tag


@router.delete("/{tag_id}")
def delete_tag(
    tag_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a tag; it is detached from every blog that carried it."""
    tag = db.query(Tag).filter(Tag.id == tag_id).first()
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")

    db.delete(tag)
    db.commit()

    return {"message": "Tag deleted successfully"}

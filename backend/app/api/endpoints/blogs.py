from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.core.database import get_db
from app.core.auth import get_current_user
from app.core.exceptions import (
    ContentValidationError,
    DuplicateEntityError,
    EntityNotFoundError,
)
from app.models.user import User
from app.schemas.blog import Blog as BlogSchema, BlogCreate, BlogUpdate
from app.services.blog_service import BlogService
from app.api.validation import CategoryParam, LimitParam, PublishedParam, SkipParam

router = APIRouter()


@router.get("/", response_model=List[BlogSchema])
def get_blogs(
    published: Optional[bool] = PublishedParam,
    category: Optional[str] = CategoryParam,
    skip: int = SkipParam,
    limit: int = LimitParam,
    db: Session = Depends(get_db),
):
    """List blogs newest first, each with logo, author, tags and references."""
    return BlogService(db).list_blogs(
        published=published, category=category, skip=skip, limit=limit
    )


@router.get("/{identifier}", response_model=BlogSchema)
def get_blog(identifier: str, db: Session = Depends(get_db)):
    """
    Get a single blog by numeric id or by slug.

    Reference articles only include blogs that are currently published.
    """
    try:
        return BlogService(db).get_blog(identifier)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Blog not found")


@router.post("/", response_model=BlogSchema, status_code=status.HTTP_201_CREATED)
def create_blog(
    blog: BlogCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a blog with its tags and reference articles in one transaction."""
    try:
        return BlogService(db).create_blog(blog)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateEntityError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/{blog_id}", response_model=BlogSchema)
def update_blog(
    blog_id: int,
    blog_update: BlogUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Update the provided fields of a blog.

    ``tags`` and ``referenceArticles``, when present, replace the existing
    collections entirely. The slug is regenerated only when the title changes.
    """
    try:
        return BlogService(db).update_blog(blog_id, blog_update)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ContentValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateEntityError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{blog_id}")
def delete_blog(
    blog_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a blog; its tag and reference links are removed with it."""
    try:
        BlogService(db).delete_blog(blog_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Blog not found")

    return {"message": "Blog deleted successfully"}

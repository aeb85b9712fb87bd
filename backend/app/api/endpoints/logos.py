from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.logo import Logo
from app.models.user import User
from app.schemas.logo import Logo as LogoSchema, LogoCreate, LogoUpdate

router = APIRouter()


@router.get("/", response_model=List[LogoSchema])
def get_logos(db: Session = Depends(get_db)):
    """Get all logos, newest first."""
    return db.query(Logo).order_by(Logo.created_at.desc(), Logo.id.desc()).all()


@router.get("/{logo_id}", response_model=LogoSchema)
def get_logo(logo_id: int, db: Session = Depends(get_db)):
    logo = db.query(Logo).filter(Logo.id == logo_id).first()
    if not logo:
        raise HTTPException(status_code=404, detail="Logo not found")
    return logo


@router.post("/", response_model=LogoSchema, status_code=status.HTTP_201_CREATED)
def create_logo(
    logo: LogoCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_logo = Logo(**logo.model_dump())
    db.add(db_logo)
    db.commit()
    db.refresh(db_logo)
    return db_logo


@router.put("/{logo_id}", response_model=LogoSchema)
def update_logo(
    logo_id: int,
    logo_update: LogoUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    logo = db.query(Logo).filter(Logo.id == logo_id).first()
    if not logo:
        raise HTTPException(status_code=404, detail="Logo not found")

    update_data = logo_update.model_dump(exclude_unset=True)
    if update_data.get("name", "") is None:
        del update_data["name"]
    for key, value in update_data.items():
        setattr(logo, key, value)

    db.commit()
    db.refresh(logo)
    return logo


@router.delete("/{logo_id}")
def delete_logo(
    logo_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a logo. Blogs showing it lose the logo but are otherwise untouched."""
    logo = db.query(Logo).filter(Logo.id == logo_id).first()
    if not logo:
        raise HTTPException(status_code=404, detail="Logo not found")

    db.delete(logo)
    db.commit()

    return {"message": "Logo deleted successfully"}

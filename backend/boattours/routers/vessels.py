# backend/boattours/routers/vessels.py
# DELETE = 405 (retire a vessel with status=inactive)

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Vessels as DBVessels
from ..schemas.vessels import VesselCreate, VesselRead, VesselUpdate

router = APIRouter(prefix="/vessels", tags=["vessels"])


@router.get("/", response_model=list[VesselRead])
def list_vessels(db: Session = Depends(get_db)):
    return db.query(DBVessels).order_by(DBVessels.rotation_order, DBVessels.id).all()


@router.get("/{id}", response_model=VesselRead)
def get_vessel(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBVessels, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=VesselRead, status_code=status.HTTP_201_CREATED)
def create_vessel(
    data: VesselCreate,
    db: Session = Depends(get_db),
):
    obj = DBVessels(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/{id}", response_model=VesselRead)
def update_vessel(
    id: int,
    data: VesselUpdate,
    db: Session = Depends(get_db),
):
    """Edit a vessel. Existing bookings keep their vessel."""
    obj = db.get(DBVessels, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )

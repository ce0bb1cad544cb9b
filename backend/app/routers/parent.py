"""
Router parent : enfants liés au compte.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_route_group
from app.models.user import User
from app.schemas.relationship import ChildResponse
from app.services import relationship_service

router = APIRouter(
    prefix="/api/parent",
    tags=["Parent"],
    dependencies=[Depends(require_route_group("parent"))],
)


@router.get("/children", response_model=List[ChildResponse], summary="Mes enfants")
def get_my_children(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return relationship_service.get_parent_children(db, current_user.id)

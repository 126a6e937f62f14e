"""
Admin API routes for the show catalogue
"""
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from curtaincall.api.routes.shows import ShowResponse
from curtaincall.core.database import get_db
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.services.show_service import ShowService

router = APIRouter(prefix="/api/admin/shows", tags=["admin"])
logger = LoggingConfig.get_logger(__name__)


class ShowCreateRequest(BaseModel):
    """Request model for creating a show"""
    title: str = Field(..., description="Show title")
    description: str = Field(..., description="Show description")
    genre: str = Field(..., description="Genre")
    venue: str = Field(..., description="Venue")
    status: str = Field("upcoming", description="upcoming, active, closed or ended")
    cast: Union[str, List[str]] = Field("", description="Comma-separated names or a list")
    schedule: Union[str, List[str]] = Field(
        "", description="Comma-separated ISO-8601 UTC datetimes (YYYY-MM-DDTHH:mm:ssZ) or a list"
    )


class ShowUpdateRequest(BaseModel):
    """Request model for updating a show; omitted fields are left alone"""
    title: Optional[str] = None
    description: Optional[str] = None
    genre: Optional[str] = None
    venue: Optional[str] = None
    status: Optional[str] = None
    cast: Optional[Union[str, List[str]]] = None
    schedule: Optional[Union[str, List[str]]] = None


@router.get("", response_model=List[ShowResponse])
async def list_shows(
    search: Optional[str] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List every show regardless of status"""
    return [s.to_dict() for s in ShowService(db).list_admin(search=search, status=status)]


@router.post("", response_model=ShowResponse, status_code=201)
async def create_show(request: ShowCreateRequest, db: Session = Depends(get_db)):
    try:
        show = ShowService(db).create_show(request.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return show.to_dict()


@router.put("/{show_id}", response_model=ShowResponse)
async def update_show(show_id: str, request: ShowUpdateRequest, db: Session = Depends(get_db)):
    try:
        show = ShowService(db).update_show(show_id, request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not show:
        raise HTTPException(status_code=404, detail=f"Show {show_id} not found")
    return show.to_dict()


@router.delete("/{show_id}")
async def delete_show(show_id: str, db: Session = Depends(get_db)):
    if not ShowService(db).delete_show(show_id):
        raise HTTPException(status_code=404, detail=f"Show {show_id} not found")
    return {"message": f"Show {show_id} deleted"}

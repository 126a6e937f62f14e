"""
Admin API routes for discount codes
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from curtaincall.core.database import get_db
from curtaincall.services.discount_service import DiscountService
from curtaincall.utils.datetime_utils import ensure_utc

router = APIRouter(prefix="/api/admin/discounts", tags=["admin"])


class DiscountCreateRequest(BaseModel):
    """Request model for creating a discount code"""
    code: str = Field(..., description="Code customers type at checkout")
    discount_percentage: int = Field(..., description="1 to 100")
    description: str = ""
    is_active: bool = True
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    usage_limit: Optional[int] = None


class DiscountUpdateRequest(BaseModel):
    """Request model for updating a discount; omitted fields are left alone"""
    code: Optional[str] = None
    discount_percentage: Optional[int] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    usage_limit: Optional[int] = None


def _utc_fields(data: dict) -> dict:
    for key in ("valid_from", "valid_until"):
        if data.get(key) is not None:
            data[key] = ensure_utc(data[key])
    return data


@router.get("")
async def list_discounts(db: Session = Depends(get_db)):
    return [d.to_dict() for d in DiscountService(db).list_discounts()]


@router.post("", status_code=201)
async def create_discount(request: DiscountCreateRequest, db: Session = Depends(get_db)):
    try:
        discount = DiscountService(db).create_discount(**_utc_fields(request.model_dump()))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return discount.to_dict()


@router.put("/{discount_id}")
async def update_discount(discount_id: str, request: DiscountUpdateRequest, db: Session = Depends(get_db)):
    try:
        discount = DiscountService(db).update_discount(
            discount_id, **_utc_fields(request.model_dump(exclude_unset=True))
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not discount:
        raise HTTPException(status_code=404, detail=f"Discount {discount_id} not found")
    return discount.to_dict()


@router.delete("/{discount_id}")
async def delete_discount(discount_id: str, db: Session = Depends(get_db)):
    if not DiscountService(db).delete_discount(discount_id):
        raise HTTPException(status_code=404, detail=f"Discount {discount_id} not found")
    return {"message": f"Discount {discount_id} deleted"}

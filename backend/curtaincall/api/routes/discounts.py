"""
API route for checking a discount code at checkout
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from curtaincall.core.database import get_db
from curtaincall.services.discount_service import DiscountService

router = APIRouter(prefix="/api/discount-codes", tags=["discounts"])


@router.get("/{code}")
async def lookup_discount_code(code: str, db: Session = Depends(get_db)):
    """Return the code and its percentage if it can be redeemed now"""
    discount = DiscountService(db).lookup_code(code)
    if not discount:
        raise HTTPException(status_code=404, detail="Invalid Code: the discount code entered is not valid.")
    return {
        "code": discount.code,
        "discount_percentage": discount.discount_percentage,
        "description": discount.description,
    }

"""
Cart API Endpoints
The cart lives on the client; the server only re-prices it
"""
from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from jingo.services.cart_service import CartService

router = APIRouter()


class CartLine(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)


class CartQuoteRequest(BaseModel):
    items: List[CartLine] = Field(default_factory=list)


@router.post("/quote")
async def quote_cart(request: CartQuoteRequest):
    """
    Re-price cart lines against the live catalog

    Unavailable products are dropped and quantities are capped at stock,
    each with a warning.
    """
    try:
        quote = CartService().quote([line.model_dump() for line in request.items])
        return {"status": "success", "data": quote}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error quoting cart: {str(e)}")

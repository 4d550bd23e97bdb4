"""
Checkout API Endpoints
Order placement for guests and signed-in customers
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from jingo.core.auth import TokenUser, get_current_user_optional
from jingo.core.exceptions import DomainError, to_http_exception
from jingo.domain.order import CheckoutRequest
from jingo.repositories.order_repository import OrderRepository
from jingo.services.checkout_service import CheckoutService

router = APIRouter()


@router.post("/orders", status_code=status.HTTP_201_CREATED)
async def create_order(
    request: CheckoutRequest,
    user: Optional[TokenUser] = Depends(get_current_user_optional)
):
    """
    Place an order

    The customer is found by email or created; a signed-in user is linked
    to it. The `test` payment method confirms and pays immediately.
    """
    try:
        return CheckoutService().create_order(request, user_id=user.id if user else None)

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating order: {str(e)}")


@router.get("/orders/number/{order_number}")
async def get_order_by_number(order_number: str):
    try:
        order = OrderRepository().find_by_number(order_number)
        if order is None:
            raise HTTPException(status_code=404, detail="Order not found")
        return {"status": "success", "data": order.to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")


@router.get("/orders/{order_id}")
async def get_order(order_id: int):
    """Order confirmation: order, items and the customer's name and email"""
    try:
        order = OrderRepository().find_by_id(order_id)
        if order is None:
            raise HTTPException(status_code=404, detail="Order not found")
        return {"status": "success", "data": order.to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")

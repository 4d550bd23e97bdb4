"""
Admin Orders API Endpoints
Order workflow for the back office
"""
from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from jingo.core.auth import TokenUser, require_manager, require_staff
from jingo.core.exceptions import DomainError, to_http_exception
from jingo.core.pagination import build_pagination, page_offset
from jingo.domain.order import FulfillmentStatus, ManualOrderCreate, OrderStatus, PaymentStatus
from jingo.repositories.order_repository import OrderRepository
from jingo.services.order_service import OrderService

router = APIRouter()


class StatusUpdate(BaseModel):
    status: OrderStatus


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus


class TrackingUpdate(BaseModel):
    tracking_number: str = Field(..., min_length=1)
    tracking_carrier: Optional[str] = None
    tracking_url: Optional[str] = None


class NoteCreate(BaseModel):
    note: str = Field(..., min_length=1)


@router.get("")
async def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Order number or customer email/name"),
    status: Optional[OrderStatus] = Query(None),
    payment_status: Optional[PaymentStatus] = Query(None),
    fulfillment_status: Optional[FulfillmentStatus] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    sort_by: Literal["created_at", "total_amount", "order_number"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    user: TokenUser = Depends(require_staff)
):
    try:
        orders, total = OrderRepository().find_all(
            search=search,
            status=status,
            payment_status=payment_status,
            fulfillment_status=fulfillment_status,
            date_from=date_from,
            date_to=date_to,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=limit,
            offset=page_offset(page, limit)
        )

        return {
            "status": "success",
            "data": [order.to_dict() for order in orders],
            "pagination": build_pagination(page, limit, total)
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/stats")
async def get_order_stats(user: TokenUser = Depends(require_staff)):
    try:
        return {"status": "success", "data": OrderService().get_stats()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order stats: {str(e)}")


@router.get("/recent")
async def get_recent_orders(limit: int = Query(5, ge=1, le=50), user: TokenUser = Depends(require_staff)):
    try:
        orders = OrderRepository().find_recent(limit)
        return {"status": "success", "data": [order.to_dict() for order in orders]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching recent orders: {str(e)}")


@router.get("/export")
async def export_orders(
    status: Optional[OrderStatus] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    user: TokenUser = Depends(require_staff)
):
    try:
        orders = OrderRepository().find_for_export(status=status, date_from=date_from, date_to=date_to)
        return {"status": "success", "count": len(orders), "data": [order.to_dict() for order in orders]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error exporting orders: {str(e)}")


@router.get("/{order_id}")
async def get_order(order_id: int, user: TokenUser = Depends(require_staff)):
    """Order with customer and items (each with product id, sku and first image)"""
    try:
        return {"status": "success", "data": OrderService().get(order_id).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")


@router.post("", status_code=201)
async def create_manual_order(data: ManualOrderCreate, user: TokenUser = Depends(require_manager)):
    """Create an order on behalf of a customer; prices come from the catalog"""
    try:
        return {"status": "success", "data": OrderService().create_manual(data).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating order: {str(e)}")


@router.patch("/{order_id}/status")
async def update_status(order_id: int, data: StatusUpdate, user: TokenUser = Depends(require_manager)):
    try:
        return {"status": "success", "data": OrderService().update_status(order_id, data.status).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating order status: {str(e)}")


@router.patch("/{order_id}/payment-status")
async def update_payment_status(order_id: int, data: PaymentStatusUpdate, user: TokenUser = Depends(require_manager)):
    try:
        order = OrderService().update_payment_status(order_id, data.payment_status)
        return {"status": "success", "data": order.to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating payment status: {str(e)}")


@router.post("/{order_id}/tracking")
async def add_tracking(order_id: int, data: TrackingUpdate, user: TokenUser = Depends(require_manager)):
    """Record tracking details and mark the order shipped"""
    try:
        order = OrderService().add_tracking(
            order_id,
            data.tracking_number,
            tracking_carrier=data.tracking_carrier,
            tracking_url=data.tracking_url,
        )
        return {"status": "success", "data": order.to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error adding tracking: {str(e)}")


@router.post("/{order_id}/notes")
async def add_note(order_id: int, data: NoteCreate, user: TokenUser = Depends(require_manager)):
    try:
        return {"status": "success", "data": OrderService().add_note(order_id, data.note).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error adding note: {str(e)}")

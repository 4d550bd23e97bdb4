"""
Admin Customers API Endpoints
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from jingo.core.auth import TokenUser, require_manager, require_staff
from jingo.core.exceptions import DomainError, to_http_exception
from jingo.core.pagination import build_pagination, page_offset
from jingo.domain.address import AdminAddressCreate, AdminAddressUpdate
from jingo.domain.customer import CustomerCreate, CustomerUpdate
from jingo.repositories.customer_repository import CustomerRepository
from jingo.services.customer_service import CustomerService

router = APIRouter()


class NoteCreate(BaseModel):
    note: str = Field(..., min_length=1)


@router.get("")
async def list_customers(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Search email, names, phone and company"),
    sort_by: Literal["created_at", "last_name", "total_spent", "total_orders"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    user: TokenUser = Depends(require_staff)
):
    try:
        customers, total = CustomerRepository().find_all(
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=limit,
            offset=page_offset(page, limit)
        )

        return {
            "status": "success",
            "data": [customer.to_dict() for customer in customers],
            "pagination": build_pagination(page, limit, total)
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching customers: {str(e)}")


@router.get("/stats")
async def get_customer_stats(user: TokenUser = Depends(require_staff)):
    try:
        return {"status": "success", "data": CustomerService().get_stats()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching customer stats: {str(e)}")


@router.get("/export")
async def export_customers(user: TokenUser = Depends(require_staff)):
    try:
        customers = CustomerRepository().find_for_export()
        return {"status": "success", "count": len(customers), "data": [customer.to_dict() for customer in customers]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error exporting customers: {str(e)}")


@router.get("/{customer_id}")
async def get_customer(customer_id: int, user: TokenUser = Depends(require_staff)):
    """Customer with addresses, latest orders and linked user account"""
    try:
        return {"status": "success", "data": CustomerService().get_detail(customer_id)}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching customer: {str(e)}")


@router.get("/{customer_id}/orders")
async def get_order_history(
    customer_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: TokenUser = Depends(require_staff)
):
    try:
        result = CustomerService().order_history(customer_id, page=page, limit=limit)
        return {"status": "success", "data": result['orders'], "pagination": result['pagination']}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order history: {str(e)}")


@router.post("", status_code=201)
async def create_customer(data: CustomerCreate, user: TokenUser = Depends(require_manager)):
    try:
        return {"status": "success", "data": CustomerService().create(data).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating customer: {str(e)}")


@router.patch("/{customer_id}")
async def update_customer(customer_id: int, data: CustomerUpdate, user: TokenUser = Depends(require_manager)):
    try:
        return {"status": "success", "data": CustomerService().update(customer_id, data).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating customer: {str(e)}")


@router.delete("/{customer_id}")
async def delete_customer(customer_id: int, user: TokenUser = Depends(require_manager)):
    try:
        CustomerService().delete(customer_id)
        return {"status": "success"}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting customer: {str(e)}")


@router.post("/{customer_id}/notes")
async def add_note(customer_id: int, data: NoteCreate, user: TokenUser = Depends(require_manager)):
    try:
        return {"status": "success", "data": CustomerService().add_note(customer_id, data.note).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error adding note: {str(e)}")


@router.post("/addresses", status_code=201)
async def add_address(data: AdminAddressCreate, user: TokenUser = Depends(require_manager)):
    try:
        return {"status": "success", "data": CustomerService().add_address(data).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error saving address: {str(e)}")


@router.patch("/addresses/{address_id}")
async def update_address(address_id: int, data: AdminAddressUpdate, user: TokenUser = Depends(require_manager)):
    try:
        return {"status": "success", "data": CustomerService().update_address(address_id, data).to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating address: {str(e)}")


@router.delete("/addresses/{address_id}")
async def delete_address(address_id: int, user: TokenUser = Depends(require_manager)):
    try:
        CustomerService().delete_address(address_id)
        return {"status": "success"}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting address: {str(e)}")

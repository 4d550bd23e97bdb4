"""
Account API Endpoints
Self-service for signed-in customers: profile, password, orders, addresses
"""
from fastapi import APIRouter, Depends, HTTPException, Query

from jingo.core.auth import TokenUser, get_current_user
from jingo.core.exceptions import DomainError, to_http_exception
from jingo.domain.address import AccountAddressCreate, AddressUpdate
from jingo.domain.user import PasswordChange, ProfileUpdate
from jingo.services.account_service import AccountService

router = APIRouter()


@router.get("/profile")
async def get_profile(user: TokenUser = Depends(get_current_user)):
    try:
        return {"status": "success", "data": AccountService().get_profile(user.id)}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching profile: {str(e)}")


@router.patch("/profile")
async def update_profile(update: ProfileUpdate, user: TokenUser = Depends(get_current_user)):
    """Update the account name and customer details (creates the customer profile if missing)"""
    try:
        customer = AccountService().update_profile(user.id, update)
        return {"status": "success", "data": customer.to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating profile: {str(e)}")


@router.post("/password")
async def change_password(change: PasswordChange, user: TokenUser = Depends(get_current_user)):
    try:
        AccountService().change_password(user.id, change)
        return {"status": "success", "message": "Password updated"}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error changing password: {str(e)}")


@router.get("/orders")
async def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    user: TokenUser = Depends(get_current_user)
):
    try:
        result = AccountService().list_orders(user.id, page=page, limit=limit)
        return {"status": "success", "data": result['orders'], "pagination": result['pagination']}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/orders/{order_id}")
async def get_order(order_id: int, user: TokenUser = Depends(get_current_user)):
    try:
        order = AccountService().get_order(user.id, order_id)
        return {"status": "success", "data": order.to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")


@router.get("/addresses")
async def list_addresses(user: TokenUser = Depends(get_current_user)):
    try:
        addresses = AccountService().list_addresses(user.id)
        return {"status": "success", "data": [address.to_dict() for address in addresses]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching addresses: {str(e)}")


@router.post("/addresses", status_code=201)
async def add_address(data: AccountAddressCreate, user: TokenUser = Depends(get_current_user)):
    try:
        address = AccountService().add_address(user.id, data)
        return {"status": "success", "data": address.to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error saving address: {str(e)}")


@router.patch("/addresses/{address_id}")
async def update_address(address_id: int, data: AddressUpdate, user: TokenUser = Depends(get_current_user)):
    try:
        address = AccountService().update_address(user.id, address_id, data)
        return {"status": "success", "data": address.to_dict()}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating address: {str(e)}")


@router.delete("/addresses/{address_id}")
async def delete_address(address_id: int, user: TokenUser = Depends(get_current_user)):
    try:
        AccountService().delete_address(user.id, address_id)
        return {"status": "success"}

    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting address: {str(e)}")


@router.get("/dashboard")
async def get_dashboard(user: TokenUser = Depends(get_current_user)):
    try:
        return {"status": "success", "data": AccountService().get_dashboard(user.id)}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching dashboard: {str(e)}")

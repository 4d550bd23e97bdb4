"""
Authentication API Endpoints
Registration, login and the current session
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import EmailStr

from jingo.core.auth import TokenUser, get_current_user
from jingo.core.exceptions import DomainError, to_http_exception
from jingo.domain.user import LoginRequest, RegisterRequest
from jingo.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest):
    """
    Create a customer account

    Password: 8+ characters with upper-case, lower-case and a digit.
    Returns 409 when the email is already registered.
    """
    try:
        return AuthService().register(request)

    except HTTPException:
        raise
    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating account: {str(e)}")


@router.get("/check-email")
async def check_email(email: EmailStr = Query(..., description="Email to check")):
    try:
        return {"available": AuthService().is_email_available(email)}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error checking email: {str(e)}")


@router.post("/login")
async def login(request: LoginRequest):
    """Exchange email and password for a bearer token"""
    try:
        return AuthService().login(request)

    except HTTPException:
        raise
    except DomainError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error signing in: {str(e)}")


@router.get("/me")
async def me(user: TokenUser = Depends(get_current_user)):
    return {"status": "success", "data": user.model_dump()}

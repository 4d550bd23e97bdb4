"""
Auth Service
Registration and credential login
"""
import logging
from typing import Dict

from jingo.core.auth import create_access_token, hash_password, verify_password
from jingo.core.database import db_transaction
from jingo.core.exceptions import ConflictError, UnauthorizedError
from jingo.domain.user import LoginRequest, RegisterRequest
from jingo.repositories.customer_repository import CustomerRepository
from jingo.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:

    def __init__(self, user_repo: UserRepository = None, customer_repo: CustomerRepository = None):
        self.user_repo = user_repo or UserRepository()
        self.customer_repo = customer_repo or CustomerRepository()

    def register(self, request: RegisterRequest) -> Dict:
        """
        Create a CUSTOMER account and its linked customer profile

        Raises:
            ConflictError: email already registered
        """
        if self.user_repo.find_by_email(request.email):
            raise ConflictError("An account with this email already exists")

        first_name, last_name = request.customer_names()

        with db_transaction() as conn:
            user = self.user_repo.create(
                email=request.email,
                name=request.name,
                password_hash=hash_password(request.password),
                role="CUSTOMER",
                conn=conn,
            )

            # A guest checkout may already have created the customer row
            existing = self.customer_repo.find_by_email(request.email, conn=conn)
            if existing and not existing.user_id:
                self.customer_repo.update(existing.id, {"user_id": user.id}, conn=conn)
            elif not existing:
                self.customer_repo.create({
                    "user_id": user.id,
                    "email": request.email,
                    "first_name": first_name,
                    "last_name": last_name,
                }, conn=conn)

        logger.info(f"Registered user {user.id} ({request.email})")

        return {
            "success": True,
            "message": "Account created successfully",
            "user_id": user.id,
        }

    def is_email_available(self, email: str) -> bool:
        return self.user_repo.find_by_email(email) is None

    def login(self, request: LoginRequest) -> Dict:
        """
        Verify credentials and issue an access token

        Raises:
            UnauthorizedError: unknown email or wrong password
        """
        user = self.user_repo.find_by_email(request.email)
        if not user or not user.password_hash or not verify_password(request.password, user.password_hash):
            logger.warning(f"Failed login for {request.email}")
            raise UnauthorizedError("Invalid email or password")

        token = create_access_token(user.id, user.email, user.name, user.role)
        return {
            "access_token": token,
            "token_type": "bearer",
            "user": user.to_dict(),
        }

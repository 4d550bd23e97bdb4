"""
Account Service
Customer self-service: profile, password, orders and saved addresses
"""
import logging
from typing import Dict, List, Optional

from jingo.core.auth import hash_password, verify_password
from jingo.core.exceptions import NotFoundError, UnauthorizedError, ValidationError
from jingo.core.pagination import build_pagination, page_offset
from jingo.domain.address import AccountAddressCreate, Address, AddressUpdate
from jingo.domain.customer import Customer
from jingo.domain.order import Order
from jingo.domain.user import PasswordChange, ProfileUpdate
from jingo.repositories.customer_repository import CustomerRepository
from jingo.repositories.order_repository import OrderRepository
from jingo.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AccountService:
    """Operations scoped to the signed-in user's own customer profile"""

    def __init__(
        self,
        user_repo: UserRepository = None,
        customer_repo: CustomerRepository = None,
        order_repo: OrderRepository = None
    ):
        self.user_repo = user_repo or UserRepository()
        self.customer_repo = customer_repo or CustomerRepository()
        self.order_repo = order_repo or OrderRepository()

    def _require_customer(self, user_id: int) -> Customer:
        customer = self.customer_repo.find_by_user_id(user_id)
        if customer is None:
            raise NotFoundError("Customer profile not found")
        return customer

    def _get_or_create_customer(
        self,
        user_id: int,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None
    ) -> Customer:
        customer = self.customer_repo.find_by_user_id(user_id)
        if customer:
            return customer

        user = self.user_repo.find_by_id(user_id)
        if not user or not user.email:
            raise ValidationError("User email is required to create customer profile")

        logger.info(f"Creating customer profile for user {user_id}")
        return self.customer_repo.create({
            "user_id": user_id,
            "email": user.email,
            "first_name": first_name or "",
            "last_name": last_name or "",
        })

    # ============================================
    # Profile
    # ============================================

    def get_profile(self, user_id: int) -> Dict:
        user = self.user_repo.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")

        customer = self.customer_repo.find_by_user_id(user_id)
        profile = user.to_dict()
        profile["customer"] = customer.to_dict() if customer else None
        return profile

    def update_profile(self, user_id: int, update: ProfileUpdate) -> Customer:
        """
        Update the user's name and the provided customer fields

        A missing customer profile is created, with names falling back to
        a split of `name`.
        """
        if update.name:
            self.user_repo.update_name(user_id, update.name)

        name_parts = update.name.split(" ") if update.name else []
        customer = self._get_or_create_customer(
            user_id,
            first_name=update.first_name or (name_parts[0] if name_parts else None),
            last_name=update.last_name or " ".join(name_parts[1:]),
        )

        changes = update.model_dump(
            include={"first_name", "last_name", "phone", "email_marketing", "sms_marketing"},
            exclude_unset=True,
        )
        # Empty names never overwrite existing ones
        for field in ("first_name", "last_name"):
            if not changes.get(field):
                changes.pop(field, None)

        if not changes:
            return customer
        return self.customer_repo.update(customer.id, changes)

    def change_password(self, user_id: int, change: PasswordChange) -> None:
        user = self.user_repo.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")

        # Accounts created without a password skip the current-password check
        if user.password_hash and not verify_password(change.current_password, user.password_hash):
            raise UnauthorizedError("Current password is incorrect")

        self.user_repo.update_password(user_id, hash_password(change.new_password))
        logger.info(f"Password changed for user {user_id}")

    # ============================================
    # Orders
    # ============================================

    def list_orders(self, user_id: int, page: int = 1, limit: int = 10) -> Dict:
        customer = self.customer_repo.find_by_user_id(user_id)
        if customer is None:
            return {"orders": [], "pagination": build_pagination(page, limit, 0)}

        orders, total = self.order_repo.find_by_customer(customer.id, limit=limit, offset=page_offset(page, limit))
        return {
            "orders": [order.to_dict() for order in orders],
            "pagination": build_pagination(page, limit, total),
        }

    def get_order(self, user_id: int, order_id: int) -> Order:
        customer = self._require_customer(user_id)
        order = self.order_repo.find_for_customer(order_id, customer.id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    # ============================================
    # Addresses
    # ============================================

    def list_addresses(self, user_id: int) -> List[Address]:
        customer = self.customer_repo.find_by_user_id(user_id)
        if customer is None:
            return []
        return self.customer_repo.find_addresses(customer.id)

    def add_address(self, user_id: int, data: AccountAddressCreate) -> Address:
        customer = self._get_or_create_customer(user_id, data.first_name, data.last_name)

        if data.is_default:
            self.customer_repo.unset_default_addresses(customer.id, data.type)

        return self.customer_repo.create_address(customer.id, data.model_dump())

    def update_address(self, user_id: int, address_id: int, data: AddressUpdate) -> Address:
        customer = self._require_customer(user_id)
        existing = self.customer_repo.find_address(address_id, customer_id=customer.id)
        if existing is None:
            raise NotFoundError("Address not found")

        if data.is_default:
            address_type = data.type or existing.type
            self.customer_repo.unset_default_addresses(customer.id, address_type, exclude_id=address_id)

        return self.customer_repo.update_address(address_id, data.model_dump(exclude_unset=True))

    def delete_address(self, user_id: int, address_id: int) -> None:
        customer = self._require_customer(user_id)
        if self.customer_repo.find_address(address_id, customer_id=customer.id) is None:
            raise NotFoundError("Address not found")
        self.customer_repo.delete_address(address_id)

    # ============================================
    # Dashboard
    # ============================================

    def get_dashboard(self, user_id: int) -> Dict:
        customer = self.customer_repo.find_by_user_id(user_id)
        if customer is None:
            return {
                "total_orders": 0,
                "total_spent": 0,
                "recent_orders": [],
                "saved_addresses": 0,
            }

        recent_orders, _ = self.order_repo.find_by_customer(customer.id, limit=3)
        return {
            "total_orders": customer.total_orders,
            "total_spent": float(customer.total_spent),
            "recent_orders": [order.to_dict() for order in recent_orders],
            "saved_addresses": self.customer_repo.count_addresses(customer.id),
        }

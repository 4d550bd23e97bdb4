"""
Customer Service
Back-office customer management
"""
import logging
from typing import Any, Dict

from jingo.core.exceptions import ConflictError, NotFoundError, PreconditionFailedError
from jingo.core.pagination import build_pagination, page_offset
from jingo.domain.address import Address, AdminAddressCreate, AdminAddressUpdate
from jingo.domain.customer import Customer, CustomerCreate, CustomerUpdate
from jingo.repositories.customer_repository import CustomerRepository
from jingo.repositories.order_repository import OrderRepository
from jingo.services.date_ranges import start_of_last_month, start_of_month, utc_now
from jingo.services.notes import append_note

logger = logging.getLogger(__name__)


def growth_rate(this_month: int, last_month: int) -> float:
    """Month-over-month growth in percent (0 when last month is 0)"""
    if not last_month:
        return 0
    return round((this_month - last_month) / last_month * 100, 2)


class CustomerService:

    def __init__(self, customer_repo: CustomerRepository = None, order_repo: OrderRepository = None):
        self.customer_repo = customer_repo or CustomerRepository()
        self.order_repo = order_repo or OrderRepository()

    def _require(self, customer_id: int) -> Customer:
        customer = self.customer_repo.find_by_id(customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")
        return customer

    def get_detail(self, customer_id: int) -> Dict[str, Any]:
        """Customer with addresses, 10 latest orders and the linked user"""
        customer = self._require(customer_id)
        customer.addresses = self.customer_repo.find_addresses(customer_id)
        orders, order_count = self.order_repo.find_by_customer(customer_id, limit=10)

        data = customer.to_dict()
        data['order_count'] = order_count
        data['orders'] = [order.to_dict() for order in orders]
        data['user'] = self.customer_repo.find_linked_user(customer.user_id) if customer.user_id else None
        return data

    def create(self, data: CustomerCreate) -> Customer:
        if self.customer_repo.find_by_email(data.email):
            raise ConflictError("A customer with this email already exists")

        customer = self.customer_repo.create(data.model_dump())
        logger.info(f"Created customer {customer.id} ({customer.email})")
        return customer

    def update(self, customer_id: int, data: CustomerUpdate) -> Customer:
        existing = self._require(customer_id)
        changes = data.model_dump(exclude_unset=True)

        new_email = changes.get('email')
        if new_email and new_email != existing.email and self.customer_repo.find_by_email(new_email):
            raise ConflictError("A customer with this email already exists")

        return self.customer_repo.update(customer_id, changes)

    def delete(self, customer_id: int) -> None:
        self._require(customer_id)

        if self.customer_repo.count_orders(customer_id) > 0:
            raise PreconditionFailedError("Cannot delete customer with existing orders")

        self.customer_repo.delete(customer_id)
        logger.info(f"Deleted customer {customer_id}")

    def add_note(self, customer_id: int, note: str) -> Customer:
        customer = self._require(customer_id)
        return self.customer_repo.update(customer_id, {"notes": append_note(customer.notes, note)})

    def order_history(self, customer_id: int, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        self._require(customer_id)
        orders, total = self.order_repo.find_by_customer(customer_id, limit=limit, offset=page_offset(page, limit))
        return {
            "orders": [order.to_dict() for order in orders],
            "pagination": build_pagination(page, limit, total),
        }

    def add_address(self, data: AdminAddressCreate) -> Address:
        self._require(data.customer_id)

        if data.is_default:
            self.customer_repo.unset_default_addresses(data.customer_id, data.type)

        return self.customer_repo.create_address(data.customer_id, data.model_dump(exclude={"customer_id"}))

    def update_address(self, address_id: int, data: AdminAddressUpdate) -> Address:
        existing = self.customer_repo.find_address(address_id)
        if existing is None:
            raise NotFoundError("Address not found")

        changes = data.model_dump(exclude_unset=True)
        if data.is_default:
            self.customer_repo.unset_default_addresses(
                changes.get('customer_id') or existing.customer_id,
                data.type or existing.type,
                exclude_id=address_id,
            )

        return self.customer_repo.update_address(address_id, changes)

    def delete_address(self, address_id: int) -> None:
        if not self.customer_repo.delete_address(address_id):
            raise NotFoundError("Address not found")

    def get_stats(self) -> Dict[str, Any]:
        now = utc_now()
        stats = self.customer_repo.get_stats(start_of_month(now), start_of_last_month(now))
        stats['growth_rate'] = growth_rate(stats['new_this_month'], stats['new_last_month'])
        return stats

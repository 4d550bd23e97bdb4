"""
Tests for CustomerService
"""
from decimal import Decimal
from unittest.mock import Mock

import pytest

from jingo.core.exceptions import ConflictError, NotFoundError, PreconditionFailedError
from jingo.domain.address import Address, AdminAddressCreate, AdminAddressUpdate
from jingo.domain.customer import Customer, CustomerCreate, CustomerUpdate
from jingo.domain.order import Order
from jingo.services.customer_service import CustomerService, growth_rate


def make_customer(**overrides):
    data = {'id': 7, 'email': 'ana@example.com', 'first_name': 'Ana', 'last_name': 'Lopez'}
    data.update(overrides)
    return Customer(**data)


def make_address(**overrides):
    data = {
        'id': 30, 'customer_id': 7, 'type': 'SHIPPING', 'first_name': 'Ana', 'last_name': 'Lopez',
        'address1': '1 Main St', 'city': 'Miami', 'state': 'FL', 'postal_code': '33101',
    }
    data.update(overrides)
    return Address(**data)


class TestGrowthRate:

    def test_no_previous_month(self):
        assert growth_rate(5, 0) == 0

    def test_rounded_percent(self):
        assert growth_rate(4, 3) == 33.33
        assert growth_rate(1, 2) == -50.0


class TestCustomerService:

    def test_create_duplicate_email(self):
        customer_repo = Mock()
        customer_repo.find_by_email.return_value = make_customer()

        with pytest.raises(ConflictError):
            CustomerService(customer_repo, Mock()).create(
                CustomerCreate(email='ana@example.com', first_name='Ana', last_name='Lopez')
            )

    def test_update_to_own_email_is_allowed(self):
        customer_repo = Mock()
        customer_repo.find_by_id.return_value = make_customer()

        CustomerService(customer_repo, Mock()).update(7, CustomerUpdate(email='ana@example.com', phone='555'))

        customer_repo.find_by_email.assert_not_called()
        customer_repo.update.assert_called_once_with(7, {'email': 'ana@example.com', 'phone': '555'})

    def test_update_to_taken_email(self):
        customer_repo = Mock()
        customer_repo.find_by_id.return_value = make_customer()
        customer_repo.find_by_email.return_value = make_customer(id=8, email='b@example.com')

        with pytest.raises(ConflictError):
            CustomerService(customer_repo, Mock()).update(7, CustomerUpdate(email='b@example.com'))

    def test_delete_with_orders_is_refused(self):
        customer_repo = Mock()
        customer_repo.find_by_id.return_value = make_customer()
        customer_repo.count_orders.return_value = 1

        with pytest.raises(PreconditionFailedError):
            CustomerService(customer_repo, Mock()).delete(7)

        customer_repo.delete.assert_not_called()

    def test_get_detail(self):
        # Arrange
        customer_repo = Mock()
        customer_repo.find_by_id.return_value = make_customer(user_id=42)
        customer_repo.find_addresses.return_value = [make_address()]
        customer_repo.find_linked_user.return_value = {'id': 42, 'email': 'ana@example.com'}
        order_repo = Mock()
        order_repo.find_by_customer.return_value = ([
            Order(id=10, order_number='JJ-2025-AAAAAA', customer_id=7,
                  subtotal=Decimal('5'), total_amount=Decimal('5')),
        ], 3)

        # Act
        detail = CustomerService(customer_repo, order_repo).get_detail(7)

        # Assert
        assert detail['full_name'] == 'Ana Lopez'
        assert detail['order_count'] == 3
        assert detail['orders'][0]['total_amount'] == 5.0
        assert detail['addresses'][0]['city'] == 'Miami'
        assert detail['user']['id'] == 42

    def test_missing_customer(self):
        customer_repo = Mock()
        customer_repo.find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            CustomerService(customer_repo, Mock()).get_detail(7)

    def test_add_default_address_unsets_previous_default(self):
        customer_repo = Mock()
        customer_repo.find_by_id.return_value = make_customer()
        data = AdminAddressCreate(
            customer_id=7, type='BILLING', is_default=True, first_name='Ana', last_name='Lopez',
            address1='1 Main St', city='Miami', state='FL', postal_code='33101',
        )

        CustomerService(customer_repo, Mock()).add_address(data)

        customer_repo.unset_default_addresses.assert_called_once_with(7, 'BILLING')
        assert 'customer_id' not in customer_repo.create_address.call_args[0][1]

    def test_update_address_default_uses_existing_type(self):
        customer_repo = Mock()
        customer_repo.find_address.return_value = make_address(type='SHIPPING')

        CustomerService(customer_repo, Mock()).update_address(30, AdminAddressUpdate(is_default=True))

        customer_repo.unset_default_addresses.assert_called_once_with(7, 'SHIPPING', exclude_id=30)

    def test_get_stats_adds_growth_rate(self):
        customer_repo = Mock()
        customer_repo.get_stats.return_value = {
            'total': 10, 'new_this_month': 4, 'new_last_month': 2, 'marketing_opt_in': 5,
        }

        stats = CustomerService(customer_repo, Mock()).get_stats()

        assert stats['growth_rate'] == 100.0

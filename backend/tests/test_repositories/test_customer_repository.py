"""
Unit tests for CustomerRepository
"""
import pytest
from unittest.mock import patch, MagicMock
from decimal import Decimal

from jingo.repositories.customer_repository import CustomerRepository
from jingo.domain.customer import Customer


def customer_row(**overrides):
    row = {
        'id': 7,
        'email': 'ana@example.com',
        'first_name': 'Ana',
        'last_name': 'Lopez',
        'phone': None,
        'company': None,
        'user_id': None,
        'email_marketing': True,
        'sms_marketing': False,
        'notes': None,
        'tags': None,
        'total_orders': 2,
        'total_spent': Decimal('3798.00'),
        'last_order_at': None,
        'created_at': None,
        'updated_at': None,
    }
    row.update(overrides)
    return row


def address_row(**overrides):
    row = {
        'id': 30,
        'customer_id': 7,
        'type': 'SHIPPING',
        'is_default': True,
        'first_name': 'Ana',
        'last_name': 'Lopez',
        'company': None,
        'address1': '1 Main St',
        'address2': None,
        'city': 'Miami',
        'state': 'FL',
        'postal_code': '33101',
        'country': 'US',
        'phone': None,
        'created_at': None,
        'updated_at': None,
    }
    row.update(overrides)
    return row


class TestCustomerRepository:
    """Test CustomerRepository methods"""

    @patch('jingo.repositories.customer_repository.get_db_connection_dict')
    def test_find_by_email_returns_customer(self, mock_get_conn):
        # Arrange
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = customer_row()

        # Act
        customer = CustomerRepository().find_by_email('ana@example.com')

        # Assert
        assert isinstance(customer, Customer)
        assert customer.full_name == 'Ana Lopez'
        assert mock_cursor.execute.call_args[0][1] == ('ana@example.com',)
        mock_conn.close.assert_called_once()

    def test_find_by_email_on_shared_connection_leaves_it_open(self):
        """A caller-owned connection is neither committed nor closed"""
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = None

        result = CustomerRepository().find_by_email('nobody@example.com', conn=mock_conn)

        assert result is None
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_not_called()

    @patch('jingo.repositories.customer_repository.get_db_connection_dict')
    def test_find_all_searches_five_columns(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = {'total': 1}
        mock_cursor.fetchall.return_value = [customer_row(order_count=2)]

        customers, total = CustomerRepository().find_all(search='ana', sort_by='last_name', sort_order='asc')

        assert total == 1
        assert customers[0].order_count == 2
        count_params = mock_cursor.execute.call_args_list[0][0][1]
        assert count_params == ['%ana%'] * 5
        assert "ORDER BY cu.last_name ASC" in mock_cursor.execute.call_args_list[1][0][0]

    def test_create_inside_transaction_does_not_commit(self):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = customer_row(total_orders=0, total_spent=Decimal('0'))

        customer = CustomerRepository().create(
            {'email': 'ana@example.com', 'first_name': 'Ana', 'last_name': 'Lopez', 'user_id': 42},
            conn=mock_conn,
        )

        assert customer.id == 7
        values = mock_cursor.execute.call_args[0][1]
        assert values == ['ana@example.com', 'Ana', 'Lopez', 42]
        mock_conn.commit.assert_not_called()
        mock_conn.close.assert_not_called()

    @patch('jingo.repositories.customer_repository.get_db_connection_dict')
    def test_record_order_defaults_amount_to_zero(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor

        CustomerRepository().record_order(7)

        query, params = mock_cursor.execute.call_args[0]
        assert "total_orders = total_orders + 1" in query
        assert params == (Decimal("0"), 7)
        mock_conn.commit.assert_called_once()

    @patch('jingo.repositories.customer_repository.get_db_connection_dict')
    def test_record_order_rolls_back_on_error(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.execute.side_effect = Exception("lock timeout")

        with pytest.raises(Exception):
            CustomerRepository().record_order(7, Decimal('10.00'))

        mock_conn.rollback.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('jingo.repositories.customer_repository.get_db_connection_dict')
    def test_find_address_restricted_to_owner(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = address_row()

        address = CustomerRepository().find_address(30, customer_id=7)

        query, params = mock_cursor.execute.call_args[0]
        assert "AND customer_id = %s" in query
        assert params == [30, 7]
        assert address.city == 'Miami'

    @patch('jingo.repositories.customer_repository.get_db_connection_dict')
    def test_unset_default_addresses_excludes_current(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor

        CustomerRepository().unset_default_addresses(7, 'SHIPPING', exclude_id=30)

        query, params = mock_cursor.execute.call_args[0]
        assert "id <> %s" in query
        assert params == [7, 'SHIPPING', 30]

    @patch('jingo.repositories.customer_repository.get_db_connection_dict')
    def test_find_for_export_attaches_addresses(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchall.side_effect = [
            [customer_row(order_count=1), customer_row(id=8, email='b@example.com', order_count=0)],
            [address_row()],
        ]

        customers = CustomerRepository().find_for_export()

        assert len(customers[0].addresses) == 1
        assert customers[1].addresses == []

    @patch('jingo.repositories.customer_repository.get_db_connection_dict')
    def test_delete_returns_false_when_missing(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = None

        assert CustomerRepository().delete(999) is False
        mock_conn.commit.assert_called_once()

"""
Unit tests for OrderRepository
"""
import pytest
from unittest.mock import patch, MagicMock
from datetime import datetime
from decimal import Decimal

from jingo.repositories.order_repository import OrderRepository
from jingo.domain.order import Order


def item_row(**overrides):
    row = {
        'id': 100,
        'order_id': 10,
        'product_id': 1,
        'sku': 'JJ-BH-001',
        'name': 'Tropical Bounce House',
        'price': Decimal('1899.00'),
        'quantity': 2,
        'total_price': Decimal('3798.00'),
    }
    row.update(overrides)
    return row


class TestOrderRepository:
    """Test OrderRepository methods"""

    @patch('jingo.repositories.order_repository.get_db_connection_dict')
    def test_find_by_id_returns_order_with_customer_and_items(self, mock_get_conn, order_row):
        # Arrange
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor

        mock_cursor.fetchone.return_value = dict(
            order_row,
            customer_email='ana@example.com',
            customer_first_name='Ana',
            customer_last_name='Lopez',
            customer_phone=None,
        )
        mock_cursor.fetchall.return_value = [item_row()]

        # Act
        order = OrderRepository().find_by_id(10)

        # Assert
        assert isinstance(order, Order)
        assert order.order_number == 'JJ-2025-ABC234'
        assert order.customer.email == 'ana@example.com'
        assert order.total_quantity == 2
        assert mock_cursor.execute.call_count == 2
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('jingo.repositories.order_repository.get_db_connection_dict')
    def test_find_by_id_returns_none_when_not_found(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = None

        assert OrderRepository().find_by_id(999) is None
        mock_cursor.execute.assert_called_once()

    @patch('jingo.repositories.order_repository.get_db_connection_dict')
    def test_find_for_customer_checks_ownership_and_loads_products(self, mock_get_conn, order_row):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = order_row
        mock_cursor.fetchall.return_value = [
            item_row(product_slug='tropical-bounce-house', product_image='https://cdn/a.jpg')
        ]

        order = OrderRepository().find_for_customer(10, 7)

        first_query, first_params = mock_cursor.execute.call_args_list[0][0]
        assert "o.customer_id = %s" in first_query
        assert first_params == (10, 7)
        assert "product_images" in mock_cursor.execute.call_args_list[1][0][0]
        assert order.items[0].product_slug == 'tropical-bounce-house'

    @patch('jingo.repositories.order_repository.get_db_connection_dict')
    def test_find_all_builds_filters(self, mock_get_conn, order_row):
        # Arrange
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = {'total': 1}
        mock_cursor.fetchall.side_effect = [[order_row], [item_row()]]
        date_from = datetime(2025, 1, 1)

        # Act
        orders, total = OrderRepository().find_all(
            search='JJ-2025', status='CONFIRMED', payment_status='PAID', date_from=date_from,
            sort_by='total_amount', sort_order='asc', limit=20, offset=0
        )

        # Assert
        assert total == 1
        assert len(orders[0].items) == 1
        count_query, count_params = mock_cursor.execute.call_args_list[0][0]
        assert "o.status = %s" in count_query
        assert count_params == ['%JJ-2025%'] * 4 + ['CONFIRMED', 'PAID', date_from]
        assert "ORDER BY o.total_amount ASC" in mock_cursor.execute.call_args_list[1][0][0]

    def test_build_filters_without_filters_matches_everything(self):
        where_clause, params = OrderRepository._build_filters()

        assert where_clause == "1=1"
        assert params == []

    @patch('jingo.repositories.order_repository.get_db_connection_dict')
    def test_get_stats_converts_revenue_to_float(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = {
            'total_orders': 5, 'today_orders': 1, 'month_orders': 3,
            'pending_orders': 1, 'processing_orders': 0, 'month_revenue': Decimal('4200.50'),
        }

        stats = OrderRepository().get_stats(datetime(2025, 3, 5), datetime(2025, 3, 1))

        assert stats['month_revenue'] == 4200.5
        assert stats['total_orders'] == 5

    def test_create_inserts_order_then_items_on_shared_connection(self, order_row):
        # Arrange
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.side_effect = [order_row, item_row(), item_row(id=101, product_id=2)]

        items = [
            {'product_id': 1, 'sku': 'JJ-BH-001', 'name': 'A', 'price': Decimal('1899.00'),
             'quantity': 2, 'total_price': Decimal('3798.00')},
            {'product_id': 2, 'name': 'B', 'price': Decimal('1899.00'),
             'quantity': 2, 'total_price': Decimal('3798.00')},
        ]

        # Act
        order = OrderRepository().create(
            {'order_number': 'JJ-2025-ABC234', 'customer_id': 7, 'subtotal': Decimal('3798.00'),
             'total_amount': Decimal('3798.00'), 'status': 'CONFIRMED'},
            items,
            conn=mock_conn,
        )

        # Assert
        assert mock_cursor.execute.call_count == 3
        second_item_params = mock_cursor.execute.call_args_list[2][0][1]
        assert second_item_params[0] == 10
        assert second_item_params[2] is None
        assert len(order.items) == 2
        mock_conn.commit.assert_not_called()
        mock_conn.close.assert_not_called()

    @patch('jingo.repositories.order_repository.get_db_connection_dict')
    def test_update_ignores_non_updatable_columns_and_reloads_order(self, mock_get_conn, order_row):
        # Arrange
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.side_effect = [
            {'id': 10},
            dict(order_row, status='SHIPPED', customer_email='ana@example.com',
                 customer_first_name='Ana', customer_last_name='Lopez', customer_phone=None),
        ]
        mock_cursor.fetchall.return_value = [item_row()]

        # Act
        order = OrderRepository().update(10, {'status': 'SHIPPED', 'total_amount': 1})

        # Assert
        query, values = mock_cursor.execute.call_args_list[0][0]
        assert "total_amount = %s" not in query
        assert values == ['SHIPPED', 10]
        assert order.status == 'SHIPPED'
        assert order.total_quantity == 2
        assert order.customer.email == 'ana@example.com'
        mock_conn.commit.assert_called_once()

    @patch('jingo.repositories.order_repository.get_db_connection_dict')
    def test_update_missing_order_returns_none(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = None

        assert OrderRepository().update(999, {'status': 'SHIPPED'}) is None
        mock_cursor.execute.assert_called_once()

    @patch('jingo.repositories.order_repository.get_db_connection_dict')
    def test_update_rolls_back_on_error(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.execute.side_effect = Exception("boom")

        with pytest.raises(Exception):
            OrderRepository().update(10, {'status': 'SHIPPED'})

        mock_conn.rollback.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('jingo.repositories.order_repository.get_db_connection_dict')
    def test_find_all_search_escapes_like_wildcards(self, mock_get_conn):
        # Arrange
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = {'total': 0}
        mock_cursor.fetchall.return_value = []

        # Act
        OrderRepository().find_all(search='JJ_2025%')

        # Assert
        count_params = mock_cursor.execute.call_args_list[0][0][1]
        assert count_params == ['%JJ\\_2025\\%%'] * 4

"""
Unit tests for SubscriberRepository
"""
from unittest.mock import patch, MagicMock
from datetime import datetime

from jingo.repositories.subscriber_repository import SubscriberRepository


def subscriber_row(**overrides):
    row = {
        'id': 1,
        'email': 'fan@example.com',
        'phone': None,
        'first_name': None,
        'last_name': None,
        'email_subscribed': True,
        'sms_subscribed': False,
        'source': 'footer',
        'confirmed_at': None,
        'unsubscribed_at': None,
        'created_at': None,
        'updated_at': None,
    }
    row.update(overrides)
    return row


class TestSubscriberRepository:

    @patch('jingo.repositories.subscriber_repository.get_db_connection_dict')
    def test_find_all_filters_on_channel_flags(self, mock_get_conn):
        # Arrange
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = {'total': 1}
        mock_cursor.fetchall.return_value = [subscriber_row()]

        # Act
        subscribers, total = SubscriberRepository().find_all(email_subscribed=True, sms_subscribed=False)

        # Assert
        assert total == 1
        assert subscribers[0].email == 'fan@example.com'
        count_query, count_params = mock_cursor.execute.call_args_list[0][0]
        assert "email_subscribed = %s AND sms_subscribed = %s" in count_query
        assert count_params == [True, False]

    def test_build_filters_keeps_false_flags(self):
        """False is a filter value, not an absent filter"""
        where_clause, params = SubscriberRepository._build_filters(sms_subscribed=False)

        assert where_clause == "sms_subscribed = %s"
        assert params == [False]

    @patch('jingo.repositories.subscriber_repository.get_db_connection_dict')
    def test_delete_unsubscribed_returns_rowcount(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.rowcount = 4

        assert SubscriberRepository().delete_unsubscribed() == 4
        mock_conn.commit.assert_called_once()

    @patch('jingo.repositories.subscriber_repository.get_db_connection_dict')
    def test_get_stats_passes_month_boundary(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = {
            'total_subscribers': 10, 'email_subscribers': 8, 'sms_subscribers': 2,
            'new_this_month': 3, 'unsubscribed': 1,
        }
        start = datetime(2025, 3, 1)

        stats = SubscriberRepository().get_stats(start)

        assert stats['total_subscribers'] == 10
        assert mock_cursor.execute.call_args[0][1] == (start,)

    @patch('jingo.repositories.subscriber_repository.get_db_connection_dict')
    def test_update_returns_none_for_unknown_subscriber(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = None

        assert SubscriberRepository().update(99, {'email_subscribed': False}) is None

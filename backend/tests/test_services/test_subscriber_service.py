"""
Tests for SubscriberService
"""
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from jingo.core.exceptions import ConflictError, NotFoundError
from jingo.domain.subscriber import Subscriber, SubscriberCreate, SubscriberImportRow
from jingo.services.subscriber_service import SubscriberService, active_rate, unsubscribe_changes

NOW = datetime(2025, 3, 5, tzinfo=timezone.utc)


class TestUnsubscribeChanges:

    def test_email_only(self):
        assert unsubscribe_changes('email', now=NOW) == {'unsubscribed_at': NOW, 'email_subscribed': False}

    def test_sms_only(self):
        assert unsubscribe_changes('sms', now=NOW) == {'unsubscribed_at': NOW, 'sms_subscribed': False}

    def test_both(self):
        changes = unsubscribe_changes('both', now=NOW)

        assert changes['email_subscribed'] is False
        assert changes['sms_subscribed'] is False


class TestActiveRate:

    def test_empty_list(self):
        assert active_rate(0, 0) == 0

    def test_rate(self):
        assert active_rate(3, 1) == 66.67


class TestSubscriberService:

    def test_create_confirms_subscriber(self):
        repo = Mock()
        repo.find_by_email.return_value = None

        SubscriberService(repo).create(SubscriberCreate(email='fan@example.com', source='admin'))

        created = repo.create.call_args[0][0]
        assert created['email'] == 'fan@example.com'
        assert created['confirmed_at'] is not None

    def test_create_duplicate(self):
        repo = Mock()
        repo.find_by_email.return_value = Subscriber(id=1, email='fan@example.com')

        with pytest.raises(ConflictError):
            SubscriberService(repo).create(SubscriberCreate(email='fan@example.com'))

    def test_unsubscribe_missing(self):
        repo = Mock()
        repo.find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            SubscriberService(repo).unsubscribe(1, 'email')

    def test_import_never_resubscribes_existing(self):
        # Arrange
        repo = Mock()
        repo.find_by_email.side_effect = [
            Subscriber(id=1, email='old@example.com', email_subscribed=False, phone='555-0001'),
            None,
        ]
        rows = [
            SubscriberImportRow(email='old@example.com', first_name='Old'),
            SubscriberImportRow(email='new@example.com', sms_subscribed=True),
        ]

        # Act
        result = SubscriberService(repo).bulk_import(rows, source='csv')

        # Assert
        assert result == {'created': 1, 'updated': 1, 'errors': []}
        update_changes = repo.update.call_args[0][1]
        assert update_changes == {'phone': '555-0001', 'first_name': 'Old', 'last_name': None}
        created = repo.create.call_args[0][0]
        assert created['source'] == 'csv'
        assert created['sms_subscribed'] is True

    def test_import_collects_errors(self):
        repo = Mock()
        repo.find_by_email.return_value = None
        repo.create.side_effect = Exception("db down")

        result = SubscriberService(repo).bulk_import([SubscriberImportRow(email='x@example.com')])

        assert result['errors'] == [{'email': 'x@example.com', 'error': 'db down'}]

    def test_get_stats_adds_active_rate(self):
        repo = Mock()
        repo.get_stats.return_value = {
            'total_subscribers': 4, 'email_subscribers': 3, 'sms_subscribers': 1,
            'new_this_month': 1, 'unsubscribed': 1,
        }

        assert SubscriberService(repo).get_stats()['active_rate'] == 75.0

"""
Subscriber Service
Newsletter / SMS list management and bulk import
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from jingo.core.exceptions import ConflictError, NotFoundError
from jingo.domain.subscriber import (
    Subscriber,
    SubscriberCreate,
    SubscriberImportRow,
    SubscriberUpdate,
    UnsubscribeType,
)
from jingo.repositories.subscriber_repository import SubscriberRepository
from jingo.services.date_ranges import start_of_month

logger = logging.getLogger(__name__)


def unsubscribe_changes(unsubscribe_type: UnsubscribeType, now: datetime = None) -> Dict[str, Any]:
    """Flags cleared by an unsubscribe of the given type"""
    changes: Dict[str, Any] = {"unsubscribed_at": now or datetime.now(timezone.utc)}
    if unsubscribe_type in ("email", "both"):
        changes["email_subscribed"] = False
    if unsubscribe_type in ("sms", "both"):
        changes["sms_subscribed"] = False
    return changes


def active_rate(total: int, unsubscribed: int) -> float:
    if not total:
        return 0
    return round((total - unsubscribed) / total * 100, 2)


class SubscriberService:

    def __init__(self, subscriber_repo: SubscriberRepository = None):
        self.subscriber_repo = subscriber_repo or SubscriberRepository()

    def get(self, subscriber_id: int) -> Subscriber:
        subscriber = self.subscriber_repo.find_by_id(subscriber_id)
        if subscriber is None:
            raise NotFoundError("Subscriber not found")
        return subscriber

    def create(self, data: SubscriberCreate) -> Subscriber:
        if self.subscriber_repo.find_by_email(data.email):
            raise ConflictError("A subscriber with this email already exists")

        # Entries added by staff are confirmed on creation
        return self.subscriber_repo.create({
            **data.model_dump(),
            "confirmed_at": datetime.now(timezone.utc),
        })

    def update(self, subscriber_id: int, data: SubscriberUpdate) -> Subscriber:
        existing = self.get(subscriber_id)
        changes = data.model_dump(exclude_unset=True)

        new_email = changes.get('email')
        if new_email and new_email != existing.email and self.subscriber_repo.find_by_email(new_email):
            raise ConflictError("A subscriber with this email already exists")

        return self.subscriber_repo.update(subscriber_id, changes)

    def delete(self, subscriber_id: int) -> None:
        if not self.subscriber_repo.delete(subscriber_id):
            raise NotFoundError("Subscriber not found")

    def unsubscribe(self, subscriber_id: int, unsubscribe_type: UnsubscribeType) -> Subscriber:
        self.get(subscriber_id)
        return self.subscriber_repo.update(subscriber_id, unsubscribe_changes(unsubscribe_type))

    def bulk_import(self, rows: List[SubscriberImportRow], source: str = "import") -> Dict[str, Any]:
        """
        Import subscribers

        Existing emails only get phone and names refreshed; they are never
        re-subscribed. New rows are created confirmed with `source`.
        """
        results = {"created": 0, "updated": 0, "errors": []}

        for row in rows:
            try:
                existing = self.subscriber_repo.find_by_email(row.email)
                if existing:
                    self.subscriber_repo.update(existing.id, {
                        "phone": row.phone or existing.phone,
                        "first_name": row.first_name or existing.first_name,
                        "last_name": row.last_name or existing.last_name,
                    })
                    results['updated'] += 1
                else:
                    self.subscriber_repo.create({
                        **row.model_dump(),
                        "source": source,
                        "confirmed_at": datetime.now(timezone.utc),
                    })
                    results['created'] += 1

            except Exception as e:
                logger.warning(f"Subscriber import failed for {row.email}: {str(e)}")
                results['errors'].append({"email": row.email, "error": str(e)})

        logger.info(f"Subscriber import ({source}): {results['created']} created, {results['updated']} updated")
        return results

    def delete_unsubscribed(self) -> int:
        count = self.subscriber_repo.delete_unsubscribed()
        logger.info(f"Removed {count} fully unsubscribed subscribers")
        return count

    def get_stats(self) -> Dict[str, Any]:
        stats = self.subscriber_repo.get_stats(start_of_month())
        stats['active_rate'] = active_rate(stats['total_subscribers'], stats['unsubscribed'])
        return stats

"""
Subscriber Repository - newsletter and SMS list
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from jingo.core.database import contains_pattern, get_db_connection_dict
from jingo.domain.subscriber import Subscriber


SUBSCRIBER_FIELDS = (
    "email", "phone", "first_name", "last_name",
    "email_subscribed", "sms_subscribed", "source",
    "confirmed_at", "unsubscribed_at",
)

SUBSCRIBER_SELECT = "id, " + ", ".join(SUBSCRIBER_FIELDS) + ", created_at, updated_at"

SORT_COLUMNS = {
    "created_at": "created_at",
    "email": "email",
    "last_name": "last_name",
}


class SubscriberRepository:

    @staticmethod
    def _build_filters(
        search: Optional[str] = None,
        email_subscribed: Optional[bool] = None,
        sms_subscribed: Optional[bool] = None
    ) -> Tuple[str, List[Any]]:
        conditions = []
        params: List[Any] = []

        if search:
            conditions.append("""(
                email ILIKE %s OR first_name ILIKE %s OR last_name ILIKE %s OR phone ILIKE %s
            )""")
            params.extend([contains_pattern(search)] * 4)

        if email_subscribed is not None:
            conditions.append("email_subscribed = %s")
            params.append(email_subscribed)

        if sms_subscribed is not None:
            conditions.append("sms_subscribed = %s")
            params.append(sms_subscribed)

        return (" AND ".join(conditions) if conditions else "1=1"), params

    def find_all(
        self,
        search: Optional[str] = None,
        email_subscribed: Optional[bool] = None,
        sms_subscribed: Optional[bool] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Subscriber], int]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            where_clause, params = self._build_filters(search, email_subscribed, sms_subscribed)
            sort_column = SORT_COLUMNS.get(sort_by, "created_at")
            direction = "ASC" if sort_order == "asc" else "DESC"

            cursor.execute(f"""
                SELECT COUNT(*) as total FROM subscribers WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {SUBSCRIBER_SELECT}
                FROM subscribers
                WHERE {where_clause}
                ORDER BY {sort_column} {direction}
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            return [Subscriber(**row) for row in cursor.fetchall()], total

        finally:
            cursor.close()
            conn.close()

    def find_for_export(
        self,
        email_subscribed: Optional[bool] = None,
        sms_subscribed: Optional[bool] = None
    ) -> List[Subscriber]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            where_clause, params = self._build_filters(None, email_subscribed, sms_subscribed)
            cursor.execute(f"""
                SELECT {SUBSCRIBER_SELECT}
                FROM subscribers
                WHERE {where_clause}
                ORDER BY created_at DESC
            """, params)
            return [Subscriber(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, subscriber_id: int) -> Optional[Subscriber]:
        return self._find_one("id = %s", (subscriber_id,))

    def find_by_email(self, email: str) -> Optional[Subscriber]:
        return self._find_one("email = %s", (email,))

    def _find_one(self, condition: str, params: tuple) -> Optional[Subscriber]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"SELECT {SUBSCRIBER_SELECT} FROM subscribers WHERE {condition}", params)
            row = cursor.fetchone()
            return Subscriber(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def create(self, data: Dict[str, Any]) -> Subscriber:
        columns = [column for column in SUBSCRIBER_FIELDS if column in data]
        values = [data[column] for column in columns]
        placeholders = ", ".join(["%s"] * len(columns))

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO subscribers ({", ".join(columns)}, created_at, updated_at)
                VALUES ({placeholders}, NOW(), NOW())
                RETURNING {SUBSCRIBER_SELECT}
            """, values)

            subscriber = Subscriber(**cursor.fetchone())
            conn.commit()
            return subscriber

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def update(self, subscriber_id: int, data: Dict[str, Any]) -> Optional[Subscriber]:
        columns = [column for column in SUBSCRIBER_FIELDS if column in data]
        assignments = [f"{column} = %s" for column in columns] + ["updated_at = NOW()"]
        values = [data[column] for column in columns]

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE subscribers SET {", ".join(assignments)}
                WHERE id = %s
                RETURNING {SUBSCRIBER_SELECT}
            """, values + [subscriber_id])

            row = cursor.fetchone()
            conn.commit()
            return Subscriber(**row) if row else None

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def delete(self, subscriber_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM subscribers WHERE id = %s RETURNING id", (subscriber_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def delete_unsubscribed(self) -> int:
        """Remove subscribers with neither email nor SMS consent"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                DELETE FROM subscribers
                WHERE email_subscribed = FALSE AND sms_subscribed = FALSE
            """)
            deleted = cursor.rowcount
            conn.commit()
            return deleted

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def get_stats(self, start_of_month: datetime) -> Dict[str, int]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    COUNT(*) AS total_subscribers,
                    COUNT(*) FILTER (WHERE email_subscribed = TRUE) AS email_subscribers,
                    COUNT(*) FILTER (WHERE sms_subscribed = TRUE) AS sms_subscribers,
                    COUNT(*) FILTER (WHERE created_at >= %s) AS new_this_month,
                    COUNT(*) FILTER (WHERE unsubscribed_at IS NOT NULL) AS unsubscribed
                FROM subscribers
            """, (start_of_month,))
            return dict(cursor.fetchone())

        finally:
            cursor.close()
            conn.close()

"""
Customer Repository - Data Access Layer for customers and saved addresses
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from jingo.core.database import contains_pattern, get_db_connection_dict
from jingo.domain.address import Address
from jingo.domain.customer import Customer


CUSTOMER_FIELDS = (
    "email", "first_name", "last_name", "phone", "company", "user_id",
    "email_marketing", "sms_marketing", "notes", "tags",
)

CUSTOMER_COLUMNS = ("id",) + CUSTOMER_FIELDS + (
    "total_orders", "total_spent", "last_order_at", "created_at", "updated_at",
)

CUSTOMER_SELECT = ", ".join(f"cu.{column}" for column in CUSTOMER_COLUMNS)

ADDRESS_FIELDS = (
    "type", "is_default", "first_name", "last_name", "company",
    "address1", "address2", "city", "state", "postal_code", "country", "phone",
)

ADDRESS_SELECT = "id, customer_id, " + ", ".join(ADDRESS_FIELDS) + ", created_at, updated_at"

SORT_COLUMNS = {
    "created_at": "cu.created_at",
    "last_name": "cu.last_name",
    "total_spent": "cu.total_spent",
    "total_orders": "cu.total_orders",
}


class CustomerRepository:
    """
    Repository for Customer data access

    Write methods used by checkout and registration accept an optional
    `conn` so they can join the caller's transaction.
    """

    @staticmethod
    def _map_row_to_customer(row: dict) -> Customer:
        data = {column: row[column] for column in CUSTOMER_COLUMNS if column in row}
        return Customer(**data, order_count=row.get('order_count'))

    # ============================================
    # Lookups
    # ============================================

    def find_by_id(self, customer_id: int) -> Optional[Customer]:
        return self._find_one("cu.id = %s", (customer_id,))

    def find_by_user_id(self, user_id: int) -> Optional[Customer]:
        return self._find_one("cu.user_id = %s", (user_id,))

    def find_by_email(self, email: str, conn=None) -> Optional[Customer]:
        return self._find_one("cu.email = %s", (email,), conn=conn)

    def _find_one(self, condition: str, params: tuple, conn=None) -> Optional[Customer]:
        should_close = conn is None
        if conn is None:
            conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CUSTOMER_SELECT}
                FROM customers cu
                WHERE {condition}
                LIMIT 1
            """, params)

            row = cursor.fetchone()
            return self._map_row_to_customer(row) if row else None

        finally:
            cursor.close()
            if should_close:
                conn.close()

    def find_all(
        self,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Customer], int]:
        """
        Find customers, searching email, names, phone and company

        Each customer carries its order count.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params: List[Any] = []

            if search:
                conditions.append("""(
                    cu.email ILIKE %s OR cu.first_name ILIKE %s OR cu.last_name ILIKE %s
                    OR cu.phone ILIKE %s OR cu.company ILIKE %s
                )""")
                params.extend([contains_pattern(search)] * 5)

            where_clause = " AND ".join(conditions) if conditions else "1=1"
            sort_column = SORT_COLUMNS.get(sort_by, "cu.created_at")
            direction = "ASC" if sort_order == "asc" else "DESC"

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM customers cu
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {CUSTOMER_SELECT},
                    (SELECT COUNT(*) FROM orders o WHERE o.customer_id = cu.id) AS order_count
                FROM customers cu
                WHERE {where_clause}
                ORDER BY {sort_column} {direction}
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            customers = [self._map_row_to_customer(row) for row in cursor.fetchall()]
            return customers, total

        finally:
            cursor.close()
            conn.close()

    def find_linked_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        """Public summary of the user account linked to a customer"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT id, name, email, role FROM users WHERE id = %s", (user_id,))
            row = cursor.fetchone()
            return dict(row) if row else None

        finally:
            cursor.close()
            conn.close()

    def count_orders(self, customer_id: int) -> int:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT COUNT(*) AS total FROM orders WHERE customer_id = %s", (customer_id,))
            return cursor.fetchone()['total']

        finally:
            cursor.close()
            conn.close()

    def find_for_export(self) -> List[Customer]:
        """All customers, newest first, with addresses and order counts"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CUSTOMER_SELECT},
                    (SELECT COUNT(*) FROM orders o WHERE o.customer_id = cu.id) AS order_count
                FROM customers cu
                ORDER BY cu.created_at DESC
            """)
            rows = cursor.fetchall()

            addresses: Dict[int, List[Address]] = {}
            if rows:
                cursor.execute(f"""
                    SELECT {ADDRESS_SELECT}
                    FROM addresses
                    WHERE customer_id = ANY(%s)
                    ORDER BY is_default DESC, created_at DESC
                """, ([row['id'] for row in rows],))
                for address_row in cursor.fetchall():
                    addresses.setdefault(address_row['customer_id'], []).append(Address(**address_row))

            customers = []
            for row in rows:
                customer = self._map_row_to_customer(row)
                customer.addresses = addresses.get(row['id'], [])
                customers.append(customer)
            return customers

        finally:
            cursor.close()
            conn.close()

    def get_stats(self, start_of_month: datetime, start_of_last_month: datetime) -> Dict[str, int]:
        """Raw counts for the customer stats panel"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    COUNT(*) AS total,
                    COUNT(*) FILTER (WHERE created_at >= %s) AS new_this_month,
                    COUNT(*) FILTER (WHERE created_at >= %s AND created_at < %s) AS new_last_month,
                    COUNT(*) FILTER (WHERE email_marketing = TRUE) AS marketing_opt_in
                FROM customers
            """, (start_of_month, start_of_last_month, start_of_month))
            return dict(cursor.fetchone())

        finally:
            cursor.close()
            conn.close()

    # ============================================
    # Writes
    # ============================================

    def create(self, data: Dict[str, Any], conn=None) -> Customer:
        """
        Insert a customer

        Args:
            data: Column values (keys outside CUSTOMER_FIELDS are ignored)
            conn: Connection of an enclosing transaction (optional)
        """
        columns = [column for column in CUSTOMER_FIELDS if column in data]
        values = [data[column] for column in columns]
        placeholders = ", ".join(["%s"] * len(columns))

        should_close = conn is None
        if conn is None:
            conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO customers ({", ".join(columns)}, total_orders, total_spent, created_at, updated_at)
                VALUES ({placeholders}, 0, 0, NOW(), NOW())
                RETURNING {", ".join(CUSTOMER_COLUMNS)}
            """, values)

            customer = self._map_row_to_customer(cursor.fetchone())
            if should_close:
                conn.commit()
            return customer

        except Exception as e:
            if should_close:
                conn.rollback()
            raise e

        finally:
            cursor.close()
            if should_close:
                conn.close()

    def update(self, customer_id: int, data: Dict[str, Any], conn=None) -> Optional[Customer]:
        """Update the provided columns of a customer"""
        columns = [column for column in CUSTOMER_FIELDS if column in data]
        assignments = [f"{column} = %s" for column in columns] + ["updated_at = NOW()"]
        values = [data[column] for column in columns]

        should_close = conn is None
        if conn is None:
            conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE customers SET {", ".join(assignments)}
                WHERE id = %s
                RETURNING {", ".join(CUSTOMER_COLUMNS)}
            """, values + [customer_id])

            row = cursor.fetchone()
            if should_close:
                conn.commit()
            return self._map_row_to_customer(row) if row else None

        except Exception as e:
            if should_close:
                conn.rollback()
            raise e

        finally:
            cursor.close()
            if should_close:
                conn.close()

    def record_order(self, customer_id: int, amount: Optional[Decimal] = None, conn=None) -> None:
        """
        Bump lifetime stats after an order

        total_orders += 1 and last_order_at = now; total_spent grows by
        `amount` when one is given.
        """
        should_close = conn is None
        if conn is None:
            conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE customers SET
                    total_orders = total_orders + 1,
                    total_spent = total_spent + %s,
                    last_order_at = NOW(),
                    updated_at = NOW()
                WHERE id = %s
            """, (amount if amount is not None else Decimal("0"), customer_id))

            if should_close:
                conn.commit()

        except Exception as e:
            if should_close:
                conn.rollback()
            raise e

        finally:
            cursor.close()
            if should_close:
                conn.close()

    def delete(self, customer_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM customers WHERE id = %s RETURNING id", (customer_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    # ============================================
    # Addresses
    # ============================================

    def find_addresses(self, customer_id: int) -> List[Address]:
        """Saved addresses, default first then newest"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {ADDRESS_SELECT}
                FROM addresses
                WHERE customer_id = %s
                ORDER BY is_default DESC, created_at DESC
            """, (customer_id,))
            return [Address(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_address(self, address_id: int, customer_id: Optional[int] = None) -> Optional[Address]:
        """Address by id, optionally restricted to its owner"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            query = f"SELECT {ADDRESS_SELECT} FROM addresses WHERE id = %s"
            params: List[Any] = [address_id]
            if customer_id is not None:
                query += " AND customer_id = %s"
                params.append(customer_id)

            cursor.execute(query, params)
            row = cursor.fetchone()
            return Address(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def count_addresses(self, customer_id: int) -> int:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT COUNT(*) AS total FROM addresses WHERE customer_id = %s", (customer_id,))
            return cursor.fetchone()['total']

        finally:
            cursor.close()
            conn.close()

    def unset_default_addresses(
        self,
        customer_id: int,
        address_type: str,
        exclude_id: Optional[int] = None,
        conn=None
    ) -> None:
        """Clear the default flag on the customer's other addresses of this type"""
        query = """
            UPDATE addresses SET is_default = FALSE, updated_at = NOW()
            WHERE customer_id = %s AND type = %s AND is_default = TRUE
        """
        params: List[Any] = [customer_id, address_type]
        if exclude_id is not None:
            query += " AND id <> %s"
            params.append(exclude_id)

        should_close = conn is None
        if conn is None:
            conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(query, params)
            if should_close:
                conn.commit()

        except Exception as e:
            if should_close:
                conn.rollback()
            raise e

        finally:
            cursor.close()
            if should_close:
                conn.close()

    def create_address(self, customer_id: int, data: Dict[str, Any], conn=None) -> Address:
        columns = [column for column in ADDRESS_FIELDS if column in data]
        values = [data[column] for column in columns]
        placeholders = ", ".join(["%s"] * len(columns))

        should_close = conn is None
        if conn is None:
            conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO addresses (customer_id, {", ".join(columns)}, created_at, updated_at)
                VALUES (%s, {placeholders}, NOW(), NOW())
                RETURNING {ADDRESS_SELECT}
            """, [customer_id] + values)

            address = Address(**cursor.fetchone())
            if should_close:
                conn.commit()
            return address

        except Exception as e:
            if should_close:
                conn.rollback()
            raise e

        finally:
            cursor.close()
            if should_close:
                conn.close()

    def update_address(self, address_id: int, data: Dict[str, Any]) -> Optional[Address]:
        columns = [column for column in ADDRESS_FIELDS if column in data]
        if "customer_id" in data:
            columns = ["customer_id"] + columns
        assignments = [f"{column} = %s" for column in columns] + ["updated_at = NOW()"]
        values = [data[column] for column in columns]

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE addresses SET {", ".join(assignments)}
                WHERE id = %s
                RETURNING {ADDRESS_SELECT}
            """, values + [address_id])

            row = cursor.fetchone()
            conn.commit()
            return Address(**row) if row else None

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def delete_address(self, address_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM addresses WHERE id = %s RETURNING id", (address_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

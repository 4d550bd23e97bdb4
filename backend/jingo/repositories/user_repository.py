"""
User Repository - accounts and credentials
"""
from typing import Optional

from jingo.core.database import get_db_connection_dict
from jingo.domain.user import User


USER_SELECT = "id, email, name, role, password_hash, created_at"


class UserRepository:

    def find_by_id(self, user_id: int) -> Optional[User]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"SELECT {USER_SELECT} FROM users WHERE id = %s", (user_id,))
            row = cursor.fetchone()
            return User(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def find_by_email(self, email: str) -> Optional[User]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"SELECT {USER_SELECT} FROM users WHERE email = %s", (email,))
            row = cursor.fetchone()
            return User(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def create(self, email: str, name: str, password_hash: str, role: str = "CUSTOMER", conn=None) -> User:
        """
        Insert a user

        Args:
            conn: Connection of an enclosing transaction (optional, will create if not provided)
        """
        should_close = conn is None
        if conn is None:
            conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO users (email, name, password_hash, role, created_at, updated_at)
                VALUES (%s, %s, %s, %s, NOW(), NOW())
                RETURNING {USER_SELECT}
            """, (email, name, password_hash, role))

            user = User(**cursor.fetchone())
            if should_close:
                conn.commit()
            return user

        except Exception as e:
            if should_close:
                conn.rollback()
            raise e

        finally:
            cursor.close()
            if should_close:
                conn.close()

    def update_name(self, user_id: int, name: str) -> None:
        self._update(user_id, "name", name)

    def update_password(self, user_id: int, password_hash: str) -> None:
        self._update(user_id, "password_hash", password_hash)

    def _update(self, user_id: int, column: str, value) -> None:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE users SET {column} = %s, updated_at = NOW()
                WHERE id = %s
            """, (value, user_id))
            conn.commit()

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

"""
Category Repository - Data Access Layer for catalog categories
"""
from typing import Any, Dict, List, Optional

from jingo.core.database import get_db_connection_dict
from jingo.domain.category import Category


CATEGORY_FIELDS = ("name", "slug", "description", "image", "position", "featured")

CATEGORY_SELECT = """
    c.id, c.name, c.slug, c.description, c.image, c.position, c.featured,
    c.created_at, c.updated_at,
    (SELECT COUNT(*) FROM products p WHERE p.category_id = c.id) AS product_count
"""


class CategoryRepository:
    """Repository for Category data access"""

    def find_all(self) -> List[Category]:
        """All categories by position, with product counts"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CATEGORY_SELECT}
                FROM categories c
                ORDER BY c.position ASC, c.id ASC
            """)
            return [Category(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, category_id: int) -> Optional[Category]:
        return self._find_one("c.id = %s", (category_id,))

    def find_by_slug(self, slug: str) -> Optional[Category]:
        return self._find_one("c.slug = %s", (slug,))

    def _find_one(self, condition: str, params: tuple) -> Optional[Category]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CATEGORY_SELECT}
                FROM categories c
                WHERE {condition}
            """, params)

            row = cursor.fetchone()
            return Category(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def find_by_names(self, names: List[str]) -> Optional[Category]:
        """First category whose name matches any of the given names"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CATEGORY_SELECT}
                FROM categories c
                WHERE c.name = ANY(%s)
                LIMIT 1
            """, (list(names),))

            row = cursor.fetchone()
            return Category(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def find_conflict(
        self,
        name: Optional[str] = None,
        slug: Optional[str] = None,
        exclude_id: Optional[int] = None
    ) -> Optional[Dict[str, Any]]:
        """Another category that already uses the name or slug"""
        clauses = []
        params: List[Any] = []
        if name:
            clauses.append("name = %s")
            params.append(name)
        if slug:
            clauses.append("slug = %s")
            params.append(slug)
        if not clauses:
            return None

        query = f"SELECT id, name, slug FROM categories WHERE ({' OR '.join(clauses)})"
        if exclude_id is not None:
            query += " AND id <> %s"
            params.append(exclude_id)
        query += " LIMIT 1"

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(query, params)
            row = cursor.fetchone()
            return dict(row) if row else None

        finally:
            cursor.close()
            conn.close()

    def get_max_position(self) -> int:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT COALESCE(MAX(position), 0) AS max_position FROM categories")
            return cursor.fetchone()['max_position']

        finally:
            cursor.close()
            conn.close()

    def create(self, data: Dict[str, Any]) -> Category:
        columns = [column for column in CATEGORY_FIELDS if column in data]
        values = [data[column] for column in columns]
        placeholders = ", ".join(["%s"] * len(columns))

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO categories ({", ".join(columns)}, created_at, updated_at)
                VALUES ({placeholders}, NOW(), NOW())
                RETURNING id, name, slug, description, image, position, featured, created_at, updated_at
            """, values)

            row = cursor.fetchone()
            conn.commit()
            return Category(**row, product_count=0)

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def update(self, category_id: int, data: Dict[str, Any]) -> Optional[Category]:
        columns = [column for column in CATEGORY_FIELDS if column in data]
        assignments = [f"{column} = %s" for column in columns] + ["updated_at = NOW()"]
        values = [data[column] for column in columns]

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE categories SET {", ".join(assignments)}
                WHERE id = %s
                RETURNING id
            """, values + [category_id])

            row = cursor.fetchone()
            conn.commit()

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

        return self.find_by_id(category_id) if row else None

    def delete(self, category_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM categories WHERE id = %s RETURNING id", (category_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

    def reorder(self, positions: List[Dict[str, int]]) -> int:
        """
        Apply new positions in a single transaction

        Args:
            positions: [{"id": 3, "position": 1}, ...]
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            for entry in positions:
                cursor.execute("""
                    UPDATE categories SET position = %s, updated_at = NOW()
                    WHERE id = %s
                """, (entry['position'], entry['id']))

            conn.commit()
            return len(positions)

        except Exception as e:
            conn.rollback()
            raise e

        finally:
            cursor.close()
            conn.close()

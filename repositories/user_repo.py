"""
repositories/user_repo.py
--------------------------
Data access layer for user records.
"""

from typing import Optional

from db.connection import dict_cursor, get_connection, release_connection
from models.user import User
from utils.logger import get_logger

logger = get_logger(__name__)


class UserRepository:
    """Repository for lookups and inserts on the users table."""

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Fetch a user by their login email.

        Returns:
            User or None.
        """
        sql = "SELECT * FROM users WHERE email = %s;"
        conn = get_connection()
        try:
            with dict_cursor(conn) as cur:
                cur.execute(sql, (email,))
                row = cur.fetchone()
                return User.from_row(row) if row else None
        finally:
            release_connection(conn)

    def get_by_id(self, user_id: int) -> Optional[User]:
        """
        Fetch a user by primary key.

        Returns:
            User or None.
        """
        sql = "SELECT * FROM users WHERE id = %s;"
        conn = get_connection()
        try:
            with dict_cursor(conn) as cur:
                cur.execute(sql, (user_id,))
                row = cur.fetchone()
                return User.from_row(row) if row else None
        finally:
            release_connection(conn)

    def add(self, user: User) -> User:
        """
        Insert a new user.

        Args:
            user: The User to persist (its id is ignored).

        Returns:
            The stored User, with its id populated.
        """
        sql = """
            INSERT INTO users (name, email, password)
            VALUES (%s, %s, %s)
            RETURNING *;
        """
        conn = get_connection()
        try:
            with dict_cursor(conn) as cur:
                cur.execute(sql, (user.name, user.email, user.password))
                row = cur.fetchone()
            conn.commit()
            stored = User.from_row(row)
            logger.info(f"Added user #{stored.id} ({stored.email})")
            return stored
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add user {user.email}: {e}")
            raise
        finally:
            release_connection(conn)

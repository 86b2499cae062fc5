"""
Users service - data access for the users table
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import asyncpg
from fastapi import Depends

from users_api.database.connection import get_db_pool
from users_api.models.enums import ErrorType
from users_api.services.base_service import BaseService, ServiceResult, STORAGE_ERRORS

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, name, email, age, created_at"
UPDATABLE_COLUMNS = ("name", "email", "age")

DUPLICATE_EMAIL_MESSAGE = "A user with this email already exists"

LIST_USERS = f"SELECT {USER_COLUMNS} FROM users ORDER BY id"
GET_USER = f"SELECT {USER_COLUMNS} FROM users WHERE id = $1"
INSERT_USER = f"INSERT INTO users (name, email, age) VALUES ($1, $2, $3) RETURNING {USER_COLUMNS}"
DELETE_USER = "DELETE FROM users WHERE id = $1"


def build_update_query(user_id: int, updates: Mapping[str, Any]) -> Tuple[str, List[Any]]:
    """
    Build a parameterized UPDATE touching only the supplied columns

    Args:
        user_id: Primary key of the row to update
        updates: Ordered mapping of column name to new value

    Returns:
        (query, params) with ``$n`` placeholders; the id is the last parameter
    """
    if not updates:
        raise ValueError("At least one field is required for update")

    set_parts = []
    params: List[Any] = []
    for column, value in updates.items():
        if column not in UPDATABLE_COLUMNS:
            raise ValueError(f"Column cannot be updated: {column}")
        params.append(value)
        set_parts.append(f"{column} = ${len(params)}")

    params.append(user_id)
    query = f"UPDATE users SET {', '.join(set_parts)} WHERE id = ${len(params)} RETURNING {USER_COLUMNS}"
    return query, params


def _deleted_count(status: Optional[str]) -> int:
    # asyncpg returns the command tag, e.g. "DELETE 1"
    if not status:
        return 0
    try:
        return int(status.split()[-1])
    except ValueError:
        return 0


class UsersService(BaseService):
    """Service for user CRUD operations"""

    def __init__(self, db_pool):
        super().__init__(db_pool, "users")

    async def list_users(self) -> ServiceResult:
        """All users ordered by id ascending"""
        try:
            async with self.db_pool.acquire() as conn:
                rows = await conn.fetch(LIST_USERS)
        except STORAGE_ERRORS as e:
            return self.storage_failure("read", e)

        return ServiceResult.ok(self.serialize_rows(rows))

    async def get_user(self, user_id: int) -> ServiceResult:
        try:
            async with self.db_pool.acquire() as conn:
                row = await conn.fetchrow(GET_USER, user_id)
        except STORAGE_ERRORS as e:
            return self.storage_failure("read", e)

        if row is None:
            return ServiceResult.fail(ErrorType.NOT_FOUND, f"User not found with ID: {user_id}")
        return ServiceResult.ok(self.serialize_rows([row]))

    async def create_user(self, name: str, email: str, age: Optional[int] = None) -> ServiceResult:
        """
        Insert a new user

        Args:
            name: Display name (required)
            email: Unique email address (required)
            age: Optional age

        Returns:
            ServiceResult with the stored row, including generated id and created_at
        """
        if not name or not email:
            return ServiceResult.fail(ErrorType.INVALID_INPUT, "Name and email are required")

        logger.info(f"Creating new user: {email}")
        try:
            async with self.db_pool.acquire() as conn:
                row = await conn.fetchrow(INSERT_USER, name, email, age)
        except asyncpg.UniqueViolationError as e:
            logger.warning(f"Unique constraint violation: {e}")
            return ServiceResult.fail(ErrorType.CONFLICT, DUPLICATE_EMAIL_MESSAGE)
        except STORAGE_ERRORS as e:
            return self.storage_failure("insert", e)

        if row is None:
            return ServiceResult.fail(ErrorType.STORAGE_UNAVAILABLE, "Insert operation failed - no data returned")
        return ServiceResult.ok(self.serialize_rows([row]))

    async def update_user(self, user_id: int, updates: Mapping[str, Any]) -> ServiceResult:
        """
        Update the supplied columns of one user

        Args:
            user_id: Primary key of the user
            updates: Column name to new value, only for fields the client sent

        Returns:
            ServiceResult with the post-update row
        """
        try:
            query, params = build_update_query(user_id, updates)
        except ValueError as e:
            return ServiceResult.fail(ErrorType.INVALID_INPUT, str(e))

        logger.info(f"Updating user {user_id}: {', '.join(updates)}")
        try:
            async with self.db_pool.acquire() as conn:
                row = await conn.fetchrow(query, *params)
        except asyncpg.UniqueViolationError as e:
            logger.warning(f"Unique constraint violation: {e}")
            return ServiceResult.fail(ErrorType.CONFLICT, DUPLICATE_EMAIL_MESSAGE)
        except STORAGE_ERRORS as e:
            return self.storage_failure("update", e)

        if row is None:
            return ServiceResult.fail(ErrorType.NOT_FOUND, f"User not found with ID: {user_id}")
        return ServiceResult.ok(self.serialize_rows([row]))

    async def delete_user(self, user_id: int) -> ServiceResult:
        try:
            async with self.db_pool.acquire() as conn:
                status = await conn.execute(DELETE_USER, user_id)
        except STORAGE_ERRORS as e:
            return self.storage_failure("delete", e)

        deleted = _deleted_count(status)
        if deleted == 0:
            return ServiceResult.fail(ErrorType.NOT_FOUND, f"User not found with ID: {user_id}")

        logger.info(f"Deleted user {user_id}")
        return ServiceResult.ok(count=deleted)

    async def ping(self) -> ServiceResult:
        """Check out a connection and run a trivial query"""
        try:
            async with self.db_pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except STORAGE_ERRORS as e:
            logger.warning(f"Database ping failed: {e}")
            return ServiceResult.fail(ErrorType.STORAGE_UNAVAILABLE, str(e) or type(e).__name__)
        return ServiceResult.ok()


def get_users_service(db_pool=Depends(get_db_pool)) -> UsersService:
    """FastAPI dependency building a service bound to the app's pool"""
    return UsersService(db_pool)

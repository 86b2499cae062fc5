"""
Base service layer shared by the resource services
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import asyncpg

from users_api.models.enums import ErrorType

logger = logging.getLogger(__name__)

# Failures that mean the store could not run the statement
STORAGE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[ErrorType] = None

    @classmethod
    def ok(cls, data: Optional[List[Dict[str, Any]]] = None, count: Optional[int] = None) -> "ServiceResult":
        data = data if data is not None else []
        return cls(success=True, data=data, count=len(data) if count is None else count)

    @classmethod
    def fail(cls, error_type: ErrorType, error: str) -> "ServiceResult":
        return cls(success=False, error=error, error_type=error_type)

    @property
    def first(self) -> Optional[Dict[str, Any]]:
        return self.data[0] if self.data else None


class BaseService:
    """Base service holding the connection pool for one table"""

    def __init__(self, db_pool, resource_name: str):
        if db_pool is None:
            raise RuntimeError("Database pool not initialized")
        self.db_pool = db_pool
        self.resource_name = resource_name

    @staticmethod
    def serialize_rows(rows: Iterable[Any]) -> List[Dict[str, Any]]:
        """Convert records to plain dicts with ISO-formatted datetimes"""
        data = [dict(row) for row in rows]
        for row in data:
            for key, value in row.items():
                if hasattr(value, 'isoformat'):
                    row[key] = value.isoformat()
        return data

    def storage_failure(self, operation: str, exc: BaseException) -> ServiceResult:
        logger.error(f"{operation} failed for {self.resource_name}: {exc}", exc_info=True)
        return ServiceResult.fail(
            ErrorType.STORAGE_UNAVAILABLE,
            f"Database {operation} failed: {exc}"
        )

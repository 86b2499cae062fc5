"""
Enum definitions for the Users API
"""

from enum import Enum


class ErrorType(str, Enum):
    """
    Failure categories reported by the service layer.

    - INVALID_INPUT: malformed id, missing required field, nothing to update
    - NOT_FOUND: no row matches the requested id
    - CONFLICT: unique constraint violation (duplicate email)
    - STORAGE_UNAVAILABLE: connection or query failure
    """
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"

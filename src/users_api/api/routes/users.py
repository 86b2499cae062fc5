"""
User management API routes
All database access goes through UsersService.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException

from users_api.models.enums import ErrorType
from users_api.models.user import INT32_MAX, UserCreateRequest, UserUpdateRequest
from users_api.services.base_service import ServiceResult
from users_api.services.users_service import UsersService, get_users_service

router = APIRouter()
logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"


def parse_user_id(raw: str) -> int:
    """Parse a path id, accepting only positive integers in the INTEGER range"""
    if not (raw.isascii() and raw.isdigit()):
        raise HTTPException(status_code=400, detail="Invalid user ID")
    user_id = int(raw)
    if user_id < 1 or user_id > INT32_MAX:
        raise HTTPException(status_code=400, detail="Invalid user ID")
    return user_id


def raise_for_result(result: ServiceResult, failure_message: str) -> None:
    """Translate a failed service result into the matching HTTP error"""
    if result.success:
        return
    if result.error_type == ErrorType.NOT_FOUND:
        raise HTTPException(status_code=404, detail=USER_NOT_FOUND)
    elif result.error_type in (ErrorType.INVALID_INPUT, ErrorType.CONFLICT):
        raise HTTPException(status_code=400, detail=result.error)
    else:
        raise HTTPException(status_code=500, detail=failure_message)


@router.get("")
async def list_users(service: UsersService = Depends(get_users_service)):
    """List all users ordered by id"""
    result = await service.list_users()
    raise_for_result(result, "Failed to retrieve users")

    return {
        "success": True,
        "users": result.data,
        "total": result.count
    }


@router.get("/{user_id}")
async def get_user(user_id: str, service: UsersService = Depends(get_users_service)):
    """Get a user by id"""
    result = await service.get_user(parse_user_id(user_id))
    raise_for_result(result, "Failed to retrieve user")

    return {
        "success": True,
        "user": result.first
    }


@router.post("", status_code=201)
async def create_user(request: UserCreateRequest, service: UsersService = Depends(get_users_service)):
    """Create a new user"""
    if not request.name or not request.email:
        raise HTTPException(status_code=400, detail="Name and email are required")

    result = await service.create_user(
        name=request.name,
        email=request.email,
        age=request.age
    )
    raise_for_result(result, "Failed to create user")

    return {
        "success": True,
        "message": "User created successfully",
        "user": result.first
    }


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    request: UserUpdateRequest,
    service: UsersService = Depends(get_users_service)
):
    """Update any subset of name, email and age"""
    parsed_id = parse_user_id(user_id)

    updates = request.supplied_fields()
    if not updates:
        raise HTTPException(status_code=400, detail="At least one field is required for update")

    result = await service.update_user(parsed_id, updates)
    raise_for_result(result, "Failed to update user")

    return {
        "success": True,
        "message": "User updated successfully",
        "user": result.first
    }


@router.delete("/{user_id}")
async def delete_user(user_id: str, service: UsersService = Depends(get_users_service)):
    """Delete a user"""
    result = await service.delete_user(parse_user_id(user_id))
    raise_for_result(result, "Failed to delete user")

    return {
        "success": True,
        "message": "User deleted successfully"
    }

"""
Health check API route
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from users_api.services.users_service import UsersService, get_users_service
from users_api.utils.error_handling import utc_timestamp

router = APIRouter()


@router.get("/health")
async def health_check(service: UsersService = Depends(get_users_service)):
    """
    Health check - pings the database through the pool.

    Always answers with a body: 200 when the database responds, 500 otherwise.
    """
    result = await service.ping()

    if result.success:
        return {
            "success": True,
            "status": "healthy",
            "database": "connected",
            "timestamp": utc_timestamp()
        }

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "status": "unhealthy",
            "database": "disconnected",
            "error": result.error,
            "timestamp": utc_timestamp()
        }
    )

"""
API documentation root and fallback for unknown endpoints
"""

from fastapi import APIRouter, Request

from users_api import __version__
from users_api.utils.error_handling import endpoint_not_found_response

router = APIRouter()

ENDPOINTS = {
    "GET /": "API documentation",
    "GET /users": "List all users",
    "GET /users/:id": "Get a user by ID",
    "POST /users": "Create a new user",
    "PUT /users/:id": "Update a user",
    "DELETE /users/:id": "Delete a user",
    "GET /health": "Check API and database health",
}


@router.get("/")
async def api_documentation():
    return {
        "message": "User Management API",
        "version": __version__,
        "endpoints": ENDPOINTS,
        "examples": {
            "POST /users": {
                "body": {
                    "name": "John Doe",
                    "email": "john.doe@example.com",
                    "age": 25
                }
            }
        }
    }


# Registered last: catches the usual methods on every path no other route
# fully matches. Other methods end in a routing 405, which the HTTP exception
# handler answers with the same 404 envelope.
fallback_router = APIRouter()


@fallback_router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    include_in_schema=False
)
async def endpoint_not_found(path: str, request: Request):
    return endpoint_not_found_response(request)

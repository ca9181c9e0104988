"""
Aggregate v1 API routes.

Convention: Use "" (not "/") for the root path of a segment (e.g. @router.get(""), @router.post(""))
so the route is /api/v1/persons not /api/v1/persons/. This avoids 307 redirects when the
request arrives without a trailing slash.
"""

from fastapi import APIRouter

from person_palace.api.v1.endpoints import persons

api_router = APIRouter()

api_router.include_router(persons.router, prefix="")

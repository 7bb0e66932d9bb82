"""
Aggregate API routes, mounted under /api by the application.

Add new resource routers here.
"""

from fastapi import APIRouter

from company_api.api.endpoints import companies

api_router = APIRouter()

api_router.include_router(companies.router, prefix="")

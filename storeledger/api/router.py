"""
API router: every v1 endpoint mounted under /api/v1.

    /api/v1/health              liveness, readiness, status
    /api/v1/users/me            caller profile
    /api/v1/inventory-records   listing, today's summaries, logging, retention
"""

from fastapi import APIRouter

from storeledger.api.v1 import health, inventory_records, users


API_PREFIX = "/api/v1"

api_router = APIRouter(prefix=API_PREFIX)

for _module in (health, users, inventory_records):
    api_router.include_router(_module.router)

"""
==============================================================================
API v1 Endpoints
==============================================================================

Routers:
--------
- health: Health check endpoints
- users: Caller profile
- inventory_records: Record listing, today's summary, logging, retention

==============================================================================
"""

from . import health, users, inventory_records

__all__ = ["health", "users", "inventory_records"]

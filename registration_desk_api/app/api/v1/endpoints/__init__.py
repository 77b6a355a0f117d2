"""
Endpoint subpackage for API v1.

Each module defines an APIRouter for one area (registrations,
revenue).  The routers are aggregated in ``router.py``.
"""

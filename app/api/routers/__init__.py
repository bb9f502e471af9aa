"""
app/api/routers package marker.
"""

from app.api.routers.admin_businesses import router as admin_businesses_router
from app.api.routers.business_import import router as business_import_router
from app.api.routers.businesses import router as businesses_router

__all__ = [
    "admin_businesses_router",
    "business_import_router",
    "businesses_router",
]

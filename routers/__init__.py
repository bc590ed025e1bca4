# routers/__init__.py

from .auth import router as auth_router
from .leads import router as leads_router
from .csv_transfer import router as csv_transfer_router
from .audit import router as audit_router
from .health import router as health_router

__all__ = [
    "auth_router",
    "leads_router",
    "csv_transfer_router",
    "audit_router",
    "health_router",
]

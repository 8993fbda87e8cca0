"""
API routes module.
"""

from turn_dispatch.api.routes.dispatch import router as dispatch_router
from turn_dispatch.api.routes.health import router as health_router
from turn_dispatch.api.routes.queue import router as queue_router
from turn_dispatch.api.routes.tickets import router as tickets_router

__all__ = ["tickets_router", "dispatch_router", "queue_router", "health_router"]

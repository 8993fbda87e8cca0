"""
API module.
Contains FastAPI application, routes, and middleware.
"""

from turn_dispatch.api.main import create_app, run

__all__ = ["create_app", "run"]

"""
FastAPI integration module.

Serves navigation queries against a live bean index over HTTP.
"""

from .integration import (
    REQUEST_ID_HEADER,
    RequestContextMiddleware,
    create_index_dependency,
    create_navigation_app,
    create_navigation_router,
)

__all__ = [
    "create_index_dependency",
    "create_navigation_router",
    "create_navigation_app",
    "RequestContextMiddleware",
    "REQUEST_ID_HEADER",
]

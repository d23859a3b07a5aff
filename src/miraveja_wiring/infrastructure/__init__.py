"""
Infrastructure layer - External integrations.

This layer contains settings loading, structured logging, the FastAPI
navigation service and testing tools. It depends on both Application and
Domain layers.
"""

from . import config, fastapi_integration, logging, testing

__all__ = [
    "config",
    "fastapi_integration",
    "logging",
    "testing",
]

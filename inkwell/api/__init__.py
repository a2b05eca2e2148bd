"""API module for Inkwell.

Contains versioned API routers.
"""

from inkwell.api.v1 import router as v1_router

__all__ = ["v1_router"]

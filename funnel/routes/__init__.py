"""
API route modules.
"""

from .pipelines import router as pipelines_router
from .sources import router as sources_router
from .content import router as content_router, public_router as content_public_router
from .misc import router as misc_router

__all__ = [
    "pipelines_router",
    "sources_router",
    "content_router",
    "content_public_router",
    "misc_router",
]

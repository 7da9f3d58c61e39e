"""
API Routers Package

Contains all FastAPI routers grouped by functionality.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Routers are thin wrappers around Application Layer use cases
    - All routers follow dependency injection pattern

Available Routers:
    - tasks_router: Image upload and task status/result/error endpoints
"""

from .tasks import router as tasks_router

__all__ = ["tasks_router"]

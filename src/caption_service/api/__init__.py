"""
API Layer - FastAPI Presentation Layer

Responsibility:
    HTTP interface for submitting images and polling task status.
    No business logic.

Contains:
    - FastAPI routers (upload, status, result, error)
    - Request/Response models (Pydantic)
    - Dependency injection setup
    - Middleware configuration (CORS, logging)

Does NOT contain:
    - Business logic (belongs to Domain layer)
    - Orchestration (belongs to Application layer)
    - Redis, broker or filesystem access (belongs to Infrastructure layer)
"""

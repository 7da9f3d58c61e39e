"""
Application Layer - Use Cases and Orchestration

Responsibility:
    Coordinates the task lifecycle between API, Celery workers and
    infrastructure adapters.

Contains:
    - Celery app and task definitions (worker side of the queue)
    - Submit and process use cases
    - Status reader (read side)
    - Ports (Protocols implemented by Infrastructure)

Does NOT contain:
    - Transition rules (belong to Domain layer)
    - HTTP handling (belongs to API layer)
    - Redis, filesystem or subprocess details (belong to Infrastructure layer)
"""

"""
Caption Service

Accepts images, captions them asynchronously on Celery workers and exposes
task status, result and error for polling clients.
"""

__version__ = "0.1.0"

"""
File Storage Infrastructure Module

Exports:
    - ImageStorageService: Atomic image writes under the shared image directory
"""

from .image_storage_service import ImageStorageService

__all__ = ["ImageStorageService"]

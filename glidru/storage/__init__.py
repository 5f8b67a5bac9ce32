"""
Storage abstractions.

Integration Points:
- MetadataStorage -> Cloud Firestore (glidru.storage.firestore)
- MetadataStorage -> in-memory (glidru.storage.local)
"""

from glidru.storage.base import MetadataStorage, Collections
from glidru.storage.local import InMemoryMetadataStorage

__all__ = [
    "MetadataStorage",
    "Collections",
    "InMemoryMetadataStorage",
]

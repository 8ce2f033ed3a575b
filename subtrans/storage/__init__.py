"""Blob storage backends."""

from .stores import (
    DEFAULT_CONTENT_TYPE,
    BlobStore,
    FileBlobStore,
    InMemoryBlobStore,
    RedisBlobStore,
    StoredBlob,
    create_blob_store,
)

__all__ = [
    "BlobStore",
    "DEFAULT_CONTENT_TYPE",
    "FileBlobStore",
    "InMemoryBlobStore",
    "RedisBlobStore",
    "StoredBlob",
    "create_blob_store",
]

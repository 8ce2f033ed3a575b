"""Blob store backends used to persist translation job records."""

from __future__ import annotations

import asyncio
import hashlib
import json
import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Dict, Optional, Protocol, Tuple
from urllib.parse import unquote, urlparse

import redis.asyncio as redis_async
from redis.exceptions import RedisError

from ..errors import StoreUnavailable
from .. import logging_manager as log_mgr

logger = log_mgr.get_logger().getChild("storage")

DEFAULT_CONTENT_TYPE = "application/octet-stream"
_META_SUFFIX = ".meta.json"


@dataclass(frozen=True, slots=True)
class StoredBlob:
    """Bytes read back from a :class:`BlobStore` together with their metadata."""

    data: bytes
    content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def etag(self) -> str:
        return hashlib.md5(self.data).hexdigest()

    def text(self, encoding: str = "utf-8") -> str:
        return self.data.decode(encoding)


class BlobStore(Protocol):
    """Key-value blob storage with a content type per key."""

    async def get(self, key: str) -> Optional[StoredBlob]:
        ...

    async def put(self, key: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> None:
        ...


class InMemoryBlobStore(BlobStore):
    """Process-local store used for tests and single-process development."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: Dict[str, Tuple[bytes, str]] = {}

    async def get(self, key: str) -> Optional[StoredBlob]:
        with self._lock:
            record = self._records.get(key)
        if record is None:
            return None
        data, content_type = record
        return StoredBlob(data=data, content_type=content_type)

    async def put(self, key: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> None:
        with self._lock:
            self._records[key] = (bytes(data), content_type)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._records)


def _safe_relative_key(key: str) -> PurePosixPath:
    relative = PurePosixPath(key)
    if not key or relative.is_absolute() or any(part in {"", ".", ".."} for part in relative.parts):
        raise ValueError(f"Invalid blob key: {key!r}")
    return relative


class FileBlobStore(BlobStore):
    """Filesystem-backed store writing one file per key plus a metadata sidecar."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        return self._root.joinpath(*_safe_relative_key(key).parts)

    async def get(self, key: str) -> Optional[StoredBlob]:
        path = self._path_for(key)
        try:
            return await asyncio.to_thread(self._read, path)
        except OSError as exc:
            logger.warning(
                "Failed to read blob %s",
                key,
                extra={"event": "storage.error", "operation": "get", "error": str(exc)},
            )
            raise StoreUnavailable(f"Unable to read {key!r} from {self._root}") from exc

    async def put(self, key: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> None:
        path = self._path_for(key)
        try:
            await asyncio.to_thread(self._write, path, bytes(data), content_type)
        except OSError as exc:
            logger.warning(
                "Failed to write blob %s",
                key,
                extra={"event": "storage.error", "operation": "put", "error": str(exc)},
            )
            raise StoreUnavailable(f"Unable to write {key!r} to {self._root}") from exc
        logger.debug("Blob %s persisted to %s", key, path)

    @staticmethod
    def _read(path: Path) -> Optional[StoredBlob]:
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        content_type = DEFAULT_CONTENT_TYPE
        meta_path = path.with_name(path.name + _META_SUFFIX)
        try:
            meta = json.loads(meta_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            meta = {}
        except json.JSONDecodeError:
            logger.debug("Ignoring unreadable metadata sidecar %s", meta_path)
            meta = {}
        if isinstance(meta, dict) and isinstance(meta.get("content_type"), str):
            content_type = meta["content_type"]
        return StoredBlob(data=data, content_type=content_type)

    @staticmethod
    def _write(path: Path, data: bytes, content_type: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        meta_payload = json.dumps({"content_type": content_type}).encode("utf-8")
        _atomic_write(path.with_name(path.name + _META_SUFFIX), meta_payload)
        _atomic_write(path, data)


def _atomic_write(path: Path, payload: bytes) -> None:
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile("wb", dir=path.parent, delete=False) as handle:
            temp_path = Path(handle.name)
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, path)
    except OSError:
        if temp_path is not None:
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise


class RedisBlobStore(BlobStore):
    """Redis-backed store keeping each blob in a hash with its content type."""

    def __init__(self, url: str, *, namespace: str = "subtrans") -> None:
        self._client = redis_async.Redis.from_url(url)
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    async def get(self, key: str) -> Optional[StoredBlob]:
        try:
            record = await self._client.hgetall(self._key(key))
        except RedisError as exc:
            logger.warning(
                "Failed to read blob %s from redis",
                key,
                extra={"event": "storage.error", "operation": "get", "error": str(exc)},
            )
            raise StoreUnavailable(f"Unable to read {key!r} from redis") from exc
        if not record or b"data" not in record:
            return None
        content_type = record.get(b"content_type", DEFAULT_CONTENT_TYPE.encode("ascii"))
        return StoredBlob(data=record[b"data"], content_type=content_type.decode("utf-8"))

    async def put(self, key: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> None:
        try:
            await self._client.hset(
                self._key(key),
                mapping={"data": bytes(data), "content_type": content_type},
            )
        except RedisError as exc:
            logger.warning(
                "Failed to write blob %s to redis",
                key,
                extra={"event": "storage.error", "operation": "put", "error": str(exc)},
            )
            raise StoreUnavailable(f"Unable to write {key!r} to redis") from exc

    async def aclose(self) -> None:
        await self._client.aclose()


def create_blob_store(url: Optional[str], *, namespace: str = "subtrans") -> BlobStore:
    """Return the blob store selected by ``url``.

    ``memory://`` (or an empty value) selects the in-process store,
    ``redis://``/``rediss://`` the redis backend, and ``file://`` URLs or plain
    paths the filesystem backend.
    """

    value = (url or "").strip()
    if not value or value == "memory://":
        return InMemoryBlobStore()
    parsed = urlparse(value)
    if parsed.scheme in {"redis", "rediss", "unix"}:
        logger.debug("Using RedisBlobStore under namespace %s", namespace)
        return RedisBlobStore(value, namespace=namespace)
    if parsed.scheme == "file":
        return FileBlobStore(Path(unquote(parsed.path)))
    if parsed.scheme and len(parsed.scheme) > 1:
        raise ValueError(f"Unsupported blob store URL: {value!r}")
    return FileBlobStore(Path(value).expanduser())


__all__ = [
    "BlobStore",
    "DEFAULT_CONTENT_TYPE",
    "FileBlobStore",
    "InMemoryBlobStore",
    "RedisBlobStore",
    "StoredBlob",
    "create_blob_store",
]

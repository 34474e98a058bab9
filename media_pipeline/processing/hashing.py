import asyncio
import hashlib
from typing import Protocol

from media_pipeline.media.exceptions import HashingError


class HashFn(Protocol):
    """Content hashing primitive."""

    async def digest(self, data: bytes) -> bytes: ...


class Sha256HashFn:
    """SHA-256 digest computed off the event loop."""

    async def digest(self, data: bytes) -> bytes:
        try:
            return await asyncio.to_thread(_sha256, data)
        except Exception as exc:
            raise HashingError(f"sha256 digest failed: {exc}") from exc


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()

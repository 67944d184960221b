"""On-disk cache of API responses with expiry times and entity tags."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import struct
import time
from collections.abc import Awaitable, Callable
from contextlib import suppress
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import platformdirs

EXPIRY_FILE_EXT = ".expiry"

_TIMESTAMP = struct.Struct(">Q")

logger = logging.getLogger(__name__)


class CacheError(Exception):
    """Base class of cache failures."""


class NoContentError(CacheError):
    def __init__(self) -> None:
        super().__init__("No content available")


class CacheWriteError(CacheError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"File could not be saved to cache: {cause}")
        self.cause = cause


class CacheReadError(CacheError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"File could not be read from cache: {cause}")
        self.cause = cause


class CacheRemoveError(CacheError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"File could not be removed from cache: {cause}")
        self.cause = cause


class CachePolicy(Enum):
    DEFAULT = "default"  # query the remote when stale
    IGNORE_EXPIRY = "ignore_expiry"  # always use the cached value
    REVALIDATE = "revalidate"  # always query the remote
    IGNORE_CACHED = "ignore_cached"  # ignore the cache altogether


@dataclass(frozen=True)
class CacheExpiry:
    """When a cached entry expires; `at` is None for entries that never do."""

    at: float | None = None
    etag: str | None = None

    @classmethod
    def never(cls) -> CacheExpiry:
        return cls()

    @classmethod
    def expire_in_seconds(cls, seconds: int, etag: str | None = None) -> CacheExpiry:
        if seconds < 0:
            raise ValueError("seconds must not be negative")
        return cls(time.time() + seconds, etag)

    def is_expired(self) -> bool:
        return self.at is not None and time.time() > self.at


class CacheFileState(Enum):
    FRESH = "fresh"
    EXPIRED = "expired"
    NONE = "none"


@dataclass(frozen=True)
class CacheFile:
    state: CacheFileState
    content: bytes | None = None
    etag: str | None = None


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a remote fetch: new content, or confirmation the cache is current."""

    content: bytes | None
    expiry: CacheExpiry

    @classmethod
    def not_modified(cls, expiry: CacheExpiry) -> FetchResult:
        return cls(None, expiry)

    @classmethod
    def modified(cls, content: bytes, expiry: CacheExpiry) -> FetchResult:
        return cls(bytes(content), expiry)


Fetcher = Callable[[str | None], Awaitable[FetchResult]]


class CacheManager:
    """Stores cached resources as files under a root directory."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root)

    @classmethod
    def for_dir(cls, directory: str) -> CacheManager:
        root = Path(platformdirs.user_cache_path()) / directory
        with suppress(OSError):
            root.mkdir(mode=0o744, parents=True, exist_ok=True)
        return cls(root)

    def _cache_path(self, resource: str) -> Path:
        return self.root / resource

    def _meta_path(self, resource: str) -> Path:
        return self.root / (resource + EXPIRY_FILE_EXT)

    def _read_expiry(self, resource: str) -> CacheExpiry:
        try:
            buffer = self._meta_path(resource).read_bytes()
        except FileNotFoundError:
            return CacheExpiry.never()
        except OSError as err:
            raise CacheReadError(err) from err
        if len(buffer) < _TIMESTAMP.size:
            raise CacheReadError(ValueError("truncated expiry file"))
        (seconds,) = _TIMESTAMP.unpack_from(buffer)
        try:
            etag: str | None = buffer[_TIMESTAMP.size :].decode("utf-8")
        except UnicodeDecodeError:
            etag = None
        return CacheExpiry(float(seconds), etag)

    def _read_sync(self, resource: str, policy: CachePolicy) -> CacheFile:
        try:
            content = self._cache_path(resource).read_bytes()
        except FileNotFoundError:
            return CacheFile(CacheFileState.NONE)
        except OSError as err:
            raise CacheReadError(err) from err

        if policy is CachePolicy.IGNORE_EXPIRY:
            return CacheFile(CacheFileState.FRESH, content)
        if policy is CachePolicy.REVALIDATE:
            try:
                expiry = self._read_expiry(resource)
            except CacheError:
                expiry = CacheExpiry.never()
            return CacheFile(CacheFileState.EXPIRED, content, expiry.etag)
        expiry = self._read_expiry(resource)
        state = CacheFileState.EXPIRED if expiry.is_expired() else CacheFileState.FRESH
        return CacheFile(state, content, expiry.etag)

    async def read_cache_file(self, resource: str, policy: CachePolicy) -> CacheFile:
        if policy is CachePolicy.IGNORE_CACHED:
            return CacheFile(CacheFileState.NONE)
        return await asyncio.to_thread(self._read_sync, resource, policy)

    @staticmethod
    def _set_expiry(path: Path, expiry: CacheExpiry) -> None:
        if expiry.at is None:
            return
        content = _TIMESTAMP.pack(int(expiry.at))
        if expiry.etag is not None:
            content += expiry.etag.encode("utf-8")
        try:
            path.write_bytes(content)
        except OSError as err:
            raise CacheWriteError(err) from err

    def _entries(self) -> list[os.DirEntry[str]]:
        try:
            with os.scandir(self.root) as entries:
                return list(entries)
        except OSError as err:
            raise CacheReadError(err) from err

    def _clear_sync(self, regex: re.Pattern[str]) -> None:
        for entry in self._entries():
            if not regex.search(entry.name):
                continue
            logger.info("Removing %s...", entry.name)
            try:
                os.remove(entry.path)
            except OSError as err:
                raise CacheRemoveError(err) from err
            with suppress(OSError):
                os.remove(entry.path + EXPIRY_FILE_EXT)

    async def clear_cache_pattern(self, pattern: str | re.Pattern[str]) -> None:
        """Remove every cached resource whose name matches the pattern."""
        await asyncio.to_thread(self._clear_sync, re.compile(pattern))

    def _expire_sync(self, regex: re.Pattern[str]) -> None:
        for entry in self._entries():
            if not entry.name.endswith(EXPIRY_FILE_EXT):
                continue
            resource = entry.name[: -len(EXPIRY_FILE_EXT)]
            if regex.search(resource):
                self._set_expiry(Path(entry.path), CacheExpiry.expire_in_seconds(0))

    async def set_expired_pattern(self, pattern: str | re.Pattern[str]) -> None:
        """Mark every resource with an expiry file matching the pattern as expired."""
        await asyncio.to_thread(self._expire_sync, re.compile(pattern))

    def _write_sync(self, resource: str, content: bytes, expiry: CacheExpiry) -> None:
        file_error: OSError | None = None
        try:
            self._cache_path(resource).write_bytes(content)
        except OSError as err:
            file_error = err
        meta_error: CacheWriteError | None = None
        try:
            self._set_expiry(self._meta_path(resource), expiry)
        except CacheWriteError as err:
            meta_error = err
        if file_error is not None:
            raise CacheWriteError(file_error) from file_error
        if meta_error is not None:
            raise meta_error

    async def write_cache_file(self, resource: str, content: bytes, expiry: CacheExpiry) -> None:
        await asyncio.to_thread(self._write_sync, resource, bytes(content), expiry)

    async def get_or_write(self, resource: str, policy: CachePolicy, fetch: Fetcher) -> bytes:
        """Return cached content, calling `fetch(etag)` when it is missing or stale."""
        cached = await self.read_cache_file(resource, policy)
        if cached.state is CacheFileState.FRESH:
            return cached.content or b""

        etag = cached.etag if cached.state is CacheFileState.EXPIRED else None
        result = await fetch(etag)
        if result.content is None:
            if cached.state is CacheFileState.NONE:
                raise NoContentError()
            await asyncio.to_thread(self._set_expiry, self._meta_path(resource), result.expiry)
            return cached.content or b""
        await self.write_cache_file(resource, result.content, result.expiry)
        return result.content
"""Cached access to the music service's web API."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from spot.cache import CacheExpiry, CacheManager, CachePolicy, FetchResult
from spot.cache_keys import CacheKey

T = TypeVar("T")

MIN_MAX_AGE = 10

logger = logging.getLogger(__name__)

_PARSE_ERRORS = (ValueError, TypeError, KeyError)


class SpotifyApiError(Exception):
    """Base class of failures reported by the web API client."""


class NoTokenError(SpotifyApiError):
    def __init__(self) -> None:
        super().__init__("No token")


class InvalidTokenError(SpotifyApiError):
    def __init__(self) -> None:
        super().__init__("Invalid token")


class BadStatusError(SpotifyApiError):
    def __init__(self, status: int, message: str = "") -> None:
        super().__init__(f"Request failed with status {status}: {message}")
        self.status = status
        self.message = message


class ParseError(SpotifyApiError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Response could not be parsed: {cause}")
        self.cause = cause


@dataclass(frozen=True)
class SpotifyResponse:
    """A response: its body, or None when the server reported it unchanged."""

    content: str | None
    max_age: int = 0
    etag: str | None = None

    @classmethod
    def ok(cls, content: str, max_age: int = 0, etag: str | None = None) -> SpotifyResponse:
        return cls(content, max_age, etag)

    @classmethod
    def not_modified(cls, max_age: int = 0, etag: str | None = None) -> SpotifyResponse:
        return cls(None, max_age, etag)


Request = Callable[[Any], Awaitable[SpotifyResponse]]


def fetch_result_from_response(response: SpotifyResponse) -> FetchResult:
    """Turn a response into a cache fetch result, kept for at least ten seconds."""
    expiry = CacheExpiry.expire_in_seconds(max(response.max_age, MIN_MAX_AGE), response.etag)
    if response.content is None:
        return FetchResult.not_modified(expiry)
    return FetchResult.modified(response.content.encode("utf-8"), expiry)


def default_cache_policy(has_token: bool) -> CachePolicy:
    """Revalidate stale entries when signed in; otherwise trust the cache."""
    return CachePolicy.DEFAULT if has_token else CachePolicy.IGNORE_EXPIRY


def _decode(raw: bytes, parse: Callable[[Any], T]) -> T:
    return parse(json.loads(raw))


async def cache_get_or_write(
    cache: CacheManager,
    key: CacheKey | str,
    policy: CachePolicy,
    request: Request,
    parse: Callable[[Any], T],
) -> T:
    """Fetch a resource through the cache and parse its JSON body.

    A cached body that cannot be parsed is fetched again, ignoring the cache.
    Cache failures propagate as the cache's own errors.
    """
    cache_key = str(key)

    async def fetch(etag: str | None) -> FetchResult:
        return fetch_result_from_response(await request(etag))

    raw = await cache.get_or_write(cache_key, policy, fetch)
    try:
        return _decode(raw, parse)
    except _PARSE_ERRORS as err:
        logger.debug("Invalid cached content for %s: %s", cache_key, err)

    fresh = await cache.get_or_write(cache_key, CachePolicy.IGNORE_CACHED, fetch)
    try:
        return _decode(fresh, parse)
    except _PARSE_ERRORS as err:
        raise ParseError(err) from err
"""Names of cached API resources and patterns that select them."""

from __future__ import annotations

import re
from dataclasses import dataclass

from spot.cache import CacheError, CacheManager

CACHE_DIR = "spot/net"

ME_TRACKS_CACHE = re.compile(r"^me_tracks_\w+_\w+\.json$")
ME_ALBUMS_CACHE = re.compile(r"^me_albums_\w+_\w+\.json$")
USER_CACHE = re.compile(r"^me_(albums|playlists|tracks)_\w+_\w+\.json$")


@dataclass(frozen=True)
class CacheKey:
    """The file name under which one API resource is cached."""

    raw: str

    def __str__(self) -> str:
        return self.raw

    @classmethod
    def saved_albums(cls, offset: int, limit: int) -> CacheKey:
        return cls(f"me_albums_{offset}_{limit}.json")

    @classmethod
    def saved_tracks(cls, offset: int, limit: int) -> CacheKey:
        return cls(f"me_tracks_{offset}_{limit}.json")

    @classmethod
    def saved_playlists(cls, offset: int, limit: int) -> CacheKey:
        return cls(f"me_playlists_{offset}_{limit}.json")

    @classmethod
    def album(cls, album_id: str) -> CacheKey:
        return cls(f"album_{album_id}.json")

    @classmethod
    def album_liked(cls, album_id: str) -> CacheKey:
        return cls(f"album_liked_{album_id}.json")

    @classmethod
    def album_tracks(cls, album_id: str, offset: int, limit: int) -> CacheKey:
        return cls(f"album_item_{album_id}_{offset}_{limit}.json")

    @classmethod
    def playlist(cls, playlist_id: str) -> CacheKey:
        return cls(f"playlist_{playlist_id}.json")

    @classmethod
    def playlist_tracks(cls, playlist_id: str, offset: int, limit: int) -> CacheKey:
        return cls(f"playlist_item_{playlist_id}_{offset}_{limit}.json")

    @classmethod
    def artist_albums(cls, artist_id: str, offset: int, limit: int) -> CacheKey:
        return cls(f"artist_albums_{artist_id}_{offset}_{limit}.json")

    @classmethod
    def artist(cls, artist_id: str) -> CacheKey:
        return cls(f"artist_{artist_id}.json")

    @classmethod
    def artist_top_tracks(cls, artist_id: str) -> CacheKey:
        return cls(f"artist_top_tracks_{artist_id}.json")

    @classmethod
    def user(cls, user_id: str) -> CacheKey:
        return cls(f"user_{user_id}.json")

    @classmethod
    def user_playlists(cls, user_id: str, offset: int, limit: int) -> CacheKey:
        return cls(f"user_playlists_{user_id}_{offset}_{limit}.json")


def playlist_cache_pattern(playlist_id: str) -> re.Pattern[str]:
    """Pattern selecting the cached entries of one playlist."""
    pid = re.escape(playlist_id)
    return re.compile(rf"^playlist(_{pid}|item_{pid}_\w+_\w+)\.json$")


async def clear_user_cache(manager: CacheManager | None = None) -> bool:
    """Remove the cached data of the signed-in user; False if that failed."""
    if manager is None:
        manager = CacheManager.for_dir(CACHE_DIR)
    try:
        await manager.clear_cache_pattern(USER_CACHE)
    except CacheError:
        return False
    return True
"""Loading of further batches of songs from paginated sources."""

from __future__ import annotations

import gettext
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, TypeVar

from spot.api import SpotifyApiError
from spot.cache import CacheError
from spot.conversions import Batch, SongBatch

A = TypeVar("A")

logger = logging.getLogger(__name__)

_ = gettext.translation("spot", fallback=True).gettext


class SongsSourceKind(Enum):
    PLAYLIST = "playlist"
    ALBUM = "album"
    SAVED_TRACKS = "saved_tracks"


@dataclass(frozen=True)
class SongsSource:
    """Where a list of songs comes from."""

    kind: SongsSourceKind
    id: str | None = None

    @classmethod
    def playlist(cls, playlist_id: str) -> SongsSource:
        return cls(SongsSourceKind.PLAYLIST, playlist_id)

    @classmethod
    def album(cls, album_id: str) -> SongsSource:
        return cls(SongsSourceKind.ALBUM, album_id)

    @classmethod
    def saved_tracks(cls) -> SongsSource:
        return cls(SongsSourceKind.SAVED_TRACKS)


@dataclass(frozen=True)
class BatchQuery:
    source: SongsSource
    batch: Batch


@dataclass(frozen=True)
class ErrorNotification:
    """Action shown to the user when loading a batch failed."""

    message: str


class SongsApi(Protocol):
    def get_playlist_tracks(self, id: str, offset: int, limit: int) -> Awaitable[SongBatch]: ...

    def get_saved_tracks(self, offset: int, limit: int) -> Awaitable[SongBatch]: ...

    def get_album_tracks(self, id: str, offset: int, limit: int) -> Awaitable[SongBatch]: ...


class BatchLoader:
    """Fetches batches of songs and turns them into actions."""

    def __init__(self, api: SongsApi) -> None:
        self.api = api

    async def _fetch(self, query: BatchQuery) -> SongBatch:
        source, batch = query.source, query.batch
        if source.kind is SongsSourceKind.PLAYLIST:
            return await self.api.get_playlist_tracks(source.id, batch.offset, batch.batch_size)
        if source.kind is SongsSourceKind.SAVED_TRACKS:
            return await self.api.get_saved_tracks(batch.offset, batch.batch_size)
        return await self.api.get_album_tracks(source.id, batch.offset, batch.batch_size)

    async def query(
        self, query: BatchQuery, create_action: Callable[[SongBatch], A]
    ) -> A | ErrorNotification:
        """Load the queried batch; on failure return a notification instead."""
        try:
            batch = await self._fetch(query)
        except (SpotifyApiError, CacheError) as err:
            logger.error("Spotify API error: %s", err)
            # Default message for unhandled errors; logs refer to console output.
            return ErrorNotification(_("An error occured. Check logs for details!"))
        return create_action(batch)
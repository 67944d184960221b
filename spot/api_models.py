"""Data models for the music service's web API responses."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar
from urllib.parse import quote_plus

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_BATCH_LIMIT = 50

_NON_WORD = re.compile(r"(\W|\s)+")


def _object(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def _required(data: Any, key: str) -> Any:
    value = _object(data).get(key)
    if value is None:
        raise ValueError(f"missing field {key!r}")
    return value


def _check_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _check_int(value: Any, key: str, unsigned: bool) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} must be an integer")
    if unsigned and value < 0:
        raise ValueError(f"field {key!r} must not be negative")
    return value


def _string(data: Any, key: str) -> str:
    return _check_str(_required(data, key), key)


def _opt_string(data: Any, key: str) -> str | None:
    value = _object(data).get(key)
    return None if value is None else _check_str(value, key)


def _integer(data: Any, key: str, *, unsigned: bool = True) -> int:
    return _check_int(_required(data, key), key, unsigned)


def _opt_integer(data: Any, key: str, *, unsigned: bool = True) -> int | None:
    value = _object(data).get(key)
    return None if value is None else _check_int(value, key, unsigned)


def _boolean(data: Any, key: str) -> bool:
    value = _required(data, key)
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean")
    return value


def _list(data: Any, key: str, parse: Callable[[Any], T]) -> list[T]:
    value = _required(data, key)
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be an array")
    return [parse(item) for item in value]


def _opt_list(data: Any, key: str, parse: Callable[[Any], T]) -> list[T] | None:
    if _object(data).get(key) is None:
        return None
    return _list(data, key, parse)


def _form_encode(value: str) -> str:
    return quote_plus(value, safe="*").replace("~", "%7E")


class SearchType(Enum):
    """Kinds of entity a search can return."""

    ARTIST = "artist"
    ALBUM = "album"


@dataclass
class SearchQuery:
    """A search request against the catalogue."""

    query: str
    types: list[SearchType]
    limit: int
    offset: int

    def to_query_string(self) -> str:
        """Render the query as a URL query string."""
        types = ",".join(search_type.value for search_type in self.types)
        query = _NON_WORD.sub(" ", self.query)
        pairs = [
            ("q", query),
            ("offset", str(self.offset)),
            ("limit", str(self.limit)),
            ("market", "from_token"),
        ]
        serialized = "&".join(f"{_form_encode(k)}={_form_encode(v)}" for k, v in pairs)
        return f"type={types}&{serialized}"


@dataclass
class Page(Generic[T]):
    """One page of a paginated listing."""

    items: list[T] | None = None
    offset: int | None = 0
    limit: int | None = 0
    total: int = 0

    @classmethod
    def from_items(cls, items: Sequence[T]) -> Page[T]:
        """A single page holding all of the given items."""
        items = list(items)
        return cls(items=items, offset=0, limit=len(items), total=len(items))

    @classmethod
    def from_json(cls, data: Any, parse_item: Callable[[Any], T]) -> Page[T]:
        return cls(
            items=_opt_list(data, "items", parse_item),
            offset=_opt_integer(data, "offset"),
            limit=_opt_integer(data, "limit"),
            total=_integer(data, "total"),
        )

    def map(self, mapper: Callable[[T], U]) -> Page[U]:
        """A page with the same paging data and every item mapped."""
        items = None if self.items is None else [mapper(item) for item in self.items]
        return Page(items=items, offset=self.offset, limit=self.limit, total=self.total)

    def batch_limit(self) -> int:
        """The page size, falling back to the number of items, then to 50."""
        limit = self.limit
        if limit is None and self.items is not None:
            limit = len(self.items)
        if limit is None or limit <= 0:
            return DEFAULT_BATCH_LIMIT
        return limit

    def batch_offset(self) -> int:
        return self.offset if self.offset is not None else 0

    def __iter__(self) -> Iterator[T]:
        return iter(self.items or [])


@dataclass
class Image:
    url: str
    height: int | None = None
    width: int | None = None

    @classmethod
    def from_json(cls, data: Any) -> Image:
        return cls(
            url=_string(data, "url"),
            height=_opt_integer(data, "height"),
            width=_opt_integer(data, "width"),
        )


def best_image_for_width(images: Sequence[Image], width: int) -> Image | None:
    """The image whose width is closest to the given width, or None."""
    return min(images, key=lambda image: abs(width - (image.width or 0)), default=None)


@dataclass
class Artist:
    id: str
    name: str
    images: list[Image] | None = None

    @classmethod
    def from_json(cls, data: Any) -> Artist:
        return cls(
            id=_string(data, "id"),
            name=_string(data, "name"),
            images=_opt_list(data, "images", Image.from_json),
        )


@dataclass
class Copyright:
    text: str
    type_: str

    @classmethod
    def from_json(cls, data: Any) -> Copyright:
        obj = _object(data)
        key = "type_" if obj.get("type_") is not None else "type"
        kind = _string(obj, key)
        if len(kind) != 1:
            raise ValueError(f"field {key!r} must be a single character")
        return cls(text=_string(obj, "text"), type_=kind)


@dataclass
class AlbumInfo:
    label: str
    copyrights: list[Copyright]
    total_tracks: int

    @classmethod
    def from_json(cls, data: Any) -> AlbumInfo:
        return cls(
            label=_string(data, "label"),
            copyrights=_list(data, "copyrights", Copyright.from_json),
            total_tracks=_integer(data, "total_tracks"),
        )


@dataclass
class AlbumTrackItem:
    id: str
    uri: str
    name: str
    duration_ms: int
    artists: list[Artist]
    track_number: int | None = None

    @classmethod
    def from_json(cls, data: Any) -> AlbumTrackItem:
        return cls(
            id=_string(data, "id"),
            uri=_string(data, "uri"),
            name=_string(data, "name"),
            duration_ms=_integer(data, "duration_ms", unsigned=False),
            artists=_list(data, "artists", Artist.from_json),
            track_number=_opt_integer(data, "track_number"),
        )


@dataclass
class Album:
    id: str
    name: str
    artists: list[Artist]
    images: list[Image]
    tracks: Page[AlbumTrackItem] | None = None
    release_date: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> Album:
        raw_tracks = _object(data).get("tracks")
        tracks = None if raw_tracks is None else Page.from_json(raw_tracks, AlbumTrackItem.from_json)
        return cls(
            id=_string(data, "id"),
            name=_string(data, "name"),
            artists=_list(data, "artists", Artist.from_json),
            images=_list(data, "images", Image.from_json),
            tracks=tracks,
            release_date=_opt_string(data, "release_date"),
        )


@dataclass
class FullAlbum:
    album: Album
    album_info: AlbumInfo

    @classmethod
    def from_json(cls, data: Any) -> FullAlbum:
        return cls(album=Album.from_json(data), album_info=AlbumInfo.from_json(data))


@dataclass
class TrackItem:
    track: AlbumTrackItem
    album: Album

    @classmethod
    def from_json(cls, data: Any) -> TrackItem:
        return cls(
            track=AlbumTrackItem.from_json(data),
            album=Album.from_json(_required(data, "album")),
        )


@dataclass
class PlaylistTrack:
    is_local: bool
    track: TrackItem | None = None

    @classmethod
    def from_json(cls, data: Any) -> PlaylistTrack:
        is_local = _boolean(data, "is_local")
        raw = _object(data).get("track")
        track = None
        if raw is not None:
            _object(raw)
            try:
                track = TrackItem.from_json(raw)
            except (ValueError, TypeError, KeyError):
                track = None
        return cls(is_local=is_local, track=track)

    def to_track_item(self) -> TrackItem | None:
        """The track, unless it is missing, unreadable or a local file."""
        if self.is_local:
            return None
        return self.track


@dataclass
class SavedTrack:
    added_at: str
    track: TrackItem

    @classmethod
    def from_json(cls, data: Any) -> SavedTrack:
        return cls(
            added_at=_string(data, "added_at"),
            track=TrackItem.from_json(_required(data, "track")),
        )

    def to_track_item(self) -> TrackItem:
        return self.track


@dataclass
class SavedAlbum:
    album: Album

    @classmethod
    def from_json(cls, data: Any) -> SavedAlbum:
        return cls(album=Album.from_json(_required(data, "album")))


@dataclass
class PlaylistOwner:
    id: str
    display_name: str

    @classmethod
    def from_json(cls, data: Any) -> PlaylistOwner:
        return cls(id=_string(data, "id"), display_name=_string(data, "display_name"))


@dataclass
class Playlist:
    id: str
    name: str
    images: list[Image]
    tracks: Page[PlaylistTrack]
    owner: PlaylistOwner

    @classmethod
    def from_json(cls, data: Any) -> Playlist:
        return cls(
            id=_string(data, "id"),
            name=_string(data, "name"),
            images=_list(data, "images", Image.from_json),
            tracks=Page.from_json(_required(data, "tracks"), PlaylistTrack.from_json),
            owner=PlaylistOwner.from_json(_required(data, "owner")),
        )


@dataclass
class User:
    id: str
    display_name: str

    @classmethod
    def from_json(cls, data: Any) -> User:
        return cls(id=_string(data, "id"), display_name=_string(data, "display_name"))


@dataclass
class TopTracks:
    tracks: list[TrackItem] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> TopTracks:
        return cls(tracks=_list(data, "tracks", TrackItem.from_json))


@dataclass
class RawSearchResults:
    albums: Page[Album] | None = None
    artists: Page[Artist] | None = None

    @classmethod
    def from_json(cls, data: Any) -> RawSearchResults:
        obj = _object(data)
        albums = obj.get("albums")
        artists = obj.get("artists")
        return cls(
            albums=None if albums is None else Page.from_json(albums, Album.from_json),
            artists=None if artists is None else Page.from_json(artists, Artist.from_json),
        )
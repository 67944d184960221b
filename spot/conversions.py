"""Conversion of web API models into the application's descriptions."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from spot.api_models import (
    Album,
    AlbumInfo,
    AlbumTrackItem,
    Artist,
    FullAlbum,
    Page,
    Playlist,
    PlaylistTrack,
    RawSearchResults,
    SavedTrack,
    TopTracks,
    TrackItem,
    best_image_for_width,
)

ART_WIDTH = 200

_U32 = 0xFFFFFFFF


@dataclass(frozen=True)
class ArtistRef:
    id: str
    name: str


@dataclass(frozen=True)
class AlbumRef:
    id: str
    name: str


@dataclass(frozen=True)
class UserRef:
    id: str
    display_name: str


@dataclass(frozen=True)
class Batch:
    """Position of one batch of songs within a paginated listing."""

    offset: int
    batch_size: int
    total: int


@dataclass
class SongDescription:
    id: str
    uri: str
    title: str
    artists: list[ArtistRef]
    album: AlbumRef
    duration: int
    track_number: int | None = None
    art: str | None = None


@dataclass
class SongBatch:
    songs: list[SongDescription]
    batch: Batch

    @classmethod
    def empty(cls) -> SongBatch:
        return cls(songs=[], batch=Batch(offset=0, batch_size=0, total=0))


@dataclass
class ArtistSummary:
    id: str
    name: str
    photo: str | None = None


@dataclass
class AlbumReleaseDetails:
    label: str
    copyright_text: str
    total_tracks: int


@dataclass
class AlbumDescription:
    id: str
    title: str
    artists: list[ArtistRef]
    release_date: str | None
    art: str | None
    songs: SongBatch
    is_liked: bool = False


@dataclass
class AlbumFullDescription:
    description: AlbumDescription
    release_details: AlbumReleaseDetails


@dataclass
class PlaylistDescription:
    id: str
    title: str
    art: str | None
    songs: SongBatch
    owner: UserRef


@dataclass
class SearchResults:
    albums: list[AlbumDescription] = field(default_factory=list)
    artists: list[ArtistSummary] = field(default_factory=list)


def _art(images: Iterable[Any] | None) -> str | None:
    image = best_image_for_width(list(images or []), ART_WIDTH)
    return None if image is None else image.url


def _artist_refs(artists: Iterable[Artist]) -> list[ArtistRef]:
    return [ArtistRef(id=artist.id, name=artist.name) for artist in artists]


def _as_track_item(item: Any) -> TrackItem | None:
    if isinstance(item, TrackItem):
        return item
    if isinstance(item, (PlaylistTrack, SavedTrack)):
        return item.to_track_item()
    raise TypeError(f"cannot read a track from {type(item).__name__}")


def _song(item: TrackItem) -> SongDescription:
    track, album = item.track, item.album
    return SongDescription(
        id=track.id,
        track_number=track.track_number,
        uri=track.uri,
        title=track.name,
        artists=_artist_refs(track.artists),
        album=AlbumRef(id=album.id, name=album.name),
        duration=track.duration_ms & _U32,
        art=_art(album.images),
    )


def song_batch_from_page(page: Page[Any]) -> SongBatch:
    """Songs of a page of tracks; local and unreadable tracks are left out."""
    batch = Batch(
        offset=page.batch_offset(),
        batch_size=page.batch_limit(),
        total=page.total,
    )
    songs = [_song(track) for track in map(_as_track_item, page) if track is not None]
    return SongBatch(songs=songs, batch=batch)


def song_batch_from_album_tracks(page: Page[AlbumTrackItem], album: Album) -> SongBatch:
    """Songs of a page of an album's tracks, each attributed to that album."""
    return song_batch_from_page(page.map(lambda track: TrackItem(track=track, album=album)))


def song_batch_from_album(album: Album) -> SongBatch:
    """Songs of an album that carries its tracks; ValueError when it does not."""
    if album.tracks is None:
        raise ValueError(f"album {album.id!r} carries no tracks")
    return song_batch_from_album_tracks(album.tracks, dataclasses.replace(album, tracks=None))


def songs_from_page(page: Page[Any]) -> list[SongDescription]:
    return song_batch_from_page(page).songs


def songs_from_top_tracks(top_tracks: TopTracks) -> list[SongDescription]:
    return songs_from_page(Page.from_items(top_tracks.tracks))


def artist_summary(artist: Artist) -> ArtistSummary:
    return ArtistSummary(id=artist.id, name=artist.name, photo=_art(artist.images))


def album_description(album: Album) -> AlbumDescription:
    try:
        songs = song_batch_from_album(album)
    except ValueError:
        songs = SongBatch.empty()
    return AlbumDescription(
        id=album.id,
        title=album.name,
        artists=_artist_refs(album.artists),
        release_date=album.release_date,
        art=_art(album.images),
        songs=songs,
        is_liked=False,
    )


def release_details(info: AlbumInfo) -> AlbumReleaseDetails:
    copyright_text = ",\n ".join(f"[{c.type_}] {c.text}" for c in info.copyrights)
    return AlbumReleaseDetails(
        label=info.label,
        copyright_text=copyright_text,
        total_tracks=info.total_tracks,
    )


def album_full_description(full_album: FullAlbum) -> AlbumFullDescription:
    return AlbumFullDescription(
        description=album_description(full_album.album),
        release_details=release_details(full_album.album_info),
    )


def playlist_description(playlist: Playlist) -> PlaylistDescription:
    return PlaylistDescription(
        id=playlist.id,
        title=playlist.name,
        art=_art(playlist.images),
        songs=song_batch_from_page(playlist.tracks),
        owner=UserRef(id=playlist.owner.id, display_name=playlist.owner.display_name),
    )


def search_results(raw: RawSearchResults) -> SearchResults:
    albums = raw.albums if raw.albums is not None else Page()
    artists = raw.artists if raw.artists is not None else Page()
    return SearchResults(
        albums=[album_description(album) for album in albums],
        artists=[artist_summary(artist) for artist in artists],
    )
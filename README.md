# spot

Building blocks for a desktop music player that talks to a streaming
service's web API:

- `spot.api_models`: parses the service's JSON responses into records
  (`Album`, `FullAlbum`, `Playlist`, `TrackItem`, `PlaylistTrack`, `Page`, …)
  with their `from_json` class methods, picks artwork with
  `best_image_for_width`, and builds search query strings with `SearchQuery`.
- `spot.conversions`: turns those records into what the application shows:
  `SongBatch`, `AlbumDescription`, `AlbumFullDescription`,
  `PlaylistDescription`, `ArtistSummary` and `SearchResults`. Local and
  unreadable playlist tracks are left out of song batches.
- `spot.cache`: an on-disk response cache with expiry times and entity tags
  (`CacheManager`, `CachePolicy`, `CacheExpiry`, `FetchResult`), and its error
  types (`CacheError` and subclasses).
- `spot.cache_keys`: file names for cached resources (`CacheKey`), patterns
  that select them (`playlist_cache_pattern`, `ME_TRACKS_CACHE`,
  `ME_ALBUMS_CACHE`, `USER_CACHE`) and `clear_user_cache`.
- `spot.api`: glue between HTTP responses and the cache:
  `cache_get_or_write`, `SpotifyResponse`, `fetch_result_from_response`,
  `default_cache_policy`, and the error types `SpotifyApiError`,
  `NoTokenError`, `InvalidTokenError`, `BadStatusError` and `ParseError`.
- `spot.batch_loader`: loads songs batch by batch from a playlist, an album
  or the saved tracks (`BatchLoader`, `BatchQuery`, `SongsSource`); a failed
  load yields an `ErrorNotification` instead of raising.
- `spot.labels`: translatable user-facing labels and `markup_escape`.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install .[test]
pytest
```

## Example

```python
from spot.api_models import SearchQuery, SearchType

query = SearchQuery(query="test??? wow", types=[SearchType.ALBUM], limit=5, offset=0)
print(query.to_query_string())
# type=album&q=test+wow&offset=0&limit=5&market=from_token
```

Cached fetching with the on-disk cache:

```python
import asyncio
from spot.cache import CacheManager, CachePolicy, CacheExpiry, FetchResult

async def fetch(etag):
    return FetchResult.modified(b'{"id": "1"}', CacheExpiry.expire_in_seconds(60, None))

async def run():
    cache = CacheManager.for_dir("spot/net")
    return await cache.get_or_write("album_1.json", CachePolicy.DEFAULT, fetch)

print(asyncio.run(run()))
```

`CacheManager.for_dir` places the cache under the user's cache directory;
`CacheManager(root)` uses any directory you give it.

## What this package does not do

- It makes no HTTP requests. `spot.api.cache_get_or_write` and `BatchLoader`
  take the request functions or API object from the caller.
- It has no user interface, no audio playback and no login handling.
- It installs no command; it is a library only.
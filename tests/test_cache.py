import time

import platformdirs
import pytest

from spot.cache import (
    EXPIRY_FILE_EXT,
    CacheExpiry,
    CacheFileState,
    CacheManager,
    CachePolicy,
    CacheReadError,
    FetchResult,
    NoContentError,
)


class Recorder:
    def __init__(self, result):
        self.result = result
        self.calls = []

    async def __call__(self, etag):
        self.calls.append(etag)
        return self.result


def test_expiry_states():
    assert not CacheExpiry.never().is_expired()
    assert not CacheExpiry.expire_in_seconds(3600).is_expired()
    assert CacheExpiry(at=time.time() - 10).is_expired()


def test_expiry_rejects_negative_seconds():
    with pytest.raises(ValueError):
        CacheExpiry.expire_in_seconds(-1)


@pytest.mark.asyncio
async def test_expiry_file_format(tmp_path):
    cache = CacheManager(tmp_path)
    await cache.write_cache_file("r.json", b"{}", CacheExpiry(at=1, etag="abc"))
    assert (tmp_path / ("r.json" + EXPIRY_FILE_EXT)).read_bytes() == b"\x00\x00\x00\x00\x00\x00\x00\x01abc"
    assert (tmp_path / "r.json").read_bytes() == b"{}"


@pytest.mark.asyncio
async def test_write_then_read_fresh(tmp_path):
    cache = CacheManager(tmp_path)
    await cache.write_cache_file("a.json", b"data", CacheExpiry.expire_in_seconds(3600, "tag"))
    cached = await cache.read_cache_file("a.json", CachePolicy.DEFAULT)
    assert cached.state is CacheFileState.FRESH
    assert cached.content == b"data"
    assert cached.etag == "tag"


@pytest.mark.asyncio
async def test_read_expired(tmp_path):
    cache = CacheManager(tmp_path)
    await cache.write_cache_file("a.json", b"data", CacheExpiry(at=5, etag="tag"))
    cached = await cache.read_cache_file("a.json", CachePolicy.DEFAULT)
    assert cached.state is CacheFileState.EXPIRED
    assert cached.etag == "tag"


@pytest.mark.asyncio
async def test_policies(tmp_path):
    cache = CacheManager(tmp_path)
    await cache.write_cache_file("a.json", b"data", CacheExpiry(at=5, etag="tag"))
    ignore_expiry = await cache.read_cache_file("a.json", CachePolicy.IGNORE_EXPIRY)
    assert (ignore_expiry.state, ignore_expiry.etag) == (CacheFileState.FRESH, None)
    ignored = await cache.read_cache_file("a.json", CachePolicy.IGNORE_CACHED)
    assert ignored.state is CacheFileState.NONE


@pytest.mark.asyncio
async def test_revalidate_is_always_expired(tmp_path):
    cache = CacheManager(tmp_path)
    await cache.write_cache_file("a.json", b"data", CacheExpiry.expire_in_seconds(3600, "tag"))
    cached = await cache.read_cache_file("a.json", CachePolicy.REVALIDATE)
    assert cached.state is CacheFileState.EXPIRED
    assert cached.etag == "tag"


@pytest.mark.asyncio
async def test_missing_file_and_missing_expiry(tmp_path):
    cache = CacheManager(tmp_path)
    missing = await cache.read_cache_file("nope.json", CachePolicy.DEFAULT)
    assert missing.state is CacheFileState.NONE
    await cache.write_cache_file("b.json", b"x", CacheExpiry.never())
    never = await cache.read_cache_file("b.json", CachePolicy.DEFAULT)
    assert (never.state, never.etag) == (CacheFileState.FRESH, None)


@pytest.mark.asyncio
async def test_truncated_expiry_file(tmp_path):
    (tmp_path / "c.json").write_bytes(b"x")
    (tmp_path / ("c.json" + EXPIRY_FILE_EXT)).write_bytes(b"\x00")
    cache = CacheManager(tmp_path)
    with pytest.raises(CacheReadError):
        await cache.read_cache_file("c.json", CachePolicy.DEFAULT)


@pytest.mark.asyncio
async def test_get_or_write_fresh_skips_fetch(tmp_path):
    cache = CacheManager(tmp_path)
    await cache.write_cache_file("a.json", b"old", CacheExpiry.expire_in_seconds(3600))
    fetch = Recorder(FetchResult.modified(b"new", CacheExpiry.never()))
    assert await cache.get_or_write("a.json", CachePolicy.DEFAULT, fetch) == b"old"
    assert fetch.calls == []


@pytest.mark.asyncio
async def test_get_or_write_missing_fetches_and_stores(tmp_path):
    cache = CacheManager(tmp_path)
    fetch = Recorder(FetchResult.modified(b"new", CacheExpiry.expire_in_seconds(60, "e1")))
    assert await cache.get_or_write("a.json", CachePolicy.DEFAULT, fetch) == b"new"
    assert fetch.calls == [None]
    cached = await cache.read_cache_file("a.json", CachePolicy.DEFAULT)
    assert (cached.content, cached.etag) == (b"new", "e1")


@pytest.mark.asyncio
async def test_get_or_write_missing_not_modified(tmp_path):
    cache = CacheManager(tmp_path)
    fetch = Recorder(FetchResult.not_modified(CacheExpiry.expire_in_seconds(60)))
    with pytest.raises(NoContentError, match="No content available"):
        await cache.get_or_write("a.json", CachePolicy.DEFAULT, fetch)


@pytest.mark.asyncio
async def test_get_or_write_expired_not_modified(tmp_path):
    cache = CacheManager(tmp_path)
    await cache.write_cache_file("a.json", b"old", CacheExpiry(at=5, etag="e0"))
    fetch = Recorder(FetchResult.not_modified(CacheExpiry.expire_in_seconds(3600, "e0")))
    assert await cache.get_or_write("a.json", CachePolicy.DEFAULT, fetch) == b"old"
    assert fetch.calls == ["e0"]
    cached = await cache.read_cache_file("a.json", CachePolicy.DEFAULT)
    assert cached.state is CacheFileState.FRESH


@pytest.mark.asyncio
async def test_clear_cache_pattern(tmp_path):
    cache = CacheManager(tmp_path)
    await cache.write_cache_file("me_tracks_0_50.json", b"1", CacheExpiry.expire_in_seconds(60))
    await cache.write_cache_file("album_x.json", b"2", CacheExpiry.expire_in_seconds(60))
    await cache.clear_cache_pattern(r"^me_tracks_\w+_\w+\.json$")
    names = sorted(p.name for p in tmp_path.iterdir())
    assert names == ["album_x.json", "album_x.json" + EXPIRY_FILE_EXT]


@pytest.mark.asyncio
async def test_set_expired_pattern(tmp_path):
    cache = CacheManager(tmp_path)
    await cache.write_cache_file("playlist_1.json", b"1", CacheExpiry.expire_in_seconds(3600, "e"))
    await cache.write_cache_file("playlist_2.json", b"2", CacheExpiry.expire_in_seconds(3600, "e"))
    await cache.set_expired_pattern(r"^playlist_1\.json$")
    time.sleep(0.01)
    first = await cache.read_cache_file("playlist_1.json", CachePolicy.DEFAULT)
    second = await cache.read_cache_file("playlist_2.json", CachePolicy.DEFAULT)
    assert first.state is CacheFileState.EXPIRED
    assert second.state is CacheFileState.FRESH


@pytest.mark.asyncio
async def test_for_dir_creates_directory(tmp_path, monkeypatch):
    monkeypatch.setattr(platformdirs, "user_cache_path", lambda *args, **kwargs: tmp_path)
    cache = CacheManager.for_dir("spot/net")
    assert (tmp_path / "spot" / "net").is_dir()
    await cache.write_cache_file("a.json", b"z", CacheExpiry.never())
    assert (tmp_path / "spot" / "net" / "a.json").read_bytes() == b"z"
    cached = await cache.read_cache_file("a.json", CachePolicy.DEFAULT)
    assert (cached.state, cached.content) == (CacheFileState.FRESH, b"z")
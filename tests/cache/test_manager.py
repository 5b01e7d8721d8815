import asyncio
from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock

import aiohttp
import pytest

from cordcache import ObjectCache
from cordcache.errors import (
    AttachmentFetchError,
    AttachmentIOError,
    AttachmentRequestError,
    EntryMissingError,
    MissingProviderError,
)

from fakes import FakeResponse, FakeSession, make_descriptor


def _cache(provider, clock, session=None, **kwargs):
    return ObjectCache(
        provider,
        session=session or FakeSession(),
        clock=clock,
        attachment_lifetime=kwargs.pop("attachment_lifetime", timedelta(minutes=5)),
        prune_threshold=kwargs.pop("prune_threshold", 1000),
        **kwargs,
    )


def test_constructing_without_provider_fails():
    with pytest.raises(MissingProviderError):
        ObjectCache(None)


def test_constructing_with_invalid_limits_fails(provider):
    with pytest.raises(ValueError):
        ObjectCache(provider, prune_threshold=-1)


def test_limits_default_to_config(provider, monkeypatch):
    from cordcache.config import cache as cache_cfg

    monkeypatch.setattr(cache_cfg, "ATTACHMENT_LIFETIME", 120.0)
    monkeypatch.setattr(cache_cfg, "ATTACHMENT_PRUNE_THRESHOLD", 10)

    cache = ObjectCache(provider)

    assert cache.attachment_lifetime == timedelta(minutes=2)
    assert cache.prune_threshold == 10


@pytest.mark.asyncio
async def test_channel_lookup_hits_provider_once(provider, clock):
    cache = _cache(provider, clock)

    first = await cache.channel("42")
    second = await cache.channel("42")

    assert first == SimpleNamespace(id="42", name="general")
    assert second == SimpleNamespace(id="42", name="general")
    assert provider.fetch_channel.await_count == 1


@pytest.mark.asyncio
async def test_kinds_are_independent(provider, clock):
    cache = _cache(provider, clock)

    await cache.channel("1")
    await cache.user("1")
    await cache.guild("1")

    provider.fetch_channel.assert_awaited_once_with("1")
    provider.fetch_user.assert_awaited_once_with("1")
    provider.fetch_guild.assert_awaited_once_with("1")

    cache.invalidate_user("1")
    stats = cache.stats()
    assert (stats.channels, stats.users, stats.guilds) == (1, 0, 1)


@pytest.mark.asyncio
async def test_invalidate_then_lookup_calls_provider_again(provider, clock):
    cache = _cache(provider, clock)

    await cache.guild(7)
    cache.invalidate_guild(7)
    await cache.guild(7)

    assert provider.fetch_guild.await_count == 2


def test_invalidate_absent_ids_raise(provider, clock):
    cache = _cache(provider, clock)

    for invalidate in (cache.invalidate_channel, cache.invalidate_user, cache.invalidate_guild):
        with pytest.raises(EntryMissingError):
            invalidate("404")


def test_provider_failure_propagates_and_is_retried(clock):
    class NotFound(Exception):
        pass

    provider = SimpleNamespace(
        fetch_channel=AsyncMock(side_effect=[NotFound("Unknown Channel"), SimpleNamespace(id="9")]),
        fetch_user=AsyncMock(),
        fetch_guild=AsyncMock(),
    )
    cache = _cache(provider, clock)

    with pytest.raises(NotFound):
        asyncio.run(cache.channel("9"))
    assert cache.stats().channels == 0

    assert asyncio.run(cache.channel("9")).id == "9"
    assert provider.fetch_channel.await_count == 2


@pytest.mark.asyncio
async def test_attachment_second_fetch_uses_cache(provider, clock):
    descriptor = make_descriptor()
    session = FakeSession({descriptor.url: FakeResponse(body=b"x" * 50)})
    cache = _cache(provider, clock, session)

    first = await cache.get_attachment(descriptor)
    clock.advance(seconds=10)
    second = await cache.get_attachment(descriptor)

    assert session.calls == [descriptor.url]
    assert first.content == second.content == b"x" * 50
    assert (first.name, first.content_type) == ("cat.png", "image/png")
    assert second.last_reference >= first.last_reference
    assert second.last_reference == clock()


@pytest.mark.asyncio
async def test_attachment_copies_do_not_leak_into_store(provider, clock):
    descriptor = make_descriptor()
    cache = _cache(provider, clock, FakeSession(default=FakeResponse(body=b"abc")))

    got = await cache.get_attachment(descriptor)
    got.content = b""

    again = await cache.get_attachment(descriptor)
    assert again.content == b"abc"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failing, error_type",
    [
        (lambda: FakeResponse(status=404), AttachmentFetchError),
        (lambda: FakeResponse(connect_exc=aiohttp.ClientConnectionError("refused")), AttachmentRequestError),
        (lambda: FakeResponse(read_exc=aiohttp.ServerDisconnectedError()), AttachmentIOError),
    ],
    ids=["http-404", "transport", "body-read"],
)
async def test_failed_attachment_fetch_is_not_cached(provider, clock, failing, error_type):
    descriptor = make_descriptor()
    session = FakeSession({descriptor.url: failing()})
    cache = _cache(provider, clock, session)

    with pytest.raises(error_type) as excinfo:
        await cache.get_attachment(descriptor)

    partial = excinfo.value.attachment
    assert (partial.name, partial.content_type, partial.content) == ("cat.png", "image/png", b"")
    assert partial.last_reference is None
    assert excinfo.value.url == descriptor.url
    assert cache.stats().attachments == 0

    session.responses[descriptor.url] = FakeResponse(body=b"ok")
    fetched = await cache.get_attachment(descriptor)

    assert fetched.content == b"ok"
    assert session.calls == [descriptor.url, descriptor.url]


@pytest.mark.asyncio
async def test_http_failure_reports_status(provider, clock):
    descriptor = make_descriptor()
    cache = _cache(provider, clock, FakeSession({descriptor.url: FakeResponse(status=404)}))

    with pytest.raises(AttachmentFetchError) as excinfo:
        await cache.get_attachment(descriptor)

    assert excinfo.value.status == 404


@pytest.mark.asyncio
async def test_missing_content_type_becomes_empty(provider, clock):
    descriptor = make_descriptor(content_type=None)
    cache = _cache(provider, clock, FakeSession(default=FakeResponse(body=b"1")))

    assert (await cache.get_attachment(descriptor)).content_type == ""


@pytest.mark.asyncio
async def test_clean_keeps_fresh_attachment(provider, clock):
    descriptor = make_descriptor()
    cache = _cache(provider, clock, FakeSession(default=FakeResponse(body=b"b" * 50)))

    await cache.get_attachment(descriptor)

    assert cache.clean() == 0
    assert cache.stats().attachments == 1
    assert cache.stats().attachment_bytes == 50


@pytest.mark.asyncio
async def test_clean_drops_stale_attachment_only(provider, clock):
    cache = _cache(provider, clock, FakeSession(default=FakeResponse(body=b"1")))
    stale = make_descriptor(url="https://cdn.example/stale")
    fresh = make_descriptor(url="https://cdn.example/fresh")

    await cache.get_attachment(stale)
    clock.advance(minutes=4)
    await cache.get_attachment(fresh)
    clock.advance(minutes=2)

    assert cache.clean() == 1
    assert "https://cdn.example/fresh" in cache._attachments
    assert "https://cdn.example/stale" not in cache._attachments


@pytest.mark.asyncio
async def test_clean_prunes_above_threshold(provider, clock):
    session = FakeSession(default=FakeResponse(body=b"1"))
    cache = _cache(provider, clock, session, prune_threshold=1000)

    for i in range(1200):
        await cache.get_attachment(make_descriptor(url=f"https://cdn.example/{i}"))
        clock.advance(milliseconds=1)

    assert cache.clean() == 200
    assert cache.stats().attachments <= 1000
    # least recently used go first
    assert "https://cdn.example/0" not in cache._attachments
    assert "https://cdn.example/1199" in cache._attachments


@pytest.mark.asyncio
async def test_clean_never_touches_reference_objects(provider, clock):
    cache = _cache(provider, clock)
    await cache.user("1")
    clock.advance(hours=1)

    cache.clean()
    await cache.user("1")

    assert provider.fetch_user.await_count == 1


@pytest.mark.asyncio
async def test_clear_empties_every_store(provider, clock):
    cache = _cache(provider, clock, FakeSession(default=FakeResponse(body=b"1")))
    await cache.channel("1")
    await cache.get_attachment(make_descriptor())

    cache.clear()

    stats = cache.stats()
    assert (stats.channels, stats.attachments, stats.attachment_bytes) == (0, 0, 0)

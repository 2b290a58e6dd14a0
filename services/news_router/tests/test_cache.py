import fakeredis

from services.news_router.app.cache import InMemoryTTLCache, RedisTTLCache
from shared.utils.redis_client import RedisClient


def test_entry_served_until_ttl_then_expires(clock):
    cache = InMemoryTTLCache(clock=clock.monotonic)
    cache.put("news:us:20:default", {"count": 1}, ttl=240)

    clock.advance(239.9)
    assert cache.get("news:us:20:default") == ({"count": 1}, True)

    clock.advance(0.1)
    assert cache.get("news:us:20:default") == (None, False)
    assert len(cache) == 0


def test_missing_key(clock):
    cache = InMemoryTTLCache(clock=clock.monotonic)
    assert cache.get("news:gb:20:default") == (None, False)


def test_put_replaces_entry_and_ttl(clock):
    cache = InMemoryTTLCache(clock=clock.monotonic)
    cache.put("k", "old", ttl=10)
    clock.advance(8)
    cache.put("k", "new", ttl=10)
    clock.advance(8)
    assert cache.get("k") == ("new", True)


def test_redis_cache_roundtrip_and_ttl():
    fake = fakeredis.FakeRedis(decode_responses=True)
    cache = RedisTTLCache(RedisClient("test", client=fake))

    cache.put("news:us:20:default", {"country": "us", "items": []}, ttl=240)

    assert cache.get("news:us:20:default") == ({"country": "us", "items": []}, True)
    assert 0 < fake.ttl("news-router:news:us:20:default") <= 240


def test_redis_cache_miss_and_unreadable_entry():
    fake = fakeredis.FakeRedis(decode_responses=True)
    cache = RedisTTLCache(RedisClient("test", client=fake))

    assert cache.get("absent") == (None, False)

    fake.set("news-router:broken", "{not json")
    assert cache.get("broken") == (None, False)

"""
Unit tests for the polar model cache.
"""

from datetime import datetime, timedelta, timezone

import pytest

from orc_polar.core.polar.cache import PolarCache, derive_cache_key
from orc_polar.core.polar.models import BoatIdentity, CacheEntry, PolarModel


def make_entry(tag: float = 1.0) -> CacheEntry:
    """A tiny entry; `tag` makes entries distinguishable."""
    return CacheEntry(
        model=PolarModel(wind_steps=(10.0,), angle_speeds={90.0: (tag,)}),
        raw_payload={"tag": tag},
        fetched_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


class TestDeriveCacheKey:
    """Key priority: ref, then country + sail, then name."""

    def test_ref_wins(self):
        identity = BoatIdentity(ref_no="034200028W9", sail_no="13", yacht_name="X", country_id="DEN")
        assert derive_cache_key(identity) == "ref:034200028w9"

    def test_country_and_sail(self):
        identity = BoatIdentity(sail_no="GBR-1234", country_id="GBR", yacht_name="Jolly")
        assert derive_cache_key(identity) == "sail:gbr|gbr-1234"

    def test_name(self):
        assert derive_cache_key(BoatIdentity(yacht_name="  Jolly Roger ", country_id="GBR")) == "name:jolly roger"

    def test_keys_are_case_insensitive(self):
        assert derive_cache_key(BoatIdentity(ref_no="ABC")) == derive_cache_key(BoatIdentity(ref_no="abc"))

    @pytest.mark.parametrize("identity", [
        BoatIdentity(),
        BoatIdentity(sail_no="GBR-1234"),
        BoatIdentity(country_id="GBR"),
        BoatIdentity(yacht_name="   "),
    ])
    def test_unidentifiable_boats_have_no_key(self, identity):
        """Sail number without a country is ambiguous, so it is not cached."""
        assert derive_cache_key(identity) is None


class TestLruEviction:
    """Capacity bound and least-recently-used order."""

    def test_inserting_past_capacity_evicts_oldest(self):
        cache = PolarCache(max_entries=100)

        for i in range(101):
            cache.set(f"ref:{i}", make_entry(i))

        assert len(cache) == 100
        assert cache.get("ref:0") is None
        assert all(cache.get(f"ref:{i}") is not None for i in range(1, 101))

        stats = cache.stats()
        assert stats.hits == 100
        assert stats.misses == 1

    def test_get_refreshes_recency(self):
        cache = PolarCache(max_entries=2)
        cache.set("a", make_entry(1))
        cache.set("b", make_entry(2))

        cache.get("a")
        cache.set("c", make_entry(3))

        assert cache.has("a")
        assert not cache.has("b")
        assert cache.has("c")

    def test_set_replaces_existing_entry(self):
        cache = PolarCache(max_entries=2)
        cache.set("a", make_entry(1))
        cache.set("a", make_entry(2))

        assert len(cache) == 1
        assert cache.get("a").raw_payload == {"tag": 2}

    def test_max_entries_must_be_positive(self):
        with pytest.raises(ValueError):
            PolarCache(max_entries=0)


class TestExpiry:
    """Entries older than the TTL are misses."""

    def test_entry_live_at_exactly_ttl(self, fake_clock):
        cache = PolarCache(ttl=timedelta(hours=24), clock=fake_clock)
        cache.set("a", make_entry())

        fake_clock.advance(24 * 3600)

        assert cache.get("a") is not None

    def test_entry_expires_after_ttl(self, fake_clock):
        cache = PolarCache(ttl=timedelta(hours=24), clock=fake_clock)
        cache.set("a", make_entry())

        fake_clock.advance(24 * 3600 + 1)

        assert cache.get("a") is None
        assert len(cache) == 0
        assert cache.stats().misses == 1

    def test_has_drops_expired_entry(self, fake_clock):
        cache = PolarCache(ttl=timedelta(minutes=5), clock=fake_clock)
        cache.set("a", make_entry())

        fake_clock.advance(301)

        assert not cache.has("a")
        assert len(cache) == 0

    def test_refreshing_an_entry_restarts_its_ttl(self, fake_clock):
        cache = PolarCache(ttl=timedelta(minutes=5), clock=fake_clock)
        cache.set("a", make_entry(1))
        fake_clock.advance(200)
        cache.set("a", make_entry(2))
        fake_clock.advance(200)

        assert cache.get("a").raw_payload == {"tag": 2}


class TestStats:
    """Hit/miss counters and clearing."""

    def test_counts_hits_and_misses(self):
        cache = PolarCache()
        cache.set("a", make_entry())

        cache.get("a")
        cache.get("a")
        cache.get("missing")

        stats = cache.stats()
        assert stats.hits == 2
        assert stats.misses == 1
        assert stats.size == 1
        assert stats.max_size == 100
        assert stats.hit_rate == pytest.approx(2 / 3)

    def test_hit_rate_is_zero_when_unused(self):
        assert PolarCache().stats().hit_rate == 0.0

    def test_has_does_not_count(self):
        cache = PolarCache()
        cache.set("a", make_entry())

        cache.has("a")
        cache.has("b")

        stats = cache.stats()
        assert stats.hits == 0
        assert stats.misses == 0

    def test_clear_resets_everything(self):
        cache = PolarCache()
        cache.set("a", make_entry())
        cache.get("a")
        cache.get("b")

        cache.clear()

        stats = cache.stats()
        assert (stats.size, stats.hits, stats.misses) == (0, 0, 0)

    def test_delete(self):
        cache = PolarCache()
        cache.set("a", make_entry())

        assert cache.delete("a") is True
        assert cache.delete("a") is False

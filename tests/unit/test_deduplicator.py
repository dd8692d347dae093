"""
Webhook dedup and TTL cache tests.

Times are passed explicitly so nothing sleeps.
"""

from models.webhook import WebhookEvent
from services.deduplicator import WebhookDeduplicator
from utils.cache_service import TTLCache


def _event(order_id=500, created_at=1718452800, scope="store/order/created"):
    return WebhookEvent.model_validate({"scope": scope, "data": {"type": "order", "id": order_id}, "created_at": created_at})


class TestTTLCache:
    def test_entry_expires_after_ttl(self):
        cache = TTLCache(ttl_seconds=60)
        cache.set("k", "v", now=1000)
        assert cache.get("k", now=1059) == "v"
        assert cache.get("k", now=1060) is None

    def test_add_if_absent_is_first_writer_wins(self):
        cache = TTLCache(ttl_seconds=60)
        assert cache.add_if_absent("k", now=0) is True
        assert cache.add_if_absent("k", now=30) is False
        assert cache.add_if_absent("k", now=61) is True

    def test_pop_returns_live_value_once(self):
        cache = TTLCache(ttl_seconds=60)
        cache.set("k", "v", now=0)
        assert cache.pop("k", now=10) == "v"
        assert cache.pop("k", now=11) is None

    def test_pop_ignores_expired_value(self):
        cache = TTLCache(ttl_seconds=60)
        cache.set("k", "v", now=0)
        assert cache.pop("k", now=120) is None
        assert len(cache) == 0

    def test_purge_returns_evicted_keys(self):
        cache = TTLCache(ttl_seconds=60)
        cache.set("old", 1, now=0)
        cache.set("new", 2, now=50)
        assert cache.purge_expired(now=70) == ["old"]
        assert len(cache) == 1

    def test_max_size_evicts_oldest(self):
        cache = TTLCache(max_size=2, ttl_seconds=60)
        for key in ("a", "b", "c"):
            cache.set(key, key, now=0)
        assert cache.get("a", now=1) is None
        assert len(cache) == 2


class TestWebhookDeduplicator:
    def test_same_event_processed_once_within_window(self):
        dedup = WebhookDeduplicator(window_seconds=60)
        assert dedup.should_process(_event(), now=0) is True
        assert dedup.should_process(_event(), now=59) is False

    def test_same_event_processed_again_after_window(self):
        dedup = WebhookDeduplicator(window_seconds=60)
        dedup.should_process(_event(), now=0)
        assert dedup.should_process(_event(), now=61) is True

    def test_distinct_identities_are_independent(self):
        dedup = WebhookDeduplicator(window_seconds=60)
        assert dedup.should_process(_event(created_at=1), now=0) is True
        assert dedup.should_process(_event(created_at=2), now=0) is True
        assert dedup.should_process(_event(order_id=501, created_at=1), now=0) is True

    def test_release_allows_redelivery(self):
        dedup = WebhookDeduplicator(window_seconds=60)
        event = _event()
        dedup.should_process(event, now=0)
        dedup.release(event)
        assert dedup.should_process(event, now=1) is True

    def test_purge_counts_expired_keys(self):
        dedup = WebhookDeduplicator(window_seconds=60)
        dedup.should_process(_event(created_at=1), now=0)
        dedup.should_process(_event(created_at=2), now=100)
        assert dedup.purge(now=110) == 1
        assert len(dedup) == 1

    def test_dedup_key_format(self):
        assert _event().dedup_key == "store/order/created-500-1718452800"

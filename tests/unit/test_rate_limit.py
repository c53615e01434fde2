"""Unit tests for the in-memory rate limit store."""

from artibrain.api.middleware.rate_limit import InMemoryRateLimitStore


class TestInMemoryRateLimitStore:
    def test_allows_up_to_limit(self):
        store = InMemoryRateLimitStore()
        
        results = [store.check_and_incr("auth", "1.2.3.4", limit=3, window_seconds=60) for _ in range(4)]
        
        assert results == [True, True, True, False]
    
    def test_identifiers_and_scopes_are_independent(self):
        store = InMemoryRateLimitStore()
        store.check_and_incr("auth", "a", limit=1, window_seconds=60)
        
        assert store.check_and_incr("auth", "b", limit=1, window_seconds=60) is True
        assert store.check_and_incr("api", "a", limit=1, window_seconds=60) is True
        assert store.check_and_incr("auth", "a", limit=1, window_seconds=60) is False
    
    def test_window_expiry_resets_count(self):
        store = InMemoryRateLimitStore()
        store.check_and_incr("api", "u", limit=1, window_seconds=0)
        
        assert store.check_and_incr("api", "u", limit=1, window_seconds=0) is True
    
    def test_cleanup_and_clear(self):
        store = InMemoryRateLimitStore()
        store.check_and_incr("api", "u", limit=1, window_seconds=60)
        store.cleanup_old(max_age_seconds=-1)
        
        assert store.check_and_incr("api", "u", limit=1, window_seconds=60) is True
        store.clear()
        assert store.check_and_incr("api", "u", limit=1, window_seconds=60) is True

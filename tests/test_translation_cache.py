# =============================================================================
# TRANSLATION CACHE TESTS
# =============================================================================

import pytest
import sys
import os
import threading
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nest_translator.models.post import TranslatedFields
from nest_translator.utils.translation_cache import InMemoryTranslationCache, CacheEntry, CacheMetrics

class TestCacheMetrics:
    def test_hit_rate(self):
        metrics = CacheMetrics(hits=3, misses=1)
        assert metrics.hit_rate == 75.0
    
    def test_hit_rate_without_requests(self):
        assert CacheMetrics().hit_rate == 0.0
    
    def test_reset(self):
        metrics = CacheMetrics(hits=1, misses=2, writes=3, rejected_writes=4)
        metrics.reset()
        assert (metrics.hits, metrics.misses, metrics.writes, metrics.rejected_writes) == (0, 0, 0, 0)

class TestCacheEntry:
    def test_touch_updates_access(self):
        entry = CacheEntry(fields=TranslatedFields("t", "s", "c"), created_at=0.0, access_count=0, last_accessed=0.0)
        entry.touch()
        assert entry.access_count == 1
        assert entry.last_accessed > 0.0

class TestInMemoryTranslationCache:
    def setup_method(self):
        self.cache = InMemoryTranslationCache()
        self.fields = TranslatedFields(title="Hola", subtitle="Sub", content="Cuerpo")
    
    def test_miss_then_hit(self):
        assert self.cache.get("/p/a") is None
        self.cache.put_if_absent("/p/a", self.fields)
        assert self.cache.get("/p/a") is self.fields
        assert self.cache.metrics.misses == 1
        assert self.cache.metrics.hits == 1
    
    def test_contains_does_not_touch_metrics(self):
        self.cache.put_if_absent("/p/a", self.fields)
        assert self.cache.contains("/p/a")
        assert not self.cache.contains("/p/b")
        assert self.cache.metrics.hits == 0
        assert self.cache.metrics.misses == 0
    
    def test_first_write_wins(self):
        other = TranslatedFields(title="Otro", subtitle="", content="Distinto")
        assert self.cache.put_if_absent("/p/a", self.fields) is self.fields
        assert self.cache.put_if_absent("/p/a", other) is self.fields
        assert self.cache.get("/p/a") is self.fields
        assert self.cache.metrics.writes == 1
        assert self.cache.metrics.rejected_writes == 1
    
    def test_ids_are_used_verbatim(self):
        self.cache.put_if_absent("/p/a", self.fields)
        assert not self.cache.contains("/p/a/")
        assert not self.cache.contains("p/a")
    
    def test_len_and_info(self):
        self.cache.put_if_absent("/p/a", self.fields)
        self.cache.put_if_absent("/p/b", self.fields)
        self.cache.get("/p/a")
        info = self.cache.get_cache_info()
        assert len(self.cache) == 2
        assert info['total_entries'] == 2
        assert info['total_hits'] == 1
        assert info['total_writes'] == 2
    
    def test_concurrent_writes_store_one_value(self):
        results = []
        
        def writer(n):
            results.append(self.cache.put_if_absent("/p/race", TranslatedFields(str(n), "", "")))
        
        threads = [threading.Thread(target=writer, args=(n,)) for n in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        
        assert len(set(id(r) for r in results)) == 1
        assert self.cache.get("/p/race") is results[0]

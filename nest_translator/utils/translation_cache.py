# =============================================================================
# TRANSLATION CACHE
# =============================================================================
# Process-lifetime store of translated fields keyed by post identifier.
#
# - Write-once: the first value stored for an id is never replaced
# - No eviction and no persistence; entries live as long as the process
# - Thread-safe; hit/miss metrics for the health endpoint
# =============================================================================

import time
import threading
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from ..models.post import TranslatedFields
from ..utils.logger import logger

@dataclass
class CacheEntry:
    """Single cache entry with metadata"""
    fields: TranslatedFields
    created_at: float
    access_count: int
    last_accessed: float
    
    def touch(self):
        """Update last accessed time and increment access count"""
        self.last_accessed = time.time()
        self.access_count += 1

@dataclass 
class CacheMetrics:
    """Cache performance metrics"""
    hits: int = 0
    misses: int = 0
    writes: int = 0
    rejected_writes: int = 0
    
    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate percentage"""
        total = self.hits + self.misses
        return (self.hits / total * 100) if total > 0 else 0.0
    
    def reset(self):
        self.hits = 0
        self.misses = 0
        self.writes = 0
        self.rejected_writes = 0


class TranslationCacheStore(Protocol):
    """What the translation pipeline needs from a cache"""
    
    def get(self, post_id: str) -> Optional[TranslatedFields]: ...
    
    def contains(self, post_id: str) -> bool: ...
    
    def put_if_absent(self, post_id: str, fields: TranslatedFields) -> TranslatedFields: ...


class InMemoryTranslationCache:
    """Thread-safe write-once translation store"""
    
    def __init__(self):
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self.metrics = CacheMetrics()
    
    def get(self, post_id: str) -> Optional[TranslatedFields]:
        with self._lock:
            entry = self._entries.get(post_id)
            if entry is None:
                self.metrics.misses += 1
                return None
            entry.touch()
            self.metrics.hits += 1
            return entry.fields
    
    def contains(self, post_id: str) -> bool:
        """Membership check that does not count as a hit or miss"""
        with self._lock:
            return post_id in self._entries
    
    def put_if_absent(self, post_id: str, fields: TranslatedFields) -> TranslatedFields:
        """Store fields for post_id unless present; return whatever is stored"""
        with self._lock:
            existing = self._entries.get(post_id)
            if existing is not None:
                self.metrics.rejected_writes += 1
                logger.warning(f"Ignoring second cache write for {post_id}")
                return existing.fields
            
            now = time.time()
            self._entries[post_id] = CacheEntry(
                fields=fields,
                created_at=now,
                access_count=0,
                last_accessed=now
            )
            self.metrics.writes += 1
            return fields
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
    
    def get_cache_info(self) -> dict:
        with self._lock:
            return {
                'total_entries': len(self._entries),
                'hit_rate_percent': round(self.metrics.hit_rate, 2),
                'total_hits': self.metrics.hits,
                'total_misses': self.metrics.misses,
                'total_writes': self.metrics.writes,
                'rejected_writes': self.metrics.rejected_writes
            }

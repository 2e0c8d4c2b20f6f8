# =============================================================================
# TRANSLATION PIPELINE
# =============================================================================
# cache check -> prompt assembly -> upstream call -> reply parsing -> cache
#
# Translation is treated as pure for a given post id: the first successful
# result is stored and every later request for that id gets the identical
# value. Concurrent first requests for one id share a single upstream call.
# =============================================================================

import time
import threading
from typing import Optional, Protocol, Tuple

from ..models.post import TranslatedFields
from ..exceptions import UpstreamTranslationError, TranslationValidationError
from ..utils.keyed_lock import KeyedLocks
from ..utils.prompt_builder import PromptBuilder, prompt_builder as default_prompt_builder
from ..utils.reply_parser import parse_translation_reply, has_header_lines
from ..utils.translation_cache import InMemoryTranslationCache, TranslationCacheStore
from ..utils.structured_logger import structured_logger, log_gemini_api_call

STATUS_ALREADY_CACHED = "already_cached"
STATUS_CACHED = "cached"


class UpstreamTranslator(Protocol):
    """Chat-completion capability: prompt in, text out"""
    
    def complete(self, system_prompt: str, user_prompt: str) -> str: ...


class TranslationPipeline:
    def __init__(
        self,
        translator: UpstreamTranslator,
        cache: Optional[TranslationCacheStore] = None,
        prompt_builder: Optional[PromptBuilder] = None
    ):
        self.translator = translator
        self.cache = cache if cache is not None else InMemoryTranslationCache()
        self.prompts = prompt_builder or default_prompt_builder
        self._locks = KeyedLocks()
        self._stats_lock = threading.Lock()
        self._upstream_calls = 0
        self._upstream_failures = 0
    
    def is_cached(self, post_id: str) -> bool:
        return self.cache.contains(post_id)
    
    def translate(self, post_id: str, title: str = '', subtitle: str = '', body_text: str = '') -> TranslatedFields:
        fields, _ = self.translate_with_status(post_id, title, subtitle, body_text)
        return fields
    
    def translate_with_status(
        self,
        post_id: str,
        title: str = '',
        subtitle: str = '',
        body_text: str = ''
    ) -> Tuple[TranslatedFields, bool]:
        """Translate a post; the flag is True when no upstream call was made"""
        self._validate(post_id, title, body_text)
        start_time = time.time()
        
        cached = self.cache.get(post_id)
        if cached is not None:
            self._log_success(post_id, cached, True, start_time)
            return cached, True
        
        with self._locks.hold(post_id):
            # Another request may have finished while we waited for the lock
            if self.cache.contains(post_id):
                cached = self.cache.get(post_id)
                self._log_success(post_id, cached, True, start_time)
                return cached, True
            
            fields = self._translate_upstream(post_id, title or '', subtitle or '', body_text or '')
            stored = self.cache.put_if_absent(post_id, fields)
        
        self._log_success(post_id, stored, False, start_time)
        return stored, False
    
    def prewarm(self, post_id: str, title: str = '', subtitle: str = '', body_text: str = '') -> str:
        """Make sure a translation is cached; returns 'already_cached' or 'cached'"""
        if self.is_cached(post_id):
            return STATUS_ALREADY_CACHED
        
        _, from_cache = self.translate_with_status(post_id, title, subtitle, body_text)
        return STATUS_ALREADY_CACHED if from_cache else STATUS_CACHED
    
    def get_metrics(self) -> dict:
        with self._stats_lock:
            metrics = {
                'upstream_calls': self._upstream_calls,
                'upstream_failures': self._upstream_failures,
                'in_flight': self._locks.active_keys()
            }
        if hasattr(self.cache, 'get_cache_info'):
            metrics['cache'] = self.cache.get_cache_info()
        return metrics
    
    def _validate(self, post_id: str, title: str, body_text: str):
        if not post_id:
            raise TranslationValidationError("id is required", field='id')
        if not (title or '').strip() and not (body_text or '').strip():
            raise TranslationValidationError("At least title or content is required", field='content')
    
    def _translate_upstream(self, post_id: str, title: str, subtitle: str, body_text: str) -> TranslatedFields:
        block = self.prompts.build_translation_block(title, subtitle, body_text)
        system_prompt = self.prompts.build_system_prompt()
        user_prompt = self.prompts.build_translation_prompt(block)
        
        structured_logger.info(
            f"Starting upstream translation: {post_id}",
            event="upstream_translation_start",
            post_id=post_id,
            prompt_length=len(user_prompt),
            cache_miss=True
        )
        
        with self._stats_lock:
            self._upstream_calls += 1
        
        api_start_time = time.time()
        try:
            reply = self.translator.complete(system_prompt, user_prompt)
        except Exception as e:
            self._record_failure(post_id, type(e).__name__, str(e))
            raise UpstreamTranslationError(
                f"Translation failed for {post_id}: {e}",
                post_id=post_id,
                upstream_error=type(e).__name__
            ) from e
        api_duration_ms = (time.time() - api_start_time) * 1000
        
        if not reply or not reply.strip():
            self._record_failure(post_id, "empty_reply", "Upstream returned an empty reply")
            raise UpstreamTranslationError(
                f"Translation failed for {post_id}: empty reply",
                post_id=post_id,
                upstream_error="empty_reply"
            )
        
        log_gemini_api_call(
            post_id=post_id,
            prompt_tokens=len(user_prompt.split()),
            response_tokens=len(reply.split()),
            duration_ms=api_duration_ms
        )
        
        if (title or subtitle) and not has_header_lines(reply):
            structured_logger.log_malformed_reply(post_id, len(reply))
        
        fields = parse_translation_reply(reply, title, subtitle)
        
        if body_text and not fields.content:
            self._record_failure(post_id, "empty_content", "Reply contained no body text")
            raise UpstreamTranslationError(
                f"Translation failed for {post_id}: reply contained no body text",
                post_id=post_id,
                upstream_error="empty_content"
            )
        
        return fields
    
    def _record_failure(self, post_id: str, error_type: str, error_message: str):
        with self._stats_lock:
            self._upstream_failures += 1
        structured_logger.log_translation_failure(post_id, error_type, error_message)
    
    def _log_success(self, post_id: str, fields: TranslatedFields, cache_hit: bool, start_time: float):
        structured_logger.log_translation_success(
            post_id=post_id,
            cache_hit=cache_hit,
            duration_ms=(time.time() - start_time) * 1000,
            content_length=len(fields.content)
        )

# =============================================================================
# TRANSLATION PIPELINE TESTS
# =============================================================================

import pytest
import sys
import os
import time
import threading
from unittest.mock import Mock, patch
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nest_translator.models.post import TranslatedFields
from nest_translator.services.translation_pipeline import TranslationPipeline
from nest_translator.utils.translation_cache import InMemoryTranslationCache
from nest_translator.utils.prompt_builder import PromptBuilder
from nest_translator.exceptions import (
    UpstreamTranslationError,
    TranslationValidationError,
    GeminiUnavailableError
)

REPLY = "# Título\n### Subtítulo\n\nCuerpo traducido."


class CountingTranslator:
    """Upstream stub that records every call"""
    
    def __init__(self, reply=REPLY, delay=0.0):
        self.reply = reply
        self.delay = delay
        self.calls = []
        self._lock = threading.Lock()
    
    def complete(self, system_prompt, user_prompt):
        with self._lock:
            self.calls.append((system_prompt, user_prompt))
        if self.delay:
            time.sleep(self.delay)
        return self.reply


class TestTranslationPipeline:
    def setup_method(self):
        self.translator = CountingTranslator()
        self.cache = InMemoryTranslationCache()
        self.pipeline = TranslationPipeline(self.translator, cache=self.cache)
    
    def test_translate_parses_reply(self):
        fields = self.pipeline.translate("/p/post", "Title", "Subtitle", "Body text.")
        assert fields == TranslatedFields(title="Título", subtitle="Subtítulo", content="Cuerpo traducido.")
    
    def test_prompt_contains_block(self):
        self.pipeline.translate("/p/post", "Title", "Subtitle", "Body text.")
        system_prompt, user_prompt = self.translator.calls[0]
        assert "Latin American Spanish" in system_prompt
        assert user_prompt.endswith("# Title\n\n### Subtitle\n\nBody text.")
    
    def test_custom_prompt_builder(self):
        pipeline = TranslationPipeline(self.translator, prompt_builder=PromptBuilder(publication_name="OtherPub"))
        pipeline.translate("/p/post", "Title", "", "Body")
        assert '"OtherPub"' in self.translator.calls[0][0]
    
    def test_second_request_is_served_from_cache(self):
        first, first_cached = self.pipeline.translate_with_status("/p/post", "Title", "", "Body")
        second, second_cached = self.pipeline.translate_with_status("/p/post", "Title", "", "Body")
        
        assert len(self.translator.calls) == 1
        assert first is second
        assert first_cached is False
        assert second_cached is True
    
    def test_cached_value_ignores_new_source_text(self):
        first = self.pipeline.translate("/p/post", "Title", "", "Body")
        self.translator.reply = "# Otro\n\nDistinto"
        second = self.pipeline.translate("/p/post", "Changed title", "", "Changed body")
        assert second is first
        assert len(self.translator.calls) == 1
    
    def test_is_cached(self):
        assert not self.pipeline.is_cached("/p/post")
        self.pipeline.translate("/p/post", "Title", "", "Body")
        assert self.pipeline.is_cached("/p/post")
    
    def test_concurrent_first_requests_make_one_upstream_call(self):
        self.translator.delay = 0.05
        results = []
        
        def request():
            results.append(self.pipeline.translate("/p/busy", "Title", "", "Body"))
        
        threads = [threading.Thread(target=request) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        
        assert len(self.translator.calls) == 1
        assert len(results) == 10
        assert all(r is results[0] for r in results)
    
    def test_different_ids_translate_independently(self):
        self.pipeline.translate("/p/one", "Title", "", "Body")
        self.pipeline.translate("/p/two", "Title", "", "Body")
        assert len(self.translator.calls) == 2
    
    def test_upstream_failure_is_not_cached(self):
        failing = Mock()
        failing.complete.side_effect = GeminiUnavailableError("Gemini API unavailable: 503")
        pipeline = TranslationPipeline(failing, cache=self.cache)
        
        with pytest.raises(UpstreamTranslationError) as exc_info:
            pipeline.translate("/p/post", "Title", "", "Body")
        
        assert isinstance(exc_info.value.__cause__, GeminiUnavailableError)
        assert exc_info.value.retryable is True
        assert exc_info.value.post_id == "/p/post"
        assert not self.cache.contains("/p/post")
        
        failing.complete.side_effect = None
        failing.complete.return_value = REPLY
        assert pipeline.translate("/p/post", "Title", "", "Body").title == "Título"
    
    def test_empty_reply_is_an_error(self):
        pipeline = TranslationPipeline(CountingTranslator(reply="   \n"), cache=self.cache)
        with pytest.raises(UpstreamTranslationError):
            pipeline.translate("/p/post", "Title", "", "Body")
        assert not self.cache.contains("/p/post")
    
    def test_reply_without_body_is_an_error(self):
        pipeline = TranslationPipeline(CountingTranslator(reply="# Solo título"), cache=self.cache)
        with pytest.raises(UpstreamTranslationError):
            pipeline.translate("/p/post", "Title", "", "Body")
    
    def test_title_only_request(self):
        pipeline = TranslationPipeline(CountingTranslator(reply="# Solo título"))
        fields = pipeline.translate("/p/post", "Only title", "", "")
        assert fields == TranslatedFields(title="Solo título", subtitle="", content="")
    
    @patch('nest_translator.services.translation_pipeline.structured_logger')
    def test_headerless_reply_is_logged_and_falls_back(self, mock_logger):
        pipeline = TranslationPipeline(CountingTranslator(reply="Solo cuerpo."))
        fields = pipeline.translate("/p/post", "Title", "Subtitle", "Body")
        
        assert fields.title == "Title"
        assert fields.subtitle == "Subtitle"
        assert fields.content == "Solo cuerpo."
        mock_logger.log_malformed_reply.assert_called_once_with("/p/post", len("Solo cuerpo."))
    
    def test_missing_id_rejected_before_upstream(self):
        with pytest.raises(TranslationValidationError):
            self.pipeline.translate("", "Title", "", "Body")
        assert self.translator.calls == []
    
    def test_missing_title_and_content_rejected_before_upstream(self):
        with pytest.raises(TranslationValidationError):
            self.pipeline.translate("/p/post", "", "Only subtitle", "")
        assert self.translator.calls == []
    
    def test_whitespace_only_text_rejected_before_upstream(self):
        with pytest.raises(TranslationValidationError):
            self.pipeline.translate("/p/post", "  ", "", "\n\n  ")
        assert self.translator.calls == []
        assert not self.pipeline.is_cached("/p/post")
    
    def test_prewarm(self):
        assert self.pipeline.prewarm("/p/post", "Title", "", "Body") == "cached"
        assert self.pipeline.prewarm("/p/post", "Title", "", "Body") == "already_cached"
        assert len(self.translator.calls) == 1
    
    def test_metrics(self):
        self.pipeline.translate("/p/post", "Title", "", "Body")
        self.pipeline.translate("/p/post", "Title", "", "Body")
        metrics = self.pipeline.get_metrics()
        
        assert metrics['upstream_calls'] == 1
        assert metrics['upstream_failures'] == 0
        assert metrics['in_flight'] == 0
        assert metrics['cache']['total_entries'] == 1
        assert metrics['cache']['total_hits'] == 1

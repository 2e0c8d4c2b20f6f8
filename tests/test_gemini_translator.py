# =============================================================================
# GEMINI TRANSLATOR TESTS
# =============================================================================

import pytest
import sys
import os
from unittest.mock import MagicMock, patch
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nest_translator.services.gemini_translator import GeminiTranslator, map_gemini_error, parse_retry_after
from nest_translator.exceptions import (
    GeminiAPIError,
    GeminiQuotaError,
    GeminiUnavailableError,
    GeminiRateLimitError,
    GeminiAuthError,
    ConfigurationError
)

API_KEY = "AIzaSyTestKey0123456789abcdefghijklmn"


class TestGeminiErrorMapping:
    def test_quota(self):
        assert isinstance(map_gemini_error(Exception("Quota exceeded for project")), GeminiQuotaError)
    
    def test_rate_limit(self):
        assert isinstance(map_gemini_error(Exception("429 Too Many Requests")), GeminiRateLimitError)
    
    def test_auth(self):
        assert isinstance(map_gemini_error(Exception("Invalid API key provided")), GeminiAuthError)
    
    def test_unavailable(self):
        assert isinstance(map_gemini_error(Exception("503 Service Unavailable")), GeminiUnavailableError)
        assert isinstance(map_gemini_error(Exception("Deadline Exceeded")), GeminiUnavailableError)
    
    def test_other(self):
        error = map_gemini_error(Exception("something odd"))
        assert type(error) is GeminiAPIError
    
    def test_quota_with_retry_hint_is_rate_limit(self):
        error = map_gemini_error(Exception(
            "429 You exceeded your current quota, please check your plan and billing details. "
            "Please retry in 27.8s."
        ))
        
        assert isinstance(error, GeminiRateLimitError)
        assert error.retry_after == 27.8
    
    def test_rate_limit_without_hint(self):
        assert map_gemini_error(Exception("429 Too Many Requests")).retry_after is None
    
    def test_parse_retry_after(self):
        assert parse_retry_after("Please retry in 3s.") == 3.0
        assert parse_retry_after("retry_delay {\n  seconds: 41\n}") == 41.0
        assert parse_retry_after("no hint here") is None


class TestGeminiTranslator:
    def setup_method(self):
        self.model = MagicMock()
        self.model.generate_content.return_value = MagicMock(text="# Hola\n\nMundo")
    
    @patch('nest_translator.services.gemini_translator.genai')
    def test_initialization(self, mock_genai):
        translator = GeminiTranslator(api_key=API_KEY, model_name="gemini-test", max_output_tokens=1024)
        
        assert translator.client_initialized is True
        mock_genai.configure.assert_called_once_with(api_key=API_KEY)
    
    @patch('nest_translator.services.gemini_translator.settings')
    def test_initialization_without_key(self, mock_settings):
        mock_settings.GOOGLE_API_KEY = None
        mock_settings.GEMINI_MODEL = "gemini-test"
        mock_settings.GEMINI_MAX_OUTPUT_TOKENS = 1024
        
        translator = GeminiTranslator()
        
        assert translator.client_initialized is False
        with pytest.raises(ConfigurationError):
            translator.complete("system", "user")
    
    @patch('nest_translator.services.gemini_translator.genai')
    def test_complete_returns_reply_text(self, mock_genai):
        mock_genai.GenerativeModel.return_value = self.model
        translator = GeminiTranslator(api_key=API_KEY, model_name="gemini-test", max_output_tokens=1024)
        
        assert translator.complete("system", "user") == "# Hola\n\nMundo"
        mock_genai.GenerativeModel.assert_called_once_with(
            "gemini-test",
            system_instruction="system",
            generation_config={'max_output_tokens': 1024, 'temperature': 0.3}
        )
        self.model.generate_content.assert_called_once_with("user")
    
    @patch('nest_translator.services.gemini_translator.genai')
    def test_model_reused_for_same_system_prompt(self, mock_genai):
        mock_genai.GenerativeModel.return_value = self.model
        translator = GeminiTranslator(api_key=API_KEY, model_name="gemini-test", max_output_tokens=1024)
        
        translator.complete("system", "one")
        translator.complete("system", "two")
        
        assert mock_genai.GenerativeModel.call_count == 1
        assert self.model.generate_content.call_count == 2
    
    @patch('nest_translator.services.gemini_translator.genai')
    def test_empty_reply_raises(self, mock_genai):
        self.model.generate_content.return_value = MagicMock(text="  ")
        mock_genai.GenerativeModel.return_value = self.model
        translator = GeminiTranslator(api_key=API_KEY, model_name="gemini-test", max_output_tokens=1024)
        
        with pytest.raises(GeminiAPIError):
            translator.complete("system", "user")
    
    @patch('nest_translator.utils.retry.time.sleep')
    @patch('nest_translator.services.gemini_translator.genai')
    def test_unavailable_is_retried(self, mock_genai, mock_sleep):
        self.model.generate_content.side_effect = [
            Exception("503 Service Unavailable"),
            MagicMock(text="Hola")
        ]
        mock_genai.GenerativeModel.return_value = self.model
        translator = GeminiTranslator(api_key=API_KEY, model_name="gemini-test", max_output_tokens=1024)
        
        assert translator.complete("system", "user") == "Hola"
        assert self.model.generate_content.call_count == 2
        mock_sleep.assert_called_once()
    
    @patch('nest_translator.utils.retry.time.sleep')
    @patch('nest_translator.services.gemini_translator.genai')
    def test_quota_is_not_retried(self, mock_genai, mock_sleep):
        self.model.generate_content.side_effect = Exception("Quota exceeded")
        mock_genai.GenerativeModel.return_value = self.model
        translator = GeminiTranslator(api_key=API_KEY, model_name="gemini-test", max_output_tokens=1024)
        
        with pytest.raises(GeminiQuotaError):
            translator.complete("system", "user")
        assert self.model.generate_content.call_count == 1
        mock_sleep.assert_not_called()
    
    @patch('nest_translator.utils.retry.time.sleep')
    @patch('nest_translator.services.gemini_translator.genai')
    def test_gives_up_after_max_attempts(self, mock_genai, mock_sleep):
        self.model.generate_content.side_effect = Exception("Rate limit reached")
        mock_genai.GenerativeModel.return_value = self.model
        translator = GeminiTranslator(api_key=API_KEY, model_name="gemini-test", max_output_tokens=1024)
        
        with pytest.raises(GeminiRateLimitError):
            translator.complete("system", "user")
        assert self.model.generate_content.call_count == 3
    
    @patch('nest_translator.utils.retry.time.sleep')
    @patch('nest_translator.services.gemini_translator.genai')
    def test_rate_limit_waits_for_retry_hint(self, mock_genai, mock_sleep):
        self.model.generate_content.side_effect = [
            Exception("429 Resource has been exhausted (e.g. check quota). Please retry in 4s."),
            MagicMock(text="Hola")
        ]
        mock_genai.GenerativeModel.return_value = self.model
        translator = GeminiTranslator(api_key=API_KEY, model_name="gemini-test", max_output_tokens=1024)
        
        assert translator.complete("system", "user") == "Hola"
        mock_sleep.assert_called_once_with(4.0)

# =============================================================================
# GEMINI TRANSLATION SERVICE
# =============================================================================
# Upstream translation capability: system directive + prompt in, text out.
# SDK failures are mapped onto the Gemini exception hierarchy and transient
# ones are retried with backoff.

import re
import time
import google.generativeai as genai
from typing import Optional

from ..config.settings import settings
from ..utils.logger import logger
from ..utils.retry import retry_with_backoff, RetryConfig
from ..exceptions import (
    GeminiAPIError,
    GeminiQuotaError,
    GeminiUnavailableError,
    GeminiRateLimitError,
    GeminiAuthError,
    NetworkError,
    ConfigurationError
)


# "Please retry in 27.8s." in the message, or the retry_delay { seconds: 27 } detail
RETRY_HINT_RE = re.compile(r'retry in (\d+(?:\.\d+)?)\s*s|retry_delay\s*\{\s*seconds:\s*(\d+)', re.IGNORECASE)


def parse_retry_after(message: str) -> Optional[float]:
    """Seconds the API asked us to wait, if the error says"""
    match = RETRY_HINT_RE.search(message or '')
    if not match:
        return None
    return float(match.group(1) or match.group(2))


def map_gemini_error(api_error: Exception) -> GeminiAPIError:
    """Translate an SDK exception into the matching Gemini error"""
    text = str(api_error).lower()
    retry_after = parse_retry_after(text)
    over_quota = "quota" in text or "billing" in text
    
    # A quota error with a retry hint is a per-minute limit, not an exhausted plan
    if over_quota and retry_after is None:
        return GeminiQuotaError(f"Gemini API quota exceeded: {api_error}")
    if over_quota or "rate limit" in text or "429" in text or "resource exhausted" in text:
        return GeminiRateLimitError(f"Gemini API rate limit: {api_error}", retry_after=retry_after)
    if "api key" in text or "authentication" in text or "permission" in text:
        return GeminiAuthError(f"Gemini API authentication error: {api_error}")
    if "unavailable" in text or "timeout" in text or "deadline" in text or "503" in text:
        return GeminiUnavailableError(f"Gemini API unavailable: {api_error}")
    return GeminiAPIError(f"Gemini API error: {api_error}")


class GeminiTranslator:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
        temperature: float = 0.3
    ):
        self.api_key = api_key if api_key is not None else settings.GOOGLE_API_KEY
        self.model_name = model_name or settings.GEMINI_MODEL
        self.max_output_tokens = max_output_tokens or settings.GEMINI_MAX_OUTPUT_TOKENS
        self.temperature = temperature
        self._models = {}
        
        if self.api_key and not self.api_key.startswith('your_'):
            genai.configure(api_key=self.api_key)
            self.client_initialized = True
            logger.info(f"✅ Gemini API initialized with model: {self.model_name}")
        else:
            self.client_initialized = False
            logger.warning("⚠️ Google Gemini API key not configured. Translation will not work.")
    
    def _model_for(self, system_prompt: str) -> genai.GenerativeModel:
        model = self._models.get(system_prompt)
        if model is None:
            model = genai.GenerativeModel(
                self.model_name,
                system_instruction=system_prompt,
                generation_config={
                    'max_output_tokens': self.max_output_tokens,
                    'temperature': self.temperature
                }
            )
            self._models[system_prompt] = model
        return model
    
    @retry_with_backoff(
        retryable_exceptions=(GeminiUnavailableError, GeminiRateLimitError, NetworkError),
        config=RetryConfig(max_attempts=3, base_delay=2.0, max_delay=20.0)
    )
    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send one prompt and return the model's text reply"""
        if not self.client_initialized:
            raise ConfigurationError(
                "Gemini API not initialized. Need GOOGLE_API_KEY in .env file",
                config_key='GOOGLE_API_KEY'
            )
        
        api_start_time = time.time()
        try:
            response = self._model_for(system_prompt).generate_content(user_prompt)
            # .text raises ValueError when the candidate was blocked
            text = response.text if response else ''
        except Exception as api_error:
            raise map_gemini_error(api_error) from api_error
        
        if not text or not text.strip():
            raise GeminiAPIError("Gemini API returned empty response")
        
        logger.debug(f"Gemini reply received in {(time.time() - api_start_time) * 1000:.0f}ms")
        return text

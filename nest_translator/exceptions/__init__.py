# =============================================================================
# CUSTOM EXCEPTION HIERARCHY
# =============================================================================
# Error handling for the translation server and the reader widget

from .base_exceptions import (
    NestTranslatorError,
    APIError,
    NetworkError,
    ValidationError,
    ConfigurationError
)

from .gemini_exceptions import (
    GeminiAPIError,
    GeminiQuotaError,
    GeminiUnavailableError,
    GeminiRateLimitError,
    GeminiAuthError
)

from .translation_exceptions import (
    TranslationError,
    UpstreamTranslationError,
    TranslationValidationError
)

from .source_exceptions import PostFetchError

from .widget_exceptions import (
    TranslateRequestError,
    DiscoveryTimeoutError
)

__all__ = [
    # Base exceptions
    'NestTranslatorError',
    'APIError',
    'NetworkError',
    'ValidationError',
    'ConfigurationError',
    
    # Gemini-specific exceptions
    'GeminiAPIError',
    'GeminiQuotaError',
    'GeminiUnavailableError',
    'GeminiRateLimitError',
    'GeminiAuthError',
    
    # Translation-specific exceptions
    'TranslationError',
    'UpstreamTranslationError',
    'TranslationValidationError',
    
    # Source fetching
    'PostFetchError',
    
    # Widget
    'TranslateRequestError',
    'DiscoveryTimeoutError'
]

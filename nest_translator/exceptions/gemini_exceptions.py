# =============================================================================
# GEMINI-SPECIFIC EXCEPTIONS
# =============================================================================
# Failures of the upstream translation model, mapped from SDK errors

from typing import Optional
from .base_exceptions import APIError


class GeminiAPIError(APIError):
    """Gemini call failed for a reason no retry will fix"""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, **kwargs)


class GeminiQuotaError(GeminiAPIError):
    """Project quota or billing limit reached"""

    def __init__(self, message: str = "Gemini API quota exhausted", **kwargs):
        kwargs.setdefault('error_code', 'QUOTA_EXCEEDED')
        super().__init__(message, **kwargs)


class GeminiUnavailableError(GeminiAPIError):
    """Model unreachable or timed out"""

    def __init__(self, message: str = "Gemini API service unavailable", **kwargs):
        kwargs.setdefault('retryable', True)
        kwargs.setdefault('error_code', 'SERVICE_UNAVAILABLE')
        super().__init__(message, **kwargs)


class GeminiRateLimitError(GeminiAPIError):
    """
    Too many requests for now.

    retry_after is the wait in seconds the API asked for, when it gave one.
    """

    def __init__(
        self,
        message: str = "Gemini API rate limit exceeded",
        retry_after: Optional[float] = None,
        **kwargs
    ):
        kwargs.setdefault('retryable', True)
        kwargs.setdefault('error_code', 'RATE_LIMIT')
        super().__init__(message, **kwargs)
        self.retry_after = retry_after

    def to_dict(self):
        result = super().to_dict()
        result['retry_after'] = self.retry_after
        return result


class GeminiAuthError(GeminiAPIError):
    """API key rejected or lacks permission for the model"""

    def __init__(self, message: str = "Gemini API authentication failed", **kwargs):
        kwargs.setdefault('error_code', 'AUTH_ERROR')
        super().__init__(message, **kwargs)

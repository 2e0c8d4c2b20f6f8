# =============================================================================
# WIDGET EXCEPTIONS
# =============================================================================
# Client-side failures of the language toggle widget

from .base_exceptions import NestTranslatorError, NetworkError


class TranslateRequestError(NetworkError):
    """Translate call from the widget failed (network error or non-2xx)"""
    
    def __init__(self, message: str = "Translation request failed", status: int = None, **kwargs):
        kwargs.setdefault('error_code', 'TRANSLATE_REQUEST_FAILED')
        super().__init__(message, **kwargs)
        self.status = status
        
    def to_dict(self):
        result = super().to_dict()
        result['status'] = self.status
        return result


class DiscoveryTimeoutError(NestTranslatorError):
    """Host page content never appeared within the discovery budget"""
    
    def __init__(self, message: str = "Timed out waiting for post content", attempts: int = 0, **kwargs):
        kwargs.setdefault('error_code', 'DISCOVERY_TIMEOUT')
        super().__init__(message, **kwargs)
        self.attempts = attempts
        
    def to_dict(self):
        result = super().to_dict()
        result['attempts'] = self.attempts
        return result

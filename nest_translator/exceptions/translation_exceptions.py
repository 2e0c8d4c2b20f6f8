# =============================================================================
# TRANSLATION-SPECIFIC EXCEPTIONS
# =============================================================================
# Error handling for the translate / pre-translate pipeline

from .base_exceptions import NestTranslatorError, ValidationError


class TranslationError(NestTranslatorError):
    """General translation error"""
    
    def __init__(self, message: str, post_id: str = None, **kwargs):
        super().__init__(message, **kwargs)
        self.post_id = post_id
        
    def to_dict(self):
        result = super().to_dict()
        result['post_id'] = self.post_id
        return result


class UpstreamTranslationError(TranslationError):
    """The translation model could not be reached or gave an unusable reply.
    
    Nothing is cached when this is raised, so a retry behaves exactly
    like the first attempt.
    """
    
    def __init__(
        self,
        message: str = "Upstream translation failed",
        upstream_error: str = None,
        **kwargs
    ):
        kwargs.setdefault('retryable', True)
        kwargs.setdefault('error_code', 'UPSTREAM_UNAVAILABLE')
        super().__init__(message, **kwargs)
        self.upstream_error = upstream_error
        
    def to_dict(self):
        result = super().to_dict()
        result['upstream_error'] = self.upstream_error
        return result


class TranslationValidationError(ValidationError):
    """Translate request rejected before any upstream call"""
    
    def __init__(self, message: str = "Invalid translation request", **kwargs):
        kwargs.setdefault('error_code', 'VALIDATION_ERROR')
        super().__init__(message, **kwargs)

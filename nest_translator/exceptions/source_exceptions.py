# =============================================================================
# SOURCE POST EXCEPTIONS
# =============================================================================
# Errors raised while fetching a post from the publishing platform

from .base_exceptions import APIError


class PostFetchError(APIError):
    """Source post could not be fetched or had no usable content"""
    
    def __init__(self, message: str, slug: str = None, url: str = None, **kwargs):
        kwargs.setdefault('error_code', 'POST_FETCH_FAILED')
        super().__init__(message, **kwargs)
        self.slug = slug
        self.url = url
        
    def to_dict(self):
        result = super().to_dict()
        result.update({
            'slug': self.slug,
            'url': self.url
        })
        return result

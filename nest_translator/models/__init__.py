from .post import PostMetadata, SourcePost, TranslatedFields

__all__ = ['PostMetadata', 'SourcePost', 'TranslatedFields']

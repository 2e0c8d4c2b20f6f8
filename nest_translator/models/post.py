# =============================================================================
# DATA MODELS FOR POSTS AND TRANSLATIONS
# =============================================================================

from dataclasses import dataclass, field, asdict
from typing import Dict, Any

@dataclass(frozen=True)
class PostMetadata:
    """Article metadata taken from the post's JSON-LD block"""
    authors: str = ''
    date_published: str = ''
    description: str = ''
    image: str = ''
    url: str = ''
    
    @classmethod
    def from_json_ld(cls, data: Dict[str, Any], fallback_url: str = '') -> 'PostMetadata':
        """Create metadata from a NewsArticle JSON-LD object"""
        authors = data.get('author') or []
        if isinstance(authors, dict):
            authors = [authors]
        
        image = data.get('image') or ''
        if isinstance(image, list):
            first = image[0] if image else ''
            image = first.get('url', '') if isinstance(first, dict) else first
        elif isinstance(image, dict):
            image = image.get('url', '')
        
        return cls(
            authors=', '.join(a.get('name', '') for a in authors if isinstance(a, dict)),
            date_published=data.get('datePublished', ''),
            description=data.get('description', ''),
            image=image or '',
            url=data.get('url') or fallback_url
        )

@dataclass(frozen=True)
class SourcePost:
    """A post as published on the source platform"""
    id: str
    slug: str
    title: str
    subtitle: str
    body_text: str
    body_html: str
    original_url: str
    metadata: PostMetadata = field(default_factory=PostMetadata)
    
    @staticmethod
    def id_for_slug(slug: str) -> str:
        """Stable identifier shared by the page route and the widget"""
        return f"/p/{slug}"

@dataclass(frozen=True)
class TranslatedFields:
    """Parsed result of one translation reply"""
    title: str
    subtitle: str
    content: str
    
    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

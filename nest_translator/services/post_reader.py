# =============================================================================
# SOURCE POST READER
# =============================================================================
# Fetches a published post page and pulls out the pieces the translator
# needs: title, subtitle, body HTML/text and JSON-LD article metadata.

import re
import json
import requests
from bs4 import BeautifulSoup
from typing import Optional

from ..config.settings import settings
from ..models.post import PostMetadata, SourcePost
from ..exceptions import PostFetchError, ValidationError
from ..utils.logger import logger
from ..utils.structured_logger import structured_logger

USER_AGENT = 'Mozilla/5.0 (compatible; NestTranslator/1.0)'
TITLE_SELECTORS = ('h1.post-title', 'h1')
SUBTITLE_SELECTOR = 'h3.subtitle'
BODY_SELECTOR = '.body.markup'
SLUG_RE = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_-]*$')


class PostReader:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.SOURCE_BASE_URL).rstrip('/')
        self.timeout = timeout or settings.FETCH_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': USER_AGENT})
    
    def post_url(self, slug: str) -> str:
        return f"{self.base_url}/p/{slug}"
    
    def fetch_post(self, slug: str) -> SourcePost:
        """Download and parse one post by slug"""
        if not slug or not SLUG_RE.match(slug):
            raise ValidationError(f"Invalid post slug: {slug!r}", field='slug')
        
        url = self.post_url(slug)
        with structured_logger.time_operation("fetch_post", slug=slug):
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.RequestException as e:
                raise PostFetchError(
                    f"Failed to fetch post: {e}", slug=slug, url=url, retryable=True
                ) from e
            
            if not response.ok:
                raise PostFetchError(
                    f"Failed to fetch post: {response.status_code} {response.reason}",
                    slug=slug,
                    url=url,
                    status_code=response.status_code
                )
            
            return self.parse_post(slug, url, response.text)
    
    def parse_post(self, slug: str, url: str, html: str) -> SourcePost:
        soup = BeautifulSoup(html, 'html.parser')
        
        title_el = None
        for selector in TITLE_SELECTORS:
            title_el = soup.select_one(selector)
            if title_el is not None:
                break
        subtitle_el = soup.select_one(SUBTITLE_SELECTOR)
        body_el = soup.select_one(BODY_SELECTOR)
        
        if body_el is None:
            raise PostFetchError("Post body not found on page", slug=slug, url=url)
        
        post = SourcePost(
            id=SourcePost.id_for_slug(slug),
            slug=slug,
            title=title_el.get_text().strip() if title_el else '',
            subtitle=subtitle_el.get_text().strip() if subtitle_el else '',
            body_text=body_el.get_text().strip(),
            body_html=body_el.decode_contents(),
            original_url=url,
            metadata=self._extract_metadata(soup, url)
        )
        logger.info(f"📄 Fetched post {post.id}: {post.title[:60]}")
        return post
    
    def _extract_metadata(self, soup: BeautifulSoup, url: str) -> PostMetadata:
        for script in soup.find_all('script', attrs={'type': 'application/ld+json'}):
            try:
                data = json.loads(script.string or '')
            except json.JSONDecodeError:
                logger.debug("Skipping unparseable JSON-LD block")
                continue
            if isinstance(data, dict) and data.get('@type') == 'NewsArticle':
                return PostMetadata.from_json_ld(data, fallback_url=url)
        return PostMetadata(url=url)

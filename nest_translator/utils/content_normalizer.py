# =============================================================================
# CONTENT NORMALIZER
# =============================================================================
# Turns post body HTML into the small markdown-like subset that is sent to
# the translation model: # / ## / ### headings, **bold**, *italic*,
# [text](url) links, blank-line paragraphs and single-newline soft breaks.
# Anything else (tables, embeds, footnotes) degrades to plain text.

import re
from bs4 import BeautifulSoup, NavigableString, Tag

HEADING_LEVELS = {'h1': 1, 'h2': 2, 'h3': 3, 'h4': 4, 'h5': 5, 'h6': 6}
BOLD_TAGS = {'b', 'strong'}
ITALIC_TAGS = {'i', 'em'}
BLOCK_TAGS = {
    'p', 'div', 'section', 'article', 'blockquote', 'li', 'ul', 'ol', 'pre',
    'figure', 'figcaption', 'header', 'footer', 'main', 'aside', 'table', 'tr', 'hr'
}
DROPPED_TAGS = {'script', 'style', 'noscript', 'template', 'head'}

WHITESPACE_RE = re.compile(r'\s+')
MULTI_SPACE_RE = re.compile(r' {2,}')
SPACE_AROUND_NEWLINE_RE = re.compile(r' *\n *')
EXCESS_NEWLINES_RE = re.compile(r'\n{3,}')


def _wrap(inner: str, opening: str, closing: str) -> str:
    """Wrap inner text in markers, keeping edge whitespace outside them"""
    stripped = inner.strip()
    if not stripped:
        return inner
    leading = inner[:len(inner) - len(inner.lstrip())]
    trailing = inner[len(inner.rstrip()):]
    return f"{leading}{opening}{stripped}{closing}{trailing}"


class ContentNormalizer:
    """HTML -> normalized text. Never raises; broken markup degrades to text."""
    
    def normalize(self, html: str) -> str:
        if not html:
            return ''
        
        soup = BeautifulSoup(html, 'html.parser')
        return self._tidy(self._render_children(soup))
    
    def _render_children(self, node) -> str:
        return ''.join(self._render(child) for child in node.children)
    
    def _render(self, node) -> str:
        if isinstance(node, NavigableString):
            # Comments, doctypes and CDATA are NavigableString subclasses
            if type(node) is not NavigableString:
                return ''
            return WHITESPACE_RE.sub(' ', str(node))
        
        if not isinstance(node, Tag):
            return ''
        
        name = (node.name or '').lower()
        
        if name in DROPPED_TAGS:
            return ''
        
        if name == 'a':
            inner = self._render_children(node)
            href = (node.get('href') or '').strip()
            if not inner.strip() or not href:
                return inner
            return _wrap(inner, '[', f']({href})')
        
        if name in BOLD_TAGS:
            return _wrap(self._render_children(node), '**', '**')
        
        if name in ITALIC_TAGS:
            return _wrap(self._render_children(node), '*', '*')
        
        if name in HEADING_LEVELS:
            inner = ' '.join(self._render_children(node).split())
            if not inner:
                return '\n\n'
            return f"\n\n{'#' * HEADING_LEVELS[name]} {inner}\n\n"
        
        if name in BLOCK_TAGS:
            return self._render_children(node) + '\n\n'
        
        if name == 'br':
            return '\n'
        
        return self._render_children(node)
    
    def _tidy(self, text: str) -> str:
        text = MULTI_SPACE_RE.sub(' ', text)
        text = SPACE_AROUND_NEWLINE_RE.sub('\n', text)
        text = EXCESS_NEWLINES_RE.sub('\n\n', text)
        return text.strip()

# Global normalizer instance
content_normalizer = ContentNormalizer()

def normalize_html(html: str) -> str:
    return content_normalizer.normalize(html)

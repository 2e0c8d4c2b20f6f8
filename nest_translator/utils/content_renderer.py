# =============================================================================
# CONTENT RENDERER
# =============================================================================
# Normalized text -> HTML fragment. The server page and the reader widget
# both go through ContentRenderer; the widget variant also renders *italic*.

import re
from html import escape

PRE_RENDERED_MARKERS = ('<p>', '<div>')
BLOCK_SPLIT_RE = re.compile(r'\n{2,}')
# ***x*** is italic around bold
BOLD_ITALIC_RE = re.compile(r'\*\*\*(?![\s*])(.+?)(?<![\s*])\*\*\*')
# A bold run may end in an italic one: **a *b***
BOLD_RE = re.compile(r'\*\*(?!\*)(.+?)\*\*(?!\*)')
LINK_RE = re.compile(r'\[([^\]]+)\]\(([^)]+)\)')
# A lone asterisk on each side; never part of a ** pair
ITALIC_RE = re.compile(r'(?<!\*)\*(?![\s*])(.+?)(?<![\s*])\*(?!\*)')
HEADING_PREFIXES = (('### ', 'h3'), ('## ', 'h2'), ('# ', 'h1'))


def _inside_tag(text: str, position: int) -> bool:
    return text.rfind('<', 0, position) > text.rfind('>', 0, position)


class ContentRenderer:
    def __init__(self, allow_italic: bool = False):
        self.allow_italic = allow_italic
    
    def to_html(self, text: str) -> str:
        """Render normalized text as HTML; text that already holds HTML passes through"""
        if not text:
            return ''
        if any(marker in text for marker in PRE_RENDERED_MARKERS):
            return text
        
        rendered = []
        for block in BLOCK_SPLIT_RE.split(text):
            block = block.strip()
            if block:
                rendered.append(self._render_block(block))
        
        return '\n'.join(rendered)
    
    def _render_block(self, block: str) -> str:
        for prefix, tag in HEADING_PREFIXES:
            if block.startswith(prefix):
                return f"<{tag}>{self.render_inline(block[len(prefix):])}</{tag}>"
        
        body = self.render_inline(block).replace('\n', '<br>')
        return f"<p>{body}</p>"
    
    def render_inline(self, text: str) -> str:
        text = escape(text, quote=False)
        text = BOLD_ITALIC_RE.sub(r'*<strong>\1</strong>*', text)
        text = BOLD_RE.sub(r'<strong>\1</strong>', text)
        text = LINK_RE.sub(self._link, text)
        if self.allow_italic:
            text = ITALIC_RE.sub(self._italic, text)
        return text
    
    @staticmethod
    def _link(match) -> str:
        href = match.group(2).strip().replace('"', '&quot;')
        return f'<a href="{href}">{match.group(1)}</a>'
    
    @staticmethod
    def _italic(match) -> str:
        # Asterisks inside a link target stay literal
        if _inside_tag(match.string, match.start()):
            return match.group(0)
        return f"<em>{match.group(1)}</em>"

# Global renderer instances (server page / reader widget)
content_renderer = ContentRenderer()
widget_renderer = ContentRenderer(allow_italic=True)

def render_content(text: str) -> str:
    return content_renderer.to_html(text)

def render_widget_content(text: str) -> str:
    return widget_renderer.to_html(text)

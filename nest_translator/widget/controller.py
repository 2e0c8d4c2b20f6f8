# =============================================================================
# LANGUAGE TOGGLE WIDGET CONTROLLER
# =============================================================================
# Mounts an English/Spanish toggle on a host post page and swaps the post's
# title, subtitle and body between the original and the translation.
#
# States:
#   DISCOVERING -> SOURCE            content found, toggle mounted
#   DISCOVERING -> DECLINED          not a post page, or discovery timed out
#   SOURCE/ERROR_REVERTED -> LOADING      "es" selected
#   LOADING -> TRANSLATED            translation arrived while still loading
#   LOADING -> ERROR_REVERTED        translate request failed
#   LOADING/TRANSLATED -> SOURCE     "en" selected
# =============================================================================

import re
import asyncio
from enum import Enum
from html import escape, unescape
from types import MappingProxyType
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from ..exceptions import DiscoveryTimeoutError
from ..utils.content_normalizer import normalize_html
from ..utils.content_renderer import ContentRenderer, widget_renderer
from ..utils.logger import logger
from .dom import DocumentAdapter
from .transport import TranslateTransport

widget_logger = logger.getChild('widget')

TAG_RE = re.compile(r'<[^>]*>')
FIELDS = ('title', 'subtitle', 'content')
INSERT_SELECTORS = ('[role="region"][aria-label="Post header"]', 'h1.post-title')
TOGGLE_HTML = (
    '<button class="nest-lang-btn active" data-lang="en">English</button>'
    '<div class="nest-translator-spinner"></div>'
    '<button class="nest-lang-btn" data-lang="es">Español</button>'
)


class ToggleState(Enum):
    DISCOVERING = "discovering"
    SOURCE = "source"
    LOADING = "loading"
    TRANSLATED = "translated"
    ERROR_REVERTED = "error_reverted"
    DECLINED = "declined"


@dataclass(frozen=True)
class WidgetConfig:
    poll_interval: float = 0.2
    max_attempts: int = 50
    initial_delay: float = 0.3
    min_text_length: int = 50
    fade_duration: float = 0.3
    content_selectors: Tuple[str, ...] = (
        ".body.markup", "article .available-content", "article", ".post-content"
    )
    title_selectors: Tuple[str, ...] = ("h1.post-title", "h1")
    subtitle_selector: str = "h3.subtitle"
    mount_id: str = "nest-translator"
    post_path_marker: str = "/p/"


def strip_tags(html: str) -> str:
    return unescape(TAG_RE.sub('', html or ''))


class WidgetController:
    def __init__(
        self,
        document: DocumentAdapter,
        transport: TranslateTransport,
        post_id: Optional[str] = None,
        renderer: Optional[ContentRenderer] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        config: Optional[WidgetConfig] = None
    ):
        self.document = document
        self.transport = transport
        self.post_id = post_id
        self.renderer = renderer or widget_renderer
        self.sleep = sleep
        self.config = config or WidgetConfig()
        
        self._state = ToggleState.DISCOVERING
        self._session_cache: Dict[str, Dict[str, Any]] = {}
        self._elements: Dict[str, Any] = {}
        self._original: Dict[str, str] = {}
        self._toggle = None
        self._buttons: Dict[str, Any] = {}
        self._request_pending = False
    
    @property
    def state(self) -> ToggleState:
        return self._state
    
    @property
    def language(self) -> str:
        return "es" if self._state == ToggleState.TRANSLATED else "en"
    
    @property
    def session_cache(self):
        return MappingProxyType(self._session_cache)
    
    # ------------------------------------------------------------------
    # Discovery and mounting
    # ------------------------------------------------------------------
    
    async def mount(self, page_path: str) -> bool:
        """Wait for the post content to render, then attach the toggle"""
        if self._state != ToggleState.DISCOVERING:
            widget_logger.info("[NestTranslator] Already mounted; ignoring")
            return False
        
        if self.config.post_path_marker not in (page_path or ''):
            widget_logger.debug(f"[NestTranslator] Not a post page: {page_path}")
            self._state = ToggleState.DECLINED
            return False
        
        await self.sleep(self.config.initial_delay)
        
        try:
            await self._wait_for_content()
        except DiscoveryTimeoutError as e:
            widget_logger.warning(f"[NestTranslator] {e}")
            self._state = ToggleState.DECLINED
            return False
        
        return self._attach(page_path)
    
    async def _wait_for_content(self):
        # .post-content only counts once discovery has settled
        selectors = self.config.content_selectors[:3]
        for attempt in range(1, self.config.max_attempts + 1):
            element = self._first_match(selectors)
            if element is not None and len(self.document.text_of(element).strip()) > self.config.min_text_length:
                widget_logger.debug(f"[NestTranslator] Content found after {attempt} attempt(s)")
                return element
            if attempt < self.config.max_attempts:
                await self.sleep(self.config.poll_interval)
        
        raise DiscoveryTimeoutError(
            f"Post content not found after {self.config.max_attempts} attempts",
            attempts=self.config.max_attempts
        )
    
    def _first_match(self, selectors) -> Optional[Any]:
        for selector in selectors:
            element = self.document.select_one(selector)
            if element is not None:
                return element
        return None
    
    def _attach(self, page_path: str) -> bool:
        mount = self.document.get_by_id(self.config.mount_id)
        if mount is not None and self.document.select_one('.nest-translator-toggle', root=mount) is not None:
            widget_logger.info("[NestTranslator] Toggle already present; not mounting twice")
            self._state = ToggleState.DECLINED
            return False
        
        elements = {
            'title': self._first_match(self.config.title_selectors),
            'subtitle': self.document.select_one(self.config.subtitle_selector),
            'content': self._first_match(self.config.content_selectors)
        }
        if elements['content'] is None:
            widget_logger.warning("[NestTranslator] No content element found.")
            self._state = ToggleState.DECLINED
            return False
        
        if mount is None:
            insert_target = self._first_match(INSERT_SELECTORS) or elements['title']
            if insert_target is None:
                widget_logger.warning("[NestTranslator] No insert target found.")
                self._state = ToggleState.DECLINED
                return False
            mount = self.document.create_element('div', {'id': self.config.mount_id})
            self.document.insert_before(mount, insert_target)
        
        if self.post_id is None:
            self.post_id = self.document.get_attribute(mount, 'data-post-id') or page_path
        
        self._elements = elements
        self._original = {
            name: self.document.inner_html(el) if el is not None else ''
            for name, el in elements.items()
        }
        
        self._toggle = self.document.create_element(
            'div', {'class': 'nest-translator-toggle'}, TOGGLE_HTML
        )
        self.document.append_child(mount, self._toggle)
        self._buttons = {
            lang: self.document.select_one(f'[data-lang="{lang}"]', root=self._toggle)
            for lang in ('en', 'es')
        }
        
        for element in self._present_elements():
            self.document.add_class(element, 'nest-translate-fade')
        
        self._state = ToggleState.SOURCE
        widget_logger.info(f"[NestTranslator] Initialized on {self.post_id}")
        return True
    
    # ------------------------------------------------------------------
    # Toggle
    # ------------------------------------------------------------------
    
    async def select_language(self, lang: str):
        """Button click handler for 'en' / 'es'"""
        if lang == 'es':
            await self._show_translation()
        elif lang == 'en':
            await self._show_source()
        else:
            raise ValueError(f"Unsupported language: {lang}")
    
    async def _show_source(self):
        if self._state == ToggleState.TRANSLATED:
            self._state = ToggleState.SOURCE
            self._set_active('en')
            await self._swap(self._original)
        elif self._state == ToggleState.LOADING:
            # The in-flight result will be cached but not rendered
            self._state = ToggleState.SOURCE
            self._set_active('en')
    
    async def _show_translation(self):
        if self._state not in (ToggleState.SOURCE, ToggleState.ERROR_REVERTED):
            return
        
        self._state = ToggleState.LOADING
        self._set_active('es')
        
        cached = self._session_cache.get(self.post_id)
        if cached is not None:
            await self._apply_translation(cached)
            return
        
        if self._request_pending:
            # A request started earlier is still outstanding and will apply
            self.document.add_class(self._toggle, 'loading')
            return
        
        self.document.add_class(self._toggle, 'loading')
        self._request_pending = True
        try:
            data = await self.transport.translate(self._build_payload())
        except Exception as e:
            widget_logger.error(f"[NestTranslator] {e}")
            if self._state == ToggleState.LOADING:
                self._state = ToggleState.ERROR_REVERTED
                self._set_active('en')
            return
        finally:
            self._request_pending = False
            self.document.remove_class(self._toggle, 'loading')
        
        self._session_cache[self.post_id] = data
        if self._state != ToggleState.LOADING:
            widget_logger.debug("[NestTranslator] Translation arrived after switching back; not rendering")
            return
        
        await self._apply_translation(data)
    
    def _build_payload(self) -> Dict[str, str]:
        return {
            'id': self.post_id,
            'title': strip_tags(self._original['title']),
            'subtitle': strip_tags(self._original['subtitle']),
            'content': normalize_html(self._original['content'])
        }
    
    async def _apply_translation(self, data: Dict[str, Any]):
        self._state = ToggleState.TRANSLATED
        await self._swap({
            'title': escape(data.get('title') or '', quote=False),
            'subtitle': escape(data.get('subtitle') or '', quote=False),
            'content': self.renderer.to_html(data.get('content') or '')
        })
    
    async def _swap(self, fields: Dict[str, str]):
        """Fade out, replace the non-empty fields, fade back in"""
        present = self._present_elements()
        for element in present:
            self.document.add_class(element, 'fading')
        
        await self.sleep(self.config.fade_duration)
        
        for name in FIELDS:
            element = self._elements.get(name)
            if element is not None and fields.get(name):
                self.document.set_inner_html(element, fields[name])
        
        for element in present:
            self.document.remove_class(element, 'fading')
    
    def _set_active(self, lang: str):
        for button_lang, button in self._buttons.items():
            if button is None:
                continue
            if button_lang == lang:
                self.document.add_class(button, 'active')
            else:
                self.document.remove_class(button, 'active')
    
    def _present_elements(self):
        return [self._elements[name] for name in FIELDS if self._elements.get(name) is not None]

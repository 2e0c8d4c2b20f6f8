# =============================================================================
# DOCUMENT ADAPTER
# =============================================================================
# The widget controller only touches the host page through this protocol.
# SoupDocument implements it on a BeautifulSoup tree so the controller can
# run against fetched or test pages.

from typing import Any, Dict, List, Optional, Protocol
from bs4 import BeautifulSoup, Tag


class DocumentAdapter(Protocol):
    def select_one(self, selector: str, root: Any = None) -> Optional[Any]: ...
    def get_by_id(self, element_id: str) -> Optional[Any]: ...
    def text_of(self, element: Any) -> str: ...
    def inner_html(self, element: Any) -> str: ...
    def set_inner_html(self, element: Any, html: str) -> None: ...
    def add_class(self, element: Any, name: str) -> None: ...
    def remove_class(self, element: Any, name: str) -> None: ...
    def has_class(self, element: Any, name: str) -> bool: ...
    def get_attribute(self, element: Any, name: str) -> Optional[str]: ...
    def create_element(self, tag: str, attrs: Optional[Dict[str, str]] = None, html: str = '') -> Any: ...
    def insert_before(self, new_element: Any, reference: Any) -> None: ...
    def append_child(self, parent: Any, child: Any) -> None: ...


class SoupDocument:
    """DocumentAdapter backed by BeautifulSoup"""
    
    def __init__(self, markup):
        self.soup = markup if isinstance(markup, BeautifulSoup) else BeautifulSoup(markup, 'html.parser')
    
    def select_one(self, selector: str, root: Optional[Tag] = None) -> Optional[Tag]:
        return (root if root is not None else self.soup).select_one(selector)
    
    def get_by_id(self, element_id: str) -> Optional[Tag]:
        return self.soup.find(id=element_id)
    
    def text_of(self, element: Tag) -> str:
        return element.get_text()
    
    def inner_html(self, element: Tag) -> str:
        return element.decode_contents()
    
    def set_inner_html(self, element: Tag, html: str) -> None:
        element.clear()
        fragment = BeautifulSoup(html, 'html.parser')
        for child in list(fragment.contents):
            element.append(child.extract())
    
    @staticmethod
    def _classes(element: Tag) -> List[str]:
        value = element.get('class', [])
        return value.split() if isinstance(value, str) else list(value)
    
    def add_class(self, element: Tag, name: str) -> None:
        classes = self._classes(element)
        if name not in classes:
            classes.append(name)
        element['class'] = classes
    
    def remove_class(self, element: Tag, name: str) -> None:
        classes = [c for c in self._classes(element) if c != name]
        if classes:
            element['class'] = classes
        elif element.has_attr('class'):
            del element['class']
    
    def has_class(self, element: Tag, name: str) -> bool:
        return name in self._classes(element)
    
    def get_attribute(self, element: Tag, name: str) -> Optional[str]:
        return element.get(name)
    
    def create_element(self, tag: str, attrs: Optional[Dict[str, str]] = None, html: str = '') -> Tag:
        element = self.soup.new_tag(tag, attrs=attrs or {})
        if html:
            self.set_inner_html(element, html)
        return element
    
    def insert_before(self, new_element: Tag, reference: Tag) -> None:
        reference.insert_before(new_element)
    
    def append_child(self, parent: Tag, child: Tag) -> None:
        parent.append(child)
    
    def __str__(self):
        return str(self.soup)

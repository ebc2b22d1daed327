"""
Markdown renderers

A renderer turns a raw property value into markup before the value is
substituted into a template. The host application owns real markdown
rendering; the renderers here cover the two cases calloutforge needs:

    WrapRenderer         escape the value and wrap it in a marker div the host
                         renders as markdown later (<div class="cf-markdown">)
    PassthroughRenderer  leave the value untouched
"""

import html
from typing import Iterable, List, Optional, Protocol

from ..models.codeblock import Property


class MarkdownRenderer(Protocol):
    """Anything that can render a raw value to markup"""

    def render(self, value: str) -> str:
        ...


class WrapRenderer:
    """
    Escapes values and wraps them in a marker div

    Example:
        >>> WrapRenderer().render("a < b")
        '<div class="cf-markdown">a &lt; b</div>'
    """

    def __init__(self, css_class: Optional[str] = None) -> None:
        if css_class is None:
            from ..config import appsettings
            css_class = appsettings.markdown_class
        self.css_class = css_class

    def render(self, value: str) -> str:
        return f'<div class="{html.escape(self.css_class)}">{html.escape(value)}</div>'


class PassthroughRenderer:
    """Returns values unchanged"""

    def render(self, value: str) -> str:
        return value


def properties_render(properties: Iterable[Property], renderer: MarkdownRenderer) -> List[Property]:
    """Render every property value, keeping keys and order"""
    return [Property(key=prop.key, value=renderer.render(prop.value)) for prop in properties]

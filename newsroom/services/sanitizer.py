# newsroom/services/sanitizer.py
"""
Limpieza de hojas de texto para render seguro en el cliente.

Orden: se quitan las etiquetas no permitidas (conservando su texto), se
decodifican entidades y se recortan espacios. Sin allow-list el resultado es
texto plano; si la decodificación produce marcado (`&lt;b&gt;`), se limpia de
nuevo.
"""
from __future__ import annotations

import html
import warnings
from typing import Iterable

from bs4 import BeautifulSoup, Comment, MarkupResemblesLocatorWarning

# Cadenas tipo URL o ruta disparan este warning en bs4; aquí son texto normal.
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

# Etiquetas que se conservan cuando la raíz del árbol es un string suelto
DEFAULT_ALLOWED_TAGS = frozenset({
    "img", "iframe", "div", "p", "a", "span", "strong", "em", "b", "i",
    "ul", "li", "ol", "br", "h1", "h2", "h3", "h4", "h5", "h6",
})

# Extractos: formato básico
EXCERPT_ALLOWED_TAGS = frozenset({"a", "strong", "em", "b", "i", "br"})

# trim() clásico: no toca el &nbsp; decodificado
_TRIM_CHARS = " \t\n\r\x00\x0b"


def _soup(text: str) -> BeautifulSoup:
    soup = BeautifulSoup(text, "html.parser")
    for c in soup.find_all(string=lambda s: isinstance(s, Comment)):
        c.extract()
    return soup


def strip_tags(text: str, allowed: Iterable[str] = ()) -> str:
    """Quita etiquetas (excepto `allowed`) y devuelve el texto con entidades ya decodificadas."""
    allowed = {t.lower() for t in allowed}
    soup = _soup(text)
    if not allowed:
        return soup.get_text()
    for tag in soup.find_all(True):
        if tag.name.lower() not in allowed:
            tag.unwrap()
    # formatter=None: los strings salen tal cual (decodificados), sin re-escapar
    return soup.decode(formatter=None)


def sanitize_text(text: str, allowed: Iterable[str] = ()) -> str:
    if not isinstance(text, str):
        return text
    if "<" not in text and "&" not in text:
        return text.strip(_TRIM_CHARS)
    out = strip_tags(text, allowed)
    if not allowed and "<" in out:
        out = strip_tags(out)
    return out.strip(_TRIM_CHARS)


def sanitize_rich_text(text: str) -> str:
    return sanitize_text(text, DEFAULT_ALLOWED_TAGS)


def decode_entities(text: str) -> str:
    """Solo decodifica entidades (contenido HTML que se entrega tal cual)."""
    return html.unescape(text or "")

# newsroom/services/layout.py
# Marcador de layout -> LayoutSpec (qué enriquecimientos aplican a la sección)
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Mapping, Optional, Tuple

from newsroom.content_rules import LayoutRules
from newsroom.utils.values import is_empty, to_int


class LayoutKind(str, Enum):
    POST_LIST = "post_list"      # select_category o layout "recent"
    PREMIUM = "premium"          # politics/sports/feature: over-fetch sin anuncio
    TRENDING = "trending"
    YOUTUBE = "youtube"
    SIDEBAR = "sidebar"


@dataclass(frozen=True)
class LayoutSpec:
    name: str
    kinds: FrozenSet[LayoutKind] = field(default_factory=frozenset)
    category_ids: Tuple[int, ...] = ()

    def has(self, kind: LayoutKind) -> bool:
        return kind in self.kinds


def layout_marker(node: Mapping[str, Any], rules: LayoutRules) -> str:
    """Primera clave marcadora presente (no None); '' si no hay."""
    for key in rules.marker_keys:
        value = node.get(key)
        if value is not None:
            return value if isinstance(value, str) else str(value)
    return ""


def parse_category_ids(raw: Any) -> Tuple[int, ...]:
    """
    Lista o string "3,5,,x" -> ids positivos únicos, en orden de aparición.
    Entradas vacías o inválidas se descartan.
    """
    if is_empty(raw):
        return ()
    if isinstance(raw, (list, tuple, set)):
        items = list(raw)
    elif isinstance(raw, str):
        items = raw.split(",")
    else:
        items = [raw]
    out = []
    for item in items:
        if isinstance(item, dict):
            # campo de taxonomía que devuelve objetos término
            item = item.get("term_id", item.get("id"))
        cid = to_int(item)
        if cid > 0 and cid not in out:
            out.append(cid)
    return tuple(out)


def parse_layout(node: Mapping[str, Any], rules: LayoutRules) -> Optional[LayoutSpec]:
    """None si el nodo no trae marcador de layout."""
    name = layout_marker(node, rules)
    if not name:
        return None
    if name == rules.grouped_layout:
        sub = node.get(rules.sub_layout_key)
        if isinstance(sub, str) and sub:
            name = sub

    kinds = set()
    has_category = not is_empty(node.get(rules.category_key))
    if has_category or rules.recent_token in name:
        kinds.add(LayoutKind.POST_LIST)
    if any(t in name for t in rules.premium_tokens):
        kinds.add(LayoutKind.PREMIUM)
    if rules.trending_token in name or name == rules.hero_layout:
        kinds.add(LayoutKind.TRENDING)
    if name == rules.youtube_layout:
        kinds.add(LayoutKind.YOUTUBE)
    elif not is_empty(node.get(rules.show_sidebar_key)):
        kinds.add(LayoutKind.SIDEBAR)

    return LayoutSpec(
        name=name,
        kinds=frozenset(kinds),
        category_ids=parse_category_ids(node.get(rules.category_key)) if has_category else (),
    )

# newsroom/services/layout_posts.py
# Enriquecimiento de secciones: posts de la sección, trending y sidebars
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from newsroom.services.context import ResolveContext
from newsroom.services.layout import LayoutKind, LayoutSpec
from newsroom.services.post_formatter import get_api_posts
from newsroom.services.sidebar_service import get_sidebar_data
from newsroom.services.trending_service import get_trending_posts, trending_limit
from newsroom.utils.values import is_empty, to_int

logger = logging.getLogger(__name__)


def _schema_default(ctx: ResolveContext, key: str) -> Optional[int]:
    if ctx.stores.schema is None:
        return None
    value = ctx.stores.schema.default_for(key)
    if is_empty(value):
        return None
    return to_int(value)


def _scan(ctx: ResolveContext, node: Mapping[str, Any], tokens) -> Tuple[Optional[int], Optional[int]]:
    """
    (valor del primer campo no vacío, default de schema del primer campo vacío)
    para los campos cuyo nombre contiene alguno de `tokens`.
    """
    fallback: Optional[int] = None
    for key, value in node.items():
        if not any(t in key for t in tokens):
            continue
        if not is_empty(value):
            return to_int(value), None
        if fallback is None:
            fallback = _schema_default(ctx, key)
    return None, fallback


def infer_count_offset(ctx: ResolveContext, node: Mapping[str, Any]) -> Tuple[int, int]:
    rules = ctx.rules
    count, count_default = _scan(ctx, node, rules.count_tokens)
    offset, offset_default = _scan(ctx, node, rules.offset_tokens)

    if count is None:
        count = count_default if count_default is not None else rules.default_count
    if offset is None:
        offset = offset_default if offset_default is not None else rules.default_offset
    if count <= 0:
        count = rules.default_count
    return count, max(0, offset)


def has_selected_ad(ctx: ResolveContext, node: Mapping[str, Any]) -> bool:
    return any(not is_empty(node.get(k)) for k in ctx.rules.premium_ad_keys)


def resolve_layout_posts(ctx: ResolveContext, node: Mapping[str, Any], spec: LayoutSpec) -> Dict[str, Any]:
    """
    Devuelve una copia del nodo con los datos que la sección necesita:
    - `section_posts` para secciones de posts
    - `trending_posts` para trending / hero banner
    - `youtube_data` o `sidebar_data` según la sección
    """
    rules = ctx.rules
    out: Dict[str, Any] = dict(node)

    if spec.has(LayoutKind.POST_LIST):
        count, offset = infer_count_offset(ctx, node)
        if spec.has(LayoutKind.PREMIUM) and not has_selected_ad(ctx, node):
            count += rules.premium_bonus
        logger.debug("Layout %s: fetching %s posts (offset %s, categories %s)", spec.name, count, offset, spec.category_ids)
        out["section_posts"] = get_api_posts(ctx, count, list(spec.category_ids), offset)

    if spec.has(LayoutKind.TRENDING):
        local, _ = _scan(ctx, node, rules.count_tokens)
        limit = local if local is not None and local > 0 else trending_limit(ctx)
        out["trending_posts"] = get_trending_posts(ctx, limit, 0)

    if spec.has(LayoutKind.YOUTUBE):
        out["youtube_data"] = get_sidebar_data(ctx, rules.youtube_sidebar)
    elif spec.has(LayoutKind.SIDEBAR):
        out["sidebar_data"] = get_sidebar_data(ctx, rules.generic_sidebar)

    return out

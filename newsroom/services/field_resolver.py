# newsroom/services/field_resolver.py
"""
Resolver recursivo del árbol de campos de una página/post/opciones.

Por cada mapping:
  1) si trae marcador de layout -> enriquecimiento de sección (posts, trending, sidebars)
  2) referencias a anuncios -> advert_code / advert_code_top / advert_code_bottom
  3) ids de imagen -> {id, url, alt}
  4) social_icons=True -> redes sociales de las opciones globales
  5) section_posts + anuncio -> section_items intercalados
  6) hijos: strings sin marcado, contenedores recursivos

Nunca muta la entrada: cada nivel construye un dict/list nuevo.
"""
from __future__ import annotations

import copy
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from newsroom.schemas.delivery import MediaRef
from newsroom.services.ad_service import get_full_ad_data
from newsroom.services.context import ResolveContext
from newsroom.services.layout import parse_layout
from newsroom.services.layout_posts import resolve_layout_posts
from newsroom.services.sanitizer import sanitize_rich_text, sanitize_text
from newsroom.utils.values import is_empty, is_numeric, is_scalar, to_int

logger = logging.getLogger(__name__)

POST_ITEM = "post"
AD_ITEM = "ad"


def interleave(posts: Sequence[Any], ad: Optional[dict], pos: int) -> List[dict]:
    """
    Inserta el anuncio justo antes del post en la posición `pos` (1-based).
    pos=0, pos>len(posts) o sin posts -> el anuncio va al final. Como mucho un anuncio.
    """
    items: List[dict] = []
    inserted = False
    for idx, post in enumerate(posts, start=1):
        if ad is not None and not inserted and pos > 0 and idx == pos:
            items.append({"type": AD_ITEM, "data": ad})
            inserted = True
        items.append({"type": POST_ITEM, "data": post})
    if ad is not None and not inserted:
        items.append({"type": AD_ITEM, "data": ad})
    return items


# -------------------- Reglas por clave --------------------
def is_ad_reference_key(ctx: ResolveContext, key: str) -> bool:
    rules = ctx.rules
    if key == rules.ad_position_keys[0]:
        return False
    return any(t in key for t in rules.ad_key_tokens)


def ad_slot_for(ctx: ResolveContext, key: str) -> str:
    target = ctx.rules.ad_target_key
    if "top" in key:
        return f"{target}_top"
    if "bottom" in key:
        return f"{target}_bottom"
    return target


def advert_position(ctx: ResolveContext, data: Mapping[str, Any]) -> int:
    for key in ctx.rules.ad_position_keys:
        value = data.get(key)
        if value is not None and value != "":
            return to_int(value)
    return 0


def _is_media_object(value: Any) -> bool:
    return isinstance(value, dict) and "id" in value and "url" in value


def _media_for(ctx: ResolveContext, value: Any) -> Optional[dict]:
    if ctx.stores.media is None:
        return None
    media = ctx.stores.media.get_attachment(to_int(value))
    if media is None:
        logger.debug("Attachment %s not found", value)
        return None
    return MediaRef(id=media.id, url=media.url, alt=media.alt).model_dump()


# -------------------- Recursión --------------------
def resolve(ctx: ResolveContext, node: Any) -> Any:
    """Punto de entrada. Un string suelto conserva el marcado básico permitido."""
    if isinstance(node, str):
        return sanitize_rich_text(node)
    return _resolve_value(ctx, node, 0)


def _resolve_value(ctx: ResolveContext, node: Any, depth: int) -> Any:
    if isinstance(node, dict):
        if depth > ctx.max_depth:
            logger.warning("Field tree deeper than %s levels; subtree dropped", ctx.max_depth)
            return None
        return _resolve_mapping(ctx, node, depth)
    if isinstance(node, (list, tuple)):
        if depth > ctx.max_depth:
            logger.warning("Field tree deeper than %s levels; subtree dropped", ctx.max_depth)
            return None
        return [_resolve_child(ctx, None, v, depth) for v in node]
    return node


def _resolve_child(ctx: ResolveContext, key: Optional[str], value: Any, depth: int) -> Any:
    rules = ctx.rules
    if _is_media_object(value):
        return copy.deepcopy(value)
    if key in rules.html_keep_keys or key in rules.block_recursion_keys:
        # ya resuelto o HTML a entregar tal cual
        return copy.deepcopy(value)
    if isinstance(value, str):
        return sanitize_text(value)
    return _resolve_value(ctx, value, depth + 1)


def _resolve_mapping(ctx: ResolveContext, node: Mapping[str, Any], depth: int) -> Dict[str, Any]:
    rules = ctx.rules
    data: Dict[str, Any] = dict(node)

    spec = parse_layout(data, rules)
    if spec is not None:
        data = resolve_layout_posts(ctx, data, spec)

    media_key = re.compile(rules.media_key_pattern, re.IGNORECASE)
    for key, value in list(data.items()):
        if not isinstance(key, str):
            continue
        if is_ad_reference_key(ctx, key) and is_scalar(value) and not is_empty(value):
            data[ad_slot_for(ctx, key)] = get_full_ad_data(ctx, value)

        if media_key.search(key) and not isinstance(value, (dict, list)) and not is_empty(value) and is_numeric(value):
            media = _media_for(ctx, value)
            if media is not None:
                data[key] = media

        if key == rules.social_toggle_key and value is True:
            data[key] = ctx.options().get(rules.social_items_option) or []

    posts = data.get("section_posts")
    if isinstance(posts, list):
        ad = next((data[s] for s in rules.ad_slot_order if data.get(s) is not None), None)
        data["section_items"] = interleave(posts, ad, advert_position(ctx, data))
        data.pop("section_posts", None)
        for slot in rules.ad_slot_order:
            data.pop(slot, None)

    return {key: _resolve_child(ctx, key, value, depth) for key, value in data.items()}

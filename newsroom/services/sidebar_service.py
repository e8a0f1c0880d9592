# newsroom/services/sidebar_service.py
"""
Extracción de datos de widgets de un área de sidebar.

Cada widget se guarda como `<base>-<n>`; sus opciones viven en
`widget_<base>[n]`. Un conjunto cerrado de adaptadores decide qué payloads
produce cada instancia; un mismo widget puede producir varios (p.ej. un texto
con dos links de YouTube) o ninguno.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from newsroom.schemas.delivery import (
    AdrotatePayload,
    ChannelPayload,
    LinkPayload,
    PlaylistPayload,
    RecentPostsPayload,
    SidebarData,
    YoutubeUrlPayload,
)
from newsroom.services.ad_service import get_full_ad_data
from newsroom.services.context import ResolveContext
from newsroom.services.post_formatter import get_api_posts
from newsroom.services.sanitizer import decode_entities
from newsroom.utils.values import is_empty, is_numeric, to_int

logger = logging.getLogger(__name__)

WIDGET_TOKEN = re.compile(r"^(.+)-(\d+)$")
YOUTUBE_URL = re.compile(
    r"(https?://)?(www\.)?(youtube\.com|youtu\.be)/(watch\?v=|embed/|v/|shorts/)?([a-zA-Z0-9_-]{11})",
    re.IGNORECASE,
)


class WidgetAdapter:
    """Contrato: `extract` devuelve cero o más payloads para una instancia."""

    def extract(self, ctx: ResolveContext, base: str, instance: Dict[str, Any]) -> List[dict]:
        raise NotImplementedError


class TextVideoLinkAdapter(WidgetAdapter):
    # widgets de texto / HTML: cada URL de YouTube encontrada es un link
    def extract(self, ctx, base, instance):
        content = instance.get("text") or instance.get("content") or ""
        if not isinstance(content, str) or not content:
            return []
        return [
            LinkPayload(url=m.group(0), id=m.group(5)).model_dump()
            for m in YOUTUBE_URL.finditer(content)
        ]


class YoutubePlaylistAdapter(WidgetAdapter):
    def extract(self, ctx, base, instance):
        if base != "bs-youtube-playlist" and "youtube" not in base:
            return []
        title = str(instance.get("title") or "")
        if "playlist_url" in instance:
            return [PlaylistPayload(url=decode_entities(str(instance["playlist_url"] or "")), title=title).model_dump()]
        if "url" in instance:
            return [YoutubeUrlPayload(url=decode_entities(str(instance["url"] or "")), title=title).model_dump()]
        return []


class AdrotateAdapter(WidgetAdapter):
    ID_KEYS = ("adrotate_id", "adrotate_group", "groupid", "group", "id", "ad")

    def extract(self, ctx, base, instance):
        candidate = next((instance[k] for k in self.ID_KEYS if instance.get(k) is not None), None)
        if is_empty(candidate) or not is_numeric(candidate):
            return []
        ad = get_full_ad_data(ctx, candidate)
        if ad is None:
            return []
        return [AdrotatePayload(advert_code=ad).model_dump()]


class RecentPostsAdapter(WidgetAdapter):
    BASE = "my_recent_posts_widget"
    DEFAULT_COUNT = 3

    def extract(self, ctx, base, instance):
        if base != self.BASE:
            return []
        count = abs(to_int(instance.get("number"))) or self.DEFAULT_COUNT
        return [
            RecentPostsPayload(
                title=str(instance.get("title") or ""),
                section_posts=get_api_posts(ctx, count),
            ).model_dump()
        ]


class ChannelAdapter(WidgetAdapter):
    def extract(self, ctx, base, instance):
        if "channel_url" not in instance and "channel_id" not in instance:
            return []
        return [
            ChannelPayload(
                url=str(instance.get("channel_url") or ""),
                id=str(instance.get("channel_id") or ""),
            ).model_dump()
        ]


ADAPTERS: List[WidgetAdapter] = [
    TextVideoLinkAdapter(),
    YoutubePlaylistAdapter(),
    AdrotateAdapter(),
    RecentPostsAdapter(),
    ChannelAdapter(),
]


def get_sidebar_data(ctx: ResolveContext, sidebar_id: str) -> Optional[dict]:
    store = ctx.stores.widgets
    if store is None:
        logger.warning("Sidebar %s skipped: widget store unavailable", sidebar_id)
        return None
    tokens = store.sidebar_widgets(sidebar_id)
    if tokens is None:
        logger.debug("Sidebar area %s does not exist", sidebar_id)
        return None

    data: List[dict] = []
    instances_by_base: Dict[str, Dict[str, Any]] = {}
    for token in tokens:
        m = WIDGET_TOKEN.match(token)
        if not m:
            continue
        base, number = m.group(1), m.group(2)
        if base not in instances_by_base:
            instances_by_base[base] = store.widget_instances(base)
        instance = instances_by_base[base].get(number)
        if not isinstance(instance, dict):
            continue
        for adapter in ADAPTERS:
            data.extend(adapter.extract(ctx, base, instance))
    return SidebarData(data=data).model_dump()

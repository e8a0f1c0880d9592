# newsroom/services/trending_service.py
# Trending: caché de vistas del plugin de stats, con top posts de 7 días como fallback
from __future__ import annotations

import calendar
import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional, Tuple

from newsroom.services.context import ResolveContext
from newsroom.services.post_formatter import format_post
from newsroom.stores.contracts import POST_TYPE_ARTICLE, PostRecord
from newsroom.utils.values import to_int

logger = logging.getLogger(__name__)

FALLBACK_DAYS = 7
WINDOW_MONTHS = 2


def months_back(now: datetime, months: int) -> datetime:
    """Mismo día N meses atrás; si el día no existe en ese mes, se usa el último."""
    month_index = now.year * 12 + (now.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def _first_bucket(cache: Any) -> Any:
    if not isinstance(cache, dict) or not cache:
        return None
    return next(iter(cache.values()))


def _cached_post_ids(cache: Any) -> Iterable[int]:
    bucket = _first_bucket(cache)
    if isinstance(bucket, dict):
        days = bucket.values()
    elif isinstance(bucket, list):
        days = bucket
    else:
        return []
    ids: List[int] = []
    for daily in days:
        if isinstance(daily, dict):
            entries = list(daily.values())
        elif isinstance(daily, list):
            entries = daily
        else:
            continue
        for entry in entries:
            if isinstance(entry, dict):
                pid = to_int(entry.get("post_id"))
                if pid > 0:
                    ids.append(pid)
    return ids


def _collect(ctx: ResolveContext, ids: Iterable[int], since: Optional[datetime]) -> List[PostRecord]:
    """Dedup por id (gana el primero), solo artículos, opcionalmente dentro de la ventana."""
    posts = ctx.stores.posts
    seen = set()
    out: List[Tuple[int, PostRecord]] = []
    for pid in ids:
        if pid in seen:
            continue
        post = posts.get_post(pid)
        if post is None or post.post_type != POST_TYPE_ARTICLE:
            continue
        if since is not None and post.date < since:
            continue
        seen.add(pid)
        out.append((len(out), post))
    # orden estable: fecha desc, empates conservan el orden de aparición
    out.sort(key=lambda item: item[1].date, reverse=True)
    return [p for _, p in out]


def _fallback_ids(ctx: ResolveContext, limit: int, offset: int) -> List[int]:
    rows = ctx.stores.stats.top_posts(days=FALLBACK_DAYS, limit=limit + offset)
    ids: List[int] = []
    for row in rows or []:
        pid = ctx.stores.posts.url_to_post_id(row.get("post_permalink", ""))
        if pid:
            ids.append(pid)
    return ids


def get_trending_posts(ctx: ResolveContext, limit: int = 10, offset: int = 0) -> List[dict]:
    """
    Lista de trending formateada. Sin servicio de stats o sin datos -> [].
    El fallback solo corre si la fuente primaria no deja nada.
    """
    if ctx.stores.stats is None or ctx.stores.posts is None:
        logger.warning("Trending skipped: view statistics or post store unavailable")
        return []
    limit = max(0, limit)
    offset = max(0, offset)

    since = months_back(ctx.clock(), WINDOW_MONTHS)
    ranked = _collect(ctx, _cached_post_ids(ctx.stores.stats.cached_views()), since)
    if not ranked:
        ranked = _collect(ctx, _fallback_ids(ctx, limit, offset), None)
    if not ranked:
        return []

    out = []
    for post in ranked[offset:offset + limit]:
        item = format_post(ctx, post)
        if item is not None:
            out.append(item)
    return out


def trending_limit(ctx: ResolveContext) -> int:
    """Límite global: primera opción no vacía de `trending_option_keys`, o el default."""
    opts = ctx.options()
    for key in ctx.rules.trending_option_keys:
        value = to_int(opts.get(key))
        if value > 0:
            return value
    return ctx.rules.trending_default_limit

# newsroom/stores/stats.py
# Estadísticas de vistas: caché local (opción stats_cache) + API CSV de top posts como fallback
from __future__ import annotations

import csv
import io
import logging
from typing import Any, Dict, List

import httpx

from newsroom.core.settings import settings

logger = logging.getLogger(__name__)


class JetpackStatsService:
    """
    - `cached_views()`: el caché por buckets de tiempo que el plugin de stats deja
      en la opción `stats_cache`.
    - `top_posts()`: consulta `postviews` en formato CSV (top posts de N días).
      Sin STATS_API_URL configurado devuelve [] (integración no disponible).
    """

    def __init__(self, options, *, client: httpx.Client | None = None) -> None:
        self.options = options
        self._client = client

    def cached_views(self) -> Any:
        return self.options.get_option("stats_cache")

    def _params(self, *, days: int, limit: int) -> Dict[str, Any]:
        params: Dict[str, Any] = {"table": "postviews", "days": days, "limit": limit, "format": "csv"}
        if settings.STATS_API_KEY:
            params["api_key"] = settings.STATS_API_KEY
        if settings.STATS_BLOG_ID:
            params["blog_id"] = settings.STATS_BLOG_ID
        return params

    def top_posts(self, *, days: int, limit: int) -> List[Dict[str, Any]]:
        if not settings.STATS_API_URL or limit <= 0:
            return []
        params = self._params(days=days, limit=limit)
        try:
            if self._client is not None:
                resp = self._client.get(settings.STATS_API_URL, params=params)
            else:
                with httpx.Client(timeout=settings.STATS_TIMEOUT_SECONDS) as client:
                    resp = client.get(settings.STATS_API_URL, params=params)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("View stats request failed: %s", exc)
            return []
        return parse_postviews_csv(resp.text)


def parse_postviews_csv(body: str) -> List[Dict[str, Any]]:
    """
    CSV con cabecera; nos interesa `post_permalink` (y `views` si viene).
    Filas sin permalink se descartan.
    """
    rows: List[Dict[str, Any]] = []
    reader = csv.DictReader(io.StringIO(body or ""))
    for row in reader:
        link = (row.get("post_permalink") or "").strip()
        if not link:
            continue
        rows.append(
            {
                "post_id": (row.get("post_id") or "").strip(),
                "post_title": (row.get("post_title") or "").strip(),
                "post_permalink": link,
                "views": (row.get("views") or "").strip(),
            }
        )
    return rows

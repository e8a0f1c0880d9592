# newsroom/services/page_service.py
"""
Ensamblado de respuestas de la API de entrega.

Cada función arma el payload de un endpoint (opciones globales, header,
footer, búsquedas, archivos, categorías, posts/páginas) y lo pasa por el
resolver de campos. Errores de frontera (slug faltante, objeto inexistente)
se levantan como ValueError / LookupError; el router los traduce a HTTP.
"""
from __future__ import annotations

import calendar
import logging
import math
from datetime import date
from typing import Any, Dict, List, Optional

from newsroom.core.settings import settings
from newsroom.schemas.delivery import CategoryRef
from newsroom.services.ad_service import get_full_ad_data, get_post_content_ads
from newsroom.services.breadcrumb_service import build_breadcrumb, build_date_breadcrumb
from newsroom.services.context import ResolveContext
from newsroom.services.field_resolver import resolve
from newsroom.services.menu_service import menu_for_locations
from newsroom.services.post_formatter import format_nav_post, format_post, get_api_posts, thumbnail_url
from newsroom.services.sanitizer import EXCERPT_ALLOWED_TAGS, decode_entities, sanitize_text
from newsroom.services.sidebar_service import get_sidebar_data
from newsroom.services.trending_service import get_trending_posts
from newsroom.stores.contracts import POST_TYPE_ARTICLE, STATUS_PUBLISH, CategoryRecord, PostRecord
from newsroom.utils.values import is_empty, to_int

logger = logging.getLogger(__name__)

# Ubicaciones de menú (primera asignada gana)
HEADER_MENU = ("header-menu", "primary")
FOOTER_MENU = ("footer-menu",)
MOBILE_MENU = ("mobile-menu",)
MOBILE_HEADER_MENU = ("mobile-menu-header", "mobile-header-menu")
CATEGORIES_MENU = ("categories-menu",)

GENERIC_SIDEBAR = "sidebar-1"
FOOTER_SIDEBAR = "custom-footer-sidebar"
DATE_SIDEBAR = "date"

HEADER_TRENDING_COUNT = 4
RELATED_ARTICLES = 3
PRIMARY_CATEGORY_META = "_yoast_wpseo_primary_category"
TTS_META = "tts_mp3_file_urls"
ALL_NEWS_TEMPLATE = "page-all-news.php"
WHATSAPP_OPTIONS = {
    "notification_image": "cuf_wa_notification_image",
    "subscribe_button_text": "cuf_wa_subscribe_button_text",
    "subscribe_button_url": "cuf_wa_subscribe_button_url",
}


# -------------------- Helpers --------------------
def _total_pages(total: int, per_page: int) -> int:
    if per_page <= 0:
        return 1
    return int(math.ceil(total / per_page))


def _global_trending(ctx: ResolveContext) -> List[dict]:
    limit = to_int(ctx.options().get("trending_posts_per_page")) or settings.TRENDING_DEFAULT_LIMIT
    return get_trending_posts(ctx, limit, 0)


def _global_ads(ctx: ResolveContext) -> Dict[str, Optional[dict]]:
    opts = ctx.options()
    return {
        "advert_top": get_full_ad_data(ctx, opts.get("adrotate_ad_select") or 0),
        "advert_bottom": get_full_ad_data(ctx, opts.get("adrotate_ad_select_bottom") or 0),
    }


def _no_results(label: str, hint: str) -> Dict[str, str]:
    return {"message": f"No results found for {label}", "description": f"No posts found. Try another {hint}."}


def _format_all(ctx: ResolveContext, posts: List[PostRecord]) -> List[dict]:
    return [item for item in (format_post(ctx, p) for p in posts) if item is not None]


# -------------------- Opciones globales / header / footer --------------------
def theme_settings(ctx: ResolveContext) -> Dict[str, Any]:
    options = ctx.options()
    if not options:
        raise LookupError("No theme settings found")

    resolved = resolve(ctx, options)
    resolved["menus"] = {
        "header": menu_for_locations(ctx, *HEADER_MENU),
        "footer": menu_for_locations(ctx, *FOOTER_MENU),
        "mobile": menu_for_locations(ctx, *MOBILE_MENU),
        "mobile_header": menu_for_locations(ctx, *MOBILE_HEADER_MENU),
        "categories": menu_for_locations(ctx, *CATEGORIES_MENU),
    }

    if ctx.stores.settings is not None:
        whatsapp = {k: ctx.stores.settings.get_option(name, "") for k, name in WHATSAPP_OPTIONS.items()}
        if any(whatsapp.values()):
            resolved["whatsapp"] = whatsapp
    return resolved


def header(ctx: ResolveContext) -> Dict[str, Any]:
    opts = ctx.options()
    today = ctx.clock()
    data = {
        "header_logo": opts.get("header_logo"),
        "social_items": opts.get("social_items") or [],
        "current_date": f"{today:%A}, {today:%B} {today.day}, {today.year}",
        "menus": {
            "header": menu_for_locations(ctx, "header-menu"),
            "mobile": menu_for_locations(ctx, *MOBILE_MENU),
            "mobile_header": menu_for_locations(ctx, *MOBILE_HEADER_MENU),
            "categories": menu_for_locations(ctx, *CATEGORIES_MENU),
        },
        "search_settings": {
            "popular_categories": opts.get("select_popular_categories") or [],
            "popular_search_title": opts.get("popular_search_title") or "Popular Searches",
            "trending_posts": get_trending_posts(ctx, HEADER_TRENDING_COUNT, 0),
        },
        "mobile_sticky_menu": opts.get("mobile_header_list") or [],
    }
    return resolve(ctx, data)


def footer(ctx: ResolveContext) -> Dict[str, Any]:
    opts = ctx.options()
    data = {
        "footer_logo": opts.get("footer_logo"),
        "footer_description": opts.get("footer_description") or "",
        "footer_copyright": opts.get("footer_copyright") or "",
        "menu": menu_for_locations(ctx, *FOOTER_MENU),
        "social_items": opts.get("social_items") or [],
        "site_credit": {
            "enabled": opts.get("site_credit", False),
            "text": opts.get("site_credit_text") or "",
        },
        "page_links": opts.get("footer_page_listing") or [],
        "whatsapp": {
            "enabled": opts.get("whatsapp_button", False),
            "url": opts.get("footer_whatsapp_url") or "",
        },
        "newsletter": {
            "title": opts.get("footer_newsletter_title") or "",
            "enabled": not is_empty(opts.get("footer_newsletter")),
        },
    }
    resolved = resolve(ctx, data)
    # payload de widgets ya resuelto: no vuelve a pasar por el resolver
    resolved["sidebar"] = get_sidebar_data(ctx, FOOTER_SIDEBAR)
    return resolved


def trending(ctx: ResolveContext, limit: int = 0, offset: int = 0) -> List[dict]:
    return get_trending_posts(ctx, limit or settings.TRENDING_DEFAULT_LIMIT, max(0, offset))


# -------------------- Búsqueda --------------------
def search(ctx: ResolveContext, keyword: str, page: int = 1) -> Dict[str, Any]:
    keyword = sanitize_text(keyword or "")
    page = max(1, page)
    if not keyword or ctx.stores.posts is None:
        return {
            "results": [],
            "pagination": {"total_pages": 0, "current_page": 1},
            "sidebar_data": get_sidebar_data(ctx, GENERIC_SIDEBAR),
        }

    per_page = settings.SEARCH_PER_PAGE
    posts, total = ctx.stores.posts.search_posts(keyword, count=per_page, offset=(page - 1) * per_page)
    results: Any = _format_all(ctx, posts) or _no_results(keyword, "search")
    return {
        "results": results,
        "pagination": {
            "total_pages": _total_pages(total, per_page),
            "current_page": page,
            "total_results": total,
        },
        "sidebar_data": get_sidebar_data(ctx, GENERIC_SIDEBAR),
    }


def search_suggestions(ctx: ResolveContext, keyword: str) -> Dict[str, Any]:
    keyword = sanitize_text(keyword or "")
    if not keyword or ctx.stores.posts is None:
        return {"results": []}

    posts, _ = ctx.stores.posts.search_posts(keyword, count=settings.SUGGESTIONS_LIMIT, offset=0)
    results = []
    for p in posts:
        cats = ctx.stores.posts.post_categories(p.id)
        results.append(
            {
                "id": p.id,
                "title": decode_entities(p.title),
                "slug": p.slug,
                "link": p.link,
                "thumbnail": thumbnail_url(ctx, p),
                "category": CategoryRef(id=cats[0].id, name=decode_entities(cats[0].name)).model_dump() if cats else None,
            }
        )
    return {"results": results or {"message": "No result found."}}


# -------------------- Archivo por fecha --------------------
def date_archive(
    ctx: ResolveContext, year: int, month: Optional[int] = None, day: Optional[int] = None, page: int = 1
) -> Dict[str, Any]:
    if not year:
        raise ValueError("The year parameter is required.")
    month = month or None
    day = day if month else None
    try:
        date(year, month or 1, day or 1)
    except ValueError as exc:
        raise ValueError(f"Invalid archive date: {exc}") from exc

    if day:
        label = f"{calendar.month_name[month]} {day}, {year}"
        title = f"Daily Archives: {label}"
    elif month:
        label = f"{calendar.month_name[month]} {year}"
        title = f"Monthly Archives: {label}"
    else:
        label = str(year)
        title = f"Yearly Archives: {label}"

    page = max(1, page)
    per_page = settings.ARCHIVE_PER_PAGE
    posts: List[PostRecord] = []
    total = 0
    if ctx.stores.posts is not None:
        posts, total = ctx.stores.posts.date_archive_posts(
            year=year, month=month, day=day, count=per_page, offset=(page - 1) * per_page
        )
    results: Any = _format_all(ctx, posts) or _no_results(label, "date")

    return {
        "archive_title": title,
        "date_label": label,
        "results": results,
        "pagination": {
            "total_pages": _total_pages(total, per_page),
            "current_page": page,
            "total_results": total,
        },
        "breadcrumb": build_date_breadcrumb(ctx, year, month, day),
        "trending_posts": _global_trending(ctx),
        "sidebar_data": get_sidebar_data(ctx, GENERIC_SIDEBAR),
        "date_sidebar": get_sidebar_data(ctx, DATE_SIDEBAR),
    }


# -------------------- Categorías --------------------
def _require_category(ctx: ResolveContext, slug: str) -> CategoryRecord:
    if not slug:
        raise ValueError("Please provide a category slug")
    category = ctx.stores.taxonomy.get_category_by_slug(slug) if ctx.stores.taxonomy is not None else None
    if category is None:
        raise LookupError("Category not found")
    return category


def category_posts(ctx: ResolveContext, slug: str, paged: int = 1, offset: Optional[int] = None) -> Dict[str, Any]:
    """Top posts fijos + listado paginado que arranca después de ellos."""
    category = _require_category(ctx, slug)
    paged = max(1, paged)
    raw_per_page = category.fields.get("category_post_per_page")
    per_page = to_int(raw_per_page) or settings.CATEGORY_PER_PAGE
    top_count = settings.CATEGORY_TOP_POSTS

    if offset is None:
        offset = top_count + (paged - 1) * per_page
    cat_ids = [category.id]
    total = ctx.stores.posts.count_posts(category_ids=cat_ids) if ctx.stores.posts is not None else 0

    data = {
        "category": {"id": category.id, "name": category.name, "slug": category.slug},
        "breadcrumb": build_breadcrumb(ctx, category),
        "trending_posts": _global_trending(ctx),
        **_global_ads(ctx),
        "sidebar_data": get_sidebar_data(ctx, GENERIC_SIDEBAR),
        "top_posts": get_api_posts(ctx, top_count, cat_ids, 0),
        "category_posts": {
            "results": get_api_posts(ctx, per_page, cat_ids, offset),
            "pagination": {
                "current_page": paged,
                "category_post_per_page": raw_per_page,
                "total_pages": _total_pages(max(0, total - top_count), per_page),
                "total_results": total,
                "offset_used": offset,
            },
        },
    }
    return resolve(ctx, data)


def enhance_category(
    ctx: ResolveContext, slug: str, page: int = 1, per_page: int = 0, offset: Optional[int] = None
) -> Dict[str, Any]:
    category = _require_category(ctx, slug)
    page = max(1, page)
    per_page = per_page or settings.CATEGORY_PER_PAGE
    top_count = settings.CATEGORY_TOP_POSTS
    if offset is None:
        offset = top_count + (page - 1) * per_page
    cat_ids = [category.id]

    fields: Dict[str, Any] = dict(category.fields)
    fields.update(_global_ads(ctx))
    fields["sidebar_data"] = get_sidebar_data(ctx, GENERIC_SIDEBAR)
    fields["trending_posts"] = _global_trending(ctx)
    fields["breadcrumb"] = build_breadcrumb(ctx, category)
    fields["top_posts"] = get_api_posts(ctx, top_count, cat_ids, 0)
    fields["category_posts"] = {
        "results": get_api_posts(ctx, per_page, cat_ids, offset),
        "pagination": {"current_page": page, "per_page": per_page},
    }
    return {
        "id": category.id,
        "name": decode_entities(category.name),
        "slug": category.slug,
        "link": category.link,
        "acf": resolve(ctx, fields),
    }


# -------------------- Posts y páginas --------------------
def _special_page_fields(ctx: ResolveContext, post: PostRecord, fields: Dict[str, Any], page: int) -> None:
    slug = post.slug.lower()
    is_404 = slug == "404" or "not-found" in slug
    is_thank_you = "thank-you" in slug
    is_trending = "trending" in slug
    is_all_news = post.template == ALL_NEWS_TEMPLATE or "all-news" in slug
    if not (is_404 or is_thank_you or is_trending or is_all_news):
        return

    for key, value in ctx.options().items():
        if is_404 and "not_found" in key:
            fields[key] = value
        if is_thank_you and ("thank_you" in key or "_ty_" in key):
            fields[key] = value
    fields["show_sidebar"] = True

    if is_all_news:
        fields.update(_global_ads(ctx))
        per_page = settings.ARCHIVE_PER_PAGE
        page = max(1, page)
        posts = get_api_posts(ctx, per_page, None, (page - 1) * per_page)
        total = ctx.stores.posts.count_posts() if ctx.stores.posts is not None else 0
        fields["all_news_posts"] = {
            "results": posts,
            "pagination": {
                "total_pages": _total_pages(total, per_page),
                "current_page": page,
                "total_results": total,
            },
        }


def _primary_category(ctx: ResolveContext, post: PostRecord) -> Optional[dict]:
    cats = ctx.stores.posts.post_categories(post.id)
    if not cats:
        return None
    wanted = to_int(post.meta.get(PRIMARY_CATEGORY_META))
    primary = next((c for c in cats if c.id == wanted), cats[0]) if wanted else cats[0]
    return CategoryRef(id=primary.id, name=decode_entities(primary.name)).model_dump()


def _single_post_fields(ctx: ResolveContext, post: PostRecord, fields: Dict[str, Any]) -> None:
    posts = ctx.stores.posts
    fields["subtitle"] = post.fields.get("subtitle")

    caption = ""
    if post.thumbnail_id and ctx.stores.media is not None:
        media = ctx.stores.media.get_attachment(post.thumbnail_id)
        caption = media.caption if media else ""
    fields["featured_image_caption"] = caption

    fields["primary_category"] = _primary_category(ctx, post)
    fields["post_navigation"] = {
        "previous": format_nav_post(ctx, posts.adjacent_post(post, previous=True)),
        "next": format_nav_post(ctx, posts.adjacent_post(post, previous=False)),
    }
    cat_ids = [c.id for c in posts.post_categories(post.id)]
    fields["related_articles"] = get_api_posts(ctx, RELATED_ARTICLES, cat_ids, 0)
    fields["sidebar_data"] = get_sidebar_data(ctx, GENERIC_SIDEBAR)
    fields["post_ads"] = get_post_content_ads(ctx)

    tts = post.meta.get(TTS_META)
    if tts:
        fields["tts_mp3_url"] = tts


def enhance_post(ctx: ResolveContext, post: Optional[PostRecord], page: int = 1) -> Dict[str, Any]:
    """
    Post/página publicada + su árbol de campos enriquecido:
    breadcrumb, trending, páginas especiales, extras de artículo y sidebar.
    """
    if post is None or post.status != STATUS_PUBLISH:
        raise LookupError("Content not found")

    fields: Dict[str, Any] = dict(post.fields)
    fields["breadcrumb"] = build_breadcrumb(ctx, post.id)
    fields["trending_posts"] = _global_trending(ctx)

    _special_page_fields(ctx, post, fields, page)
    if post.post_type == POST_TYPE_ARTICLE:
        _single_post_fields(ctx, post, fields)

    if is_empty(fields.get("sidebar_data")) and (
        not is_empty(fields.get("show_sidebar")) or not is_empty(fields.get("show_sider"))
    ):
        fields["sidebar_data"] = get_sidebar_data(ctx, GENERIC_SIDEBAR)

    return {
        "id": post.id,
        "type": post.post_type,
        "slug": post.slug,
        "link": post.link,
        "date": post.date.isoformat(),
        "title": decode_entities(post.title),
        "content": decode_entities(post.content),
        "excerpt": sanitize_text(post.excerpt, EXCERPT_ALLOWED_TAGS),
        "newsroom_api": "active",
        "acf": resolve(ctx, fields),
    }


def get_post(ctx: ResolveContext, post_id: int, page: int = 1) -> Dict[str, Any]:
    post = ctx.stores.posts.get_post(post_id) if ctx.stores.posts is not None else None
    return enhance_post(ctx, post, page)


def get_page(ctx: ResolveContext, slug: str, page: int = 1) -> Dict[str, Any]:
    if not slug:
        raise ValueError("Please provide a page slug")
    post = ctx.stores.posts.get_page_by_slug(slug) if ctx.stores.posts is not None else None
    return enhance_post(ctx, post, page)

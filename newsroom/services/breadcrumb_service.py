# newsroom/services/breadcrumb_service.py
from __future__ import annotations

import calendar
from typing import List, Optional, Union

from newsroom.schemas.delivery import BreadcrumbEntry
from newsroom.services.context import ResolveContext
from newsroom.services.sanitizer import decode_entities
from newsroom.stores.contracts import POST_TYPE_ARTICLE, POST_TYPE_PAGE, CategoryRecord

Target = Union[int, str, CategoryRecord, None]


def _entry(title: str, url: str) -> dict:
    return BreadcrumbEntry(title=decode_entities(title), url=url).model_dump()


def _home(ctx: ResolveContext) -> dict:
    return _entry("Home", f"{ctx.home_url.rstrip('/')}/")


def _category_chain(ctx: ResolveContext, category: CategoryRecord) -> List[dict]:
    out: List[dict] = []
    if ctx.stores.taxonomy is not None and category.parent_id:
        for anc in ctx.stores.taxonomy.category_ancestors(category.id):
            out.append(_entry(anc.name, anc.link))
    out.append(_entry(category.name, category.link))
    return out


def build_breadcrumb(ctx: ResolveContext, target: Target) -> List[dict]:
    """
    Ruta Home -> ... -> objeto.

    - id de página: ancestros (raíz primero) + la página
    - id de post: ancestros de la categoría principal + categoría + post
    - CategoryRecord: ancestros + la categoría
    Un id que no existe devuelve solo [Home].
    """
    if not target:
        return []
    crumbs = [_home(ctx)]

    if isinstance(target, CategoryRecord):
        return crumbs + _category_chain(ctx, target)

    posts = ctx.stores.posts
    post_id = int(target) if str(target).strip().isdigit() else 0
    post = posts.get_post(post_id) if posts is not None and post_id > 0 else None
    if post is None:
        return crumbs

    if post.post_type == POST_TYPE_PAGE:
        if post.parent_id:
            crumbs += [_entry(a.title, a.link) for a in posts.page_ancestors(post.id)]
        crumbs.append(_entry(post.title, post.link))
    elif post.post_type == POST_TYPE_ARTICLE:
        categories = posts.post_categories(post.id)
        if categories:
            crumbs += _category_chain(ctx, categories[0])
        crumbs.append(_entry(post.title, post.link))
    return crumbs


def build_date_breadcrumb(ctx: ResolveContext, year: int, month: Optional[int] = None, day: Optional[int] = None) -> List[dict]:
    """Home > 2026 > February > 11"""
    base = f"{ctx.home_url.rstrip('/')}/"
    crumbs = [_entry("Home", base), _entry(str(year), f"{base}{year}/")]
    if month:
        crumbs.append(_entry(calendar.month_name[month], f"{base}{year}/{month:02d}/"))
        if day:
            crumbs.append(_entry(str(day), f"{base}{year}/{month:02d}/{day:02d}/"))
    return crumbs

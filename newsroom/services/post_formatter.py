# newsroom/services/post_formatter.py
# Registro crudo de post -> PostSummary canónico
from __future__ import annotations

import re
from typing import Optional

from newsroom.schemas.delivery import CategoryRef, PostNavItem, PostSummary
from newsroom.services.context import ResolveContext
from newsroom.services.sanitizer import decode_entities, sanitize_text
from newsroom.stores.contracts import PostRecord

EXCERPT_WORDS = 30
MORE = "…"


def format_date(post: PostRecord) -> str:
    """'Oct 5, 2026'"""
    d = post.date
    return f"{d:%b} {d.day}, {d.year}"


def trim_words(html_text: str, num_words: int = EXCERPT_WORDS, more: str = MORE) -> str:
    text = sanitize_text(html_text or "")
    words = re.split(r"\s+", text.strip()) if text.strip() else []
    if len(words) > num_words:
        return " ".join(words[:num_words]) + more
    return " ".join(words)


def thumbnail_url(ctx: ResolveContext, post: PostRecord) -> Optional[str]:
    if not post.thumbnail_id or ctx.stores.media is None:
        return None
    media = ctx.stores.media.get_attachment(post.thumbnail_id)
    return media.url if media else None


def format_post(ctx: ResolveContext, post: PostRecord | None) -> Optional[dict]:
    if post is None:
        return None
    cats = ctx.stores.posts.post_categories(post.id) if ctx.stores.posts is not None else []
    return PostSummary(
        id=post.id,
        title=decode_entities(post.title),
        link=post.link,
        slug=post.slug,
        date=format_date(post),
        thumbnail=thumbnail_url(ctx, post),
        excerpt=trim_words(post.content),
        categories=[CategoryRef(id=c.id, name=decode_entities(c.name)) for c in cats],
    ).model_dump()


def format_nav_post(ctx: ResolveContext, post: PostRecord | None) -> Optional[dict]:
    if post is None:
        return None
    return PostNavItem(
        id=post.id,
        title=decode_entities(post.title),
        link=post.link,
        thumbnail=thumbnail_url(ctx, post),
    ).model_dump()


def get_api_posts(ctx: ResolveContext, count: int, category_ids=None, offset: int = 0) -> list:
    """Posts publicados, más nuevos primero, ya formateados."""
    if ctx.stores.posts is None or count <= 0:
        return []
    records = ctx.stores.posts.query_posts(category_ids=category_ids or None, count=count, offset=max(0, offset))
    return [format_post(ctx, p) for p in records]

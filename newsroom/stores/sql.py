# newsroom/stores/sql.py
# Implementaciones SQLAlchemy de los stores (posts, opciones, taxonomía, media, ads, widgets)
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from newsroom.core.settings import settings
from newsroom.models.adrotate import Ad, AdGroup, AdLink
from newsroom.models.content import Attachment, Category, Post, PostCategory
from newsroom.models.options import MenuItem, Option
from newsroom.stores.contracts import (
    AdGroupRecord,
    AdRecord,
    CategoryRecord,
    MediaRecord,
    MenuItemRecord,
    POST_TYPE_ARTICLE,
    POST_TYPE_PAGE,
    PostRecord,
    STATUS_PUBLISH,
    Stores,
)


def _aware(dt: datetime | None) -> datetime:
    """SQLite devuelve datetimes naive; los normalizamos a UTC."""
    if dt is None:
        return datetime.fromtimestamp(0, tz=timezone.utc)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _ids(values: Iterable[int] | None) -> List[int]:
    return sorted({int(v) for v in (values or [])})


# -------------------- Options --------------------
class SqlSettingsStore:
    def __init__(self, db: Session, *, theme_key: str | None = None) -> None:
        self.db = db
        self.theme_key = theme_key or settings.THEME_OPTIONS_KEY

    def get_option(self, name: str, default: Any = None) -> Any:
        row = self.db.get(Option, name)
        if row is None or row.value is None:
            return default
        return row.value

    def get_options(self) -> Dict[str, Any]:
        value = self.get_option(self.theme_key, {})
        return dict(value) if isinstance(value, dict) else {}


# -------------------- Posts --------------------
class SqlPostStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def _link(self, p: Post) -> str:
        if p.post_type == POST_TYPE_PAGE:
            slugs = [a.slug for a in self._page_chain(p)] + [p.slug]
            return f"{settings.HOME}/{'/'.join(slugs)}/"
        return f"{settings.HOME}/{p.slug}/"

    def _record(self, p: Post) -> PostRecord:
        return PostRecord(
            id=p.id,
            post_type=p.post_type,
            status=p.status,
            title=p.title or "",
            slug=p.slug or "",
            content=p.content or "",
            excerpt=p.excerpt or "",
            date=_aware(p.date),
            link=self._link(p),
            parent_id=p.parent_id,
            thumbnail_id=p.thumbnail_id,
            template=p.template or "",
            fields=dict(p.fields or {}),
            meta=dict(p.meta or {}),
        )

    def _published_articles(self):
        return select(Post).where(Post.post_type == POST_TYPE_ARTICLE, Post.status == STATUS_PUBLISH)

    def _in_categories(self, q, category_ids: Iterable[int] | None):
        ids = _ids(category_ids)
        if not ids:
            return q
        sub = select(PostCategory.post_id).where(PostCategory.category_id.in_(ids))
        return q.where(Post.id.in_(sub))

    def query_posts(self, *, category_ids: Iterable[int] | None, count: int, offset: int) -> List[PostRecord]:
        q = self._in_categories(self._published_articles(), category_ids)
        q = q.order_by(Post.date.desc(), Post.id.desc()).limit(max(0, count)).offset(max(0, offset))
        return [self._record(p) for p in self.db.scalars(q).all()]

    def count_posts(self, *, category_ids: Iterable[int] | None = None) -> int:
        q = self._in_categories(self._published_articles(), category_ids)
        return int(self.db.scalar(select(func.count()).select_from(q.subquery())) or 0)

    def get_post(self, post_id: int) -> Optional[PostRecord]:
        p = self.db.get(Post, post_id)
        return self._record(p) if p else None

    def get_page_by_slug(self, slug: str) -> Optional[PostRecord]:
        p = self.db.scalar(
            select(Post).where(Post.post_type == POST_TYPE_PAGE, Post.slug == slug).limit(1)
        )
        return self._record(p) if p else None

    def post_categories(self, post_id: int) -> List[CategoryRecord]:
        rows = self.db.scalars(
            select(Category)
            .join(PostCategory, PostCategory.category_id == Category.id)
            .where(PostCategory.post_id == post_id)
            .order_by(PostCategory.position, Category.id)
        ).all()
        return [category_record(c) for c in rows]

    def _page_chain(self, p: Post) -> List[Post]:
        chain: List[Post] = []
        seen = {p.id}
        parent_id = p.parent_id
        while parent_id and parent_id not in seen:
            seen.add(parent_id)
            parent = self.db.get(Post, parent_id)
            if parent is None:
                break
            chain.append(parent)
            parent_id = parent.parent_id
        chain.reverse()
        return chain

    def page_ancestors(self, post_id: int) -> List[PostRecord]:
        p = self.db.get(Post, post_id)
        if p is None:
            return []
        return [self._record(a) for a in self._page_chain(p)]

    def adjacent_post(
        self, post: PostRecord, *, previous: bool, category_ids: Iterable[int] | None = None
    ) -> Optional[PostRecord]:
        q = self._in_categories(self._published_articles(), category_ids).where(Post.id != post.id)
        if previous:
            q = q.where(Post.date < post.date).order_by(Post.date.desc(), Post.id.desc())
        else:
            q = q.where(Post.date > post.date).order_by(Post.date.asc(), Post.id.asc())
        p = self.db.scalars(q.limit(1)).first()
        return self._record(p) if p else None

    def url_to_post_id(self, url: str) -> Optional[int]:
        path = urlparse(url or "").path
        parts = [s for s in path.split("/") if s]
        if not parts:
            return None
        p = self.db.scalar(
            select(Post)
            .where(Post.slug == parts[-1], Post.post_type.in_([POST_TYPE_ARTICLE, POST_TYPE_PAGE]))
            .order_by(Post.id)
            .limit(1)
        )
        return p.id if p else None

    def search_posts(self, keyword: str, *, count: int, offset: int) -> Tuple[List[PostRecord], int]:
        like = f"%{keyword}%"
        q = self._published_articles().where(or_(Post.title.ilike(like), Post.content.ilike(like)))
        total = int(self.db.scalar(select(func.count()).select_from(q.subquery())) or 0)
        rows = self.db.scalars(q.order_by(Post.date.desc(), Post.id.desc()).limit(count).offset(offset)).all()
        return [self._record(p) for p in rows], total

    def date_archive_posts(
        self, *, year: int, month: int | None, day: int | None, count: int, offset: int
    ) -> Tuple[List[PostRecord], int]:
        start, end = _date_range(year, month, day)
        q = self._published_articles().where(Post.date >= start, Post.date < end)
        total = int(self.db.scalar(select(func.count()).select_from(q.subquery())) or 0)
        rows = self.db.scalars(q.order_by(Post.date.desc(), Post.id.desc()).limit(count).offset(offset)).all()
        return [self._record(p) for p in rows], total


def _date_range(year: int, month: int | None, day: int | None) -> Tuple[datetime, datetime]:
    utc = timezone.utc
    if month and day:
        start = datetime(year, month, day, tzinfo=utc)
        return start, start + timedelta(days=1)
    if month:
        start = datetime(year, month, 1, tzinfo=utc)
        end = datetime(year + 1, 1, 1, tzinfo=utc) if month == 12 else datetime(year, month + 1, 1, tzinfo=utc)
        return start, end
    return datetime(year, 1, 1, tzinfo=utc), datetime(year + 1, 1, 1, tzinfo=utc)


# -------------------- Taxonomía / menús --------------------
def category_record(c: Category) -> CategoryRecord:
    return CategoryRecord(
        id=c.id,
        name=c.name or "",
        slug=c.slug or "",
        parent_id=c.parent_id,
        link=f"{settings.HOME}/category/{c.slug}/",
        fields=dict(c.fields or {}),
    )


class SqlTaxonomyStore:
    def __init__(self, db: Session, options: SqlSettingsStore) -> None:
        self.db = db
        self.options = options

    def get_category(self, category_id: int) -> Optional[CategoryRecord]:
        c = self.db.get(Category, category_id)
        return category_record(c) if c else None

    def get_category_by_slug(self, slug: str) -> Optional[CategoryRecord]:
        c = self.db.scalar(select(Category).where(Category.slug == slug).limit(1))
        return category_record(c) if c else None

    def category_ancestors(self, category_id: int) -> List[CategoryRecord]:
        c = self.db.get(Category, category_id)
        chain: List[CategoryRecord] = []
        seen = {category_id}
        parent_id = c.parent_id if c else None
        while parent_id and parent_id not in seen:
            seen.add(parent_id)
            parent = self.db.get(Category, parent_id)
            if parent is None:
                break
            chain.append(category_record(parent))
            parent_id = parent.parent_id
        chain.reverse()
        return chain

    def menu_locations(self) -> Dict[str, int]:
        raw = self.options.get_option("nav_menu_locations", {})
        if not isinstance(raw, dict):
            return {}
        out: Dict[str, int] = {}
        for loc, menu_id in raw.items():
            try:
                out[str(loc)] = int(menu_id)
            except (TypeError, ValueError):
                continue
        return out

    def menu_items(self, menu_id: int) -> List[MenuItemRecord]:
        rows = self.db.scalars(
            select(MenuItem).where(MenuItem.menu_id == menu_id).order_by(MenuItem.position, MenuItem.id)
        ).all()
        return [
            MenuItemRecord(
                id=r.id,
                parent_id=r.parent_item_id or 0,
                object_id=r.object_id or 0,
                object_type=r.object_type or "custom",
                item_type=r.item_type or "custom",
                title=r.title or "",
                url=r.url or "",
            )
            for r in rows
        ]

    def object_slug(self, item: MenuItemRecord) -> str:
        if item.item_type == "post_type":
            p = self.db.get(Post, item.object_id)
            return p.slug if p else ""
        if item.item_type == "taxonomy":
            c = self.db.get(Category, item.object_id)
            return c.slug if c else ""
        return ""


# -------------------- Media --------------------
class SqlMediaStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_attachment(self, attachment_id: int) -> Optional[MediaRecord]:
        a = self.db.get(Attachment, attachment_id)
        if a is None or not a.url:
            return None
        return MediaRecord(id=a.id, url=a.url, alt=a.alt or "", caption=a.caption or "")


# -------------------- Publicidad --------------------
def _group_record(g: AdGroup) -> AdGroupRecord:
    return AdGroupRecord(
        id=g.id,
        name=g.name or "",
        modus=g.modus or 0,
        adspeed=g.adspeed or 0,
        repeat_impressions=g.repeat_impressions or "N",
        gridrows=g.gridrows or 1,
        gridcolumns=g.gridcolumns or 1,
    )


def _ad_record(a: Ad) -> AdRecord:
    return AdRecord(
        id=a.id,
        title=a.title or "",
        bannercode=a.bannercode or "",
        image=a.image or "",
        tracker=a.tracker or "N",
    )


class SqlAdStore:
    def __init__(self, db: Session, options: SqlSettingsStore) -> None:
        self.db = db
        self.options = options

    def get_group(self, group_id: int) -> Optional[AdGroupRecord]:
        g = self.db.get(AdGroup, group_id)
        return _group_record(g) if g else None

    def active_group_ads(self, group_id: int) -> List[AdRecord]:
        linked = select(AdLink.ad_id).where(AdLink.group_id == group_id)
        rows = self.db.scalars(
            select(Ad).where(Ad.id.in_(linked), Ad.type == "active").order_by(Ad.id)
        ).all()
        return [_ad_record(a) for a in rows]

    def get_active_ad(self, ad_id: int) -> Optional[AdRecord]:
        a = self.db.scalar(select(Ad).where(Ad.id == ad_id, Ad.type == "active"))
        return _ad_record(a) if a else None

    def find_group_by_name(self, name: str) -> Optional[AdGroupRecord]:
        g = self.db.scalar(select(AdGroup).where(AdGroup.name.ilike(f"%{name}%")).order_by(AdGroup.id).limit(1))
        return _group_record(g) if g else None

    def banner_folder(self) -> str:
        config = self.options.get_option("adrotate_config", {})
        if isinstance(config, dict) and config.get("banner_folder"):
            return str(config["banner_folder"])
        return "banners"


# -------------------- Widgets --------------------
class OptionsWidgetStore:
    """Sidebars y widgets guardados como opciones: `sidebars_widgets` y `widget_<base>`."""

    def __init__(self, options: SqlSettingsStore) -> None:
        self.options = options

    def sidebar_widgets(self, sidebar_id: str) -> Optional[Sequence[str]]:
        areas = self.options.get_option("sidebars_widgets", {})
        if not isinstance(areas, dict) or sidebar_id not in areas:
            return None
        tokens = areas.get(sidebar_id) or []
        return [str(t) for t in tokens] if isinstance(tokens, list) else []

    def widget_instances(self, base: str) -> Dict[str, Any]:
        raw = self.options.get_option(f"widget_{base}", {})
        if isinstance(raw, list):
            # JSON sin claves explícitas: el índice es el id de instancia
            return {str(i): v for i, v in enumerate(raw)}
        if not isinstance(raw, dict):
            return {}
        return {str(k): v for k, v in raw.items()}


# -------------------- Fábrica --------------------
def build_sql_stores(db: Session) -> Stores:
    from newsroom.stores.field_schema import JsonSchemaFieldDefaults
    from newsroom.stores.stats import JetpackStatsService

    options = SqlSettingsStore(db)
    return Stores(
        posts=SqlPostStore(db),
        settings=options,
        taxonomy=SqlTaxonomyStore(db, options),
        media=SqlMediaStore(db),
        ads=SqlAdStore(db, options),
        stats=JetpackStatsService(options),
        widgets=OptionsWidgetStore(options),
        schema=JsonSchemaFieldDefaults.from_option(options.get_option(settings.FIELD_SCHEMA_OPTION)),
    )

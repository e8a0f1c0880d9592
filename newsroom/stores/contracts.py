# newsroom/stores/contracts.py
"""
Contratos de los colaboradores externos que consume el resolver.

Cada store es un Protocol estrecho; las implementaciones SQLAlchemy viven en
`newsroom.stores.sql`, el servicio de estadísticas en `newsroom.stores.stats` y
los defaults de campos en `newsroom.stores.field_schema`. Un store ausente
(None en `Stores`) significa "integración no disponible": la parte del árbol
que depende de él se omite.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

POST_TYPE_ARTICLE = "post"
POST_TYPE_PAGE = "page"
STATUS_PUBLISH = "publish"


# -------------------- Registros crudos --------------------
@dataclass(frozen=True)
class CategoryRecord:
    id: int
    name: str
    slug: str
    parent_id: Optional[int]
    link: str
    fields: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PostRecord:
    id: int
    post_type: str
    status: str
    title: str
    slug: str
    content: str
    excerpt: str
    date: datetime
    link: str
    parent_id: Optional[int] = None
    thumbnail_id: Optional[int] = None
    template: str = ""
    fields: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MediaRecord:
    id: int
    url: str
    alt: str = ""
    caption: str = ""


@dataclass(frozen=True)
class MenuItemRecord:
    id: int
    parent_id: int
    object_id: int
    object_type: str
    item_type: str
    title: str
    url: str


@dataclass(frozen=True)
class AdGroupRecord:
    id: int
    name: str
    modus: int = 0
    adspeed: int = 0
    repeat_impressions: str = "N"
    gridrows: int = 1
    gridcolumns: int = 1


@dataclass(frozen=True)
class AdRecord:
    id: int
    title: str
    bannercode: str = ""
    image: str = ""
    tracker: str = "N"


# -------------------- Protocols --------------------
class PostStore(Protocol):
    def query_posts(self, *, category_ids: Iterable[int] | None, count: int, offset: int) -> List[PostRecord]:
        """Published posts, newest first, sticky posts ignored."""

    def get_post(self, post_id: int) -> Optional[PostRecord]: ...

    def get_page_by_slug(self, slug: str) -> Optional[PostRecord]: ...

    def post_categories(self, post_id: int) -> List[CategoryRecord]: ...

    def page_ancestors(self, post_id: int) -> List[PostRecord]:
        """Parent chain, root first, without the page itself."""

    def adjacent_post(self, post: PostRecord, *, previous: bool, category_ids: Iterable[int] | None = None) -> Optional[PostRecord]: ...

    def url_to_post_id(self, url: str) -> Optional[int]: ...

    def search_posts(self, keyword: str, *, count: int, offset: int) -> Tuple[List[PostRecord], int]: ...

    def date_archive_posts(
        self, *, year: int, month: int | None, day: int | None, count: int, offset: int
    ) -> Tuple[List[PostRecord], int]: ...

    def count_posts(self, *, category_ids: Iterable[int] | None = None) -> int: ...


class SettingsStore(Protocol):
    def get_options(self) -> Dict[str, Any]:
        """Global theme fields as a mapping ({} when unset)."""

    def get_option(self, name: str, default: Any = None) -> Any: ...


class TaxonomyStore(Protocol):
    def get_category(self, category_id: int) -> Optional[CategoryRecord]: ...

    def get_category_by_slug(self, slug: str) -> Optional[CategoryRecord]: ...

    def category_ancestors(self, category_id: int) -> List[CategoryRecord]:
        """Parent chain, root first, without the category itself."""

    def menu_locations(self) -> Dict[str, int]: ...

    def menu_items(self, menu_id: int) -> List[MenuItemRecord]: ...

    def object_slug(self, item: MenuItemRecord) -> str: ...


class MediaStore(Protocol):
    def get_attachment(self, attachment_id: int) -> Optional[MediaRecord]: ...


class AdStore(Protocol):
    def get_group(self, group_id: int) -> Optional[AdGroupRecord]: ...

    def active_group_ads(self, group_id: int) -> List[AdRecord]: ...

    def get_active_ad(self, ad_id: int) -> Optional[AdRecord]: ...

    def find_group_by_name(self, name: str) -> Optional[AdGroupRecord]: ...

    def banner_folder(self) -> str: ...


class ViewStatsService(Protocol):
    def cached_views(self) -> Any:
        """Raw view-count cache keyed by time bucket (or None)."""

    def top_posts(self, *, days: int, limit: int) -> List[Dict[str, Any]]:
        """Most viewed rows, each with at least `post_permalink`."""


class WidgetStore(Protocol):
    def sidebar_widgets(self, sidebar_id: str) -> Optional[Sequence[str]]: ...

    def widget_instances(self, base: str) -> Dict[str, Any]: ...


class FieldSchemaStore(Protocol):
    def default_for(self, key: str) -> Any: ...


@dataclass
class Stores:
    """Colaboradores de una request. Cualquiera puede ser None (no disponible)."""
    posts: Optional[PostStore] = None
    settings: Optional[SettingsStore] = None
    taxonomy: Optional[TaxonomyStore] = None
    media: Optional[MediaStore] = None
    ads: Optional[AdStore] = None
    stats: Optional[ViewStatsService] = None
    widgets: Optional[WidgetStore] = None
    schema: Optional[FieldSchemaStore] = None

    def options(self) -> Dict[str, Any]:
        if self.settings is None:
            return {}
        opts = self.settings.get_options()
        return opts if isinstance(opts, dict) else {}

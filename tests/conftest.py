# tests/conftest.py
from __future__ import annotations

import os

# Antes de importar newsroom: settings se instancia al importar el módulo
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SITE_URL", "http://news.test")

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

import pytest
from sqlalchemy.orm import Session, sessionmaker

import newsroom.models  # noqa: F401  (registra las tablas)
from newsroom.db.base import Base
from newsroom.db.session import engine, get_db
from newsroom.models import (
    Ad,
    AdGroup,
    AdLink,
    Attachment,
    Category,
    MenuItem,
    Option,
    Post,
    PostCategory,
)
from newsroom.services.context import ResolveContext
from newsroom.stores.sql import build_sql_stores

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

TestingSessionLocal = sessionmaker(autoflush=False, autocommit=False)


@pytest.fixture(scope="session", autouse=True)
def _schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def db() -> Session:
    """
    Una sesión por prueba dentro de una transacción explícita.
    Al terminar se hace rollback: la BD en memoria queda limpia para la siguiente.
    """
    connection = engine.connect()
    trans = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


@pytest.fixture(autouse=True)
def _override_get_db(db: Session):
    """Todos los endpoints usan la misma sesión de la prueba en curso."""
    from newsroom.main import app  # import tardío para evitar ciclos

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient
    from newsroom.main import app

    return TestClient(app)


# -------------------- Seeding --------------------
class Seeder:
    """Helpers mínimos para poblar la BD de prueba (flush, sin commit)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _add(self, obj):
        self.db.add(obj)
        self.db.flush()
        return obj

    def option(self, name: str, value: Any) -> Option:
        return self._add(Option(name=name, value=value))

    def attachment(self, id: int, url: str, alt: str = "", caption: str = "") -> Attachment:
        return self._add(Attachment(id=id, url=url, alt=alt, caption=caption))

    def category(self, id: int, name: str, slug: Optional[str] = None, parent_id: Optional[int] = None, **fields) -> Category:
        return self._add(
            Category(id=id, name=name, slug=slug or name.lower().replace(" ", "-"), parent_id=parent_id, fields=fields)
        )

    def post(
        self,
        id: int,
        title: str,
        *,
        slug: Optional[str] = None,
        post_type: str = "post",
        status: str = "publish",
        days_ago: float = 1,
        content: str = "",
        excerpt: str = "",
        categories: Iterable[int] = (),
        fields: Optional[Dict[str, Any]] = None,
        meta: Optional[Dict[str, Any]] = None,
        parent_id: Optional[int] = None,
        thumbnail_id: Optional[int] = None,
        template: str = "",
    ) -> Post:
        p = self._add(
            Post(
                id=id,
                title=title,
                slug=slug or title.lower().replace(" ", "-"),
                post_type=post_type,
                status=status,
                date=NOW - timedelta(days=days_ago),
                modified=NOW - timedelta(days=days_ago),
                content=content,
                excerpt=excerpt,
                fields=fields or {},
                meta=meta or {},
                parent_id=parent_id,
                thumbnail_id=thumbnail_id,
                template=template,
            )
        )
        for pos, cid in enumerate(categories):
            self._add(PostCategory(post_id=id, category_id=cid, position=pos))
        return p

    def ad_group(self, id: int, name: str, **kw) -> AdGroup:
        return self._add(AdGroup(id=id, name=name, **kw))

    def ad(self, id: int, title: str, *, bannercode: str = "", image: str = "", type: str = "active", groups: Iterable[int] = ()) -> Ad:
        ad = self._add(Ad(id=id, title=title, bannercode=bannercode, image=image, type=type))
        for gid in groups:
            self._add(AdLink(ad_id=id, group_id=gid))
        return ad

    def menu_item(
        self,
        id: int,
        menu_id: int,
        title: str,
        *,
        parent: Optional[int] = None,
        object_id: int = 0,
        object_type: str = "custom",
        item_type: str = "custom",
        url: str = "",
        position: int = 0,
    ) -> MenuItem:
        return self._add(
            MenuItem(
                id=id,
                menu_id=menu_id,
                parent_item_id=parent,
                object_id=object_id,
                object_type=object_type,
                item_type=item_type,
                title=title,
                url=url,
                position=position,
            )
        )


@pytest.fixture()
def seed(db: Session) -> Seeder:
    return Seeder(db)


@pytest.fixture()
def make_ctx(db: Session):
    """
    Fábrica de contextos sobre la sesión de prueba. Se llama después de
    sembrar (los stores leen el schema de campos al construirse).
    """
    def _make(**overrides) -> ResolveContext:
        stores = build_sql_stores(db)
        for name, value in overrides.pop("stores", {}).items():
            setattr(stores, name, value)
        overrides.setdefault("now", NOW)
        return ResolveContext(stores=stores, **overrides)

    return _make


# -------------------- Fakes --------------------
class FakeStats:
    def __init__(self, cached: Any = None, top: Optional[List[Dict[str, Any]]] = None) -> None:
        self.cached = cached
        self.top = top or []
        self.calls: List[Dict[str, int]] = []

    def cached_views(self) -> Any:
        return self.cached

    def top_posts(self, *, days: int, limit: int) -> List[Dict[str, Any]]:
        self.calls.append({"days": days, "limit": limit})
        return list(self.top)


@pytest.fixture()
def fake_stats():
    return FakeStats

#  newsroom/api/delivery/router.py
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from newsroom.core.settings import settings
from newsroom.db.session import get_db
from newsroom.services import page_service
from newsroom.services.context import ResolveContext
from newsroom.stores.sql import build_sql_stores

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.API_PREFIX, tags=["Delivery"])


def get_context(db: Session = Depends(get_db)) -> ResolveContext:
    """Un contexto por request: stores sobre la sesión actual + reglas del tema."""
    return ResolveContext(stores=build_sql_stores(db))


def _run(fn: Callable[..., Any], *args, **kwargs) -> Any:
    """
    Traduce errores de frontera del servicio a HTTP:
    - ValueError  -> 400 (parámetro faltante o inválido)
    - LookupError -> 404 (objeto inexistente o no publicado)
    """
    try:
        return fn(*args, **kwargs)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc) or "Not found")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


# --- Opciones globales / layout del sitio ---
@router.get("/theme-settings", summary="Opciones globales del tema + menús")
def get_theme_settings(ctx: ResolveContext = Depends(get_context)):
    return _run(page_service.theme_settings, ctx)


@router.get("/header", summary="Datos del header")
def get_header(ctx: ResolveContext = Depends(get_context)):
    return page_service.header(ctx)


@router.get("/footer", summary="Datos del footer")
def get_footer(ctx: ResolveContext = Depends(get_context)):
    return page_service.footer(ctx)


@router.get("/trending", summary="Posts en tendencia")
def get_trending(
    limit: int = Query(10, ge=0, le=100),
    offset: int = Query(0, ge=0),
    ctx: ResolveContext = Depends(get_context),
):
    return page_service.trending(ctx, limit, offset)


# --- Búsqueda ---
@router.get("/search", summary="Búsqueda paginada")
def get_search(
    s: str = Query("", description="Palabra clave"),
    page: int = Query(1, ge=1),
    ctx: ResolveContext = Depends(get_context),
):
    return page_service.search(ctx, s, page)


@router.get("/search-suggestions", summary="Sugerencias de búsqueda (autocomplete)")
def get_search_suggestions(
    s: str = Query("", description="Palabra clave"),
    ctx: ResolveContext = Depends(get_context),
):
    return page_service.search_suggestions(ctx, s)


# --- Archivo por fecha ---
@router.get("/date-archive/{year}", summary="Archivo anual")
@router.get("/date-archive/{year}/{month}", summary="Archivo mensual")
@router.get("/date-archive/{year}/{month}/{day}", summary="Archivo diario")
def get_date_archive(
    year: int = Path(..., ge=1, le=9999),
    month: Optional[int] = None,
    day: Optional[int] = None,
    page: int = Query(1, ge=1),
    ctx: ResolveContext = Depends(get_context),
):
    return _run(page_service.date_archive, ctx, year, month, day, page)


# --- Categorías ---
@router.get("/category-posts", summary="Posts paginados de una categoría")
def get_category_posts(
    slug: str = Query("", description="Slug de la categoría"),
    paged: int = Query(1, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    ctx: ResolveContext = Depends(get_context),
):
    return _run(page_service.category_posts, ctx, slug, paged, offset)


@router.get("/categories/{slug}", summary="Categoría con campos enriquecidos")
def get_category(
    slug: str,
    page: int = Query(1, ge=1),
    per_page: int = Query(0, ge=0, le=100),
    offset: Optional[int] = Query(None, ge=0),
    ctx: ResolveContext = Depends(get_context),
):
    return _run(page_service.enhance_category, ctx, slug, page, per_page, offset)


# --- Posts / páginas ---
@router.get("/pages/{slug}", summary="Página publicada con campos resueltos")
def get_page(
    slug: str,
    page: int = Query(1, ge=1),
    ctx: ResolveContext = Depends(get_context),
):
    return _run(page_service.get_page, ctx, slug, page)


@router.get("/posts/{post_id}", summary="Post publicado con campos resueltos")
def get_post(
    post_id: int,
    page: int = Query(1, ge=1),
    ctx: ResolveContext = Depends(get_context),
):
    return _run(page_service.get_post, ctx, post_id, page)

# newsroom/models/options.py
# Opciones globales (clave -> JSON) y entradas de menú de navegación
from __future__ import annotations
from typing import Any, Optional

from sqlalchemy import String, Integer, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from newsroom.db.base import Base, JSONType


class Option(Base):
    """
    Almacén clave/valor. Aquí viven los campos del tema (THEME_OPTIONS_KEY),
    el caché de estadísticas (stats_cache), los sidebars (sidebars_widgets),
    las instancias de widgets (widget_<base>) y la config del inventario de ads.
    """
    __tablename__ = "options"

    name: Mapped[str] = mapped_column(String(191), primary_key=True)
    value: Mapped[Any] = mapped_column(JSONType, nullable=True)


class MenuItem(Base):
    __tablename__ = "menu_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    menu_id: Mapped[int] = mapped_column(Integer, index=True)
    parent_item_id: Mapped[Optional[int]] = mapped_column(ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=True)

    # objeto enlazado: id + tipo ("page", "post", "category", "custom")
    object_id: Mapped[int] = mapped_column(Integer, default=0)
    object_type: Mapped[str] = mapped_column(String(32), default="custom")
    # "post_type" | "taxonomy" | "custom"
    item_type: Mapped[str] = mapped_column(String(32), default="custom")

    title: Mapped[str] = mapped_column(String(255))
    url: Mapped[str] = mapped_column(String(1024), default="")
    position: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (
        Index("ix_menu_items_menu_position", "menu_id", "position"),
    )

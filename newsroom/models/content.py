# newsroom/models/content.py
# Modelos de contenido: Post (posts y páginas), Category (jerárquica), PostCategory, Attachment
from __future__ import annotations
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    String, Integer, Text, ForeignKey, DateTime, UniqueConstraint, Index, func
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from newsroom.db.base import Base, JSONType


class Attachment(Base):
    __tablename__ = "attachments"

    id: Mapped[int] = mapped_column(primary_key=True)
    url: Mapped[str] = mapped_column(String(1024))
    alt: Mapped[str] = mapped_column(String(512), default="")
    caption: Mapped[str] = mapped_column(Text, default="")


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    parent_id: Mapped[Optional[int]] = mapped_column(ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)

    name: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(200), unique=True)
    description: Mapped[str] = mapped_column(Text, default="")

    # campos estructurados propios de la categoría (p.ej. category_post_per_page)
    fields: Mapped[dict] = mapped_column(JSONType, default=dict)


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(primary_key=True)
    # "post" para artículos, "page" para páginas
    post_type: Mapped[str] = mapped_column(String(20), default="post")
    status: Mapped[str] = mapped_column(String(20), default="publish")

    title: Mapped[str] = mapped_column(String(512))
    slug: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text, default="")
    excerpt: Mapped[str] = mapped_column(Text, default="")
    template: Mapped[str] = mapped_column(String(200), default="")

    parent_id: Mapped[Optional[int]] = mapped_column(ForeignKey("posts.id", ondelete="SET NULL"), nullable=True)
    thumbnail_id: Mapped[Optional[int]] = mapped_column(ForeignKey("attachments.id", ondelete="SET NULL"), nullable=True)

    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    modified: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # árbol de campos estructurados (layouts, ads, imágenes...) que consume el resolver
    fields: Mapped[dict] = mapped_column(JSONType, default=dict)
    # metadatos sueltos: primary_category, tts_mp3_file_urls, ...
    meta: Mapped[dict] = mapped_column(JSONType, default=dict)

    categories: Mapped[list["PostCategory"]] = relationship(
        "PostCategory", cascade="all, delete-orphan", order_by="PostCategory.position"
    )

    __table_args__ = (
        UniqueConstraint("post_type", "slug", name="uq_post_type_slug"),
        Index("ix_posts_type_status_date", "post_type", "status", "date"),
    )


class PostCategory(Base):
    __tablename__ = "post_categories"

    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True)
    # la categoría con menor posición es la "primaria"
    position: Mapped[int] = mapped_column(Integer, default=0)

    category: Mapped["Category"] = relationship("Category")

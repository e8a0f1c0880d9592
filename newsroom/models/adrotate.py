# newsroom/models/adrotate.py
# Inventario de publicidad: grupos, anuncios y la tabla de enlace grupo <-> anuncio
from __future__ import annotations

from sqlalchemy import String, Integer, Text, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from newsroom.db.base import Base


class AdGroup(Base):
    __tablename__ = "ad_groups"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    modus: Mapped[int] = mapped_column(Integer, default=0)
    adspeed: Mapped[int] = mapped_column(Integer, default=0)
    repeat_impressions: Mapped[str] = mapped_column(String(1), default="N")
    gridrows: Mapped[int] = mapped_column(Integer, default=1)
    gridcolumns: Mapped[int] = mapped_column(Integer, default=1)


class Ad(Base):
    __tablename__ = "ads"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), default="")
    # HTML del banner tal como se guardó (puede venir con slashes escapados)
    bannercode: Mapped[str] = mapped_column(Text, default="")
    # ruta de imagen con placeholder %folder%, o vacío
    image: Mapped[str] = mapped_column(String(1024), default="")
    tracker: Mapped[str] = mapped_column(String(1), default="N")
    # "active", "disabled", "expired", ...
    type: Mapped[str] = mapped_column(String(20), default="active")


class AdLink(Base):
    __tablename__ = "ad_links"

    id: Mapped[int] = mapped_column(primary_key=True)
    ad_id: Mapped[int] = mapped_column(ForeignKey("ads.id", ondelete="CASCADE"))
    group_id: Mapped[int] = mapped_column(ForeignKey("ad_groups.id", ondelete="CASCADE"))

    __table_args__ = (
        Index("ix_ad_links_group_ad", "group_id", "ad_id"),
    )

# newsroom/schemas/delivery.py
# Pydantic: formas de salida que el resolver incrusta en el árbol de campos
from __future__ import annotations
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


# ---------- Posts ----------
class CategoryRef(BaseModel):
    id: int
    name: str


class PostSummary(BaseModel):
    id: int
    title: str
    link: str
    slug: str
    date: str
    thumbnail: Optional[str] = None
    excerpt: str = ""
    categories: List[CategoryRef] = Field(default_factory=list)


class PostNavItem(BaseModel):
    id: int
    title: str
    link: str
    thumbnail: Optional[str] = None


# ---------- Media ----------
class MediaRef(BaseModel):
    id: int
    url: str
    alt: str = ""


# ---------- Ads ----------
class AdGroupOut(BaseModel):
    id: int
    name: str
    modus: int = 0
    adspeed: int = 0
    repeat_impressions: str = "N"
    gridrows: int = 1
    gridcolumns: int = 1


class AdOut(BaseModel):
    id: int
    title: str
    image_url: str = ""
    click_url: str = ""
    tracker_status: str = "N"
    tracking_data: str
    bannercode: str = ""


class AdBundle(BaseModel):
    group: AdGroupOut
    ads: List[AdOut] = Field(default_factory=list)


# ---------- Breadcrumb / menús ----------
class BreadcrumbEntry(BaseModel):
    title: str
    url: str


class MenuNode(BaseModel):
    id: int
    menu_item_id: int
    title: str
    url: str
    post_type: str
    slug: str = ""
    children: List["MenuNode"] = Field(default_factory=list)


# ---------- Widgets (variante etiquetada por `type`) ----------
class LinkPayload(BaseModel):
    type: Literal["link"] = "link"
    url: str
    id: str


class PlaylistPayload(BaseModel):
    type: Literal["playlist"] = "playlist"
    url: str
    title: str = ""


class YoutubeUrlPayload(BaseModel):
    type: Literal["youtube_url"] = "youtube_url"
    url: str
    title: str = ""


class AdrotatePayload(BaseModel):
    type: Literal["adrotate"] = "adrotate"
    advert_code: dict


class RecentPostsPayload(BaseModel):
    type: Literal["recent_posts"] = "recent_posts"
    title: str = ""
    section_posts: List[dict] = Field(default_factory=list)


class ChannelPayload(BaseModel):
    type: Literal["channel"] = "channel"
    url: str = ""
    id: str = ""


WidgetPayload = Annotated[
    Union[
        LinkPayload,
        PlaylistPayload,
        YoutubeUrlPayload,
        AdrotatePayload,
        RecentPostsPayload,
        ChannelPayload,
    ],
    Field(discriminator="type"),
]


class SidebarData(BaseModel):
    data: List[WidgetPayload] = Field(default_factory=list)


MenuNode.model_rebuild()

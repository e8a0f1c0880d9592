from newsroom.models.content import Attachment, Category, Post, PostCategory
from newsroom.models.adrotate import Ad, AdGroup, AdLink
from newsroom.models.options import MenuItem, Option

__all__ = [
    "Ad",
    "AdGroup",
    "AdLink",
    "Attachment",
    "Category",
    "MenuItem",
    "Option",
    "Post",
    "PostCategory",
]

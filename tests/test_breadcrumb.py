# tests/test_breadcrumb.py
from datetime import datetime, timezone

import pytest

from newsroom.services.breadcrumb_service import build_breadcrumb, build_date_breadcrumb
from newsroom.services.context import ResolveContext
from newsroom.stores.contracts import POST_TYPE_PAGE, STATUS_PUBLISH, PostRecord, Stores


@pytest.fixture()
def tree(seed):
    seed.category(1, "World")
    seed.category(2, "Europe", parent_id=1)
    seed.category(3, "Elections", parent_id=2)
    seed.post(40, "Vote Count Begins", categories=[3, 1])
    seed.post(50, "About", post_type="page")
    seed.post(51, "Team", post_type="page", parent_id=50)
    return seed


def _titles(crumbs):
    return [c["title"] for c in crumbs]


def test_category_chain_root_first(tree, make_ctx):
    ctx = make_ctx()
    target = ctx.stores.taxonomy.get_category(3)

    crumbs = build_breadcrumb(ctx, target)

    assert _titles(crumbs) == ["Home", "World", "Europe", "Elections"]
    assert crumbs[0]["url"] == "http://news.test/"
    assert crumbs[-1]["url"] == "http://news.test/category/elections/"


def test_post_uses_primary_category(tree, make_ctx):
    crumbs = build_breadcrumb(make_ctx(), 40)

    assert _titles(crumbs) == ["Home", "World", "Europe", "Elections", "Vote Count Begins"]
    assert crumbs[-1]["url"] == "http://news.test/vote-count-begins/"


def test_page_with_ancestors(tree, make_ctx):
    crumbs = build_breadcrumb(make_ctx(), "51")

    assert _titles(crumbs) == ["Home", "About", "Team"]
    assert crumbs[-1]["url"] == "http://news.test/about/team/"


def test_unknown_id_is_home_only(tree, make_ctx):
    assert _titles(build_breadcrumb(make_ctx(), 999)) == ["Home"]


@pytest.mark.parametrize("target", [None, 0, ""])
def test_falsy_target_is_empty(make_ctx, target):
    assert build_breadcrumb(make_ctx(), target) == []


def test_date_breadcrumb():
    from newsroom.services.context import ResolveContext
    from newsroom.stores.contracts import Stores

    ctx = ResolveContext(stores=Stores(), home_url="https://site.test/")
    crumbs = build_date_breadcrumb(ctx, 2026, 2, 11)

    assert _titles(crumbs) == ["Home", "2026", "February", "11"]
    assert crumbs[-1]["url"] == "https://site.test/2026/02/11/"
    assert _titles(build_date_breadcrumb(ctx, 2026)) == ["Home", "2026"]


class MemoryPosts:
    """Store de posts en memoria: el builder solo depende de los contratos."""

    def __init__(self, *records):
        self.records = {r.id: r for r in records}

    def get_post(self, post_id):
        return self.records.get(post_id)

    def page_ancestors(self, post_id):
        chain = []
        parent = self.records[post_id].parent_id
        while parent:
            chain.insert(0, self.records[parent])
            parent = self.records[parent].parent_id
        return chain

    def post_categories(self, post_id):
        return []


def _page(id, title, parent_id=None):
    return PostRecord(
        id=id,
        post_type=POST_TYPE_PAGE,
        status=STATUS_PUBLISH,
        title=title,
        slug=title.lower(),
        content="",
        excerpt="",
        date=datetime(2026, 10, 1, tzinfo=timezone.utc),
        link=f"http://news.test/{title.lower()}/",
        parent_id=parent_id,
    )


def test_page_chain_with_in_memory_store():
    posts = MemoryPosts(_page(1, "About"), _page(2, "Team", parent_id=1), _page(3, "Editors", parent_id=2))
    ctx = ResolveContext(stores=Stores(posts=posts))

    assert _titles(build_breadcrumb(ctx, 3)) == ["Home", "About", "Team", "Editors"]

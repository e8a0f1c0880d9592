# tests/test_delivery_api.py
import pytest

from newsroom.core.settings import settings

API = settings.API_PREFIX


@pytest.fixture()
def newsroom_site(seed):
    seed.category(1, "Politics")
    seed.category(2, "Elections", parent_id=1, category_post_per_page="2")
    for i in range(1, 8):
        seed.post(i, f"Budget Story {i}", days_ago=i, categories=[2], content=f"<p>Budget item {i}</p>")
    seed.post(20, "Draft Piece", status="draft", categories=[2])
    seed.post(30, "About", post_type="page", fields={"intro": "<p>We <b>report</b></p>", "show_sidebar": True})
    seed.post(31, "Trending Now", slug="trending-now", post_type="page")
    seed.post(40, "Storm Warning", days_ago=3, categories=[1, 2], meta={"_yoast_wpseo_primary_category": "2"},
              fields={"subtitle": "Coast on alert"})
    seed.option("theme_options", {"site_name": "<b>Daily</b> News", "trending_posts_per_page": 4, "not_found_title": "Lost?"})
    seed.option("sidebars_widgets", {"sidebar-1": [], "date": []})
    return seed


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_theme_settings_404_without_options(client):
    r = client.get(f"{API}/theme-settings")
    assert r.status_code == 404


def test_theme_settings_resolved_with_menus(client, newsroom_site):
    r = client.get(f"{API}/theme-settings")
    assert r.status_code == 200
    body = r.json()
    assert body["site_name"] == "Daily News"
    assert set(body["menus"]) == {"header", "footer", "mobile", "mobile_header", "categories"}


def test_header_and_footer(client, newsroom_site):
    header = client.get(f"{API}/header").json()
    assert header["search_settings"]["popular_search_title"] == "Popular Searches"
    assert header["search_settings"]["trending_posts"] == []

    footer = client.get(f"{API}/footer").json()
    assert footer["newsletter"] == {"title": "", "enabled": False}
    assert footer["sidebar"] is None


def test_trending_endpoint_empty_without_stats(client, newsroom_site):
    r = client.get(f"{API}/trending", params={"limit": 5})
    assert r.status_code == 200
    assert r.json() == []


def test_category_posts_requires_known_slug(client, newsroom_site):
    assert client.get(f"{API}/category-posts").status_code == 400
    assert client.get(f"{API}/category-posts", params={"slug": "nope"}).status_code == 404


def test_category_posts_pagination(client, newsroom_site):
    r = client.get(f"{API}/category-posts", params={"slug": "elections", "paged": 2})
    assert r.status_code == 200
    body = r.json()

    # 8 publicados en la categoría: 3 fijos arriba, 2 por página
    assert [p["id"] for p in body["top_posts"]] == [1, 2, 40]
    pagination = body["category_posts"]["pagination"]
    assert pagination["offset_used"] == 5
    assert pagination["total_results"] == 8
    assert pagination["total_pages"] == 3
    assert [p["id"] for p in body["category_posts"]["results"]] == [5, 6]
    assert [c["title"] for c in body["breadcrumb"]] == ["Home", "Politics", "Elections"]


def test_enhanced_category(client, newsroom_site):
    body = client.get(f"{API}/categories/elections", params={"per_page": 4}).json()
    assert body["slug"] == "elections"
    assert body["acf"]["category_posts"]["pagination"] == {"current_page": 1, "per_page": 4}
    assert len(body["acf"]["category_posts"]["results"]) == 4


def test_search(client, newsroom_site):
    body = client.get(f"{API}/search", params={"s": "budget"}).json()
    assert body["pagination"]["total_results"] == 7
    assert len(body["results"]) == 7

    missing = client.get(f"{API}/search", params={"s": "volcano"}).json()
    assert missing["results"]["message"] == "No results found for volcano"

    empty = client.get(f"{API}/search").json()
    assert empty["results"] == []
    assert empty["pagination"] == {"total_pages": 0, "current_page": 1}


def test_search_suggestions(client, newsroom_site):
    body = client.get(f"{API}/search-suggestions", params={"s": "budget"}).json()
    assert len(body["results"]) == 6
    assert body["results"][0]["category"] == {"id": 2, "name": "Elections"}

    assert client.get(f"{API}/search-suggestions", params={"s": "zzz"}).json() == {
        "results": {"message": "No result found."}
    }


def test_date_archive(client, newsroom_site):
    body = client.get(f"{API}/date-archive/2026/10").json()
    assert body["archive_title"] == "Monthly Archives: October 2026"
    assert [c["title"] for c in body["breadcrumb"]] == ["Home", "2026", "October"]
    assert body["pagination"]["total_results"] == 8
    assert body["date_sidebar"] == {"data": []}

    assert client.get(f"{API}/date-archive/2026/13").status_code == 400
    nothing = client.get(f"{API}/date-archive/2020").json()
    assert nothing["results"]["message"] == "No results found for 2020"


def test_single_post_is_enhanced(client, newsroom_site):
    r = client.get(f"{API}/posts/40")
    assert r.status_code == 200
    body = r.json()
    acf = body["acf"]

    assert body["newsroom_api"] == "active"
    assert acf["subtitle"] == "Coast on alert"
    assert acf["primary_category"] == {"id": 2, "name": "Elections"}
    assert [c["title"] for c in acf["breadcrumb"]] == ["Home", "Politics", "Storm Warning"]
    assert acf["post_navigation"]["previous"]["id"] == 4
    assert acf["post_navigation"]["next"]["id"] == 2
    assert len(acf["related_articles"]) == 3
    assert acf["sidebar_data"] == {"data": []}
    assert set(acf["post_ads"]) >= {"above_post_content", "below_post_content", "middle_post_content"}


def test_unpublished_or_missing_post_is_404(client, newsroom_site):
    assert client.get(f"{API}/posts/20").status_code == 404
    assert client.get(f"{API}/posts/999").status_code == 404


def test_page_fields_and_sidebar_fallback(client, newsroom_site):
    body = client.get(f"{API}/pages/about").json()
    assert body["acf"]["intro"] == "We report"
    assert body["acf"]["sidebar_data"] == {"data": []}
    assert [c["title"] for c in body["acf"]["breadcrumb"]] == ["Home", "About"]


def test_special_page_forces_sidebar(client, newsroom_site):
    body = client.get(f"{API}/pages/trending-now").json()
    assert body["acf"]["show_sidebar"] is True
    assert body["acf"]["sidebar_data"] == {"data": []}


def test_unknown_page_is_404(client, newsroom_site):
    assert client.get(f"{API}/pages/nowhere").status_code == 404


def test_footer_sidebar_widgets_are_not_resolved_twice(client, seed):
    for i in range(1, 8):
        seed.post(i, f"Story {i}", days_ago=i)
    seed.option("sidebars_widgets", {"custom-footer-sidebar": ["my_recent_posts_widget-2"]})
    seed.option("widget_my_recent_posts_widget", {"2": {"title": "Latest", "number": "2"}})

    footer = client.get(f"{API}/footer").json()

    widget = footer["sidebar"]["data"][0]
    assert widget["type"] == "recent_posts"
    assert widget["title"] == "Latest"
    assert [p["id"] for p in widget["section_posts"]] == [1, 2]
    assert "section_items" not in widget

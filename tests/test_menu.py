# tests/test_menu.py
from newsroom.services.menu_service import menu_for_locations


def test_menu_tree_with_slugs(seed, make_ctx):
    seed.category(1, "News")
    seed.category(2, "Politics", parent_id=1)
    seed.post(30, "About Us", slug="about", post_type="page")
    seed.menu_item(1, 5, "Home", url="http://news.test/", position=0)
    seed.menu_item(2, 5, "News &amp; Views", object_id=1, object_type="category", item_type="taxonomy", position=1)
    seed.menu_item(3, 5, "Politics", parent=2, object_id=2, object_type="category", item_type="taxonomy")
    seed.menu_item(4, 5, "About", object_id=30, object_type="page", item_type="post_type", position=2)
    seed.option("nav_menu_locations", {"primary": 5})

    menu = menu_for_locations(make_ctx(), "header-menu", "primary")

    assert [n["title"] for n in menu] == ["Home", "News & Views", "About"]
    news = menu[1]
    assert news["id"] == 1
    assert news["menu_item_id"] == 2
    assert news["post_type"] == "category"
    assert news["slug"] == "news"
    assert [c["slug"] for c in news["children"]] == ["politics"]
    assert menu[2]["slug"] == "about"
    assert menu[0]["slug"] == ""
    assert menu[0]["children"] == []


def test_unassigned_location_gives_empty_menu(seed, make_ctx):
    seed.option("nav_menu_locations", {"footer-menu": 0})
    assert menu_for_locations(make_ctx(), "footer-menu") == []
    assert menu_for_locations(make_ctx(), "mobile-menu") == []

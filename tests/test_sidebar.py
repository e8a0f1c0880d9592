# tests/test_sidebar.py
import pytest
from pydantic import ValidationError

from newsroom.schemas.delivery import ChannelPayload, SidebarData
from newsroom.services.sidebar_service import get_sidebar_data


@pytest.fixture()
def widgets(seed):
    seed.ad_group(7, "Sidebar Box")
    seed.ad(1, "Box", bannercode="<a href='https://adv.test'>x</a>", groups=[7])
    seed.post(1, "Recent A", days_ago=1)
    seed.post(2, "Recent B", days_ago=2)
    seed.post(3, "Recent C", days_ago=3)

    seed.option(
        "sidebars_widgets",
        {
            "sidebar-1": [
                "text-2",
                "bs-youtube-playlist-3",
                "adrotate_widgets-4",
                "my_recent_posts_widget-5",
                "yt_channel-6",
                "unknown-7",
                "garbage",
            ],
            "custom-youtube-sidebar": ["youtube_embed-1"],
            "empty": [],
        },
    )
    seed.option(
        "widget_text",
        {"2": {"text": 'Watch <a href="https://www.youtube.com/watch?v=abcdefghijk">here</a> or https://youtu.be/ZYXWVUTSRQP'}},
    )
    seed.option(
        "widget_bs-youtube-playlist",
        {"3": {"title": "Videos", "playlist_url": "https://www.youtube.com/playlist?list=PL1&amp;index=2"}},
    )
    seed.option("widget_adrotate_widgets", {"4": {"adrotate_id": "7"}})
    seed.option("widget_my_recent_posts_widget", {"5": {"title": "Latest", "number": "2"}})
    seed.option("widget_yt_channel", {"6": {"channel_url": "https://youtube.com/c/news", "channel_id": "UC1"}})
    seed.option("widget_youtube_embed", {"1": {"title": "Live", "url": "https://youtube.com/live/x"}})
    return seed


def test_adapters_run_in_order(widgets, make_ctx):
    out = get_sidebar_data(make_ctx(), "sidebar-1")

    assert [w["type"] for w in out["data"]] == ["link", "link", "playlist", "adrotate", "recent_posts", "channel"]

    first, second = out["data"][0], out["data"][1]
    assert first == {"type": "link", "url": "https://www.youtube.com/watch?v=abcdefghijk", "id": "abcdefghijk"}
    assert second["id"] == "ZYXWVUTSRQP"


def test_payload_details(widgets, make_ctx):
    data = get_sidebar_data(make_ctx(), "sidebar-1")["data"]
    by_type = {w["type"]: w for w in data}

    assert by_type["playlist"] == {
        "type": "playlist",
        "url": "https://www.youtube.com/playlist?list=PL1&index=2",
        "title": "Videos",
    }
    assert by_type["adrotate"]["advert_code"]["group"]["id"] == 7
    assert by_type["recent_posts"]["title"] == "Latest"
    assert [p["id"] for p in by_type["recent_posts"]["section_posts"]] == [1, 2]
    assert by_type["channel"] == {"type": "channel", "url": "https://youtube.com/c/news", "id": "UC1"}


def test_youtube_widget_without_playlist_uses_url(widgets, make_ctx):
    out = get_sidebar_data(make_ctx(), "custom-youtube-sidebar")
    assert out == {"data": [{"type": "youtube_url", "url": "https://youtube.com/live/x", "title": "Live"}]}


def test_unknown_area_is_none_and_empty_area_is_empty(widgets, make_ctx):
    ctx = make_ctx()
    assert get_sidebar_data(ctx, "does-not-exist") is None
    assert get_sidebar_data(ctx, "empty") == {"data": []}


def test_adrotate_needs_numeric_resolvable_id(seed, make_ctx):
    seed.option("sidebars_widgets", {"s": ["adrotate_widgets-1", "adrotate_widgets-2"]})
    seed.option("widget_adrotate_widgets", {"1": {"group": "abc"}, "2": {"id": "999"}})
    assert get_sidebar_data(make_ctx(), "s") == {"data": []}


def test_recent_posts_default_count(seed, make_ctx):
    for i in range(1, 6):
        seed.post(i, f"Story {i}", days_ago=i)
    seed.option("sidebars_widgets", {"s": ["my_recent_posts_widget-1"]})
    seed.option("widget_my_recent_posts_widget", {"1": {"title": ""}})

    data = get_sidebar_data(make_ctx(), "s")["data"]
    assert len(data[0]["section_posts"]) == 3


def test_missing_widget_store(make_ctx):
    assert get_sidebar_data(make_ctx(stores={"widgets": None}), "sidebar-1") is None


def test_sidebar_payloads_are_typed_by_kind():
    data = SidebarData(data=[{"type": "channel", "url": "https://youtube.com/c/news", "id": "UC1"}])
    assert isinstance(data.data[0], ChannelPayload)
    assert data.model_dump() == {"data": [{"type": "channel", "url": "https://youtube.com/c/news", "id": "UC1"}]}

    with pytest.raises(ValidationError):
        SidebarData(data=[{"type": "weather", "city": "Lima"}])

# tests/test_stats.py
import httpx
import pytest

from newsroom.core.settings import settings
from newsroom.stores.stats import JetpackStatsService, parse_postviews_csv

CSV_BODY = (
    "post_id,post_title,post_permalink,views\n"
    "1,Budget Day,http://news.test/budget-day/,120\n"
    "2,No Link,,80\n"
    "3,Storm Warning,http://news.test/storm-warning/,75\n"
)


class _Options:
    def __init__(self, values=None):
        self.values = values or {}

    def get_option(self, name, default=None):
        return self.values.get(name, default)


@pytest.fixture()
def stats_url(monkeypatch):
    monkeypatch.setattr(settings, "STATS_API_URL", "https://stats.test/csv")
    monkeypatch.setattr(settings, "STATS_API_KEY", "k-123")
    return settings.STATS_API_URL


def test_parse_postviews_csv_skips_rows_without_permalink():
    rows = parse_postviews_csv(CSV_BODY)
    assert [r["post_permalink"] for r in rows] == [
        "http://news.test/budget-day/",
        "http://news.test/storm-warning/",
    ]
    assert rows[0]["views"] == "120"


def test_top_posts_queries_postviews(stats_url):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, text=CSV_BODY)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    rows = JetpackStatsService(_Options(), client=client).top_posts(days=7, limit=5)

    assert len(rows) == 2
    assert seen["params"]["table"] == "postviews"
    assert seen["params"]["days"] == "7"
    assert seen["params"]["limit"] == "5"
    assert seen["params"]["api_key"] == "k-123"


def test_http_errors_degrade_to_empty(stats_url, caplog):
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(503)))
    assert JetpackStatsService(_Options(), client=client).top_posts(days=7, limit=5) == []
    assert "View stats request failed" in caplog.text


def test_transport_errors_degrade_to_empty(stats_url):
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    assert JetpackStatsService(_Options(), client=client).top_posts(days=7, limit=5) == []


def test_unconfigured_service_does_not_call_out(monkeypatch):
    monkeypatch.setattr(settings, "STATS_API_URL", None)

    def handler(request):
        raise AssertionError("no debería hacer requests")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    assert JetpackStatsService(_Options(), client=client).top_posts(days=7, limit=5) == []


def test_cached_views_reads_option():
    cache = {"7_days": {}}
    assert JetpackStatsService(_Options({"stats_cache": cache})).cached_views() is cache

# tests/test_sanitizer.py
from newsroom.services.sanitizer import (
    EXCERPT_ALLOWED_TAGS,
    decode_entities,
    sanitize_rich_text,
    sanitize_text,
)


def test_plain_text_strips_all_markup_and_decodes():
    assert sanitize_text("<p>Hello <b>world</b></p>") == "Hello world"
    assert sanitize_text("  Tom &amp; Jerry \n") == "Tom & Jerry"


def test_markup_hidden_in_entities_is_stripped_too():
    assert sanitize_text("&lt;b&gt;bold&lt;/b&gt;") == "bold"


def test_comments_are_dropped():
    assert sanitize_text("a<!-- editor note -->b") == "ab"


def test_non_strings_pass_through():
    assert sanitize_text(5) == 5
    assert sanitize_text(None) is None


def test_rich_text_keeps_allowed_tags_only():
    out = sanitize_rich_text('<p>Hi <script>x()</script><a href="/x">link</a></p>')
    assert "<script" not in out
    assert '<a href="/x">link</a>' in out
    assert out.startswith("<p>Hi ")


def test_excerpt_allow_list():
    out = sanitize_text("<div><em>Short</em> text<img src='a.png'></div>", EXCERPT_ALLOWED_TAGS)
    assert out == "<em>Short</em> text"


def test_decode_entities_keeps_markup():
    assert decode_entities("&lt;p&gt;x&lt;/p&gt; &amp; y") == "<p>x</p> & y"
    assert decode_entities(None) == ""

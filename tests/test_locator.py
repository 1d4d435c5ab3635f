import pytest

from inputtools.clients.locator import QueryUrlBuilder, canonical_key
from inputtools.core.errors import InvalidInput

BASE = "https://inputtools.google.com/request"


def make_builder(cache_size=100):
    return QueryUrlBuilder(base_url=BASE, itc="yue-hant-t-i0-und", num=13, callback="_callbacks____test", cache_size=cache_size)


def test_url_layout():
    url = make_builder().build("nei")
    assert url == (
        BASE + "?text=nei&itc=yue-hant-t-i0-und&num=13&cp=0&cs=1"
        "&ie=utf-8&oe=utf-8&app=jsapi&cb=_callbacks____test"
    )


def test_retained_context_is_encoded_into_text():
    url = make_builder().build("hou", "你")
    assert "text=%7C%E4%BD%A0%2Chou&" in url


def test_canonical_key():
    assert canonical_key("hou") == "hou"
    assert canonical_key("hou", "") == "hou"
    assert canonical_key("hou", "你") == "|你,hou"


def test_encoding_matches_uri_component_rules():
    url = make_builder().build("a b!'()*~")
    assert "text=a%20b!'()*~&" in url


def test_builds_are_deterministic():
    builder = make_builder()
    first = builder.build("sik", "我")
    assert builder.build("sik", "我") == first
    assert make_builder().build("sik", "我") == first
    assert first.endswith("&cb=_callbacks____test")


def test_cache_hit_returns_cached_url():
    builder = make_builder()
    builder.build("nei")
    builder.build("nei")
    assert builder.cache.stats()["hits"] == 1


def test_cache_evicts_first_inserted_key():
    builder = make_builder(cache_size=100)
    keys = [f"q{i}" for i in range(101)]
    for key in keys:
        builder.build(key)
    assert "q0" not in builder.cache
    assert all(key in builder.cache for key in keys[1:])
    assert len(builder.cache) == 100


def test_instances_do_not_share_caches():
    a, b = make_builder(), make_builder()
    a.build("nei")
    assert "nei" not in b.cache


@pytest.mark.parametrize("query", ["", "   "])
def test_blank_query_is_rejected(query):
    with pytest.raises(InvalidInput):
        make_builder().build(query, "你")

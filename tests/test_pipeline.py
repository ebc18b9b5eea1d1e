"""Tests for mdview.services.pipeline.get_markdown_for_path."""

import asyncio

import httpx
import pytest

from mdview.exceptions import OriginHttpError, PathExcluded
from mdview.models.config import MarkdownConfig
from mdview.services.cache import MarkdownCache
from mdview.services.pipeline import get_markdown_for_path

_BLOG_HTML = "<html><head><title>Blog</title></head><body><h1>Blog</h1><p>Posts.</p></body></html>"


def _transport(calls, status=200, html=_BLOG_HTML, headers=None):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(status, text=html, headers=headers or {})

    return httpx.MockTransport(handler)


def _run(path, config, **kwargs):
    kwargs.setdefault("base_url", "https://example.com")
    return asyncio.run(get_markdown_for_path(path, config, **kwargs))


class TestGetMarkdownForPath:
    def test_renders_fetched_page(self):
        calls = []
        md = _run("/blog", MarkdownConfig(cache_enabled=False), transport=_transport(calls))
        assert "# Blog" in md
        assert 'title: "Blog"' in md
        assert calls == ["https://example.com/blog"]

    def test_excluded_path_is_not_fetched(self):
        calls = []
        with pytest.raises(PathExcluded) as excinfo:
            _run("/api/users", MarkdownConfig(), transport=_transport(calls))
        assert excinfo.value.path == "/api/users"
        assert calls == []

    def test_second_request_is_served_from_cache(self):
        calls = []
        cache = MarkdownCache()
        transport = _transport(calls)
        first = _run("/blog", MarkdownConfig(), cache=cache, transport=transport)
        second = _run("/blog/", MarkdownConfig(), cache=cache, transport=transport)
        assert first == second
        assert len(calls) == 1

    def test_new_build_recomputes(self):
        calls = []
        cache = MarkdownCache()
        transport = _transport(calls)
        _run("/blog", MarkdownConfig(), cache=cache, build_id="b1", transport=transport)
        _run("/blog", MarkdownConfig(), cache=cache, build_id="b2", transport=transport)
        assert len(calls) == 2

    def test_cache_disabled_in_config(self):
        calls = []
        cache = MarkdownCache()
        transport = _transport(calls)
        config = MarkdownConfig(cache_enabled=False)
        _run("/blog", config, cache=cache, transport=transport)
        _run("/blog", config, cache=cache, transport=transport)
        assert len(calls) == 2
        assert len(cache) == 0

    def test_ttl_comes_from_origin_headers(self):
        calls = []
        now = [1000.0]
        cache = MarkdownCache(clock=lambda: now[0])
        transport = _transport(calls, headers={"Cache-Control": "s-maxage=60"})
        _run("/blog", MarkdownConfig(), cache=cache, transport=transport)
        now[0] += 30
        _run("/blog", MarkdownConfig(), cache=cache, transport=transport)
        assert len(calls) == 1
        now[0] += 31
        _run("/blog", MarkdownConfig(), cache=cache, transport=transport)
        assert len(calls) == 2

    def test_fetch_errors_are_not_cached(self):
        calls = []
        cache = MarkdownCache()
        with pytest.raises(OriginHttpError):
            _run("/blog", MarkdownConfig(), cache=cache, transport=_transport(calls, status=500))
        assert len(cache) == 0

    def test_falls_back_to_config_base_url(self):
        calls = []
        config = MarkdownConfig(base_url="https://configured.test/", cache_enabled=False)
        asyncio.run(get_markdown_for_path("/blog", config, transport=_transport(calls)))
        assert calls == ["https://configured.test/blog"]

    def test_missing_origin_is_rejected(self):
        with pytest.raises(ValueError):
            asyncio.run(get_markdown_for_path("/blog", MarkdownConfig(cache_enabled=False)))

    def test_debug_reports_fetched_html_size(self):
        calls = []
        md = _run(
            "/blog",
            MarkdownConfig(debug_enabled=True, cache_enabled=False),
            transport=_transport(calls),
        )
        assert md.startswith(f"<!-- mdview: html_size={len(_BLOG_HTML.encode('utf-8'))} bytes")

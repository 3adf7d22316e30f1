#!/usr/bin/env python3
"""
test_sitemap.py
---------------
Tests for sitemap entries and the Jinja2 sitemap renderer.

Usage:
    python -m pytest tests/unit/utils/test_sitemap.py -v
"""
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from folio.utils.sitemap import (
    STATIC_PAGES,
    SitemapEntry,
    SitemapRenderer,
    build_sitemap_entries,
    static_entries,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def renderer():
    """Renderer using the packaged template."""
    return SitemapRenderer()


class TestEntries:
    """Test static_entries and build_sitemap_entries."""

    def test_static_pages(self):
        """Test every static page is listed with its frequency and priority."""
        entries = static_entries("https://leechy.dev", NOW)
        assert len(entries) == len(STATIC_PAGES) == 6
        assert entries[0] == SitemapEntry("https://leechy.dev/", NOW, "monthly", 1.0)
        assert entries[-1].loc == "https://leechy.dev/terms"

    def test_static_limit(self):
        """Test limit keeps only the first pages."""
        locs = [e.loc for e in static_entries("https://x.dev", NOW, limit=4)]
        assert locs == ["https://x.dev/", "https://x.dev/about", "https://x.dev/projects", "https://x.dev/blog"]

    def test_posts_and_projects(self):
        """Test posts use slugs, projects use ids, lastmod falls back."""
        updated = datetime(2024, 1, 15, 10, 0)
        created = datetime(2023, 12, 1, 8, 0)
        posts = [SimpleNamespace(slug="hello", updated_at=updated, created_at=created)]
        projects = [
            SimpleNamespace(id=7, updated_at=None, created_at=created),
            SimpleNamespace(id=8),
        ]

        entries = build_sitemap_entries("https://leechy.dev/", posts, projects, now=NOW)

        assert len(entries) == 9
        post, first, second = entries[6], entries[7], entries[8]
        assert post == SitemapEntry("https://leechy.dev/blog/hello", updated, "monthly", 0.7)
        assert first.loc == "https://leechy.dev/projects/7"
        assert first.lastmod == created
        assert first.priority == 0.8
        assert second.lastmod == NOW


class TestSitemapRenderer:
    """Test SitemapRenderer."""

    def test_rejects_both_sources(self, tmp_path):
        """Test templates_dir and templates are mutually exclusive."""
        with pytest.raises(ValueError):
            SitemapRenderer(templates_dir=tmp_path, templates={"sitemap.xml.jinja2": ""})

    def test_render_entries(self, renderer):
        """Test each entry renders its loc, lastmod, changefreq and priority."""
        entry = SitemapEntry(
            "https://leechy.dev/blog/a&b", datetime(2024, 1, 15, 10, 0), "monthly", 0.7
        )
        xml = renderer.render([entry])

        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "<loc>https://leechy.dev/blog/a&amp;b</loc>" in xml
        assert "<lastmod>2024-01-15T10:00:00.000Z</lastmod>" in xml
        assert "<changefreq>monthly</changefreq>" in xml
        assert "<priority>0.7</priority>" in xml
        assert 'xmlns:news="http://www.google.com/schemas/sitemap-news/0.9"' in xml
        assert xml.rstrip().endswith("</urlset>")

    def test_lastmod_converted_to_utc(self, renderer):
        """Test aware datetimes are rendered in UTC with milliseconds."""
        from datetime import timedelta

        local = datetime(2024, 1, 15, 12, 0, 0, 250000, tzinfo=timezone(timedelta(hours=2)))
        xml = renderer.render([SitemapEntry("https://x.dev/", local, "yearly", 0.3)])
        assert "<lastmod>2024-01-15T10:00:00.250Z</lastmod>" in xml

    def test_fallback(self, renderer):
        """Test the fallback lists four pages without extended namespaces."""
        xml = renderer.render_fallback("https://leechy.dev/", now=NOW)
        assert xml.count("<url>") == 4
        assert "xmlns:news" not in xml
        assert "<loc>https://leechy.dev/blog</loc>" in xml
        assert "/privacy" not in xml

    def test_dict_templates(self):
        """Test templates can be supplied in memory."""
        renderer = SitemapRenderer(
            templates={"sitemap.xml.jinja2": "{% for e in entries %}{{ e.loc }}|{% endfor %}"}
        )
        entries = [SitemapEntry("https://x.dev/", NOW, "monthly", 1.0)]
        assert renderer.render(entries) == "https://x.dev/|"

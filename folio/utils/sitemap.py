#!/usr/bin/env python3
"""
sitemap.py
-----------
Jinja2 rendering of /sitemap.xml.

build_sitemap_entries() turns the static pages, published posts and
projects into SitemapEntry rows; SitemapRenderer writes them with the
sitemap.xml.jinja2 template.

Usage:
    entries = build_sitemap_entries(settings.site_url, posts, projects)
    xml = SitemapRenderer().render(entries)

Dependencies:
    - jinja2>=3.1.0
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

# --- Third-party imports ---
from jinja2 import BaseLoader, DictLoader, Environment, FileSystemLoader, select_autoescape

# --- Local imports ---
from folio.core.paths import TEMPLATES_DIR

SITEMAP_TEMPLATE = "sitemap.xml.jinja2"

# (path, changefreq, priority)
STATIC_PAGES: List[Tuple[str, str, float]] = [
    ("/", "monthly", 1.0),
    ("/about", "monthly", 0.8),
    ("/projects", "weekly", 0.9),
    ("/blog", "weekly", 0.9),
    ("/privacy", "yearly", 0.3),
    ("/terms", "yearly", 0.3),
]

BLOG_CHANGEFREQ, BLOG_PRIORITY = "monthly", 0.7
PROJECT_CHANGEFREQ, PROJECT_PRIORITY = "monthly", 0.8

CACHE_MAX_AGE = 3600
FALLBACK_CACHE_MAX_AGE = 300


@dataclass
class SitemapEntry:
    """One <url> element."""

    loc: str
    lastmod: datetime
    changefreq: str
    priority: float


def _isoformat(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + (
        f"{value.microsecond // 1000:03d}Z"
    )


def _lastmod(item: Any, fallback: datetime) -> datetime:
    return getattr(item, "updated_at", None) or getattr(item, "created_at", None) or fallback


def static_entries(site_url: str, now: datetime, limit: Optional[int] = None) -> List[SitemapEntry]:
    """Entries for the static pages (the first `limit` of them if given)."""
    pages = STATIC_PAGES if limit is None else STATIC_PAGES[:limit]
    return [
        SitemapEntry(f"{site_url}{path}", now, changefreq, priority)
        for path, changefreq, priority in pages
    ]


def build_sitemap_entries(
    site_url: str,
    posts: Iterable[Any] = (),
    projects: Iterable[Any] = (),
    now: Optional[datetime] = None,
) -> List[SitemapEntry]:
    """
    Sitemap rows for static pages, posts (/blog/{slug}) and projects
    (/projects/{id}).

    Args:
        site_url: Base URL without trailing slash
        posts: Published blog posts
        projects: Projects to list
        now: lastmod of the static pages (default: current UTC time)
    """
    site_url = site_url.rstrip("/")
    now = now or datetime.now(timezone.utc)

    entries = static_entries(site_url, now)
    entries.extend(
        SitemapEntry(
            f"{site_url}/blog/{post.slug}", _lastmod(post, now), BLOG_CHANGEFREQ, BLOG_PRIORITY
        )
        for post in posts
    )
    entries.extend(
        SitemapEntry(
            f"{site_url}/projects/{project.id}",
            _lastmod(project, now),
            PROJECT_CHANGEFREQ,
            PROJECT_PRIORITY,
        )
        for project in projects
    )
    return entries


class SitemapRenderer:
    """
    Jinja2 environment for the sitemap template.

    Attributes:
        env: Configured Jinja2 Environment instance
    """

    def __init__(
        self,
        templates_dir: Optional[Path] = None,
        templates: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Args:
            templates_dir: Directory holding sitemap.xml.jinja2
            templates: Dict of template_name -> template_string (tests)

        Raises:
            ValueError: If both templates_dir and templates are provided
        """
        if templates_dir and templates:
            raise ValueError("Provide either templates_dir or templates, not both")

        loader: BaseLoader
        if templates is not None:
            loader = DictLoader(templates)
        else:
            loader = FileSystemLoader(str(templates_dir or TEMPLATES_DIR))

        self.env = Environment(
            loader=loader,
            autoescape=select_autoescape(["xml", "jinja2"]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["isoformat"] = _isoformat

    def render(self, entries: Sequence[SitemapEntry], extended: bool = True) -> str:
        """
        Render the urlset document.

        Args:
            entries: Rows to include
            extended: Declare the news/xhtml/mobile/image/video namespaces
        """
        template = self.env.get_template(SITEMAP_TEMPLATE)
        return template.render(entries=entries, extended=extended)

    def render_fallback(self, site_url: str, now: Optional[datetime] = None) -> str:
        """Minimal sitemap (home, about, projects, blog) used when the database fails."""
        now = now or datetime.now(timezone.utc)
        return self.render(static_entries(site_url.rstrip("/"), now, limit=4), extended=False)

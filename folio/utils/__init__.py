"""
Utilities package for Folio.

This package provides helpers organized by domain:
- seo: Meta tags, structured data and SEO checks
- images: Responsive image paths, srcset and placeholders
- markdown: Markdown to sanitized HTML, plain text and headings
- slugify: URL slugs and upload filenames
- sitemap: sitemap.xml rendering

Import commonly-used utilities directly from this package:
    from folio.utils import slugify, markdown_to_html, generate_meta_tags

Or import specific modules:
    from folio.utils import seo, images, markdown
"""

# Slugs and filenames
from .slugify import sanitize_filename, slugify, split_extension, title_slug

# Markdown rendering
from .markdown import (
    estimate_reading_time,
    extract_headings,
    markdown_to_html,
    markdown_to_plain_text,
)

# SEO
from .seo import (
    DEFAULT_SEO,
    format_page_title,
    generate_blog_post_meta,
    generate_meta_tags,
    generate_project_meta,
    truncate_description,
)

# Images
from .images import (
    DEFAULT_BREAKPOINTS,
    create_responsive_image_set,
    generate_srcset,
    get_optimized_image_path,
)

# Sitemap
from .sitemap import SitemapRenderer, build_sitemap_entries

# Module imports
from . import images, markdown, seo, sitemap

__all__ = [
    "sanitize_filename",
    "slugify",
    "split_extension",
    "title_slug",
    "estimate_reading_time",
    "extract_headings",
    "markdown_to_html",
    "markdown_to_plain_text",
    "DEFAULT_SEO",
    "format_page_title",
    "generate_blog_post_meta",
    "generate_meta_tags",
    "generate_project_meta",
    "truncate_description",
    "DEFAULT_BREAKPOINTS",
    "create_responsive_image_set",
    "generate_srcset",
    "get_optimized_image_path",
    "SitemapRenderer",
    "build_sitemap_entries",
    "images",
    "markdown",
    "seo",
    "sitemap",
]

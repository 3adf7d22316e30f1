#!/usr/bin/env python3
"""
seo.py
-------------------
Meta tags, structured data and content checks for search engines.

Page loaders build a `meta` dict with generate_meta_tags() (or the blog
and project shortcuts) and templates render it with create_meta_tag_html().

Config dictionaries use these keys, all optional except title and
description:
    title, description, keywords, author, site_url, image, image_alt,
    type ('website' | 'article' | 'profile'), locale, site_name,
    twitter_handle, published_time, modified_time, tags, canonical
"""
from __future__ import annotations

# --- Standard library imports ---
import html
import math
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence
from urllib.parse import quote

DEFAULT_SEO: Dict[str, str] = {
    "title": "Leechy.dev - Full-Stack Developer Portfolio",
    "description": (
        "Portfolio of a passionate full-stack developer creating innovative "
        "web solutions with modern technologies."
    ),
    "site_name": "Leechy.dev",
    "type": "website",
    "locale": "en_US",
}

SEO_LIMITS: Dict[str, Dict[str, int]] = {
    "title": {"min": 30, "max": 60},
    "description": {"min": 120, "max": 160},
    "keywords": {"max": 10},
}

WORDS_PER_MINUTE = 200

_MARKDOWN_TITLE_CHARS = re.compile(r"[#*_`~]")
_MARKDOWN_DESCRIPTION_CHARS = re.compile(r"[#*_`~\[\]]")
_HEADING_LINE = re.compile(r"^(#{1,6})\s+(.+)$", re.MULTILINE)
_MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


# ----- Meta Tag Generation -----
def generate_meta_tags(config: Mapping[str, Any]) -> Dict[str, str]:
    """
    Generate the complete meta tag set for a page.

    Args:
        config: Page SEO configuration (see module docstring)

    Returns:
        Ordered dict of tag name -> content. 'title' and 'canonical'
        are rendered as <title> and <link rel="canonical">, the rest
        as <meta> tags.

    Examples:
        >>> tags = generate_meta_tags({"title": "Blog", "description": "Posts"})
        >>> tags["title"]
        'Blog | Leechy.dev'
    """
    title = config.get("title") or ""
    page_type = config.get("type") or DEFAULT_SEO["type"]
    site_name = config.get("site_name") or DEFAULT_SEO["site_name"]
    author = config.get("author")
    site_url = config.get("site_url")

    description = truncate_description(config.get("description") or "")
    image = config.get("image")
    image_url = resolve_image_url(image, site_url) if image else None
    canonical = config.get("canonical") or site_url
    keywords = config.get("keywords")

    tags: Dict[str, str] = {
        "title": format_page_title(title, site_name),
        "description": description,
    }
    if keywords:
        tags["keywords"] = ", ".join(keywords)
    tags["author"] = author or "Leechy"
    if canonical:
        tags["canonical"] = canonical

    # Open Graph
    tags.update(
        {
            "og:type": page_type,
            "og:title": title,
            "og:description": description,
            "og:site_name": site_name,
            "og:locale": config.get("locale") or DEFAULT_SEO["locale"],
            "twitter:card": "summary_large_image",
            "twitter:title": title,
            "twitter:description": description,
        }
    )

    if canonical:
        tags["og:url"] = canonical
        tags["twitter:url"] = canonical

    if image_url:
        tags["og:image"] = image_url
        tags["twitter:image"] = image_url
        if config.get("image_alt"):
            tags["og:image:alt"] = config["image_alt"]
            tags["twitter:image:alt"] = config["image_alt"]

    handle = config.get("twitter_handle")
    if handle:
        creator = handle if handle.startswith("@") else f"@{handle}"
        tags["twitter:creator"] = creator
        tags["twitter:site"] = creator

    if page_type == "article":
        if config.get("published_time"):
            tags["article:published_time"] = config["published_time"]
        if config.get("modified_time"):
            tags["article:modified_time"] = config["modified_time"]
        if author:
            tags["article:author"] = author

    return tags


def generate_blog_post_meta(
    post: Mapping[str, Any], site_url: Optional[str] = None
) -> Dict[str, str]:
    """Article meta tags for a blog post; keywords come from its tags."""
    post_url = f"{site_url}/blog/{post['slug']}" if site_url else None
    config = dict(post)
    config.update(
        {
            "type": "article",
            "site_url": post_url,
            "canonical": post_url,
            "keywords": post.get("tags") or post.get("keywords"),
        }
    )
    return generate_meta_tags(config)


def generate_project_meta(
    project: Mapping[str, Any], site_url: Optional[str] = None
) -> Dict[str, str]:
    """Website meta tags for a project; keywords come from its technologies."""
    project_url = f"{site_url}/projects/{project['slug']}" if site_url else None
    config = dict(project)
    config.update(
        {
            "type": "website",
            "site_url": project_url,
            "canonical": project_url,
            "keywords": project.get("technologies") or project.get("keywords"),
        }
    )
    return generate_meta_tags(config)


# ----- Title and Description Helpers -----
def format_page_title(page_title: str, site_name: str = DEFAULT_SEO["site_name"]) -> str:
    """
    Append the site name to a page title unless it is already there.

    Examples:
        >>> format_page_title("Projects")
        'Projects | Leechy.dev'
        >>> format_page_title("")
        'Leechy.dev'
    """
    if not page_title:
        return site_name
    if site_name in page_title:
        return page_title
    return f"{page_title} | {site_name}"


def generate_seo_title(
    content: str,
    max_length: int = SEO_LIMITS["title"]["max"],
    suffix: Optional[str] = None,
) -> str:
    """
    Build a title from arbitrary content.

    Strips markdown markers, truncates at a word boundary when one is
    close to the limit, and appends ' | suffix' only if it still fits.
    """
    title = _MARKDOWN_TITLE_CHARS.sub("", content.strip())

    if len(title) > max_length:
        title = title[:max_length].strip()
        last_space = title.rfind(" ")
        if last_space > max_length * 0.8:
            title = title[:last_space]

    if suffix and len(title) + len(suffix) + 3 <= max_length:
        title += f" | {suffix}"
    return title


def truncate_description(
    description: str, max_length: int = SEO_LIMITS["description"]["max"]
) -> str:
    """
    Fit a description to max_length characters.

    Prefers ending on a sentence, then on a word (with '...'),
    otherwise cuts hard and appends '...'.
    """
    if not description:
        return ""

    text = _MARKDOWN_DESCRIPTION_CHARS.sub("", description.strip())
    if len(text) <= max_length:
        return text

    text = text[:max_length]
    last_sentence = text.rfind(".")
    last_space = text.rfind(" ")

    if last_sentence > max_length * 0.8:
        return text[: last_sentence + 1]
    if last_space > max_length * 0.8:
        return text[:last_space] + "..."
    return text + "..."


def extract_excerpt(content: str, max_length: int = SEO_LIMITS["description"]["max"]) -> str:
    """First paragraph of markdown content, stripped of formatting and truncated."""
    excerpt = re.sub(r"^#{1,6}\s+", "", content, flags=re.MULTILINE)
    excerpt = re.sub(r"\*\*(.*?)\*\*", r"\1", excerpt)
    excerpt = re.sub(r"\*(.*?)\*", r"\1", excerpt)
    excerpt = re.sub(r"`(.*?)`", r"\1", excerpt)
    excerpt = re.sub(r"\[(.*?)\]\(.*?\)", r"\1", excerpt).strip()

    first_paragraph = excerpt.split("\n\n")[0]
    if first_paragraph:
        excerpt = first_paragraph
    return truncate_description(excerpt, max_length)


# ----- Structured Data -----
def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def generate_website_structured_data(
    name: str,
    url: str,
    description: str,
    author: Optional[str] = None,
    logo: Optional[str] = None,
    same_as: Optional[Sequence[str]] = None,
) -> Dict[str, Any]:
    """schema.org WebSite object."""
    return _compact(
        {
            "@context": "https://schema.org",
            "@type": "WebSite",
            "name": name,
            "url": url,
            "description": description,
            "author": {"@type": "Person", "name": author} if author else None,
            "logo": logo,
            "sameAs": list(same_as) if same_as else None,
        }
    )


def generate_person_structured_data(
    name: str,
    job_title: Optional[str] = None,
    url: Optional[str] = None,
    email: Optional[str] = None,
    same_as: Optional[Sequence[str]] = None,
    works_for: Optional[str] = None,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """schema.org Person object."""
    return _compact(
        {
            "@context": "https://schema.org",
            "@type": "Person",
            "name": name,
            "jobTitle": job_title,
            "url": url,
            "email": email,
            "sameAs": list(same_as) if same_as else None,
            "worksFor": {"@type": "Organization", "name": works_for} if works_for else None,
            "description": description,
        }
    )


def generate_article_structured_data(
    title: str,
    description: str,
    url: str,
    author: str,
    published_time: str,
    modified_time: Optional[str] = None,
    image: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
    word_count: Optional[int] = None,
) -> Dict[str, Any]:
    """schema.org BlogPosting object; dateModified falls back to datePublished."""
    return _compact(
        {
            "@context": "https://schema.org",
            "@type": "BlogPosting",
            "headline": title,
            "description": description,
            "url": url,
            "datePublished": published_time,
            "dateModified": modified_time or published_time,
            "author": {"@type": "Person", "name": author},
            "image": image,
            "keywords": list(tags) if tags else None,
            "wordCount": word_count,
        }
    )


def generate_breadcrumb_structured_data(
    breadcrumbs: Sequence[Mapping[str, str]],
) -> Dict[str, Any]:
    """schema.org BreadcrumbList from [{'name', 'url'}, ...], positions from 1."""
    return {
        "@context": "https://schema.org",
        "@type": "BreadcrumbList",
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": index,
                "name": item["name"],
                "item": item["url"],
            }
            for index, item in enumerate(breadcrumbs, start=1)
        ],
    }


# ----- URL Helpers -----
def resolve_image_url(image_path: Optional[str], base_url: Optional[str] = None) -> str:
    """
    Make an image path absolute against base_url.

    Examples:
        >>> resolve_image_url("img/a.png", "https://leechy.dev/")
        'https://leechy.dev/img/a.png'
        >>> resolve_image_url("https://cdn.example.com/a.png", "https://leechy.dev")
        'https://cdn.example.com/a.png'
    """
    if not image_path:
        return ""
    if image_path.startswith(("http://", "https://")):
        return image_path
    if not base_url:
        return image_path
    return generate_canonical_url(image_path, base_url)


def generate_canonical_url(path: str, base_url: str) -> str:
    """Join base_url and path with exactly one slash."""
    clean_path = path if path.startswith("/") else f"/{path}"
    return f"{base_url.rstrip('/')}{clean_path}"


def generate_social_share_urls(
    url: str,
    title: str,
    description: Optional[str] = None,
    via: Optional[str] = None,
) -> Dict[str, str]:
    """Share links for twitter, facebook, linkedin, reddit, hackernews and email."""
    encoded_url = quote(url, safe="")
    encoded_title = quote(title, safe="")
    encoded_description = quote(description or "", safe="")
    via_param = f"&via={via}" if via else ""

    return {
        "twitter": (
            f"https://twitter.com/intent/tweet?url={encoded_url}"
            f"&text={encoded_title}{via_param}"
        ),
        "facebook": f"https://www.facebook.com/sharer/sharer.php?u={encoded_url}",
        "linkedin": f"https://www.linkedin.com/sharing/share-offsite/?url={encoded_url}",
        "reddit": f"https://reddit.com/submit?url={encoded_url}&title={encoded_title}",
        "hackernews": (
            f"https://news.ycombinator.com/submitlink?u={encoded_url}&t={encoded_title}"
        ),
        "email": (
            f"mailto:?subject={encoded_title}"
            f"&body={encoded_description}%0A%0A{encoded_url}"
        ),
    }


# ----- Validation and Analysis -----
def validate_seo_config(config: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Check title, description, keywords and image alt text against SEO_LIMITS.

    Returns:
        {'valid': bool, 'warnings': [...], 'errors': [...]}
        Missing title or description are errors; lengths out of range,
        too many keywords and an image without alt text are warnings.
    """
    warnings: List[str] = []
    errors: List[str] = []

    for field in ("title", "description"):
        value = config.get(field)
        limits = SEO_LIMITS[field]
        if not value:
            errors.append(f"{field.capitalize()} is required")
            continue
        if len(value) < limits["min"]:
            warnings.append(
                f"{field.capitalize()} is too short "
                f"({len(value)} chars, minimum {limits['min']})"
            )
        if len(value) > limits["max"]:
            warnings.append(
                f"{field.capitalize()} is too long "
                f"({len(value)} chars, maximum {limits['max']})"
            )

    keywords = config.get("keywords") or []
    if len(keywords) > SEO_LIMITS["keywords"]["max"]:
        warnings.append(
            f"Too many keywords ({len(keywords)}, maximum {SEO_LIMITS['keywords']['max']})"
        )

    if config.get("image") and not config.get("image_alt"):
        warnings.append("Image provided without alt text")

    return {"valid": not errors, "warnings": warnings, "errors": errors}


def analyze_seo_content(content: str) -> Dict[str, Any]:
    """
    Word count, reading time, heading outline and recommendations for markdown.

    Returns:
        {'word_count', 'reading_time', 'heading_structure', 'recommendations'}
    """
    word_count = len(content.split())
    reading_time = math.ceil(word_count / WORDS_PER_MINUTE)
    headings = [
        {"level": len(hashes), "text": text.strip()}
        for hashes, text in _HEADING_LINE.findall(content)
    ]

    recommendations: List[str] = []
    if word_count < 300:
        recommendations.append(
            "Content is quite short. Consider adding more valuable information."
        )

    if not headings:
        recommendations.append("No headings found. Add headings to improve content structure.")
    else:
        h1_count = sum(1 for h in headings if h["level"] == 1)
        if h1_count > 1:
            recommendations.append("Multiple H1 headings found. Use only one H1 per page.")
        if h1_count == 0:
            recommendations.append("No H1 heading found. Add a main heading to your content.")

    if not _MARKDOWN_LINK.search(content):
        recommendations.append(
            "No links found. Consider adding relevant internal and external links."
        )

    return {
        "word_count": word_count,
        "reading_time": reading_time,
        "heading_structure": headings,
        "recommendations": recommendations,
    }


# ----- Rendering -----
def create_meta_tag_html(meta_tags: Mapping[str, Any]) -> str:
    """Render a meta tag dict as HTML, one tag per line, values escaped."""
    lines: List[str] = []
    for key, value in meta_tags.items():
        if value is None:
            continue
        escaped = html.escape(str(value), quote=True)
        if key == "title":
            lines.append(f"<title>{escaped}</title>")
        elif key == "canonical":
            lines.append(f'<link rel="canonical" href="{escaped}">')
        elif key.startswith(("og:", "twitter:", "article:")):
            lines.append(f'<meta property="{key}" content="{escaped}">')
        else:
            lines.append(f'<meta name="{key}" content="{escaped}">')
    return "\n".join(lines)


def generate_robots_meta(
    index: bool = True,
    follow: bool = True,
    noarchive: bool = False,
    nosnippet: bool = False,
    noimageindex: bool = False,
) -> str:
    """
    Robots directive string.

    Examples:
        >>> generate_robots_meta(index=False, noarchive=True)
        'noindex, follow, noarchive'
    """
    directives = ["index" if index else "noindex", "follow" if follow else "nofollow"]
    if noarchive:
        directives.append("noarchive")
    if nosnippet:
        directives.append("nosnippet")
    if noimageindex:
        directives.append("noimageindex")
    return ", ".join(directives)

#!/usr/bin/env python3
"""
slugify.py
----------
String slugification for URLs and uploaded filenames.

Key Features:
    - Lowercase transformation
    - Accent/diacritic normalization (Café → cafe)
    - Space to hyphen conversion
    - Maximum length enforcement
    - Filename sanitizing that keeps the extension dot
    - Title slugs that drop symbols and accented letters

Usage:
    from folio.utils.slugify import slugify, sanitize_filename, title_slug

    slug = slugify("Building a Portfolio with SvelteKit")
    # "building-a-portfolio-with-sveltekit"

    name = sanitize_filename("My Photo (1).JPG")
    # "my-photo-1-.jpg"

    title_slug("Svelte & TypeScript")
    # "svelte-typescript"
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
import unicodedata
from typing import Tuple


def slugify(text: str, max_length: int = 200) -> str:
    """
    Convert text to a URL slug.

    Applies, in order:
    - Normalize accents (Café → cafe)
    - Lowercase
    - Remove apostrophes (it's → its)
    - Replace '&' with 'and'
    - Replace whitespace, underscores and slashes with hyphens
    - Strip everything outside [a-z0-9-]
    - Collapse and trim hyphens

    Args:
        text: Input text
        max_length: Maximum slug length (default 200)

    Returns:
        Slug, possibly empty

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'
        >>> slugify("  Svelte & TypeScript  ")
        'svelte-and-typescript'
        >>> slugify("Crème brûlée")
        'creme-brulee'
    """
    if not text:
        return ""

    text = unicodedata.normalize("NFKD", str(text))
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()

    text = text.replace("'", "")
    text = text.replace("&", " and ")
    text = re.sub(r"[\s_/]+", "-", text)
    text = re.sub(r"[^a-z0-9-]", "", text)
    text = re.sub(r"-+", "-", text)
    text = text.strip("-")

    if len(text) > max_length:
        text = text[:max_length].rstrip("-")

    return text


def title_slug(title: str) -> str:
    """
    Slug for a post or project title.

    Lowercases, drops everything outside [a-z0-9], whitespace and
    hyphens, turns whitespace runs into hyphens, then collapses and
    trims hyphens. Unlike slugify, symbols and accented letters are
    dropped rather than spelled out.

    >>> title_slug("Svelte & TypeScript")
    'svelte-typescript'
    >>> title_slug("Café Crème")
    'caf-crme'
    """
    text = (title or "").lower()
    text = re.sub(r"[^a-z0-9\s-]", "", text)
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"-+", "-", text)
    return text.strip("-")


def split_extension(filename: str) -> Tuple[str, str]:
    """
    Split a filename into stem and lowercase extension (without dot).

    >>> split_extension("Photo.Final.PNG")
    ('Photo.Final', 'png')
    >>> split_extension("README")
    ('README', '')
    """
    name = (filename or "").strip()
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return name, ""
    return stem, ext.lower()


def sanitize_filename(name: str) -> str:
    """
    Make an uploaded filename safe for the upload directory.

    Lowercases, replaces every character outside [a-z0-9.-] with a
    hyphen, collapses runs of hyphens and trims them from both ends.

    >>> sanitize_filename("My Photo (1).JPG")
    'my-photo-1-.jpg'
    >>> sanitize_filename("--résumé--.pdf")
    'r-sum-.pdf'
    """
    text = (name or "").strip().lower()
    text = re.sub(r"[^a-z0-9.-]", "-", text)
    text = re.sub(r"-+", "-", text)
    return text.strip("-")

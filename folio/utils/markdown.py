#!/usr/bin/env python3
"""
markdown.py
-------------------
Markdown to sanitized HTML for blog posts and project write-ups.

Rendering uses markdown-it-py with tables, strikethrough and hard line
breaks enabled, plus a few render rules:
    - headings get an id and a self-link (<a class="anchor-link">)
    - code blocks render as <pre class="code-block"><code class="language-X">
    - external links open in a new tab with rel="noopener noreferrer"
    - images load lazily

The HTML is then cleaned with nh3 against a fixed tag and attribute
allowlist, so stored content can never inject scripts or handlers.

Usage:
    html = markdown_to_html(post.content)
    toc = extract_headings(post.content)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import html
import math
import re
from typing import Any, Dict, List, Optional, Sequence

# --- Third-party imports ---
import nh3
from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml

ALLOWED_TAGS = {
    "h1", "h2", "h3", "h4", "h5", "h6",
    "p", "br", "strong", "em", "u", "s", "del",
    "a", "img", "code", "pre",
    "ul", "ol", "li", "blockquote", "hr",
    "table", "thead", "tbody", "tr", "th", "td",
    "div", "span",
}

ALLOWED_ATTRIBUTES = {
    "*": {"href", "title", "alt", "src", "target", "rel", "class", "id", "loading"},
}

WORDS_PER_MINUTE = 200

_TAG = re.compile(r"<[^>]*>")
_NON_WORD = re.compile(r"[^\w]+")


def heading_anchor(text: str) -> str:
    """
    Anchor id for a heading.

    Examples:
        >>> heading_anchor("What is SvelteKit?")
        'what-is-sveltekit-'
    """
    return _NON_WORD.sub("-", text.lower())


# ----- Render rules -----
def _heading_open(self: Any, tokens: Sequence[Any], idx: int, options: Any, env: Any) -> str:
    token = tokens[idx]
    inline = tokens[idx + 1] if idx + 1 < len(tokens) else None
    anchor = heading_anchor(inline.content if inline is not None else "")
    return f'<{token.tag} id="{escapeHtml(anchor)}"><a href="#{escapeHtml(anchor)}" class="anchor-link">'


def _heading_close(self: Any, tokens: Sequence[Any], idx: int, options: Any, env: Any) -> str:
    return f"</a></{tokens[idx].tag}>\n"


def _code_block(self: Any, tokens: Sequence[Any], idx: int, options: Any, env: Any) -> str:
    token = tokens[idx]
    info = token.info.strip().split() if token.info else []
    language = info[0] if info else "text"
    return (
        f'<pre class="code-block"><code class="language-{escapeHtml(language)}">'
        f"{escapeHtml(token.content)}</code></pre>\n"
    )


def _link_open(self: Any, tokens: Sequence[Any], idx: int, options: Any, env: Any) -> str:
    token = tokens[idx]
    href = token.attrGet("href") or ""
    if href.startswith("http"):
        token.attrSet("target", "_blank")
        token.attrSet("rel", "noopener noreferrer")
    return self.renderToken(tokens, idx, options, env)


def folio_render_plugin(md: MarkdownIt) -> None:
    """Register the heading, code, link and image render rules."""
    default_image = md.renderer.rules["image"]

    def _image(self: Any, tokens: Sequence[Any], idx: int, options: Any, env: Any) -> str:
        tokens[idx].attrSet("loading", "lazy")
        return default_image(tokens, idx, options, env)

    md.add_render_rule("heading_open", _heading_open)
    md.add_render_rule("heading_close", _heading_close)
    md.add_render_rule("fence", _code_block)
    md.add_render_rule("code_block", _code_block)
    md.add_render_rule("link_open", _link_open)
    md.add_render_rule("image", _image)


def create_renderer() -> MarkdownIt:
    """MarkdownIt instance with the site's options and render rules."""
    return (
        MarkdownIt("commonmark", {"breaks": True})
        .enable(["table", "strikethrough"])
        .use(folio_render_plugin)
    )


_renderer = create_renderer()


# ----- Public API -----
def sanitize_html(raw_html: str) -> str:
    """Strip every tag and attribute outside the allowlist."""
    return nh3.clean(
        raw_html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        link_rel=None,
    )


def markdown_to_html(markdown: Optional[str]) -> str:
    """
    Convert markdown to sanitized HTML.

    Examples:
        >>> markdown_to_html("**bold**")
        '<p><strong>bold</strong></p>\\n'
        >>> markdown_to_html("")
        ''
    """
    if not markdown:
        return ""
    return sanitize_html(_renderer.render(markdown))


def markdown_to_plain_text(markdown: Optional[str], max_length: Optional[int] = None) -> str:
    """
    Plain text of rendered markdown, for excerpts and meta descriptions.

    Args:
        markdown: Source text
        max_length: Truncate to this many characters and append '...'
    """
    if not markdown:
        return ""

    text = html.unescape(_TAG.sub("", _renderer.render(markdown))).strip()
    if max_length and len(text) > max_length:
        return text[:max_length].strip() + "..."
    return text


def estimate_reading_time(markdown: Optional[str], words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Minutes to read the text, at least 1."""
    words = len(markdown_to_plain_text(markdown).split())
    return max(1, math.ceil(words / words_per_minute))


def extract_headings(markdown: Optional[str], max_level: int = 6) -> List[Dict[str, Any]]:
    """
    Table of contents: [{'level', 'text', 'id'}] in document order.

    Headings inside code blocks are not included.
    """
    if not markdown:
        return []

    tokens = _renderer.parse(markdown)
    headings: List[Dict[str, Any]] = []
    for idx, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        level = int(token.tag[1])
        if level > max_level:
            continue
        text = tokens[idx + 1].content.strip()
        headings.append({"level": level, "text": text, "id": heading_anchor(text)})
    return headings

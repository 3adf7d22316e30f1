#!/usr/bin/env python3
"""
test_markdown.py
----------------
Tests for markdown rendering, sanitizing and text extraction.

Usage:
    python -m pytest tests/unit/utils/test_markdown.py -v
"""
from folio.utils.markdown import (
    estimate_reading_time,
    extract_headings,
    heading_anchor,
    markdown_to_html,
    markdown_to_plain_text,
    sanitize_html,
)


class TestMarkdownToHtml:
    """Test markdown_to_html()."""

    def test_basic_formatting(self):
        """Test inline formatting renders."""
        assert markdown_to_html("**bold**") == "<p><strong>bold</strong></p>\n"

    def test_empty(self):
        """Test empty input gives empty output."""
        assert markdown_to_html("") == ""
        assert markdown_to_html(None) == ""

    def test_heading_anchor(self):
        """Test headings get an id and a self-link."""
        html = markdown_to_html("## Getting Started")
        assert 'id="getting-started"' in html
        assert 'href="#getting-started"' in html
        assert 'class="anchor-link"' in html

    def test_code_block(self):
        """Test fenced code gets the code-block and language classes."""
        html = markdown_to_html("```python\nprint('hi')\n```")
        assert '<pre class="code-block">' in html
        assert 'class="language-python"' in html
        assert "print(" in html

    def test_code_block_without_language(self):
        """Test fences without info use the text language."""
        assert 'class="language-text"' in markdown_to_html("```\nplain\n```")

    def test_external_links_open_new_tab(self):
        """Test http links get target and rel."""
        html = markdown_to_html("[site](https://leechy.dev)")
        assert 'target="_blank"' in html
        assert 'rel="noopener noreferrer"' in html

    def test_internal_links_unchanged(self):
        """Test relative links keep the same tab."""
        html = markdown_to_html("[about](/about)")
        assert 'href="/about"' in html
        assert "target=" not in html

    def test_images_lazy(self):
        """Test images load lazily."""
        html = markdown_to_html("![Alt](/uploads/a.png)")
        assert 'loading="lazy"' in html
        assert 'alt="Alt"' in html

    def test_tables(self):
        """Test GFM tables are enabled."""
        html = markdown_to_html("| a | b |\n|---|---|\n| 1 | 2 |")
        assert "<table>" in html
        assert "<td>1</td>" in html

    def test_scripts_removed(self):
        """Test raw script tags and handlers are stripped."""
        html = markdown_to_html('Hi <script>alert(1)</script><img src="x.png" onerror="alert(1)">')
        assert "<script" not in html
        assert "alert(1)" not in html
        assert "onerror" not in html


class TestSanitizeHtml:
    """Test sanitize_html()."""

    def test_disallowed_tags_stripped(self):
        """Test iframes are removed and allowed tags kept."""
        cleaned = sanitize_html('<p>ok</p><iframe src="https://evil.test"></iframe>')
        assert cleaned == "<p>ok</p>"

    def test_javascript_urls_removed(self):
        """Test javascript: links lose their href."""
        assert "javascript:" not in sanitize_html('<a href="javascript:alert(1)">x</a>')


class TestTextHelpers:
    """Test plain text, reading time and headings."""

    def test_heading_anchor(self):
        """Test non-word runs become hyphens."""
        assert heading_anchor("What is SvelteKit?") == "what-is-sveltekit-"

    def test_plain_text(self):
        """Test tags are removed and entities decoded."""
        text = markdown_to_plain_text("# Title\n\nSome **bold** & text")
        assert text == "Title\nSome bold & text"

    def test_plain_text_truncates(self):
        """Test max_length appends an ellipsis."""
        assert markdown_to_plain_text("one two three four", max_length=7) == "one two..."

    def test_reading_time(self):
        """Test minutes round up with a minimum of one."""
        assert estimate_reading_time("") == 1
        assert estimate_reading_time(" ".join(["word"] * 401)) == 3

    def test_extract_headings(self):
        """Test headings in document order, skipping code blocks."""
        source = "# Intro\n\n```\n# not a heading\n```\n\n## Part Two\n\n### Deep"
        assert extract_headings(source) == [
            {"level": 1, "text": "Intro", "id": "intro"},
            {"level": 2, "text": "Part Two", "id": "part-two"},
            {"level": 3, "text": "Deep", "id": "deep"},
        ]
        assert len(extract_headings(source, max_level=2)) == 2

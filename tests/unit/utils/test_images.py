#!/usr/bin/env python3
"""
test_images.py
--------------
Tests for responsive image paths, placeholders and dimension helpers.

Usage:
    python -m pytest tests/unit/utils/test_images.py -v
"""
import base64

import pytest

from folio.utils.images import (
    DEFAULT_BREAKPOINTS,
    Breakpoint,
    calculate_optimal_dimensions,
    create_responsive_image_set,
    generate_blur_placeholder,
    generate_picture_config,
    generate_placeholder_svg,
    generate_sizes,
    generate_srcset,
    get_image_format,
    get_loading_strategy,
    get_optimized_image_path,
    parse_image_metadata,
    validate_image_path,
)


def _decode_data_uri(uri):
    prefix = "data:image/svg+xml;base64,"
    assert uri.startswith(prefix)
    return base64.b64decode(uri[len(prefix):]).decode("utf-8")


class TestOptimizedPaths:
    """Test get_optimized_image_path() and friends."""

    def test_full_parameters(self):
        """Test width, format and quality are appended in order."""
        assert get_optimized_image_path("/uploads/photo.jpg", 640, "webp", 85) == (
            "/images/optimized/uploads/photo_w_640_webp_q_85.webp"
        )

    def test_no_parameters_keeps_extension(self):
        """Test the source extension is kept when no format is given."""
        assert get_optimized_image_path("/uploads/photo.png") == "/images/optimized/uploads/photo.png"

    def test_external_unchanged(self):
        """Test remote URLs are not rewritten."""
        url = "https://cdn.example.com/a.jpg"
        assert get_optimized_image_path(url, 640, "webp") == url

    def test_image_format(self):
        """Test extension detection defaults to jpg."""
        assert get_image_format("a/b/Photo.PNG") == "png"
        assert get_image_format("a/b/photo") == "jpg"

    def test_srcset(self):
        """Test one entry per breakpoint with its width descriptor."""
        srcset = generate_srcset("/a.jpg", [Breakpoint(320), Breakpoint(640)], "webp", 80)
        assert srcset == (
            "/images/optimized/a_w_320_webp_q_80.webp 320w, "
            "/images/optimized/a_w_640_webp_q_80.webp 640w"
        )

    def test_sizes(self):
        """Test the last breakpoint has no media query."""
        assert generate_sizes([Breakpoint(320), Breakpoint(640)]) == "(max-width: 320px) 320px, 640px"
        assert generate_sizes([]) == ""


class TestResponsiveSets:
    """Test responsive image sets and picture configs."""

    def test_image_set_default_qualities(self):
        """Test each format uses its own default quality."""
        image_set = create_responsive_image_set("/uploads/photo.jpg", formats=("webp", "avif"))
        assert image_set["webp"]["src"] == "/images/optimized/uploads/photo_webp_q_85.webp"
        assert image_set["avif"]["src"] == "/images/optimized/uploads/photo_avif_q_75.avif"
        assert image_set["webp"]["sizes"] == generate_sizes(DEFAULT_BREAKPOINTS)

    def test_image_set_explicit_quality(self):
        """Test an explicit quality overrides every format."""
        image_set = create_responsive_image_set("/p.jpg", formats=("png",), quality=50)
        assert image_set["png"]["src"] == "/images/optimized/p_png_q_50.png"

    def test_picture_config(self):
        """Test sources exclude the last format, used by the img fallback."""
        config = generate_picture_config(
            "/uploads/photo.jpg", "Photo", formats=("avif", "webp", "jpg"), fetchpriority="high"
        )
        assert [s["type"] for s in config["sources"]] == ["image/avif", "image/webp"]
        assert config["img"]["src"] == "/images/optimized/uploads/photo_w_1920_jpg_q_85.jpg"
        assert config["img"]["alt"] == "Photo"
        assert config["img"]["loading"] == "lazy"
        assert config["img"]["fetchpriority"] == "high"
        assert "class" not in config["img"]

    @pytest.mark.parametrize(
        "critical, above_fold, expected",
        [
            (True, False, {"loading": "eager", "fetchpriority": "high"}),
            (False, True, {"loading": "eager", "fetchpriority": "high"}),
            (False, False, {"loading": "lazy", "fetchpriority": "low"}),
        ],
    )
    def test_loading_strategy(self, critical, above_fold, expected):
        """Test critical or above-the-fold images load eagerly."""
        assert get_loading_strategy(critical, above_fold) == expected


class TestPlaceholders:
    """Test SVG placeholders."""

    def test_placeholder_svg(self):
        """Test the solid placeholder carries its size and colour."""
        svg = _decode_data_uri(generate_placeholder_svg(16, 9, "#000"))
        assert 'width="16" height="9"' in svg
        assert 'fill="#000"' in svg

    def test_blur_placeholder_keeps_ratio(self):
        """Test the blurred placeholder is 40px wide at the source ratio."""
        svg = _decode_data_uri(generate_blur_placeholder(1600, 800))
        assert 'width="40" height="20"' in svg
        assert "feGaussianBlur" in svg


class TestValidationAndMetadata:
    """Test path validation, metadata and dimension fitting."""

    @pytest.mark.parametrize(
        "src, expected",
        [
            ("/uploads/a.JPG", True),
            ("/uploads/a.svg", True),
            ("https://cdn.example.com/image", True),
            ("/uploads/a.pdf", False),
            ("", False),
            (None, False),
            (42, False),
        ],
    )
    def test_validate_image_path(self, src, expected):
        """Test accepted extensions and external URLs."""
        assert validate_image_path(src) is expected

    def test_metadata_from_filename(self):
        """Test dimensions in the filename are parsed."""
        metadata = parse_image_metadata("/uploads/hero_800x600.webp")
        assert metadata["format"] == "webp"
        assert metadata["width"] == 800
        assert metadata["height"] == 600
        assert metadata["aspect_ratio"] == pytest.approx(4 / 3)

    def test_metadata_without_dimensions(self):
        """Test only the format is known without dimensions."""
        assert parse_image_metadata("/uploads/hero.png") == {"src": "/uploads/hero.png", "format": "png"}

    def test_contain(self):
        """Test contain fits a wide image to the container width."""
        assert calculate_optimal_dimensions(400, 400, 2.0, "contain") == {"width": 400, "height": 200}
        assert calculate_optimal_dimensions(400, 400, 0.5, "contain") == {"width": 200, "height": 400}

    def test_cover(self):
        """Test cover fills the container and overflows one side."""
        assert calculate_optimal_dimensions(400, 400, 2.0, "cover") == {"width": 800, "height": 400}
        assert calculate_optimal_dimensions(400, 400, 0.5, "cover") == {"width": 400, "height": 800}

    def test_fill(self):
        """Test fill stretches to the container."""
        assert calculate_optimal_dimensions(300, 200, 3.0, "fill") == {"width": 300, "height": 200}

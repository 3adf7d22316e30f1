#!/usr/bin/env python3
"""
images.py
-------------------
Responsive image paths, srcset strings and placeholders.

Optimized variants live under /images/optimized/ and are named after
their source with the requested width, format and quality appended:

    /uploads/photo.jpg  ->  /images/optimized/uploads/photo_w_640_webp_q_85.webp

The files themselves are produced by an external build step; this
module only computes the URLs templates and page loaders hand out.
"""
from __future__ import annotations

# --- Standard library imports ---
import base64
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence


@dataclass(frozen=True)
class Breakpoint:
    """Viewport width with a short name."""

    width: int
    suffix: Optional[str] = None


DEFAULT_BREAKPOINTS: List[Breakpoint] = [
    Breakpoint(320, "xs"),
    Breakpoint(640, "sm"),
    Breakpoint(768, "md"),
    Breakpoint(1024, "lg"),
    Breakpoint(1280, "xl"),
    Breakpoint(1920, "2xl"),
]

# In order of preference
IMAGE_FORMATS = ("webp", "avif", "jpg", "png")

DEFAULT_QUALITY: Dict[str, int] = {
    "webp": 85,
    "avif": 75,
    "jpg": 85,
    "png": 100,
}

OPTIMIZED_PREFIX = "/images/optimized"

_VALID_IMAGE_PATH = re.compile(r"\.(jpg|jpeg|png|gif|webp|avif|svg)$", re.IGNORECASE)
_DIMENSIONS_IN_NAME = re.compile(r"(\d+)x(\d+)")


def _is_external(src: str) -> bool:
    return src.startswith(("http://", "https://"))


# ----- Paths -----
def get_image_format(src: str) -> str:
    """Lowercase extension of src, 'jpg' when it has none."""
    match = re.search(r"\.([^./]+)$", src)
    return match.group(1).lower() if match else "jpg"


def get_optimized_image_path(
    src: str,
    width: Optional[int] = None,
    image_format: Optional[str] = None,
    quality: Optional[int] = None,
) -> str:
    """
    URL of an optimized variant of src.

    External URLs are returned unchanged.

    Examples:
        >>> get_optimized_image_path("/uploads/photo.jpg", 640, "webp", 85)
        '/images/optimized/uploads/photo_w_640_webp_q_85.webp'
        >>> get_optimized_image_path("/uploads/photo.png")
        '/images/optimized/uploads/photo.png'
    """
    if _is_external(src):
        return src

    base_path = re.sub(r"\.[^./]+$", "", src.lstrip("/"))
    path = f"{OPTIMIZED_PREFIX}/{base_path}"

    params: List[str] = []
    if width:
        params.append(f"w_{width}")
    if image_format:
        params.append(image_format)
    if quality:
        params.append(f"q_{quality}")
    if params:
        path += "_" + "_".join(params)

    return f"{path}.{image_format or get_image_format(src)}"


def generate_srcset(
    src: str,
    breakpoints: Sequence[Breakpoint] = DEFAULT_BREAKPOINTS,
    image_format: Optional[str] = None,
    quality: Optional[int] = None,
) -> str:
    """'path 320w, path 640w, ...' for every breakpoint."""
    return ", ".join(
        f"{get_optimized_image_path(src, bp.width, image_format, quality)} {bp.width}w"
        for bp in breakpoints
    )


def generate_sizes(breakpoints: Sequence[Breakpoint] = DEFAULT_BREAKPOINTS) -> str:
    """sizes attribute; the last breakpoint has no media query."""
    parts = [f"(max-width: {bp.width}px) {bp.width}px" for bp in breakpoints[:-1]]
    if breakpoints:
        parts.append(f"{breakpoints[-1].width}px")
    return ", ".join(parts)


# ----- Responsive Sets -----
def create_responsive_image_set(
    src: str,
    breakpoints: Sequence[Breakpoint] = DEFAULT_BREAKPOINTS,
    formats: Sequence[str] = ("webp", "jpg"),
    quality: Optional[int] = None,
    sizes: Optional[str] = None,
) -> Dict[str, Dict[str, str]]:
    """
    One {src, srcset, sizes} entry per format.

    Without an explicit quality each format uses its DEFAULT_QUALITY.
    """
    sizes = sizes or generate_sizes(breakpoints)
    image_set: Dict[str, Dict[str, str]] = {}
    for image_format in formats:
        format_quality = quality or DEFAULT_QUALITY.get(image_format)
        image_set[image_format] = {
            "src": get_optimized_image_path(src, None, image_format, format_quality),
            "srcset": generate_srcset(src, breakpoints, image_format, format_quality),
            "sizes": sizes,
        }
    return image_set


def generate_picture_config(
    src: str,
    alt: str,
    breakpoints: Sequence[Breakpoint] = DEFAULT_BREAKPOINTS,
    formats: Sequence[str] = ("webp", "jpg"),
    quality: Optional[int] = None,
    sizes: Optional[str] = None,
    loading: str = "lazy",
    fetchpriority: Optional[str] = None,
    class_name: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Data for a <picture> element.

    Every format but the last becomes a <source>; the last one is the
    <img> fallback at the widest breakpoint.
    """
    sizes = sizes or generate_sizes(breakpoints)
    sources = []
    for image_format in formats[:-1]:
        format_quality = quality or DEFAULT_QUALITY.get(image_format)
        sources.append(
            {
                "srcset": generate_srcset(src, breakpoints, image_format, format_quality),
                "sizes": sizes,
                "type": f"image/{image_format}",
            }
        )

    fallback = formats[-1]
    fallback_quality = quality or DEFAULT_QUALITY.get(fallback)
    img: Dict[str, Any] = {
        "src": get_optimized_image_path(src, breakpoints[-1].width, fallback, fallback_quality),
        "alt": alt,
        "loading": loading,
    }
    if fetchpriority:
        img["fetchpriority"] = fetchpriority
    if class_name:
        img["class"] = class_name

    return {"sources": sources, "img": img}


def get_loading_strategy(is_critical: bool = False, is_above_fold: bool = False) -> Dict[str, str]:
    """Eager/high priority for critical or above-the-fold images, lazy/low otherwise."""
    if is_critical or is_above_fold:
        return {"loading": "eager", "fetchpriority": "high"}
    return {"loading": "lazy", "fetchpriority": "low"}


# ----- Placeholders -----
def _svg_data_uri(svg: str) -> str:
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


def generate_placeholder_svg(width: int = 10, height: int = 10, color: str = "#f3f4f6") -> str:
    """Solid-colour SVG as a base64 data URI."""
    svg = (
        f'<svg width="{width}" height="{height}" xmlns="http://www.w3.org/2000/svg">'
        f'<rect width="100%" height="100%" fill="{color}"/>'
        "</svg>"
    )
    return _svg_data_uri(svg)


def generate_blur_placeholder(width: int, height: int, primary_color: str = "#e5e7eb") -> str:
    """Blurred 40px-wide SVG keeping the aspect ratio of width x height."""
    placeholder_width = 40
    placeholder_height = round(placeholder_width / (width / height))
    svg = (
        f'<svg width="{placeholder_width}" height="{placeholder_height}" '
        'xmlns="http://www.w3.org/2000/svg">'
        '<defs><filter id="blur"><feGaussianBlur stdDeviation="2"/></filter></defs>'
        f'<rect width="100%" height="100%" fill="{primary_color}" filter="url(#blur)"/>'
        "</svg>"
    )
    return _svg_data_uri(svg)


# ----- Validation and Analysis -----
def validate_image_path(src: Any) -> bool:
    """External URLs, or local paths with an image extension."""
    if not src or not isinstance(src, str):
        return False
    if _is_external(src):
        return True
    return bool(_VALID_IMAGE_PATH.search(src))


def parse_image_metadata(src: str) -> Dict[str, Any]:
    """
    Format and, when the filename carries them (photo_800x600.jpg),
    width, height and aspect_ratio.
    """
    filename = src.rsplit("/", 1)[-1]
    metadata: Dict[str, Any] = {"src": src, "format": get_image_format(filename)}

    match = _DIMENSIONS_IN_NAME.search(filename)
    if match:
        width, height = int(match.group(1)), int(match.group(2))
        metadata["width"] = width
        metadata["height"] = height
        if height:
            metadata["aspect_ratio"] = width / height
    return metadata


def calculate_optimal_dimensions(
    container_width: int,
    container_height: int,
    image_aspect_ratio: float,
    mode: str = "cover",
) -> Dict[str, int]:
    """
    Rendered size of an image inside a container.

    Args:
        mode: 'contain' fits inside, 'cover' fills and overflows,
            anything else ('fill') stretches to the container
    """
    container_ratio = container_width / container_height
    wider = image_aspect_ratio > container_ratio

    if mode == "contain":
        if wider:
            return {"width": container_width, "height": round(container_width / image_aspect_ratio)}
        return {"width": round(container_height * image_aspect_ratio), "height": container_height}

    if mode == "cover":
        if wider:
            return {"width": round(container_height * image_aspect_ratio), "height": container_height}
        return {"width": container_width, "height": round(container_width / image_aspect_ratio)}

    return {"width": container_width, "height": container_height}

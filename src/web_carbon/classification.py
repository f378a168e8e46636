"""Resource classification for observed network transfers."""

from __future__ import annotations

from enum import Enum
from typing import Final
from urllib.parse import urlsplit

__all__ = ["ResourceCategory", "classify", "extension_of"]


class ResourceCategory(str, Enum):
    """Classification bucket for a single network transfer."""

    IMAGES = "images"
    JS = "js"
    CSS = "css"
    FONTS = "fonts"
    OTHER = "other"


_EXTENSION_TABLE: Final[dict[str, ResourceCategory]] = {
    "jpg": ResourceCategory.IMAGES,
    "jpeg": ResourceCategory.IMAGES,
    "png": ResourceCategory.IMAGES,
    "gif": ResourceCategory.IMAGES,
    "webp": ResourceCategory.IMAGES,
    "avif": ResourceCategory.IMAGES,
    "svg": ResourceCategory.IMAGES,
    "js": ResourceCategory.JS,
    "mjs": ResourceCategory.JS,
    "css": ResourceCategory.CSS,
    "woff": ResourceCategory.FONTS,
    "woff2": ResourceCategory.FONTS,
    "ttf": ResourceCategory.FONTS,
    "otf": ResourceCategory.FONTS,
    "eot": ResourceCategory.FONTS,
}

_FONT_MARKERS: Final[tuple[str, ...]] = ("font", "woff", "ttf")


def extension_of(url: str) -> str:
    """Return the lowercased file extension of ``url``'s path, or ``""``."""

    try:
        path = urlsplit(url).path
    except ValueError:
        path = url
    last_segment = path.rsplit("/", 1)[-1]
    if "." not in last_segment:
        return ""
    return last_segment.rsplit(".", 1)[-1].lower()


def _classify_content_type(content_type: str) -> ResourceCategory:
    lowered = content_type.lower()
    if lowered.startswith("image/"):
        return ResourceCategory.IMAGES
    if "javascript" in lowered or "ecmascript" in lowered:
        return ResourceCategory.JS
    if "css" in lowered:
        return ResourceCategory.CSS
    if any(marker in lowered for marker in _FONT_MARKERS):
        return ResourceCategory.FONTS
    return ResourceCategory.OTHER


def classify(declared_content_type: str | None, url: str) -> ResourceCategory:
    """Classify a transfer by its declared content type, else by extension.

    Args:
        declared_content_type: ``Content-Type`` header value, if any.
        url: URL of the transfer, used only when no content type is declared.

    Returns:
        Exactly one :class:`ResourceCategory`.
    """

    if declared_content_type and declared_content_type.strip():
        return _classify_content_type(declared_content_type.strip())
    return _EXTENSION_TABLE.get(extension_of(url), ResourceCategory.OTHER)

"""Data models."""

from epub_loader.models.epub import (
    BookMetadata,
    ManifestItem,
    NavPoint,
    ParsedEpub,
    Spine,
    guess_media_type,
    is_image_type,
    is_markup_type,
)

__all__ = [
    "BookMetadata",
    "ManifestItem",
    "NavPoint",
    "ParsedEpub",
    "Spine",
    "is_image_type",
    "is_markup_type",
    "guess_media_type",
]

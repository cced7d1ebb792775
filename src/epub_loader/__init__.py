"""Parse EPUB archives into a resolved, in-memory document model."""

from epub_loader.core.epub_parser import EpubParser, parse_epub
from epub_loader.core.errors import (
    ArchiveReadError,
    CorruptArchiveError,
    EpubError,
    MissingContainerError,
    MissingPackageError,
    MissingRootfileError,
)
from epub_loader.core.paths import resolve_path
from epub_loader.models.epub import BookMetadata, ManifestItem, NavPoint, ParsedEpub, Spine

__all__ = [
    "EpubParser",
    "parse_epub",
    "resolve_path",
    # Errors
    "EpubError",
    "CorruptArchiveError",
    "MissingContainerError",
    "MissingRootfileError",
    "MissingPackageError",
    "ArchiveReadError",
    # Models
    "BookMetadata",
    "ManifestItem",
    "NavPoint",
    "ParsedEpub",
    "Spine",
]

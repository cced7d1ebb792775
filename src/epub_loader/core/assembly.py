"""Extract resources and chapters and assemble the parsed book."""

import html
import logging
import re
from urllib.parse import unquote, urlparse

from epub_loader.core.archive import Archive
from epub_loader.core.diagnostics import Diagnostics
from epub_loader.core.errors import ArchiveReadError
from epub_loader.core.markup import MarkupDocument, MarkupMode, add_class, get_attr
from epub_loader.core.paths import directory_of, file_name, resolve_path
from epub_loader.models.epub import BookMetadata, ManifestItem, NavPoint, ParsedEpub, Spine

log = logging.getLogger(__name__)

IMAGE_CLASS = "epub-image"
ORIGINAL_SRC_ATTR = "data-original-src"
ORIGINAL_HREF_ATTR = "data-original-href"
RESOLVED_PATH_ATTR = "data-epub-path"
ERROR_PLACEHOLDER = "<p>Error loading content: {reason}</p>"

XML_ENTITIES = frozenset({"amp", "lt", "gt", "quot", "apos"})
_ENTITY_REF = re.compile(r"&([A-Za-z][A-Za-z0-9]*);")


def _is_web_url(reference: str) -> bool:
    return reference.startswith("http")


def _resolve_reference(reference: str, document_dir: str) -> str | None:
    """Archive path for a same-book reference; None for URIs with a scheme."""
    if urlparse(reference).scheme:
        return None
    path = unquote(reference.split("#", 1)[0])
    if not path:
        return None
    return resolve_path(path, document_dir)


def _uses_html_entities(source: str | bytes) -> bool:
    """True when the source references named entities XML does not define."""
    if isinstance(source, bytes):
        source = source.decode("latin-1")
    return any(name not in XML_ENTITIES for name in _ENTITY_REF.findall(source))


def _parse_chapter(source: str | bytes, media_type: str) -> MarkupDocument:
    if media_type == "text/html":
        return MarkupDocument.parse(source, MarkupMode.HTML)

    # the XML builder drops entities such as &nbsp; it has no definition for
    if _uses_html_entities(source):
        log.info("XHTML uses HTML named entities, parsing as HTML")
        return MarkupDocument.parse(source, MarkupMode.HTML)

    doc = MarkupDocument.parse(source, MarkupMode.XML)
    if doc.is_empty:
        log.info("XHTML did not parse as XML, retrying as HTML")
        doc = MarkupDocument.parse(source, MarkupMode.HTML)
    return doc


def rewrite_markup(source: str | bytes, item: ManifestItem) -> str:
    """Annotate image and stylesheet references so they survive extraction.

    Each ``img`` with a local ``src`` keeps it under ``data-original-src``,
    gains the ``epub-image`` class and a ``data-epub-path`` holding the
    archive path it points to. Local stylesheet ``link`` elements keep their
    href under ``data-original-href`` in the same way.
    """
    doc = _parse_chapter(source, item.media_type)
    document_dir = directory_of(item.href)

    for img in doc.find_all("img"):
        src = get_attr(img, "src")
        if not src or _is_web_url(src):
            continue
        img[ORIGINAL_SRC_ATTR] = src
        add_class(img, IMAGE_CLASS)
        resolved = _resolve_reference(src, document_dir)
        if resolved:
            img[RESOLVED_PATH_ATTR] = resolved

    for link in doc.find_all("link"):
        rel = (get_attr(link, "rel") or "").lower().split()
        href = get_attr(link, "href")
        if "stylesheet" not in rel or not href or _is_web_url(href):
            continue
        link[ORIGINAL_HREF_ATTR] = href
        resolved = _resolve_reference(href, document_dir)
        if resolved:
            link[RESOLVED_PATH_ATTR] = resolved

    return doc.serialize()


def extract_resources(
    archive: Archive,
    manifest: dict[str, ManifestItem],
    diagnostics: Diagnostics,
) -> dict[str, bytes]:
    """Image bytes keyed by archive path and, lossily, by bare file name."""
    resources: dict[str, bytes] = {}
    for item in manifest.values():
        if not item.is_image:
            continue
        try:
            data = archive.read_bytes(item.href)
        except ArchiveReadError as e:
            diagnostics.warn(f"Error extracting resource {item.href}: {e.message}")
            continue
        if data is None:
            diagnostics.warn(f"Resource {item.href} is missing from the archive")
            continue

        resources[item.href] = data
        name = file_name(item.href)
        if name:
            resources[name] = data
    return resources


def extract_content(
    archive: Archive,
    manifest: dict[str, ManifestItem],
    diagnostics: Diagnostics,
) -> dict[str, str]:
    """Rewritten markup keyed by manifest id."""
    content: dict[str, str] = {}
    for item in manifest.values():
        if not item.is_markup:
            continue
        try:
            source = archive.read_bytes(item.href)
        except ArchiveReadError as e:
            diagnostics.warn(f"Error extracting HTML content {item.href}: {e.message}")
            content[item.id] = ERROR_PLACEHOLDER.format(reason=html.escape(e.message))
            continue
        if source is None:
            diagnostics.warn(f"HTML content {item.href} is missing from the archive")
            continue

        content[item.id] = rewrite_markup(source, item)
    return content


def read_cover(archive: Archive, cover_path: str | None, diagnostics: Diagnostics) -> bytes | None:
    if not cover_path:
        return None
    try:
        data = archive.read_bytes(cover_path)
    except ArchiveReadError as e:
        diagnostics.warn(f"Error reading cover {cover_path}: {e.message}")
        return None
    if data is None:
        diagnostics.warn(f"Cover {cover_path} is missing from the archive")
    return data


def assemble(
    archive: Archive,
    metadata: BookMetadata,
    manifest: dict[str, ManifestItem],
    spine: Spine,
    nav_points: list[NavPoint],
    cover_path: str | None,
    base_path: str,
    diagnostics: Diagnostics | None = None,
) -> ParsedEpub:
    """Extract every image and chapter and build the final model."""
    diagnostics = diagnostics or Diagnostics()

    resources = extract_resources(archive, manifest, diagnostics)
    content = extract_content(archive, manifest, diagnostics)
    cover_data = read_cover(archive, cover_path, diagnostics)

    log.info(f"Assembled {len(content)} chapters and {len(resources)} resource keys")
    return ParsedEpub(
        metadata=metadata,
        spine=spine,
        manifest=manifest,
        nav_points=nav_points,
        cover_path=cover_path,
        cover_data=cover_data,
        content=content,
        resources=resources,
        base_path=base_path,
        warnings=tuple(diagnostics.messages),
    )

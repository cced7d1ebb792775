"""Parse the package document: metadata, manifest and spine."""

import logging

from bs4 import Tag

from epub_loader.core.diagnostics import Diagnostics
from epub_loader.core.markup import MarkupDocument, find_all, find_first, get_attr, text_of
from epub_loader.core.paths import resolve_path
from epub_loader.models.epub import BookMetadata, ManifestItem, Spine

log = logging.getLogger(__name__)

# Dublin Core element -> BookMetadata field
DC_FIELDS = {
    "title": "title",
    "creator": "creator",
    "publisher": "publisher",
    "language": "language",
    "identifier": "identifier",
    "description": "description",
    "rights": "rights",
    "date": "published",
}

MODIFIED_PROPERTY = "dcterms:modified"


def parse_metadata(doc: MarkupDocument) -> BookMetadata:
    """Read descriptive fields; anything missing is simply left unset."""
    metadata_el = doc.find("metadata")
    if metadata_el is None:
        return BookMetadata()

    fields: dict[str, str] = {}
    for element_name, field_name in DC_FIELDS.items():
        value = text_of(find_first(metadata_el, element_name))
        if value:
            fields[field_name] = value

    modified = text_of(find_first(metadata_el, "meta", {"property": MODIFIED_PROPERTY}))
    if modified:
        fields["modified"] = modified

    return BookMetadata(**fields)


def parse_manifest(
    doc: MarkupDocument,
    base_path: str,
    diagnostics: Diagnostics | None = None,
) -> dict[str, ManifestItem]:
    """Map manifest ids to items with hrefs resolved against ``base_path``.

    Items lacking id, href or media-type are skipped. A repeated id keeps
    the last declaration.
    """
    diagnostics = diagnostics or Diagnostics()
    manifest_el = doc.find("manifest")
    if manifest_el is None:
        return {}

    manifest: dict[str, ManifestItem] = {}
    for item in find_all(manifest_el, "item"):
        item_id = get_attr(item, "id")
        href = get_attr(item, "href")
        media_type = get_attr(item, "media-type")

        if not (item_id and href and media_type):
            diagnostics.warn(
                f"Skipping manifest item missing id/href/media-type: "
                f"id={item_id!r} href={href!r}"
            )
            continue

        manifest[item_id] = ManifestItem(
            id=item_id,
            href=resolve_path(href, base_path),
            media_type=media_type,
        )

    return manifest


def parse_spine(doc: MarkupDocument) -> Spine:
    """Reading order plus the id of the navigation document."""
    spine_el = doc.find("spine")
    if spine_el is None:
        return Spine()

    items = [
        idref
        for idref in (get_attr(ref, "idref") for ref in find_all(spine_el, "itemref"))
        if idref
    ]
    return Spine(items=items, toc=get_attr(spine_el, "toc") or "")


def parse_package(
    doc: MarkupDocument,
    base_path: str,
    diagnostics: Diagnostics | None = None,
) -> tuple[BookMetadata, dict[str, ManifestItem], Spine]:
    """Parse metadata, manifest and spine from a package document."""
    metadata = parse_metadata(doc)
    manifest = parse_manifest(doc, base_path, diagnostics)
    spine = parse_spine(doc)
    log.info(
        f"Package parsed: {len(manifest)} manifest items, "
        f"{len(spine.items)} spine entries"
    )
    return metadata, manifest, spine


def manifest_elements(doc: MarkupDocument) -> list[Tag]:
    """Raw manifest ``item`` elements, for lookups on attributes the model drops."""
    manifest_el = doc.find("manifest")
    return find_all(manifest_el, "item") if manifest_el is not None else []

"""Cover image discovery with ordered fallback strategies."""

import logging
from dataclasses import dataclass
from typing import Callable

from epub_loader.core.markup import MarkupDocument, get_attr
from epub_loader.core.package import manifest_elements
from epub_loader.models.epub import ManifestItem

log = logging.getLogger(__name__)

Manifest = dict[str, ManifestItem]

COVER_IDS = ("cover", "cover-image")
COVER_IMAGE_PROPERTY = "cover-image"


@dataclass
class CoverStrategy:
    """A single cover heuristic."""

    name: str
    fn: Callable[[MarkupDocument, Manifest], str | None]
    description: str


def find_by_meta(doc: MarkupDocument, manifest: Manifest) -> str | None:
    """``<meta name="cover" content="ID">`` pointing at a manifest id."""
    meta = doc.find("meta", {"name": "cover"})
    if meta is None:
        return None
    cover_id = get_attr(meta, "content")
    if cover_id and cover_id in manifest:
        return manifest[cover_id].href
    return None


def find_by_id(doc: MarkupDocument, manifest: Manifest) -> str | None:
    """Image item whose id is literally ``cover`` or ``cover-image``."""
    for cover_id in COVER_IDS:
        item = manifest.get(cover_id)
        if item is not None and item.is_image:
            return item.href
    return None


def find_by_properties(doc: MarkupDocument, manifest: Manifest) -> str | None:
    """EPUB 3 ``properties="cover-image"`` on a manifest item."""
    for element in manifest_elements(doc):
        properties = (get_attr(element, "properties") or "").split()
        if COVER_IMAGE_PROPERTY not in properties:
            continue
        item_id = get_attr(element, "id")
        if item_id and item_id in manifest:
            return manifest[item_id].href
    return None


def find_by_name(doc: MarkupDocument, manifest: Manifest) -> str | None:
    """Any image whose id or href mentions "cover"."""
    for item in manifest.values():
        if item.is_image and ("cover" in item.id.lower() or "cover" in item.href.lower()):
            return item.href
    return None


COVER_STRATEGIES = [
    CoverStrategy(name="meta", fn=find_by_meta, description="OPF meta name=cover"),
    CoverStrategy(name="id", fn=find_by_id, description="Manifest id cover/cover-image"),
    CoverStrategy(
        name="properties", fn=find_by_properties, description="Manifest properties=cover-image"
    ),
    CoverStrategy(name="name", fn=find_by_name, description="Image named like a cover"),
]


def find_cover(doc: MarkupDocument, manifest: Manifest) -> str | None:
    """Archive path of the cover image, or None when no strategy matches."""
    for strategy in COVER_STRATEGIES:
        path = strategy.fn(doc, manifest)
        if path:
            log.info(f"Cover found via {strategy.name} ({strategy.description}): {path}")
            return path

    log.info("No cover found")
    return None

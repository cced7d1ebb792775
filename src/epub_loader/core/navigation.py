"""Parse the NCX navigation document into a table of contents."""

import logging
import re

from bs4 import Tag

from epub_loader.core.diagnostics import Diagnostics
from epub_loader.core.markup import MarkupDocument, child_elements, find_first, get_attr, text_of
from epub_loader.models.epub import NavPoint

log = logging.getLogger(__name__)

_INTEGER = re.compile(r"-?[0-9]+")


def _play_order(value: str | None) -> int:
    """playOrder as an integer; anything but plain ASCII digits is 0."""
    if value is None:
        return 0
    value = value.strip()
    if not _INTEGER.fullmatch(value):
        return 0
    return int(value)


def _first_child(element: Tag, name: str) -> Tag | None:
    children = child_elements(element, name)
    return children[0] if children else None


def parse_nav_point(element: Tag, diagnostics: Diagnostics) -> NavPoint | None:
    """Build one navPoint and its subtree.

    Returns None when the id, label text or content src is missing; the
    subtree of a dropped node is not visited.
    """
    point_id = get_attr(element, "id")
    label_el = _first_child(element, "navLabel")
    label = text_of(find_first(label_el, "text")) if label_el is not None else None
    content_el = _first_child(element, "content")
    src = get_attr(content_el, "src") if content_el is not None else None

    if not (point_id and label and src):
        diagnostics.warn(f"Dropping navPoint missing id/label/src: id={point_id!r}")
        return None

    children = []
    for child_el in child_elements(element, "navPoint"):
        child = parse_nav_point(child_el, diagnostics)
        if child is not None:
            children.append(child)

    return NavPoint(
        id=point_id,
        label=label,
        href=src,
        order=_play_order(get_attr(element, "playOrder")),
        children=children,
    )


def parse_nav(doc: MarkupDocument, diagnostics: Diagnostics | None = None) -> list[NavPoint]:
    """Top-level navPoints sorted by playOrder; nested children keep document order."""
    diagnostics = diagnostics or Diagnostics()
    nav_map = doc.find("navMap")
    if nav_map is None:
        return []

    points = []
    for element in child_elements(nav_map, "navPoint"):
        point = parse_nav_point(element, diagnostics)
        if point is not None:
            points.append(point)

    log.info(f"Navigation parsed: {len(points)} top-level entries")
    return sorted(points, key=lambda p: p.order)

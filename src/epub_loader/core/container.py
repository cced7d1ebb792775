"""Locate the package document through META-INF/container.xml."""

import logging

from epub_loader.core.archive import Archive
from epub_loader.core.errors import ArchiveReadError, MissingContainerError, MissingRootfileError
from epub_loader.core.markup import MarkupDocument, MarkupMode, get_attr

log = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"


def locate_package_document(archive: Archive) -> str:
    """Return the archive path of the package document (OPF).

    Raises:
        MissingContainerError: container.xml is absent or unreadable
        MissingRootfileError: no rootfile element carries a full-path
    """
    try:
        container_xml = archive.read_bytes(CONTAINER_PATH)
    except ArchiveReadError as e:
        raise MissingContainerError(
            f"Invalid EPUB: unreadable {CONTAINER_PATH}: {e.message}", path=CONTAINER_PATH
        ) from e
    if container_xml is None:
        raise MissingContainerError(f"Invalid EPUB: Missing {CONTAINER_PATH}", path=CONTAINER_PATH)

    doc = MarkupDocument.parse(container_xml, MarkupMode.XML)
    rootfile = doc.find("rootfile")
    full_path = get_attr(rootfile, "full-path") if rootfile is not None else None
    if not full_path:
        raise MissingRootfileError(
            "Invalid EPUB: Unable to find rootfile path", path=CONTAINER_PATH
        )

    log.info(f"Package document at {full_path}")
    return full_path

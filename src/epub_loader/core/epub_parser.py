"""EPUB parsing from raw archive bytes."""

import logging
from pathlib import Path

from epub_loader.core.archive import Archive
from epub_loader.core.assembly import assemble
from epub_loader.core.container import locate_package_document
from epub_loader.core.cover import find_cover
from epub_loader.core.diagnostics import Diagnostics, WarningSink
from epub_loader.core.errors import ArchiveReadError, MissingPackageError
from epub_loader.core.markup import MarkupDocument, MarkupMode
from epub_loader.core.navigation import parse_nav
from epub_loader.core.package import parse_package
from epub_loader.core.paths import directory_of
from epub_loader.models.epub import ManifestItem, NavPoint, ParsedEpub, Spine

log = logging.getLogger(__name__)


class EpubParser:
    """Parse an EPUB archive into a fully resolved ``ParsedEpub``.

    Container and package failures raise an ``EpubError`` subclass. Problems
    with individual chapters, images, navigation entries or the cover are
    recorded as warnings and the parse carries on.
    """

    def __init__(self, data: bytes, on_warning: WarningSink | None = None):
        self.data = data
        self.on_warning = on_warning

    @classmethod
    def from_path(cls, epub_path: Path, on_warning: WarningSink | None = None) -> "EpubParser":
        return cls(epub_path.read_bytes(), on_warning=on_warning)

    def parse(self) -> ParsedEpub:
        """Parse the EPUB and return complete structure."""
        diagnostics = Diagnostics(self.on_warning)

        with Archive.open(self.data) as archive:
            package_path = locate_package_document(archive)
            package_doc = self._read_package(archive, package_path)
            base_path = directory_of(package_path)

            metadata, manifest, spine = parse_package(package_doc, base_path, diagnostics)
            nav_points = self._get_nav_points(archive, manifest, spine, diagnostics)
            cover_path = find_cover(package_doc, manifest)

            return assemble(
                archive,
                metadata=metadata,
                manifest=manifest,
                spine=spine,
                nav_points=nav_points,
                cover_path=cover_path,
                base_path=base_path,
                diagnostics=diagnostics,
            )

    def _read_package(self, archive: Archive, package_path: str) -> MarkupDocument:
        try:
            opf_content = archive.read_bytes(package_path)
        except ArchiveReadError as e:
            raise MissingPackageError(
                f"Invalid EPUB: unreadable OPF file at {package_path}: {e.message}",
                path=package_path,
            ) from e
        if opf_content is None:
            raise MissingPackageError(
                f"Invalid EPUB: Missing OPF file at {package_path}", path=package_path
            )
        return MarkupDocument.parse(opf_content, MarkupMode.XML)

    def _get_nav_points(
        self,
        archive: Archive,
        manifest: dict[str, ManifestItem],
        spine: Spine,
        diagnostics: Diagnostics,
    ) -> list[NavPoint]:
        """Navigation forest from the NCX named by the spine, if any."""
        if not spine.toc:
            return []

        toc_item = manifest.get(spine.toc)
        if toc_item is None:
            diagnostics.warn(f"Spine toc {spine.toc!r} is not in the manifest")
            return []

        try:
            toc_content = archive.read_bytes(toc_item.href)
        except ArchiveReadError as e:
            diagnostics.warn(f"Error reading navigation document {toc_item.href}: {e.message}")
            return []
        if toc_content is None:
            diagnostics.warn(f"Navigation document {toc_item.href} is missing from the archive")
            return []

        return parse_nav(MarkupDocument.parse(toc_content, MarkupMode.XML), diagnostics)


def parse_epub(data: bytes, on_warning: WarningSink | None = None) -> ParsedEpub:
    """Parse raw EPUB bytes into a ``ParsedEpub``."""
    return EpubParser(data, on_warning=on_warning).parse()

"""Data models for a parsed EPUB package."""

from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict, Field

IMAGE_MEDIA_PREFIX = "image/"
MARKUP_MEDIA_TYPES = ("application/xhtml+xml", "text/html")


def is_image_type(media_type: str) -> bool:
    return media_type.startswith(IMAGE_MEDIA_PREFIX)


def is_markup_type(media_type: str) -> bool:
    return media_type in MARKUP_MEDIA_TYPES


class BookMetadata(BaseModel):
    """Descriptive metadata from the package document. Every field is optional."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    creator: str | None = None
    publisher: str | None = None
    language: str | None = None
    identifier: str | None = None
    description: str | None = None
    rights: str | None = None
    published: str | None = None
    modified: str | None = None


class ManifestItem(BaseModel):
    """Single manifest resource; ``href`` is already archive-relative."""

    model_config = ConfigDict(frozen=True)

    id: str
    href: str
    media_type: str

    @property
    def is_image(self) -> bool:
        return is_image_type(self.media_type)

    @property
    def is_markup(self) -> bool:
        return is_markup_type(self.media_type)

    @property
    def file_name(self) -> str:
        return self.href.rsplit("/", 1)[-1]


class Spine(BaseModel):
    """Reading order over manifest ids."""

    model_config = ConfigDict(frozen=True)

    items: tuple[str, ...] = ()
    toc: str = ""  # manifest id of the navigation document


class NavPoint(BaseModel):
    """Single entry in the navigation tree."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    href: str
    order: int = 0
    children: tuple["NavPoint", ...] = ()


class ParsedEpub(BaseModel):
    """Complete parsed EPUB structure.

    Fields cannot be reassigned and sequences are tuples. The ``manifest``,
    ``content`` and ``resources`` mappings are plain dicts shared with every
    holder of the model; treat them as read-only.
    """

    model_config = ConfigDict(frozen=True)

    metadata: BookMetadata = Field(default_factory=BookMetadata)
    spine: Spine = Field(default_factory=Spine)
    manifest: dict[str, ManifestItem] = Field(default_factory=dict)
    nav_points: tuple[NavPoint, ...] = ()
    cover_path: str | None = None
    cover_data: bytes | None = None
    content: dict[str, str] = Field(default_factory=dict)  # manifest id -> markup
    resources: dict[str, bytes] = Field(default_factory=dict)  # path and file name -> bytes
    base_path: str = ""  # directory of the package document
    warnings: tuple[str, ...] = ()

    def spine_items(self) -> list[ManifestItem]:
        """Manifest items in reading order, skipping idrefs the manifest lacks."""
        return [self.manifest[i] for i in self.spine.items if i in self.manifest]

    def chapter(self, item_id: str) -> str | None:
        return self.content.get(item_id)

    def flat_toc(self) -> list[tuple[int, NavPoint]]:
        """Depth-first ``(level, nav_point)`` pairs."""
        flat: list[tuple[int, NavPoint]] = []

        def walk(points: tuple[NavPoint, ...], level: int) -> None:
            for point in points:
                flat.append((level, point))
                walk(point.children, level + 1)

        walk(self.nav_points, 0)
        return flat

    def find_resource(self, reference: str) -> str | None:
        """Find the ``resources`` key for an image reference taken from markup.

        Tries the reference as-is, its file name, the reference with ``../``
        removed and its URL-decoded form, then any key ending in the file name.
        """
        name = reference.rsplit("/", 1)[-1]
        variations = [
            reference,
            name,
            reference.replace("../", ""),
            unquote(reference),
        ]
        for variation in variations:
            if variation and variation in self.resources:
                return variation

        if name:
            for key in self.resources:
                if key.endswith(name):
                    return key
        return None


_EXTENSION_MEDIA_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".css": "text/css",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
}


def guess_media_type(path: str) -> str:
    """Media type from a file extension, for resources looked up by file name."""
    name = path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    ext = name[dot:].lower() if dot != -1 else ""
    return _EXTENSION_MEDIA_TYPES.get(ext, "application/octet-stream")

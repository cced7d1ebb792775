"""Namespace-insensitive querying over XML and HTML documents."""

import logging
import warnings
from enum import Enum

from bs4 import BeautifulSoup, Tag, XMLParsedAsHTMLWarning
from bs4.builder import ParserRejectedMarkup

# XHTML chapters are sometimes retried with the HTML builder
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

log = logging.getLogger(__name__)


class MarkupMode(str, Enum):
    """Parser used to build the document tree."""

    XML = "xml"
    HTML = "html"


_BUILDERS = {
    MarkupMode.XML: "lxml-xml",
    MarkupMode.HTML: "lxml",
}


def local_name(name: str | None) -> str:
    """Strip a namespace prefix from a tag name: ``dc:title`` -> ``title``."""
    if not name:
        return ""
    return name.rsplit(":", 1)[-1]


def _name_matcher(name: str, attrs: dict[str, str] | None):
    wanted = name.lower()

    def matches(tag: Tag) -> bool:
        if local_name(tag.name).lower() != wanted:
            return False
        if attrs:
            for key, value in attrs.items():
                if get_attr(tag, key) != value:
                    return False
        return True

    return matches


def find_first(node: Tag, name: str, attrs: dict[str, str] | None = None) -> Tag | None:
    """First descendant whose local name is ``name`` (and whose attributes match)."""
    return node.find(_name_matcher(name, attrs))


def find_all(node: Tag, name: str, attrs: dict[str, str] | None = None) -> list[Tag]:
    """All descendants whose local name is ``name``, in document order."""
    return list(node.find_all(_name_matcher(name, attrs)))


def child_elements(node: Tag, name: str) -> list[Tag]:
    """Immediate children whose local name is ``name``."""
    return list(node.find_all(_name_matcher(name, None), recursive=False))


def get_attr(tag: Tag, name: str) -> str | None:
    """Read an attribute as a string; multi-valued attributes are space-joined."""
    value = tag.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return value


def text_of(tag: Tag | None) -> str | None:
    """Whitespace-stripped text content, or ``None`` when empty."""
    if tag is None:
        return None
    text = tag.get_text().strip()
    return text or None


def add_class(tag: Tag, class_name: str) -> None:
    """Append a class to an element, keeping existing ones."""
    current = tag.get("class")
    if current is None:
        classes = []
    elif isinstance(current, list):
        classes = list(current)
    else:
        classes = current.split()
    if class_name not in classes:
        classes.append(class_name)
    tag["class"] = " ".join(classes)


class MarkupDocument:
    """A parsed document tree.

    Parsing never raises: the lxml builders recover from malformed input,
    and markup rejected outright becomes an empty document so callers see
    ordinary "element not found" results.
    """

    def __init__(self, soup: BeautifulSoup):
        self.soup = soup

    @classmethod
    def parse(cls, text: str | bytes, mode: MarkupMode = MarkupMode.XML) -> "MarkupDocument":
        """Build a tree from text or raw bytes.

        Bytes are decoded from their byte order mark or declared encoding
        (XML declaration, or meta charset in HTML mode).
        """
        builder = _BUILDERS[mode]
        try:
            soup = BeautifulSoup(text, builder)
        except (ParserRejectedMarkup, ValueError) as e:
            log.warning(f"Unparsable {mode.value} markup, using empty document: {e}")
            soup = BeautifulSoup("", builder)
        return cls(soup)

    @property
    def root(self) -> Tag | None:
        """Document element, or ``None`` for an empty document."""
        return self.soup.find(True, recursive=False)

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def find(self, name: str, attrs: dict[str, str] | None = None) -> Tag | None:
        return find_first(self.soup, name, attrs)

    def find_all(self, name: str, attrs: dict[str, str] | None = None) -> list[Tag]:
        return find_all(self.soup, name, attrs)

    def serialize(self) -> str:
        return str(self.soup)

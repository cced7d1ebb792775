"""Tests for the data models."""

import pytest
from pydantic import ValidationError

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


def _book(**overrides) -> ParsedEpub:
    fields = dict(
        manifest={
            "c1": ManifestItem(id="c1", href="OEBPS/c1.xhtml", media_type="application/xhtml+xml"),
            "c2": ManifestItem(id="c2", href="OEBPS/c2.xhtml", media_type="application/xhtml+xml"),
        },
        spine=Spine(items=["c2", "gone", "c1"]),
        content={"c1": "<p>one</p>"},
        resources={
            "OEBPS/images/fig 1.png": b"F",
            "fig 1.png": b"F",
            "OEBPS/images/deep/pic.jpg": b"P",
        },
    )
    fields.update(overrides)
    return ParsedEpub(**fields)


class TestMediaTypes:
    """Tests for media type helpers."""

    def test_image_types(self):
        assert is_image_type("image/png")
        assert is_image_type("image/svg+xml")
        assert not is_image_type("text/css")

    def test_markup_types(self):
        assert is_markup_type("application/xhtml+xml")
        assert is_markup_type("text/html")
        assert not is_markup_type("application/x-dtbncx+xml")

    def test_manifest_item_properties(self):
        item = ManifestItem(id="i", href="OEBPS/img/a.png", media_type="image/png")
        assert item.is_image
        assert not item.is_markup
        assert item.file_name == "a.png"

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("a/b/c.JPG", "image/jpeg"),
            ("x.svg", "image/svg+xml"),
            ("style.css", "text/css"),
            ("font.woff2", "font/woff2"),
            ("noext", "application/octet-stream"),
        ],
    )
    def test_guess_media_type(self, path, expected):
        assert guess_media_type(path) == expected


class TestImmutability:
    """Models are frozen once built."""

    def test_metadata_frozen(self):
        metadata = BookMetadata(title="T")
        with pytest.raises(ValidationError):
            metadata.title = "Other"

    def test_parsed_epub_frozen(self):
        with pytest.raises(ValidationError):
            _book().cover_path = "x.jpg"

    def test_sequences_are_tuples(self):
        book = _book(
            nav_points=[NavPoint(id="n", label="N", href="n.xhtml", children=[])],
            warnings=["first"],
        )
        assert book.spine.items == ("c2", "gone", "c1")
        assert isinstance(book.nav_points, tuple)
        assert book.nav_points[0].children == ()
        with pytest.raises(AttributeError):
            book.warnings.append("second")

    def test_metadata_all_optional(self):
        metadata = BookMetadata()
        assert metadata.title is None
        assert metadata.modified is None


class TestParsedEpubHelpers:
    """Tests for ParsedEpub convenience reads."""

    def test_spine_items_skips_dangling(self):
        assert [item.id for item in _book().spine_items()] == ["c2", "c1"]

    def test_chapter(self):
        book = _book()
        assert book.chapter("c1") == "<p>one</p>"
        assert book.chapter("c2") is None

    def test_flat_toc(self):
        toc = [
            NavPoint(
                id="a",
                label="A",
                href="a.xhtml",
                children=[NavPoint(id="a1", label="A1", href="a.xhtml#1")],
            ),
            NavPoint(id="b", label="B", href="b.xhtml"),
        ]
        flat = _book(nav_points=toc).flat_toc()
        assert [(level, p.id) for level, p in flat] == [(0, "a"), (1, "a1"), (0, "b")]

    def test_find_resource_exact(self):
        assert _book().find_resource("OEBPS/images/deep/pic.jpg") == "OEBPS/images/deep/pic.jpg"

    def test_find_resource_by_file_name(self):
        assert _book().find_resource("../images/fig 1.png") == "fig 1.png"

    def test_find_resource_url_decoded(self):
        assert _book().find_resource("fig%201.png") == "fig 1.png"

    def test_find_resource_suffix_match(self):
        assert _book().find_resource("../deep/pic.jpg") == "OEBPS/images/deep/pic.jpg"

    def test_find_resource_missing(self):
        assert _book().find_resource("../images/none.png") is None

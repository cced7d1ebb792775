"""Shared fixtures: EPUB archives built in memory."""

import io
import struct
import zipfile
from typing import Callable

import pytest

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{opf_path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

SAMPLE_OPF = """<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="2.0" unique-identifier="bookid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:opf="http://www.idpf.org/2007/opf">
    <dc:title>Sample Book</dc:title>
    <dc:creator opf:role="aut">Jane Doe</dc:creator>
    <dc:language>en</dc:language>
    <dc:identifier id="bookid">urn:uuid:1234</dc:identifier>
    <dc:publisher>Sample Press</dc:publisher>
    <dc:date>2020-05-01</dc:date>
    <meta name="cover" content="cover-img"/>
    <meta property="dcterms:modified">2021-01-02T03:04:05Z</meta>
  </metadata>
  <manifest>
    <item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>
    <item id="ch1" href="text/ch1.xhtml" media-type="application/xhtml+xml"/>
    <item id="ch2" href="text/ch2.xhtml" media-type="application/xhtml+xml"/>
    <item id="css" href="styles/main.css" media-type="text/css"/>
    <item id="cover-img" href="images/cover.jpg" media-type="image/jpeg"/>
    <item id="fig1" href="images/fig1.png" media-type="image/png"/>
  </manifest>
  <spine toc="ncx">
    <itemref idref="ch1"/>
    <itemref idref="ch2"/>
  </spine>
</package>
"""

SAMPLE_NCX = """<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <head/>
  <docTitle><text>Sample Book</text></docTitle>
  <navMap>
    <navPoint id="np-ch2" playOrder="4">
      <navLabel><text>Chapter Two</text></navLabel>
      <content src="text/ch2.xhtml"/>
    </navPoint>
    <navPoint id="np-ch1" playOrder="1">
      <navLabel><text>Chapter One</text></navLabel>
      <content src="text/ch1.xhtml"/>
      <navPoint id="np-ch1-b" playOrder="3">
        <navLabel><text>Section B</text></navLabel>
        <content src="text/ch1.xhtml#b"/>
      </navPoint>
      <navPoint id="np-ch1-a" playOrder="2">
        <navLabel><text>Section A</text></navLabel>
        <content src="text/ch1.xhtml#a"/>
      </navPoint>
    </navPoint>
  </navMap>
</ncx>
"""

CHAPTER_ONE = """<?xml version="1.0" encoding="utf-8"?>
<html xmlns="http://www.w3.org/1999/xhtml">
<head>
  <title>Chapter One</title>
  <link rel="stylesheet" type="text/css" href="../styles/main.css"/>
</head>
<body>
  <h1 id="a">Chapter One</h1>
  <p><img src="../images/fig1.png" alt="Figure 1"/></p>
  <p id="b"><img src="https://example.com/remote.png" alt="Remote"/></p>
</body>
</html>
"""

CHAPTER_TWO = """<?xml version="1.0" encoding="utf-8"?>
<html xmlns="http://www.w3.org/1999/xhtml">
<head><title>Chapter Two</title></head>
<body><h1>Chapter Two</h1><p>The end.</p></body>
</html>
"""

COVER_BYTES = b"\xff\xd8\xff\xe0cover-jpeg"
FIG1_BYTES = b"\x89PNG\r\n\x1a\nfigure-one"

MINIMAL_OPF = """<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/"/>
  <manifest>
    <item id="only" href="only.xhtml" media-type="application/xhtml+xml"/>
  </manifest>
  <spine>
    <itemref idref="only"/>
  </spine>
</package>
"""

MINIMAL_CHAPTER = """<?xml version="1.0" encoding="utf-8"?>
<html xmlns="http://www.w3.org/1999/xhtml"><head><title>Only</title></head>
<body><p>Hello.</p></body></html>
"""


def build_epub(
    files: dict[str, str | bytes],
    opf_path: str = "OEBPS/content.opf",
    container: bool = True,
    stored: bool = False,
) -> bytes:
    """Zip ``files`` into an EPUB container."""
    compression = zipfile.ZIP_STORED if stored else zipfile.ZIP_DEFLATED
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression) as zf:
        zf.writestr("mimetype", "application/epub+zip", compress_type=zipfile.ZIP_STORED)
        if container:
            zf.writestr("META-INF/container.xml", CONTAINER_XML.format(opf_path=opf_path))
        for name, data in files.items():
            zf.writestr(name, data)
    return buffer.getvalue()


def corrupt_stored_entry(data: bytes, name: str) -> bytes:
    """Flip the first payload byte of a stored entry so its CRC no longer matches."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        info = zf.getinfo(name)
    raw = bytearray(data)
    offset = info.header_offset
    name_len, extra_len = struct.unpack("<HH", raw[offset + 26 : offset + 30])
    start = offset + 30 + name_len + extra_len
    raw[start] ^= 0xFF
    return bytes(raw)


@pytest.fixture
def make_epub() -> Callable[..., bytes]:
    """Factory building EPUB bytes from a path -> content mapping."""
    return build_epub


@pytest.fixture
def corrupt_entry() -> Callable[[bytes, str], bytes]:
    return corrupt_stored_entry


@pytest.fixture
def sample_files() -> dict[str, str | bytes]:
    """Files of a small two-chapter book with a cover and an NCX."""
    return {
        "OEBPS/content.opf": SAMPLE_OPF,
        "OEBPS/toc.ncx": SAMPLE_NCX,
        "OEBPS/text/ch1.xhtml": CHAPTER_ONE,
        "OEBPS/text/ch2.xhtml": CHAPTER_TWO,
        "OEBPS/styles/main.css": "body { margin: 0; }",
        "OEBPS/images/cover.jpg": COVER_BYTES,
        "OEBPS/images/fig1.png": FIG1_BYTES,
    }


@pytest.fixture
def sample_epub(sample_files) -> bytes:
    return build_epub(sample_files)


@pytest.fixture
def minimal_epub() -> bytes:
    """One manifest item, one spine entry, no navigation, no cover."""
    return build_epub(
        {"content.opf": MINIMAL_OPF, "only.xhtml": MINIMAL_CHAPTER},
        opf_path="content.opf",
    )


@pytest.fixture
def sample_epub_path(tmp_path, sample_epub):
    path = tmp_path / "sample.epub"
    path.write_bytes(sample_epub)
    return path

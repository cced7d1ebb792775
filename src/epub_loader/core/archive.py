"""Zip container access by internal path."""

import io
import logging
import zipfile
import zlib

from bs4 import UnicodeDammit

from epub_loader.core.errors import ArchiveReadError, CorruptArchiveError

log = logging.getLogger(__name__)


class Archive:
    """Read-only view over the entries of an in-memory zip archive.

    Lookups are by exact internal path. A missing entry yields ``None`` so
    callers can fall back; an entry that exists but cannot be decompressed
    raises ``ArchiveReadError``.
    """

    def __init__(self, zf: zipfile.ZipFile):
        self._zf = zf
        self._names = set(zf.namelist())

    @classmethod
    def open(cls, data: bytes) -> "Archive":
        """Open an archive from raw bytes."""
        try:
            zf = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as e:
            raise CorruptArchiveError(f"Invalid zip archive: {e}") from e
        log.debug(f"Opened archive with {len(zf.namelist())} entries")
        return cls(zf)

    def names(self) -> list[str]:
        """List entry paths in archive order."""
        return self._zf.namelist()

    def read_bytes(self, path: str) -> bytes | None:
        """Decompress an entry to raw bytes, or ``None`` if absent."""
        if path not in self._names:
            return None
        try:
            return self._zf.read(path)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError, OSError) as e:
            raise ArchiveReadError(f"Could not decompress {path}: {e}", path=path) from e

    def read_text(self, path: str) -> str | None:
        """Decompress an entry and decode it, or ``None`` if absent.

        Tries the byte order mark, then UTF-8, then the encoding named in the
        XML declaration.
        """
        raw = self.read_bytes(path)
        if raw is None:
            return None
        dammit = UnicodeDammit(raw, user_encodings=["utf-8"], is_html=False)
        if dammit.unicode_markup is None:
            raise ArchiveReadError(f"Could not decode {path}", path=path)
        return dammit.unicode_markup

    def close(self) -> None:
        self._zf.close()

    def __enter__(self) -> "Archive":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

"""Exceptions raised while reading EPUB packages."""


class EpubError(Exception):
    """Fatal error while reading an EPUB package."""

    error_type = "EPUB_ERROR"

    def __init__(self, message: str, path: str | None = None):
        self.message = message
        self.path = path
        super().__init__(f"{self.error_type}: {message}")


class CorruptArchiveError(EpubError):
    """The input bytes are not a readable zip container."""

    error_type = "CORRUPT_ARCHIVE"


class MissingContainerError(EpubError):
    """META-INF/container.xml is absent."""

    error_type = "MISSING_CONTAINER"


class MissingRootfileError(EpubError):
    """The container descriptor names no package document."""

    error_type = "MISSING_ROOTFILE"


class MissingPackageError(EpubError):
    """The package document is absent or unreadable."""

    error_type = "MISSING_PACKAGE"


class ArchiveReadError(EpubError):
    """An archive entry exists but could not be decompressed or decoded."""

    error_type = "READ_FAILED"

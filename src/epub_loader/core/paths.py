"""Archive-relative path resolution."""


def directory_of(path: str) -> str:
    """Return the directory part of an archive path, keeping the trailing slash.

    ``"OEBPS/content.opf"`` -> ``"OEBPS/"``; a bare file name yields ``""``.
    """
    return path[: path.rfind("/") + 1]


def resolve_path(reference: str, base_dir: str) -> str:
    """Resolve ``reference`` against ``base_dir`` into a normalized archive path.

    A leading slash marks an archive-absolute reference: the slash is stripped
    and the base is ignored. ``base_dir`` is a directory when it ends with
    ``/``; otherwise its last segment is treated as a file name and dropped.
    ``..`` above the archive root is a no-op.
    """
    if reference.startswith("/"):
        return reference[1:]

    stack = [part for part in base_dir.split("/") if part]
    if stack and not base_dir.endswith("/"):
        stack.pop()

    for part in reference.split("/"):
        if part == "..":
            if stack:
                stack.pop()
        elif part and part != ".":
            stack.append(part)

    return "/".join(stack)


def file_name(path: str) -> str:
    """Return the last segment of an archive path."""
    return path.rsplit("/", 1)[-1]

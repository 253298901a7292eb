"""File handler module: encoding-aware reads and directory listings.

The sync pipeline only ever reads from the content tree; nothing here
writes to disk.
"""

from pathlib import Path

from charset_normalizer import from_bytes


def read_file_with_encoding(path: Path) -> tuple[str, str]:
    """Read a file with automatic encoding detection.

    Reads raw bytes first, then uses charset-normalizer to detect encoding.
    Defaults to UTF-8 for empty files or when detection fails.  A UTF-8
    byte order mark is dropped.

    Args:
        path: Path to the file to read.

    Returns:
        Tuple of (content_string, detected_encoding).

    Raises:
        OSError: If the file cannot be read.
    """
    raw = path.read_bytes()
    if not raw:
        return ("", "utf-8")

    try:
        return (raw.decode("utf-8").lstrip("\ufeff"), "utf-8")
    except UnicodeDecodeError:
        pass

    result = from_bytes(raw).best()
    if result is None:
        return (raw.decode("utf-8", errors="replace"), "utf-8")
    return (str(result), result.encoding)


def list_files(directory: Path, extension: str) -> list[Path]:
    """Return regular files in *directory* (non-recursive) with *extension*.

    Sorted by name so discovery order is stable across platforms.

    Raises:
        OSError: If the directory cannot be listed.
    """
    return sorted(
        entry
        for entry in directory.iterdir()
        if entry.name.endswith(extension) and entry.is_file()
    )


def list_subdirectories(directory: Path) -> list[Path]:
    """Return immediate subdirectories of *directory*, sorted by name.

    Raises:
        OSError: If the directory cannot be listed.
    """
    return sorted(entry for entry in directory.iterdir() if entry.is_dir())

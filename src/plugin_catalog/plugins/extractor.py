"""
Manifest extraction from plugin archives.

Walks the entries of a zip archive and yields the plugin manifests laid out
as ``<anything>/plugins/<plugin-dir>/<file>.yaml``, together with the
optional ``logo.svg`` that sits next to each manifest.
"""

import logging
import posixpath
import zipfile
import zlib
from dataclasses import dataclass
from typing import Iterator, Optional

from plugin_catalog.utils.globbing import match_path, validate_pattern

logger = logging.getLogger(__name__)

MANIFEST_PATTERN = "**/plugins/*/*.yaml"
LOGO_FILENAME = "logo.svg"

# Errors zipfile raises while opening or decompressing a single member
ENTRY_READ_ERRORS = (OSError, zipfile.BadZipFile, zlib.error)


@dataclass
class ManifestEntry:
    """A manifest file read from the archive."""

    name: str  # Path of the manifest within the archive
    content: bytes
    logo: Optional[bytes] = None


def _read_logo(archive: zipfile.ZipFile, entry_name: str) -> Optional[bytes]:
    """Read the logo next to a manifest. A missing logo is not an error."""
    logo_name = posixpath.join(posixpath.dirname(entry_name), LOGO_FILENAME)
    try:
        logo_file = archive.open(logo_name)
    except KeyError:
        return None
    except ENTRY_READ_ERRORS as e:
        logger.warning(f"Could not open logo file for {entry_name}: {e}")
        return None

    with logo_file:
        try:
            return logo_file.read()
        except ENTRY_READ_ERRORS as e:
            logger.warning(f"Could not copy logo file for {entry_name}: {e}")
            return None


def iter_manifests(
    archive: zipfile.ZipFile, pattern: str = MANIFEST_PATTERN
) -> Iterator[ManifestEntry]:
    """
    Yield every manifest in the archive, in archive order.

    Entries that cannot be opened or read are logged and skipped.

    Args:
        archive: Open zip archive
        pattern: Glob that manifest entry names must match

    Yields:
        ManifestEntry for each readable manifest

    Raises:
        InvalidPatternError: If the pattern is malformed (raised on first
                             iteration, before any entry is read)
    """
    validate_pattern(pattern)

    for info in archive.infolist():
        if info.is_dir() or not match_path(pattern, info.filename):
            continue

        try:
            with archive.open(info) as entry_file:
                content = entry_file.read()
        except ENTRY_READ_ERRORS as e:
            logger.warning(f"Could not read file {info.filename}: {e}")
            continue

        yield ManifestEntry(
            name=info.filename,
            content=content,
            logo=_read_logo(archive, info.filename),
        )

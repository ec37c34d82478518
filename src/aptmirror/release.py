"""Release manifest parsing."""

import logging
from collections.abc import Iterator

from debian import deb822

from aptmirror.constants import HASH_SECTION
from aptmirror.errors import ManifestError
from aptmirror.models import HashIndexEntry, ReleaseManifest

logger = logging.getLogger(__name__)


def _is_section_header(line: str, section: str) -> bool:
    return line.rstrip().removesuffix(":") == section


def iter_hash_entries(manifest_text: str, section: str = HASH_SECTION) -> Iterator[HashIndexEntry]:
    """Yield the rows of a Release file hash section in file order.

    Capture starts at the first line equal to ``section`` (trailing colon
    optional) and ends at the first following line that is not indented.
    Later headers with the same name are ignored.

    Raises:
        ManifestError: the section is missing, or one of its rows is not
            ``<digest> <size> <path>``.
    """
    found = False
    for lineno, line in enumerate(manifest_text.splitlines(), start=1):
        if not found:
            found = _is_section_header(line, section)
            continue
        if not line.startswith(" "):
            # only the first occurrence of the section is honoured
            break

        cols = line.split()
        if len(cols) != 3:
            raise ManifestError(f"Malformed {section} row at line {lineno}: {line.strip()!r}")
        digest, size, path = cols
        try:
            size_val = int(size)
        except ValueError:
            raise ManifestError(f"Invalid size in {section} row at line {lineno}: {size!r}") from None
        yield HashIndexEntry(path=path, digest=digest, size=size_val)

    if not found:
        raise ManifestError(f"Release file has no {section} section")


def parse_hash_index(manifest_text: str, section: str = HASH_SECTION) -> dict[str, str]:
    """Parse the hash section of a Release file into a path -> digest mapping.

    Duplicate paths keep the last digest seen.
    """
    return {entry.path: entry.digest for entry in iter_hash_entries(manifest_text, section)}


def parse_release(manifest_text: str) -> ReleaseManifest:
    """Parse a Release file into a ReleaseManifest.

    The hash index is parsed strictly; the descriptive fields are best effort.
    """
    hash_index = parse_hash_index(manifest_text)
    logger.debug(f"Parsed {len(hash_index)} {HASH_SECTION} entries from Release file")

    release_data = deb822.Release(manifest_text)
    return ReleaseManifest(
        hash_index=hash_index,
        origin=release_data.get("Origin"),
        suite=release_data.get("Suite"),
        codename=release_data.get("Codename"),
        date=release_data.get("Date"),
        architectures=release_data.get("Architectures", "").split(),
        components=release_data.get("Components", "").split(),
    )

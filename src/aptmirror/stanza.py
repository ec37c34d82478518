"""Control stanza (deb822 paragraph) parsing for Packages indices."""

import logging
import re
from collections.abc import Iterable, Iterator

from debian import deb822

from aptmirror.errors import StanzaError
from aptmirror.models import PackageRecord, PackageTable

logger = logging.getLogger(__name__)

# control field name -> PackageRecord attribute; anything else is ignored
RECOGNIZED_FIELDS = {
    "Package": "name",
    "Architecture": "architecture",
    "Version": "version",
    "Depends": "depends",
    "Suggests": "suggests",
    "Filename": "filename",
    "Size": "size",
    "MD5sum": "md5sum",
    "SHA1": "sha1",
    "SHA256": "sha256",
}

_FIELD_LINE = re.compile(r"^[^\s:]+:")


def _check_line(line: str, lineno: int) -> None:
    if line[0] in " \t" or _FIELD_LINE.match(line):
        return
    raise StanzaError(f"Invalid control line {lineno}: {line!r}")


def build_record(lines: list[str], start: int = 1) -> PackageRecord:
    """Build a PackageRecord from the lines of one stanza.

    Args:
        lines: Non-blank lines of the stanza, without line terminators
        start: Line number of the first line, for error messages

    Raises:
        StanzaError: a line is neither a field nor a continuation, ``Size`` is
            not an unsigned integer, or the stanza has no ``Package`` field.
    """
    for offset, line in enumerate(lines):
        _check_line(line, start + offset)

    paragraph = deb822.Deb822(lines)
    values = {}
    for field, attr in RECOGNIZED_FIELDS.items():
        value = paragraph.get(field)
        if value is not None:
            values[attr] = value

    if "size" in values:
        size = values["size"].strip()
        if not (size.isascii() and size.isdigit()):
            raise StanzaError(f"Invalid Size {size!r} in stanza at line {start}")
        values["size"] = int(size)

    if not values.get("name"):
        raise StanzaError(f"Stanza at line {start} has no Package field")
    return PackageRecord(**values)


def iter_stanzas(index_text: str, strict: bool = False) -> Iterator[PackageRecord]:
    """Yield package records from Packages index text in source order.

    Stanzas are separated by blank lines. A trailing stanza with no blank line
    after it is still emitted at end of input.

    Args:
        index_text: Decompressed Packages index
        strict: Raise on the first invalid stanza instead of logging and skipping it
    """
    pending: list[str] | None = None  # None while idle between stanzas
    start = 0

    def finish() -> Iterator[PackageRecord]:
        try:
            yield build_record(pending, start)
        except StanzaError as e:
            if strict:
                raise
            logger.warning(f"Skipping stanza: {e}")

    for lineno, line in enumerate(index_text.splitlines(), start=1):
        if line.strip() == "":
            if pending is not None:
                yield from finish()
                pending = None
            continue
        if pending is None:
            pending, start = [], lineno
        pending.append(line)

    if pending is not None:
        yield from finish()


def parse_stanzas(index_text: str, strict: bool = False) -> list[PackageRecord]:
    """Parse Packages index text into a list of records, duplicates included."""
    return list(iter_stanzas(index_text, strict=strict))


def merge_records(records: Iterable[PackageRecord], table: PackageTable | None = None) -> PackageTable:
    """Merge records into a table keyed by package name; later records win."""
    if table is None:
        table = {}
    for record in records:
        if record.name in table:
            logger.debug(f"Replacing {record.name} {table[record.name].version} with {record.version}")
        table[record.name] = record
    return table

"""aptmirror: minimal APT archive mirror and package index reader."""

from aptmirror.compression import decode, encode
from aptmirror.errors import (
    AptMirrorError,
    BadStreamError,
    DecodeError,
    EncodingError,
    ManifestError,
    ReleaseMissingError,
    StanzaError,
    TransportError,
)
from aptmirror.models import CompressionVariant, FetchResponse, PackageRecord, PackageTable, ReleaseManifest
from aptmirror.release import parse_hash_index, parse_release
from aptmirror.resolver import resolve
from aptmirror.stanza import merge_records, parse_stanzas

__version__ = "0.1.0"

__all__ = [
    "AptMirrorError",
    "BadStreamError",
    "CompressionVariant",
    "DecodeError",
    "EncodingError",
    "FetchResponse",
    "ManifestError",
    "PackageRecord",
    "PackageTable",
    "ReleaseManifest",
    "ReleaseMissingError",
    "StanzaError",
    "TransportError",
    "decode",
    "encode",
    "merge_records",
    "parse_hash_index",
    "parse_release",
    "parse_stanzas",
    "resolve",
]

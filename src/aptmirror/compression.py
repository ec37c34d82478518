"""Decode package index payloads published as Packages, Packages.gz or Packages.xz."""

import gzip
import lzma
import zlib

from aptmirror.errors import BadStreamError, EncodingError
from aptmirror.models import CompressionVariant


def _decompress(raw: bytes, variant: CompressionVariant) -> bytes:
    match variant:
        case CompressionVariant.IDENTITY:
            return raw
        case CompressionVariant.GZIP:
            try:
                return gzip.decompress(raw)
            except (OSError, EOFError, zlib.error) as e:
                raise BadStreamError(f"Corrupt gzip stream: {e}") from e
        case CompressionVariant.XZ:
            try:
                return lzma.decompress(raw, format=lzma.FORMAT_XZ)
            except (lzma.LZMAError, EOFError) as e:
                raise BadStreamError(f"Corrupt xz stream: {e}") from e
        case _:
            raise ValueError(f"Unknown or unsupported compression variant: {variant}")


def decode(raw: bytes, variant: CompressionVariant) -> str:
    """Fully decompress ``raw`` and decode it as UTF-8 text.

    Raises:
        BadStreamError: the compressed stream is corrupt or truncated.
        EncodingError: the decompressed bytes are not valid UTF-8.
    """
    data = _decompress(raw, variant)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"Index is not valid UTF-8 ({variant.value}): {e}") from e


def encode(text: str, variant: CompressionVariant) -> bytes:
    """Inverse of :func:`decode`."""
    data = text.encode("utf-8")
    match variant:
        case CompressionVariant.IDENTITY:
            return data
        case CompressionVariant.GZIP:
            return gzip.compress(data)
        case CompressionVariant.XZ:
            return lzma.compress(data, format=lzma.FORMAT_XZ)
        case _:
            raise ValueError(f"Unknown or unsupported compression variant: {variant}")

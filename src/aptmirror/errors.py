"""Exception types raised while mirroring an APT archive."""


class AptMirrorError(Exception):
    """Base class for all aptmirror errors."""


class TransportError(AptMirrorError):
    """A request could not be completed (connection, timeout, IO)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class DecodeError(AptMirrorError):
    """A package index could not be turned back into text."""


class BadStreamError(DecodeError):
    """The compressed stream is corrupt or truncated."""


class EncodingError(DecodeError):
    """The decompressed payload is not valid UTF-8."""


class ManifestError(AptMirrorError, ValueError):
    """The release manifest is missing its hash index or has a malformed row."""


class ReleaseMissingError(ManifestError):
    """The Release file could not be downloaded at all."""


class StanzaError(AptMirrorError, ValueError):
    """A control stanza has an invalid line or field value."""

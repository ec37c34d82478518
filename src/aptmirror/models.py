"""Data models for release manifests, package indices and package records."""

from enum import Enum
from typing import NamedTuple

from debian.deb822 import PkgRelation
from pydantic import BaseModel, ConfigDict, Field


class CompressionVariant(str, Enum):
    """Encodings a Packages index may be published in.

    Ordering between variants comes from the caller's preference list,
    never from the enum itself.
    """

    IDENTITY = "identity"
    GZIP = "gzip"
    XZ = "xz"

    @property
    def extension(self) -> str:
        """File extension appended to ``Packages`` for this variant."""
        return _EXTENSIONS[self]

    @classmethod
    def from_extension(cls, extension: str) -> "CompressionVariant":
        """Look up the variant for a file extension (``""``, ``".gz"`` or ``".xz"``)."""
        for variant, ext in _EXTENSIONS.items():
            if ext == extension:
                return variant
        raise ValueError(f"Unknown or unsupported index extension: {extension!r}")


_EXTENSIONS = {
    CompressionVariant.IDENTITY: "",
    CompressionVariant.GZIP: ".gz",
    CompressionVariant.XZ: ".xz",
}

DEFAULT_PREFERENCE = [CompressionVariant.IDENTITY, CompressionVariant.GZIP, CompressionVariant.XZ]


class HashIndexEntry(NamedTuple):
    path: str
    digest: str
    size: int


class ReleaseManifest(BaseModel):
    """Parsed Release file: the hash index plus a few informational fields."""

    model_config = ConfigDict(frozen=True)

    hash_index: dict[str, str] = Field(default_factory=dict)
    origin: str | None = None
    suite: str | None = None
    codename: str | None = None
    date: str | None = None
    architectures: list[str] = Field(default_factory=list)
    components: list[str] = Field(default_factory=list)

    def has(self, path: str) -> bool:
        """Whether the archive publishes ``path`` according to the hash index."""
        return path in self.hash_index


class PackageRecord(BaseModel):
    """A single binary package entry from a Packages index."""

    name: str = ""
    architecture: str = ""
    version: str = ""
    depends: str = ""
    suggests: str = ""
    filename: str = ""
    size: int = 0
    md5sum: str | None = None
    sha1: str | None = None
    sha256: str | None = None

    def dependency_names(self) -> list[str]:
        """Names of all packages mentioned in Depends, alternatives included."""
        if not self.depends.strip():
            return []
        names = []
        for alternatives in PkgRelation.parse_relations(self.depends):
            for relation in alternatives:
                if relation["name"] not in names:
                    names.append(relation["name"])
        return names


type PackageTable = dict[str, PackageRecord]


class FetchResponse(BaseModel):
    """Result of a completed HTTP request, whatever its status."""

    url: str
    status_code: int
    content: bytes = Field(default=b"", repr=False)
    last_modified: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def not_found(self) -> bool:
        return self.status_code == 404

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

"""Mirror run configuration."""

from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from aptmirror import constants
from aptmirror.models import CompressionVariant
from aptmirror.utils import split_tokens

type TokenList = Annotated[list[str], BeforeValidator(split_tokens)]
# " .gz .xz" keeps the leading empty (identity) extension
type ExtensionList = Annotated[list[str], BeforeValidator(lambda v: split_tokens(v, sep=" "))]


class MirrorConfig(BaseModel):
    """Settings for one mirror run.

    Components, architectures and extensions are opaque tokens used only to
    build index paths; they are not checked against the Release file.
    """

    archive_root: str = constants.ARCHIVE_ROOT
    os_id: str = constants.OS_ID
    distribution: str = constants.DISTRIBUTION
    components: TokenList = Field(default_factory=lambda: list(constants.DEFAULT_COMPONENTS))
    architectures: TokenList = Field(default_factory=lambda: list(constants.DEFAULT_ARCHITECTURES))
    extensions: ExtensionList = Field(default_factory=lambda: list(constants.DEFAULT_EXTENSIONS))
    user_agent: str = constants.USER_AGENT
    cache_root: Path = constants.CACHE_DIR
    timeout: float = Field(default=constants.REQUEST_TIMEOUT, gt=0)
    mirror_all_variants: bool = False
    concurrency: int = Field(default=1, ge=1)

    @field_validator("extensions")
    @classmethod
    def _check_extensions(cls, value: list[str]) -> list[str]:
        for ext in value:
            CompressionVariant.from_extension(ext)
        return value

    @property
    def preference(self) -> list[CompressionVariant]:
        """Compression variants in the order they should be tried."""
        return [CompressionVariant.from_extension(ext) for ext in self.extensions]

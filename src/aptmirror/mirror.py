"""A complete mirror run: release files, manifest, then package indices."""

import logging

from pydantic import BaseModel, ConfigDict

from aptmirror.config import MirrorConfig
from aptmirror.constants import RELEASE_FILES
from aptmirror.errors import ManifestError, ReleaseMissingError
from aptmirror.fetcher import CacheSink, Fetcher, FetchFn, dist_url
from aptmirror.models import FetchResponse, PackageRecord, PackageTable, ReleaseManifest
from aptmirror.release import parse_release
from aptmirror.resolver import fetch_indexed, persist, resolve

logger = logging.getLogger(__name__)


class SyncResult(BaseModel):
    """Outcome of a mirror run."""

    model_config = ConfigDict(frozen=True)

    manifest: ReleaseManifest
    tables: dict[str, PackageTable]

    def lookup(self, name: str, architecture: str | None = None) -> dict[str, PackageRecord]:
        """Find a package by name, returning architecture -> record."""
        return {
            arch: table[name]
            for arch, table in self.tables.items()
            if name in table and (architecture is None or arch == architecture)
        }


async def fetch_release_files(
    config: MirrorConfig,
    fetch: FetchFn,
    sink: CacheSink | None = None,
) -> dict[str, FetchResponse]:
    """Download InRelease, Release and Release.gpg, caching whichever succeed."""
    fetched = {}
    for name in RELEASE_FILES:
        response = await fetch_indexed(fetch, dist_url(config.archive_root, config.distribution, name), name)
        if response is None:
            logger.error(f"Failed to download {name}")
            continue
        if sink is not None:
            await persist(sink, name, response)
        fetched[name] = response
    return fetched


async def sync(config: MirrorConfig, fetch: FetchFn, sink: CacheSink | None = None) -> SyncResult:
    """Mirror the configured indices and return one package table per architecture.

    Raises:
        ReleaseMissingError: the Release file could not be downloaded
        ManifestError: the Release file is not UTF-8 or its MD5Sum index is malformed
    """
    fetched = await fetch_release_files(config, fetch, sink)
    if "Release" not in fetched:
        raise ReleaseMissingError(f"No Release file for {config.distribution} at {config.archive_root}")

    # TODO: verify the Release file against InRelease / Release.gpg
    try:
        release_text = fetched["Release"].content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ManifestError(f"Release file is not valid UTF-8: {e}") from e
    manifest = parse_release(release_text)
    logger.info(
        f"Release {manifest.codename or config.distribution} lists {len(manifest.hash_index)} indexed files"
    )

    tables = await resolve(
        fetch,
        manifest.hash_index,
        config.components,
        config.architectures,
        config.preference,
        dist_base=dist_url(config.archive_root, config.distribution),
        sink=sink,
        mirror_all_variants=config.mirror_all_variants,
        concurrency=config.concurrency,
    )
    return SyncResult(manifest=manifest, tables=tables)


async def run(config: MirrorConfig, cache: bool = True) -> SyncResult:
    """Run a sync with an HTTP fetcher and, optionally, the on-disk cache."""
    sink = CacheSink(config.cache_root, config.os_id, config.distribution) if cache else None
    async with Fetcher(user_agent=config.user_agent, timeout=config.timeout) as fetch:
        return await sync(config, fetch, sink)

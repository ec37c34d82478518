"""Select, fetch and parse Packages indices for each component and architecture."""

import asyncio
import logging
from collections.abc import Sequence

from aptmirror.compression import decode
from aptmirror.errors import DecodeError, TransportError
from aptmirror.fetcher import CacheSink, FetchFn
from aptmirror.models import DEFAULT_PREFERENCE, CompressionVariant, FetchResponse, PackageRecord, PackageTable
from aptmirror.stanza import merge_records, parse_stanzas

logger = logging.getLogger(__name__)


def packages_path(component: str, architecture: str, variant: CompressionVariant | None = None) -> str:
    """Path of a Packages index relative to the distribution directory.

    Examples:
        >>> packages_path("main", "amd64", CompressionVariant.GZIP)
        'main/binary-amd64/Packages.gz'
    """
    suffix = variant.extension if variant is not None else ""
    return f"{component}/binary-{architecture}/Packages{suffix}"


async def fetch_indexed(fetch: FetchFn, url: str, rel_path: str) -> FetchResponse | None:
    """Fetch a file, logging and swallowing transport errors and non-2xx responses."""
    try:
        response = await fetch(url)
    except TransportError as e:
        logger.warning(f"Failed to download {rel_path}: {e.reason}")
        return None

    if response.ok:
        logger.info(f"Downloaded {rel_path}")
        return response
    if response.not_found:
        logger.debug(f"File {rel_path} not found")
    else:
        logger.warning(f"Failed to download {rel_path} (HTTP {response.status_code}): {response.text[:500]}")
    return None


async def persist(sink: CacheSink, rel_path: str, response: FetchResponse) -> None:
    try:
        await sink.store(rel_path, response)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to cache {rel_path}: {e}")


def parse_index(raw: bytes, variant: CompressionVariant, rel_path: str) -> list[PackageRecord]:
    """Decode and parse one downloaded index; a corrupt index yields no records."""
    try:
        text = decode(raw, variant)
    except DecodeError as e:
        logger.error(f"Unable to decode {rel_path}: {e}")
        return []
    records = parse_stanzas(text)
    logger.debug(f"Parsed {len(records)} stanzas from {rel_path}")
    return records


async def resolve_pair(
    fetch: FetchFn,
    hash_index: dict[str, str],
    component: str,
    architecture: str,
    preference: Sequence[CompressionVariant] = DEFAULT_PREFERENCE,
    *,
    dist_base: str = "",
    sink: CacheSink | None = None,
    mirror_all_variants: bool = False,
) -> list[PackageRecord]:
    """Fetch and parse the preferred Packages variant for one component/architecture.

    Variants are tried in ``preference`` order, skipping any path the hash
    index does not list. The first variant that downloads is the only one
    parsed, even if it then fails to decode. With ``mirror_all_variants`` the
    remaining listed variants are still downloaded, but only to be cached.

    Returns:
        The parsed records in source order (possibly empty)
    """
    records: list[PackageRecord] = []
    parsed = False
    for variant in preference:
        rel_path = packages_path(component, architecture, variant)
        if rel_path not in hash_index:
            logger.debug(f"{rel_path} not listed in Release, skipping")
            continue

        url = f"{dist_base.rstrip('/')}/{rel_path}" if dist_base else rel_path
        response = await fetch_indexed(fetch, url, rel_path)
        if response is None:
            continue

        if sink is not None:
            await persist(sink, rel_path, response)
        if not parsed:
            parsed = True
            records = parse_index(response.content, variant, rel_path)
        if not mirror_all_variants:
            break

    if not parsed:
        logger.warning(f"No usable Packages index for {component}/{architecture}")
    return records


async def resolve(
    fetch: FetchFn,
    hash_index: dict[str, str],
    components: Sequence[str],
    architectures: Sequence[str],
    preference: Sequence[CompressionVariant] = DEFAULT_PREFERENCE,
    *,
    dist_base: str = "",
    sink: CacheSink | None = None,
    mirror_all_variants: bool = False,
    concurrency: int = 1,
) -> dict[str, PackageTable]:
    """Build one package table per architecture from the archive's Packages indices.

    Args:
        fetch: Fetch capability; called with ``<dist_base>/<rel_path>``, or the
            bare relative path when ``dist_base`` is empty
        hash_index: Release file index (path -> digest), used only to decide
            which paths exist
        components: Components to read, e.g. ``["main", "universe"]``
        architectures: Architectures to build tables for
        preference: Compression variants in the order they should be tried
        dist_base: URL of the ``dists/<distribution>`` directory
        sink: Where to cache downloaded indices, if anywhere
        mirror_all_variants: Also download (but not parse) less preferred variants
        concurrency: How many component/architecture pairs may be in flight at once

    Returns:
        Mapping of architecture to a table of package name -> record. When a
        name appears more than once, the last one in component order wins.
    """
    components = list(dict.fromkeys(components))
    semaphore = asyncio.Semaphore(concurrency)

    async def run(component: str, architecture: str) -> list[PackageRecord]:
        async with semaphore:
            return await resolve_pair(
                fetch,
                hash_index,
                component,
                architecture,
                preference,
                dist_base=dist_base,
                sink=sink,
                mirror_all_variants=mirror_all_variants,
            )

    tables: dict[str, PackageTable] = {}
    for architecture in dict.fromkeys(architectures):
        results = await asyncio.gather(*(run(component, architecture) for component in components))
        # merge at a single point, in component order, regardless of completion order
        table: PackageTable = {}
        for records in results:
            merge_records(records, table)
        logger.info(f"Loaded {len(table)} packages for {architecture}")
        tables[architecture] = table
    return tables

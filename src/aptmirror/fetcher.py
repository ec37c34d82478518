"""HTTP fetching and on-disk caching of archive files."""

import logging
from os import utime
from pathlib import Path
from typing import Protocol
from urllib.parse import urljoin

import aiofiles
import httpx

from aptmirror.constants import REQUEST_TIMEOUT, USER_AGENT
from aptmirror.errors import TransportError
from aptmirror.models import FetchResponse
from aptmirror.utils import try_parse_date

logger = logging.getLogger(__name__)


class FetchFn(Protocol):
    """Anything that can fetch a URL.

    Must return a FetchResponse for every HTTP status and raise
    TransportError only when no response was received.
    """

    async def __call__(self, url: str) -> FetchResponse: ...


def dist_url(archive_root: str, distribution: str, rel_path: str = "") -> str:
    """Construct the URL of a file under ``dists/<distribution>/``.

    Examples:
        >>> dist_url("https://archive.ubuntu.com/ubuntu", "focal", "main/binary-amd64/Packages.gz")
        'https://archive.ubuntu.com/ubuntu/dists/focal/main/binary-amd64/Packages.gz'
    """
    repo_prefix = archive_root if archive_root.endswith("/") else f"{archive_root}/"
    return urljoin(repo_prefix, f"dists/{distribution.strip('/')}/{rel_path.lstrip('/')}")


class Fetcher:
    """Fetch capability backed by an ``httpx.AsyncClient``.

    Use as an async context manager; requests are buffered fully in memory.
    """

    def __init__(
        self,
        user_agent: str = USER_AGENT,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            headers={"User-Agent": user_agent},
            follow_redirects=True,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "Fetcher":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self._client.__aexit__(*exc_info)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __call__(self, url: str) -> FetchResponse:
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as e:
            raise TransportError(url, f"timed out ({e.__class__.__name__})") from e
        except httpx.HTTPError as e:
            raise TransportError(url, str(e) or e.__class__.__name__) from e

        return FetchResponse(
            url=url,
            status_code=response.status_code,
            content=response.content,
            last_modified=response.headers.get("last-modified"),
        )


class CacheSink:
    """Persist fetched files under ``<root>/<os_id>/dists/<distribution>/``.

    Files are written as-is (still compressed); nothing is read back during a run.
    """

    def __init__(self, root: Path, os_id: str, distribution: str):
        self.root = Path(root)
        self.base = self.root / os_id / "dists" / distribution

    def path_for(self, rel_path: str) -> Path:
        """Local path mirroring ``rel_path`` relative to the distribution directory.

        Examples:
            >>> CacheSink(Path("/tmp/m"), "ubuntu", "focal").path_for("main/binary-amd64/Packages.xz")
            PosixPath('/tmp/m/ubuntu/dists/focal/main/binary-amd64/Packages.xz')
        """
        path = (self.base / rel_path.lstrip("/")).resolve()
        if not path.is_relative_to(self.base.resolve()):
            raise ValueError(f"Refusing to cache {rel_path!r} outside of {self.base}")
        return path

    async def store(self, rel_path: str, response: FetchResponse) -> Path:
        """Write the response body to the cache, keeping the remote mtime if known."""
        output_path = self.path_for(rel_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(output_path, "wb") as f:
            await f.write(response.content)

        if last_modified := try_parse_date(response.last_modified):
            remote_ts = last_modified.timestamp()
            utime(output_path, (remote_ts, remote_ts))

        logger.debug(f"Cached {rel_path} to {output_path}")
        return output_path

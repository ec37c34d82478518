"""Canned archive content and a fetch test double."""

import pytest

from aptmirror.models import FetchResponse

RELEASE_TEXT = """\
Origin: Ubuntu
Label: Ubuntu
Suite: focal
Version: 20.04
Codename: focal
Date: Thu, 23 Apr 2020 17:33:17 UTC
Architectures: amd64 arm64 armhf i386 ppc64el riscv64 s390x
Components: main restricted universe multiverse
Description: Ubuntu Focal 20.04
MD5Sum:
 3e5e1ec27f9b4cc1a5a9c4e7e2cd1f8e  1275 main/binary-amd64/Packages
 7a3a1b0dbb0a6b9f9c0a2b0f2bfb3d2a   842 main/binary-amd64/Packages.gz
 5d41402abc4b2a76b9719d911017c592   760 main/binary-amd64/Packages.xz
 9e107d9d372bb6826bd81d3542a419d6   801 main/binary-i386/Packages.xz
 e4d909c290d0fb1ca068ffaddf22cbd0   115 main/binary-amd64/Release
SHA256:
 0f343b0931126a20f133d67c2b018a3b0f6b3d1c1e8f3f0b0d6c1a0e3b2a9f8e  1275 main/binary-amd64/Packages
"""

PACKAGES_TEXT = """\
Package: curl
Architecture: amd64
Version: 7.68.0-1ubuntu2
Priority: optional
Section: web
Installed-Size: 411
Depends: libc6 (>= 2.17), libcurl4 (= 7.68.0-1ubuntu2), zlib1g (>= 1:1.1.4)
Filename: pool/main/c/curl/curl_7.68.0-1ubuntu2_amd64.deb
Size: 161112
MD5sum: 8e1bba23cad9b6b7aa7bd4ab4d5de1a7
SHA1: 7de3c1b7d9a2b0f8bbd9d06d6cd31c25e49a4a5b
SHA256: c2a6a1c3f0f56b3d3b0b4e1b0fd20bfa6b5b3f8c7f09d28d5c44b1a5e6d4f3b2
Description: command line tool for transferring data with URL syntax

Package: wget
Architecture: amd64
Version: 1.20.3-1ubuntu1
Depends: libc6 (>= 2.28), libidn2-0 (>= 0.6)
Suggests: ca-certificates
Filename: pool/main/w/wget/wget_1.20.3-1ubuntu1_amd64.deb
Size: 348472

"""


class FakeFetch:
    """Fetch capability test double serving canned responses by URL.

    Fails the test if asked for a URL it was not given a response for.
    """

    def __init__(self, responses: dict[str, FetchResponse | Exception], allowed: set[str] | None = None):
        self.responses = responses
        self.allowed = set(responses) if allowed is None else allowed
        self.calls: list[str] = []

    async def __call__(self, url: str) -> FetchResponse:
        if url not in self.allowed:
            pytest.fail(f"Unexpected fetch of {url}")
        self.calls.append(url)
        result = self.responses.get(url, FetchResponse(url=url, status_code=404))
        if isinstance(result, Exception):
            raise result
        return result


def ok(url: str, content: bytes, last_modified: str | None = None) -> FetchResponse:
    return FetchResponse(url=url, status_code=200, content=content, last_modified=last_modified)

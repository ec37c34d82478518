from os import getenv
from pathlib import Path

USER_AGENT = "Debian APT-HTTP/1.3 (2.0.9) non-interactive"

# cache directory is created lazily by the cache sink, not at import time
CACHE_DIR = Path(getenv("APTMIRROR_CACHE_DIR", "/tmp/apt-mirror-minimal"))

ARCHIVE_ROOT = getenv("APTMIRROR_ARCHIVE_ROOT", "https://mirrors.bfsu.edu.cn/ubuntu")
DISTRIBUTION = getenv("APTMIRROR_DISTRIBUTION", "focal")
OS_ID = "ubuntu"

# fmt: off
DEFAULT_COMPONENTS = ["main", "restricted"]
DEFAULT_ARCHITECTURES = ["amd64", "i386"]
DEFAULT_EXTENSIONS = ["", ".gz", ".xz"]
# fmt: on

# Only the legacy MD5Sum section of the Release file is used as the index
HASH_SECTION = "MD5Sum"

RELEASE_FILES = ["InRelease", "Release", "Release.gpg"]

REQUEST_TIMEOUT = 30.0

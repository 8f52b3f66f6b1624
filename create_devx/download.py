"""
download.py

Responsibility: Fetch the template tarball and unpack it into the project root.

The response body is streamed straight into `tarfile` (no temporary file),
with the archive's single wrapping folder stripped from every member. Any
VCS metadata the archive carried is removed afterwards.

Every expected failure is raised as `DownloadError`; a partially extracted
tree is left in place.
"""

from __future__ import annotations

import logging
import shutil
import tarfile
import zlib
from collections.abc import Iterator
from pathlib import Path, PurePosixPath
from typing import BinaryIO

import requests

from create_devx.cancel import CancelToken

logger = logging.getLogger(__name__)

VCS_METADATA_NAMES = frozenset({".git"})


class DownloadError(RuntimeError):
    pass


def _strip_components(name: str, count: int = 1) -> str | None:
    parts = PurePosixPath(name).parts
    if len(parts) <= count:
        return None
    return str(PurePosixPath(*parts[count:]))


def _vcs_metadata_root(name: str) -> str | None:
    """
    Return the path of the first VCS metadata component in `name`, e.g.
    `lib/.git/config` -> `lib/.git`.
    """
    parts = PurePosixPath(name).parts
    for i, part in enumerate(parts):
        if part in VCS_METADATA_NAMES:
            return str(PurePosixPath(*parts[: i + 1]))
    return None


def _stripped_members(
    tar: tarfile.TarFile,
    vcs_paths: set[str],
    cancel: CancelToken | None,
) -> Iterator[tarfile.TarInfo]:
    for member in tar:
        if cancel is not None:
            cancel.raise_if_cancelled()
        stripped = _strip_components(member.name)
        if stripped is None:
            continue
        if member.islnk():
            link = _strip_components(member.linkname)
            if link is None:
                continue
            member.linkname = link
        member.name = stripped
        vcs_root = _vcs_metadata_root(stripped)
        if vcs_root is not None:
            vcs_paths.add(vcs_root)
        yield member


def _open_stream(url: str, session: requests.Session, timeout: float | None) -> requests.Response:
    response = session.get(url, stream=True, timeout=timeout)
    response.raise_for_status()
    if response.raw is None:
        response.close()
        raise DownloadError(f"Failed to download: {url}")
    # Undo any transfer Content-Encoding; the tarball's own gzip layer is left to tarfile.
    response.raw.decode_content = True
    return response


def extract_tar_stream(
    fileobj: BinaryIO,
    root: Path,
    *,
    cancel: CancelToken | None = None,
) -> int:
    """
    Extract a gzip tar stream into `root`, stripping one leading component and
    removing VCS metadata that came with it. Returns the number of members
    extracted.
    """
    vcs_paths: set[str] = set()
    extracted = 0
    with tarfile.open(fileobj=fileobj, mode="r|gz") as tar:
        for member in _stripped_members(tar, vcs_paths, cancel):
            tar.extract(member, path=root, filter="data")
            extracted += 1

    for rel in sorted(vcs_paths):
        target = root / rel
        logger.debug("removing bundled VCS metadata %s", target)
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        elif target.exists() or target.is_symlink():
            target.unlink()
    return extracted


def _fetch_and_extract(
    url: str,
    root: Path,
    session: requests.Session,
    timeout: float | None,
    cancel: CancelToken | None,
) -> int:
    with _open_stream(url, session, timeout) as response:
        return extract_tar_stream(response.raw, root, cancel=cancel)


def download_and_extract_repo(
    root: str | Path,
    *,
    url: str,
    session: requests.Session | None = None,
    timeout: float | None = None,
    cancel: CancelToken | None = None,
) -> int:
    """
    Download `url` and unpack it into `root`.

    Raises `DownloadError` on network, HTTP, decompression or filesystem errors.
    """
    root_path = Path(root)
    logger.debug("downloading %s into %s", url, root_path)
    try:
        if cancel is not None:
            cancel.raise_if_cancelled()
        if session is None:
            with requests.Session() as http:
                count = _fetch_and_extract(url, root_path, http, timeout, cancel)
        else:
            count = _fetch_and_extract(url, root_path, session, timeout, cancel)
    except DownloadError:
        raise
    except (requests.RequestException, tarfile.TarError, zlib.error, EOFError, OSError) as e:
        raise DownloadError(str(e) or e.__class__.__name__) from e
    logger.debug("extracted %d members", count)
    return count

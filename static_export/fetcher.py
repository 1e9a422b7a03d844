"""Fetcher adapter: mirror the origin site with ``wget``.

Crawling is left entirely to wget.  This module only finds the binary,
builds its argument list, runs it to completion, and then locates the
directory wget wrote the site into (named after the origin's host).
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

import httpx

from static_export.config import settings
from static_export.errors import (
    FetchFailureError,
    MissingDependencyError,
    MissingFetchedRootError,
)
from static_export.models import SiteUrls

_DEFAULT_HEADERS = {
    "User-Agent": "static-export/0.1 (+preflight)",
}


def find_wget(binary: Optional[str] = None) -> str:
    """Return the full path to the wget executable.

    Raises:
        MissingDependencyError: If *binary* (default ``settings.wget_binary``)
            is neither an executable path nor found on ``PATH``.
    """
    name = binary or settings.wget_binary
    found = shutil.which(name)
    if not found:
        raise MissingDependencyError(
            f"wget not found ({name!r}). Install wget or set STATIC_EXPORT_WGET."
        )
    return found


def build_wget_command(
    wget: str,
    urls: SiteUrls,
    output_dir: Path,
    depth: Optional[int] = None,
) -> List[str]:
    """Return the wget argument list for mirroring ``urls.origin``.

    wget ignores ``--no-clobber`` when ``--convert-links`` is also given, so a
    re-run re-downloads and overwrites files that are already present.
    """
    level = settings.crawl_depth if depth is None else depth
    return [
        wget,
        "--recursive",
        f"--level={level}",
        "--page-requisites",
        "--remote-encoding=utf-8",
        "--local-encoding=utf-8",
        "--adjust-extension",
        "--convert-links",
        "--restrict-file-names=windows",
        f"--domains={urls.origin_host}",
        "--no-clobber",
        "--no-parent",
        f"--directory-prefix={output_dir}",
        f"{urls.origin}/",
    ]


def probe_origin(urls: SiteUrls, timeout: Optional[float] = None) -> int:
    """GET the origin once so an unreachable local server fails fast.

    Returns:
        The HTTP status code.

    Raises:
        FetchFailureError: On a connection error or a 4xx/5xx response.
    """
    try:
        with httpx.Client(
            headers=_DEFAULT_HEADERS,
            timeout=timeout or settings.request_timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(f"{urls.origin}/")
            response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchFailureError(
            f"origin {urls.origin} answered HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise FetchFailureError(f"origin {urls.origin} is unreachable: {exc}") from exc
    return response.status_code


def fetched_root_candidates(urls: SiteUrls, output_dir: Path) -> List[Path]:
    """Directories wget may have created for the origin host, most specific first."""
    netloc = urls.origin_netloc
    names = [netloc, netloc.replace(":", "+"), urls.origin_host]
    seen: list[str] = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return [output_dir / name for name in seen]


def locate_fetched_root(urls: SiteUrls, output_dir: Path) -> Path:
    """Return the directory holding the fetched site.

    Raises:
        MissingFetchedRootError: If none of the expected host directories exist.
    """
    candidates = fetched_root_candidates(urls, output_dir)
    for candidate in candidates:
        if candidate.is_dir():
            return candidate
    tried = ", ".join(str(c) for c in candidates)
    raise MissingFetchedRootError(f"fetched site root not found (looked for {tried})")


def fetch_site(
    urls: SiteUrls,
    output_dir: Optional[Path] = None,
    *,
    wget_binary: Optional[str] = None,
    depth: Optional[int] = None,
    probe: Optional[bool] = None,
) -> Path:
    """Mirror ``urls.origin`` into *output_dir* and return the fetched root.

    Pipeline:
        1. Locate wget (:func:`find_wget`).
        2. Optionally probe the origin (:func:`probe_origin`).
        3. Run wget and wait for it to exit.
        4. Locate the host directory (:func:`locate_fetched_root`).

    Files left from an earlier run are not deleted first; see
    :func:`build_wget_command` for why wget may still overwrite them.

    Raises:
        MissingDependencyError: wget is not installed.
        FetchFailureError: The probe failed or wget exited non-zero.
        MissingFetchedRootError: wget finished but no host directory exists.
    """
    out = Path(output_dir) if output_dir is not None else settings.output_dir
    wget = find_wget(wget_binary)

    if settings.probe_origin if probe is None else probe:
        print(f"[fetch] Probing {urls.origin} …")
        probe_origin(urls)

    out.mkdir(parents=True, exist_ok=True)
    cmd = build_wget_command(wget, urls, out, depth=depth)
    print(f"[fetch] Mirroring {urls.origin} into {out} …")
    try:
        completed = subprocess.run(cmd, check=False)
    except OSError as exc:
        raise MissingDependencyError(f"could not execute {wget!r}: {exc}") from exc
    if completed.returncode != 0:
        raise FetchFailureError(
            f"wget exited with status {completed.returncode}",
            returncode=completed.returncode,
        )

    root = locate_fetched_root(urls, out)
    print(f"[fetch] Site fetched into {root}")
    return root

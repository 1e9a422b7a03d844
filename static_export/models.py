"""Data models for the export pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List
from urllib.parse import urlsplit


def _strip_url(url: str) -> str:
    return url.strip().rstrip("/")


@dataclass(frozen=True)
class SiteUrls:
    """The origin being mirrored and the URL it will be deployed under.

    Both are stored without a trailing slash.  The origin is only ever used
    as a literal match pattern; the target is an opaque replacement string.
    """

    origin: str
    target: str

    @classmethod
    def normalise(cls, origin: str, target: str) -> SiteUrls:
        """Strip whitespace and trailing slashes, and validate both URLs.

        Raises:
            ValueError: If the origin is not an ``http``/``https`` URL with a
                host, or the target is empty. The target is otherwise opaque,
                so protocol-relative or path-only targets are accepted.
        """
        origin = _strip_url(origin)
        target = _strip_url(target)
        parts = urlsplit(origin)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"Origin URL must be an http(s) URL with a host: {origin!r}")
        if not target:
            raise ValueError("Target URL must not be empty")
        return cls(origin=origin, target=target)

    @property
    def origin_host(self) -> str:
        """Host component of the origin (no port), lower-cased."""
        return (urlsplit(self.origin).hostname or "").lower()

    @property
    def origin_netloc(self) -> str:
        """``host[:port]`` of the origin, lower-cased, default ports dropped."""
        parts = urlsplit(self.origin)
        host = self.origin_host
        port = parts.port
        default = 443 if parts.scheme == "https" else 80
        if port is None or port == default:
            return host
        return f"{host}:{port}"


@dataclass(frozen=True)
class MojibakeEntry:
    """One known corruption: a UTF-8 character decoded as Windows-1252."""

    name: str
    corrupted: str
    correct: str


@dataclass
class FileChange:
    """The outcome of processing a single eligible file."""

    path: Path
    substitutions: int

    @property
    def changed(self) -> bool:
        return self.substitutions > 0


@dataclass
class StageReport:
    """Summary of one rewrite/repair pass over a tree."""

    stage: str
    scanned: int = 0
    changed: List[Path] = field(default_factory=list)
    substitutions: int = 0

    def summary(self) -> str:
        return (
            f"[{self.stage}] {self.scanned} file(s) scanned, "
            f"{len(self.changed)} changed, {self.substitutions} substitution(s)"
        )

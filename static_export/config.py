"""Runtime knobs for an export run.

Covers where the mirror is written, which wget binary is invoked and how deep
it recurses, whether the origin gets a preflight GET, and how many threads
the rewrite and repair passes use.  Every field reads a ``STATIC_EXPORT_*``
environment variable; a `.env` beside the package fills in any that are unset.
CLI options override these per run.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Real environment variables win over .env entries.
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    output_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("STATIC_EXPORT_OUTPUT_DIR", "static-site-export")
        )
    )

    # ------------------------------------------------------------------
    # Fetch (wget)
    # ------------------------------------------------------------------
    wget_binary: str = field(
        default_factory=lambda: os.environ.get("STATIC_EXPORT_WGET", "wget")
    )
    crawl_depth: int = field(
        default_factory=lambda: int(os.environ.get("STATIC_EXPORT_DEPTH", "1"))
    )
    probe_origin: bool = field(
        default_factory=lambda: _env_bool("STATIC_EXPORT_PROBE_ORIGIN", "true")
    )
    request_timeout: float = field(
        default_factory=lambda: float(
            os.environ.get("STATIC_EXPORT_REQUEST_TIMEOUT", "10.0")
        )
    )

    # ------------------------------------------------------------------
    # Rewrite / repair
    # ------------------------------------------------------------------
    workers: int = field(
        default_factory=lambda: int(
            os.environ.get("STATIC_EXPORT_WORKERS", str(min(8, os.cpu_count() or 1)))
        )
    )


# Shared by the fetcher, file pool, pipeline and CLI.
settings = Settings()

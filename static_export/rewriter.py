"""Reference rewriter: swap every literal origin URL for the target URL.

The origin is matched as a plain substring.  It is escaped before being
compiled, so characters such as ``.`` or ``?`` in the URL never act as
pattern syntax, and the replacement is passed through a function so
backslashes in the target are never treated as group references.

Matching is deliberately naive: an origin of ``http://site.local`` also
matches inside ``http://site.local.other``.
"""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import Optional, Tuple

from static_export.files import process_tree, transform_file
from static_export.models import FileChange, SiteUrls, StageReport

REWRITE_EXTENSIONS = ("html", "htm", "css", "js", "xml")

# Non-UTF-8 bytes survive a decode/encode cycle unchanged.
_TEXT_ENCODING = "utf-8"
_TEXT_ERRORS = "surrogateescape"


def rewrite_text(text: str, urls: SiteUrls) -> Tuple[str, int]:
    """Return *text* with every occurrence of the origin replaced, and the count."""
    pattern = re.compile(re.escape(urls.origin))
    return pattern.subn(lambda _m: urls.target, text)


def rewrite_file(path: Path, urls: SiteUrls) -> FileChange:
    """Rewrite a single file in place."""
    return transform_file(
        path,
        partial(rewrite_text, urls=urls),
        stage="rewrite",
        encoding=_TEXT_ENCODING,
        errors=_TEXT_ERRORS,
    )


def rewrite_tree(
    root: Path,
    urls: SiteUrls,
    *,
    workers: Optional[int] = None,
    verbose: bool = False,
) -> StageReport:
    """Rewrite every HTML/CSS/JS/XML file under *root*.

    Raises:
        FileProcessingError: On the first file that cannot be processed.
    """
    report = process_tree(
        root,
        REWRITE_EXTENSIONS,
        partial(rewrite_file, urls=urls),
        stage="rewrite",
        workers=workers,
        verbose=verbose,
    )
    print(report.summary())
    return report

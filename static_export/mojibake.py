"""Mojibake repair for HTML files.

The upstream export pipeline sometimes decodes UTF-8 punctuation as
Windows-1252, turning one character into three (``—`` becomes ``â€”``).
This module undoes exactly the sequences listed in :data:`MOJIBAKE_TABLE`;
any other encoding damage is left alone.

Only ``.html`` files are repaired.  CSS, JS and XML are not, even though the
same corruption could occur there.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

from static_export.files import process_tree, transform_file
from static_export.models import FileChange, MojibakeEntry, StageReport

REPAIR_EXTENSIONS = ("html",)

# Keys are the Windows-1252 reading of each character's UTF-8 bytes.
MOJIBAKE_TABLE: Tuple[MojibakeEntry, ...] = (
    MojibakeEntry("em dash", "\u00e2\u20ac\u201d", "\u2014"),
    MojibakeEntry("en dash", "\u00e2\u20ac\u201c", "\u2013"),
    MojibakeEntry("right single quote", "\u00e2\u20ac\u2122", "\u2019"),
    MojibakeEntry("left single quote", "\u00e2\u20ac\u02dc", "\u2018"),
    MojibakeEntry("left double quote", "\u00e2\u20ac\u0153", "\u201c"),
    # 0x9D has no Windows-1252 mapping and survives as the C1 control char.
    MojibakeEntry("right double quote", "\u00e2\u20ac\u009d", "\u201d"),
    MojibakeEntry("euro sign", "\u00e2\u201a\u00ac", "\u20ac"),
)

_BOM = "\ufeff"


def repair_text(
    text: str, table: Iterable[MojibakeEntry] = MOJIBAKE_TABLE
) -> Tuple[str, int]:
    """Replace every corrupted sequence in *text*; return the text and count."""
    total = 0
    for entry in table:
        count = text.count(entry.corrupted)
        if count:
            text = text.replace(entry.corrupted, entry.correct)
            total += count
    return text, total


def _repair_html(text: str, table: Sequence[MojibakeEntry]) -> Tuple[str, int]:
    # Written back without a BOM; only reached for files that change.
    if text.startswith(_BOM):
        text = text[len(_BOM):]
    return repair_text(text, table)


def repair_file(
    path: Path, table: Sequence[MojibakeEntry] = MOJIBAKE_TABLE
) -> FileChange:
    """Repair a single HTML file in place."""
    return transform_file(
        path,
        partial(_repair_html, table=table),
        stage="repair",
        encoding="utf-8",
        errors="strict",
    )


def repair_tree(
    root: Path,
    table: Sequence[MojibakeEntry] = MOJIBAKE_TABLE,
    *,
    workers: Optional[int] = None,
    verbose: bool = False,
) -> StageReport:
    """Repair every ``.html`` file under *root* (or any subtree).

    Raises:
        FileProcessingError: On the first file that is not valid UTF-8 or
            cannot be written.
    """
    report = process_tree(
        root,
        REPAIR_EXTENSIONS,
        partial(repair_file, table=table),
        stage="repair",
        workers=workers,
        verbose=verbose,
    )
    print(report.summary())
    return report

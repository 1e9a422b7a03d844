"""File discovery and per-file read/modify/write over a fetched tree.

Both the rewriter and the mojibake repairer are stateless single-pass
transforms: each takes the decoded text of one file and returns the new text
plus a substitution count.  :func:`process_tree` applies such a transform to
every eligible file under a root, in parallel, with exactly one worker per
path.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Tuple

from static_export.config import settings
from static_export.errors import FileProcessingError
from static_export.models import FileChange, StageReport

# (text) -> (new_text, substitutions)
TextTransform = Callable[[str], Tuple[str, int]]


def iter_eligible_files(root: Path, extensions: Iterable[str]) -> Iterator[Path]:
    """Yield every regular file under *root* whose suffix is in *extensions*.

    Matching is case-insensitive and *extensions* are given without the dot.
    """
    wanted = {f".{ext.lower().lstrip('.')}" for ext in extensions}
    for path in sorted(root.rglob("*")):
        if path.is_file() and path.suffix.lower() in wanted:
            yield path


def write_atomic(path: Path, data: bytes) -> None:
    """Replace the contents of *path* with *data* via a sibling temp file."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def transform_file(
    path: Path,
    transform: TextTransform,
    *,
    stage: str,
    encoding: str = "utf-8",
    errors: str = "strict",
) -> FileChange:
    """Read *path*, apply *transform*, and write it back if anything changed.

    Unchanged files are never rewritten, so they stay byte-identical.

    Raises:
        FileProcessingError: If the file cannot be read, decoded or written.
    """
    try:
        raw = path.read_bytes()
        text = raw.decode(encoding, errors=errors)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileProcessingError(path, f"cannot read: {exc}", phase=stage) from exc

    new_text, count = transform(text)
    if count == 0:
        return FileChange(path=path, substitutions=0)

    try:
        data = new_text.encode(encoding, errors=errors)
        write_atomic(path, data)
    except (OSError, UnicodeEncodeError) as exc:
        raise FileProcessingError(path, f"cannot write: {exc}", phase=stage) from exc
    return FileChange(path=path, substitutions=count)


def process_tree(
    root: Path,
    extensions: Iterable[str],
    process: Callable[[Path], FileChange],
    *,
    stage: str,
    workers: Optional[int] = None,
    verbose: bool = False,
) -> StageReport:
    """Run *process* on every eligible file under *root*.

    Files are independent, so they are handled by a ``ThreadPoolExecutor``
    bounded by ``settings.workers``.  The first failure cancels any work not
    yet started and is re-raised; files already written stay written.
    """
    paths = list(iter_eligible_files(root, extensions))
    report = StageReport(stage=stage, scanned=len(paths))
    if not paths:
        return report

    limit = max(1, workers or settings.workers)
    with ThreadPoolExecutor(max_workers=min(limit, len(paths))) as pool:
        future_to_path = {pool.submit(process, path): path for path in paths}
        _, pending = wait(future_to_path, return_when=FIRST_EXCEPTION)
        for future in pending:
            future.cancel()

    changes: list[FileChange] = []
    for future in future_to_path:
        if future.cancelled():
            continue
        exc = future.exception()
        if exc is not None:
            raise exc
        changes.append(future.result())

    for change in sorted(changes, key=lambda c: c.path):
        if not change.changed:
            continue
        report.changed.append(change.path)
        report.substitutions += change.substitutions
        if verbose:
            rel = change.path.relative_to(root)
            print(f"[{stage}] {rel}: {change.substitutions} substitution(s)")
    return report

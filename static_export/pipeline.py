"""Export pipeline: fetch → rewrite → repair.

Each stage is a blocking step that must complete before the next one may
start.  The rewrite and repair stages need a closed, stable file set, so they
refuse to run until the fetch stage has been marked complete.

``ExportPipeline.from_existing_tree`` marks the fetch stage complete for a
tree that is already on disk, which lets the rewrite or repair stage be
re-run on its own::

    pipeline = ExportPipeline.from_existing_tree(root, urls)
    pipeline.run_stage(Stage.REWRITE)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from static_export.config import settings
from static_export.errors import ExportError
from static_export.fetcher import fetch_site
from static_export.models import SiteUrls, StageReport
from static_export.mojibake import repair_tree
from static_export.rewriter import rewrite_tree


class Stage(str, enum.Enum):
    FETCH = "fetch"
    REWRITE = "rewrite"
    REPAIR = "repair"


STAGE_ORDER: tuple[Stage, ...] = (Stage.FETCH, Stage.REWRITE, Stage.REPAIR)


@dataclass
class ExportPipeline:
    """Ordered stages over a single fetched tree.

    ``root`` is ``None`` until the fetch stage has produced (or been given)
    the fetched site directory.
    """

    urls: Optional[SiteUrls]
    output_dir: Path = field(default_factory=lambda: settings.output_dir)
    root: Optional[Path] = None
    workers: Optional[int] = None
    verbose: bool = False
    wget_binary: Optional[str] = None
    depth: Optional[int] = None
    probe: Optional[bool] = None
    completed: List[Stage] = field(default_factory=list)
    reports: Dict[Stage, StageReport] = field(default_factory=dict)

    @classmethod
    def from_existing_tree(
        cls, root: Path, urls: Optional[SiteUrls] = None, **kwargs
    ) -> ExportPipeline:
        """Build a pipeline whose fetch stage is already complete at *root*.

        Raises:
            ExportError: If *root* is not a directory.
        """
        root = Path(root)
        if not root.is_dir():
            raise ExportError(f"fetched tree not found: {root}", phase="fetch")
        return cls(
            urls=urls,
            output_dir=root.parent,
            root=root,
            completed=[Stage.FETCH],
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Stage gate
    # ------------------------------------------------------------------
    def is_complete(self, stage: Stage) -> bool:
        return stage in self.completed

    def _require(self, stage: Stage) -> None:
        if not self.is_complete(stage):
            raise ExportError(
                f"stage {stage.value!r} has not completed", phase=stage.value
            )

    def _require_root(self) -> Path:
        self._require(Stage.FETCH)
        if self.root is None:
            raise ExportError("fetched tree root is not set", phase="fetch")
        return self.root

    def _require_urls(self, stage: Stage) -> SiteUrls:
        if self.urls is None:
            raise ExportError(
                "origin and target URLs are required", phase=stage.value
            )
        return self.urls

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------
    def run_stage(self, stage: Stage) -> Optional[StageReport]:
        """Run one stage, enforcing that the fetch stage is already complete."""
        report: Optional[StageReport] = None
        if stage is Stage.FETCH:
            urls = self._require_urls(stage)
            self.root = fetch_site(
                urls,
                self.output_dir,
                wget_binary=self.wget_binary,
                depth=self.depth,
                probe=self.probe,
            )
        else:
            root = self._require_root()
            if stage is Stage.REWRITE:
                urls = self._require_urls(stage)
                print(f"[rewrite] {urls.origin} → {urls.target}")
                report = rewrite_tree(
                    root, urls, workers=self.workers, verbose=self.verbose
                )
            else:
                report = repair_tree(
                    root, workers=self.workers, verbose=self.verbose
                )
            self.reports[stage] = report

        if stage not in self.completed:
            self.completed.append(stage)
        return report

    def run(self, stages: Sequence[Stage] = STAGE_ORDER) -> Path:
        """Run *stages* in pipeline order and return the fetched root."""
        for stage in sorted(set(stages), key=STAGE_ORDER.index):
            self.run_stage(stage)
        return self._require_root()


def run_export(
    origin: str,
    target: str,
    output_dir: Optional[Path] = None,
    **kwargs,
) -> ExportPipeline:
    """Fetch, rewrite and repair a site in one call.

    Raises:
        ValueError: If either URL is malformed.
        ExportError: On the first stage failure.
    """
    urls = SiteUrls.normalise(origin, target)
    pipeline = ExportPipeline(
        urls=urls,
        output_dir=Path(output_dir) if output_dir is not None else settings.output_dir,
        **kwargs,
    )
    pipeline.run()
    print(f"[export] Static site ready at {pipeline.root}")
    return pipeline

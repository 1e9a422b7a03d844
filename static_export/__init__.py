"""Static export — mirror a locally served site for deployment elsewhere."""

from static_export.errors import (
    ExportError,
    FetchFailureError,
    FileProcessingError,
    MissingDependencyError,
    MissingFetchedRootError,
)
from static_export.models import SiteUrls, StageReport
from static_export.mojibake import MOJIBAKE_TABLE, repair_tree
from static_export.pipeline import ExportPipeline, Stage, run_export
from static_export.rewriter import rewrite_tree

__all__ = [
    "ExportError",
    "ExportPipeline",
    "FetchFailureError",
    "FileProcessingError",
    "MOJIBAKE_TABLE",
    "MissingDependencyError",
    "MissingFetchedRootError",
    "SiteUrls",
    "Stage",
    "StageReport",
    "repair_tree",
    "rewrite_tree",
    "run_export",
]

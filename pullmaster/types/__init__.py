"""Pullmaster type definitions.

This module exports all data model types used by the pipeline.
"""

from pullmaster.types.analysis import (
    AnalysisFindings,
    AnalysisMetadata,
    NormalizedPullRequestRecord,
)
from pullmaster.types.pulls import (
    Commit,
    FileChange,
    PullRequestMetadata,
    PullRequestRef,
    Review,
)

__all__ = [
    # Pull request types
    "PullRequestRef",
    "PullRequestMetadata",
    "FileChange",
    "Commit",
    "Review",
    # Snapshot types
    "AnalysisMetadata",
    "NormalizedPullRequestRecord",
    "AnalysisFindings",
]

"""Aggregated pull request snapshot and analysis models."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from pullmaster.types.pulls import (
    Commit,
    FileChange,
    PullRequestMetadata,
    Review,
)


@dataclass(frozen=True)
class AnalysisMetadata:
    """Totals derived from the file, commit and review lists of a snapshot."""

    total_files: int
    total_commits: int
    total_reviews: int
    additions: int
    deletions: int
    changed_files: tuple[str, ...]
    reviewers: frozenset[str]

    @classmethod
    def derive(
        cls,
        files: Iterable[FileChange],
        commits: Iterable[Commit],
        reviews: Iterable[Review],
    ) -> "AnalysisMetadata":
        """
        Compute metadata from the given lists.

        Must be re-run whenever the lists attached to a record change.
        """
        files = tuple(files)
        commits = tuple(commits)
        reviews = tuple(reviews)
        return cls(
            total_files=len(files),
            total_commits=len(commits),
            total_reviews=len(reviews),
            additions=sum(f.additions for f in files),
            deletions=sum(f.deletions for f in files),
            changed_files=tuple(f.filename for f in files),
            reviewers=frozenset(r.reviewer for r in reviews),
        )


@dataclass(frozen=True)
class NormalizedPullRequestRecord:
    """The consistent snapshot produced by one aggregation run."""

    metadata: PullRequestMetadata
    files: tuple[FileChange, ...]
    commits: tuple[Commit, ...]
    reviews: tuple[Review, ...]
    derived: AnalysisMetadata


@dataclass
class AnalysisFindings:
    """Structured findings returned by an analysis step."""

    summary: str
    security: list[str] = field(default_factory=list)
    quality: list[str] = field(default_factory=list)
    bugs: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

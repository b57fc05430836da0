"""
Pytest fixtures for Pullmaster testing.

Provides factories and fixtures for building pull request snapshots
without touching the network.
"""

import hashlib
from collections.abc import Generator

import pytest

from pullmaster.testing.fake import FakePullRequestClient
from pullmaster.types.analysis import AnalysisMetadata, NormalizedPullRequestRecord
from pullmaster.types.pulls import (
    Commit,
    FileChange,
    PullRequestMetadata,
    PullRequestRef,
    Review,
)


# ============================================================================
# Factories
# ============================================================================


def create_mock_metadata(
    title: str = "Add feature",
    description: str | None = "Implements the feature",
    author: str = "octocat",
    base_sha: str = "base-sha",
    head_sha: str = "head-sha",
    number: int | None = 42,
) -> PullRequestMetadata:
    """Create PullRequestMetadata with sensible defaults."""
    return PullRequestMetadata(
        title=title,
        description=description,
        author=author,
        base_branch="main",
        head_branch="feature/add",
        base_sha=base_sha,
        head_sha=head_sha,
        number=number,
        url=f"https://github.com/octo/repo/pull/{number}",
    )


def create_mock_file(
    filename: str,
    status: str = "modified",
    additions: int = 1,
    deletions: int = 0,
    patch: str | None = "@@ -1 +1 @@",
) -> FileChange:
    """Create a FileChange without content."""
    return FileChange(
        filename=filename,
        status=status,
        additions=additions,
        deletions=deletions,
        patch=patch,
    )


def create_mock_commit(message: str = "Initial commit", author: str = "Octo Cat") -> Commit:
    return Commit(
        sha=hashlib.sha1(message.encode()).hexdigest(),
        message=message,
        author_name=author,
        author_date="2024-01-15T10:30:00Z",
    )


def create_mock_review(reviewer: str, state: str = "APPROVED") -> Review:
    return Review(reviewer=reviewer, state=state, submitted_at="2024-01-16T09:00:00Z")


def create_mock_record(
    files: list[FileChange] | None = None,
    commits: list[Commit] | None = None,
    reviews: list[Review] | None = None,
    metadata: PullRequestMetadata | None = None,
) -> NormalizedPullRequestRecord:
    """Create a record whose derived metadata matches its lists."""
    files = files or []
    commits = commits or []
    reviews = reviews or []
    return NormalizedPullRequestRecord(
        metadata=metadata or create_mock_metadata(),
        files=tuple(files),
        commits=tuple(commits),
        reviews=tuple(reviews),
        derived=AnalysisMetadata.derive(files, commits, reviews),
    )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def pr_ref() -> PullRequestRef:
    """Provide a test pull request reference."""
    return PullRequestRef(owner="octo", repo_name="repo", number=42)


@pytest.fixture
def sample_metadata() -> PullRequestMetadata:
    return create_mock_metadata()


@pytest.fixture
def sample_files() -> list[FileChange]:
    """Provide an added, a modified and a removed file."""
    return [
        create_mock_file("src/new.py", status="added", additions=10),
        create_mock_file("src/app.py", status="modified", additions=3, deletions=2),
        create_mock_file("src/old.py", status="removed", deletions=7),
    ]


@pytest.fixture
def sample_record(sample_files: list[FileChange]) -> NormalizedPullRequestRecord:
    return create_mock_record(
        files=sample_files,
        commits=[create_mock_commit("Add feature"), create_mock_commit("Fix typo")],
        reviews=[create_mock_review("alice"), create_mock_review("bob", "COMMENTED")],
    )


@pytest.fixture
def fake_client(
    sample_metadata: PullRequestMetadata, sample_files: list[FileChange]
) -> Generator[FakePullRequestClient, None, None]:
    """
    Provide a FakePullRequestClient serving sample_files.

    src/new.py only exists at head, src/old.py only at base.
    """
    client = FakePullRequestClient(
        metadata=sample_metadata,
        files=sample_files,
        commits=[create_mock_commit("Add feature")],
        reviews=[create_mock_review("alice")],
        contents={
            ("src/new.py", "head-sha"): "print('new')\n",
            ("src/app.py", "base-sha"): "x = 1\n",
            ("src/app.py", "head-sha"): "x = 2\n",
            ("src/old.py", "base-sha"): "print('old')\n",
        },
    )
    yield client
    client.reset()

"""Pull request-related data models."""

from dataclasses import dataclass

from pullmaster.exceptions import InvalidReferenceError


@dataclass(frozen=True)
class PullRequestRef:
    """Address of a single pull request."""

    owner: str
    repo_name: str
    number: int

    @classmethod
    def parse(cls, repo_string: str, number: int | str) -> "PullRequestRef":
        """
        Parse an ``owner/repo`` string and a pull request number.

        Args:
            repo_string: Repository in format owner/repo
            number: Pull request number (an int or a decimal string)

        Returns:
            PullRequestRef

        Raises:
            InvalidReferenceError: If the repository or number is malformed
        """
        parts = repo_string.split("/")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise InvalidReferenceError(
                f"Invalid repository format {repo_string!r}. Use: owner/repo"
            )

        # Only ints and decimal strings; int(2.7) would silently truncate
        if isinstance(number, bool) or not isinstance(number, (int, str)):
            raise InvalidReferenceError(
                f"Invalid pull request number {number!r}"
            )
        try:
            pr_number = int(number)
        except ValueError as e:
            raise InvalidReferenceError(
                f"Invalid pull request number {number!r}"
            ) from e
        if pr_number < 1:
            raise InvalidReferenceError(
                f"Invalid pull request number {number!r}"
            )

        return cls(owner=parts[0], repo_name=parts[1], number=pr_number)

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo_name}"

    def __str__(self) -> str:
        return f"{self.slug}#{self.number}"


@dataclass(frozen=True)
class PullRequestMetadata:
    """Pull request information captured once per aggregation run."""

    title: str
    description: str | None
    author: str
    base_branch: str
    head_branch: str
    base_sha: str
    head_sha: str
    number: int | None = None
    url: str | None = None


@dataclass(frozen=True)
class FileChange:
    """A file changed by a pull request, with its content on both sides."""

    filename: str
    status: str  # "added", "modified", "removed", "renamed"
    additions: int
    deletions: int
    patch: str | None = None  # None for binary files
    base_content: str | None = None  # None if absent at the base ref
    head_content: str | None = None  # None if absent at the head ref
    previous_filename: str | None = None


@dataclass(frozen=True)
class Commit:
    """Commit included in a pull request."""

    sha: str
    message: str
    author_name: str
    author_date: str  # ISO 8601


@dataclass(frozen=True)
class Review:
    """Pull request review."""

    reviewer: str
    state: str  # "APPROVED", "CHANGES_REQUESTED", "COMMENTED", ...
    submitted_at: str | None = None

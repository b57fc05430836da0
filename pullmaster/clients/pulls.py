"""Pull requests resource client."""

from typing import TYPE_CHECKING, Any

from pullmaster.exceptions import UnknownError
from pullmaster.types.pulls import (
    Commit,
    FileChange,
    PullRequestMetadata,
    PullRequestRef,
)

if TYPE_CHECKING:
    from pullmaster.transport import AsyncHTTPTransport


class PullsClient:
    """Client for pull request, changed-file and commit listings."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the pulls client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def get(self, ref: PullRequestRef) -> PullRequestMetadata:
        """
        Get pull request information.

        Args:
            ref: The pull request reference

        Returns:
            PullRequestMetadata including base and head commit SHAs
        """
        data = await self.transport.get_json(self._path(ref))
        return self._parse_pull_request(data)

    async def list_files(self, ref: PullRequestRef) -> list[FileChange]:
        """
        List the files changed by a pull request, in provider order.

        Content fields are left empty; they are filled in by the content fetcher.
        """
        files = await self.transport.get_paginated(f"{self._path(ref)}/files")
        return [
            FileChange(
                filename=f["filename"],
                status=f.get("status", "modified"),
                additions=f.get("additions", 0),
                deletions=f.get("deletions", 0),
                patch=f.get("patch"),
                previous_filename=f.get("previous_filename"),
            )
            for f in files
        ]

    async def list_commits(self, ref: PullRequestRef) -> list[Commit]:
        """List the commits of a pull request in chronological order."""
        commits = await self.transport.get_paginated(f"{self._path(ref)}/commits")
        return [self._parse_commit(c) for c in commits]

    def _path(self, ref: PullRequestRef) -> str:
        return f"/repos/{ref.owner}/{ref.repo_name}/pulls/{ref.number}"

    def _parse_pull_request(self, data: dict[str, Any]) -> PullRequestMetadata:
        """Parse pull request data from API response."""
        if not isinstance(data, dict):
            data = {}
        base = data.get("base") or {}
        head = data.get("head") or {}
        user = data.get("user") or {}
        if "sha" not in base or "sha" not in head:
            raise UnknownError(
                "UNEXPECTED_RESPONSE", "Pull request payload lacks base or head SHA"
            )
        return PullRequestMetadata(
            title=data.get("title", ""),
            description=data.get("body"),
            author=user.get("login", "ghost"),
            base_branch=base.get("ref", ""),
            head_branch=head.get("ref", ""),
            base_sha=base["sha"],
            head_sha=head["sha"],
            number=data.get("number"),
            url=data.get("html_url"),
        )

    def _parse_commit(self, data: dict[str, Any]) -> Commit:
        commit = data.get("commit") or {}
        author = commit.get("author") or {}
        return Commit(
            sha=data.get("sha", ""),
            message=commit.get("message", ""),
            author_name=author.get("name", ""),
            author_date=author.get("date", ""),
        )

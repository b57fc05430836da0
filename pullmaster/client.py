"""
Remote pull request client.

Defines the capability set the aggregation pipeline needs from a hosted Git
provider and the GitHub implementation of it.
"""

import os
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import httpx

from pullmaster.clients import ContentsClient, PullsClient, ReviewsClient
from pullmaster.exceptions import ConfigurationError
from pullmaster.transport import AsyncHTTPTransport, RetryConfig
from pullmaster.types.pulls import (
    Commit,
    FileChange,
    PullRequestMetadata,
    PullRequestRef,
    Review,
)

if TYPE_CHECKING:
    from pullmaster.config import PullmasterConfig


class PullRequestProvider(ABC):
    """Abstract capability set over a hosted Git provider."""

    @abstractmethod
    async def get_metadata(self, ref: PullRequestRef) -> PullRequestMetadata:
        """Fetch pull request metadata, including base and head SHAs."""
        pass

    @abstractmethod
    async def get_files(self, ref: PullRequestRef) -> list[FileChange]:
        """Fetch the changed-file list, without content."""
        pass

    @abstractmethod
    async def get_commits(self, ref: PullRequestRef) -> list[Commit]:
        """Fetch the commit list in chronological order."""
        pass

    @abstractmethod
    async def get_reviews(self, ref: PullRequestRef) -> list[Review]:
        """Fetch the review list."""
        pass

    @abstractmethod
    async def get_file_content(
        self, ref: PullRequestRef, path: str, git_ref: str
    ) -> str | None:
        """Fetch file content at git_ref; None when the file does not exist there."""
        pass


class GitHubClient(PullRequestProvider):
    """
    Async client for the GitHub REST API.

    Aggregates the resource clients behind the PullRequestProvider
    capability set. Each aggregation run should be handed its own instance.

    Example:
        ```python
        import asyncio
        from pullmaster import GitHubClient, PullRequestAggregator, PullRequestRef

        async def main():
            async with GitHubClient(token="ghp_...") as client:
                aggregator = PullRequestAggregator(client)
                ref = PullRequestRef.parse("octocat/hello-world", 42)
                record = await aggregator.aggregate(ref)
                print(record.derived.total_files)

        asyncio.run(main())
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the GitHub client.

        Args:
            token: GitHub access token (already valid)
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Per-request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            http_transport: Optional httpx transport, for tests

        Raises:
            ConfigurationError: If no token is given
        """
        if not token:
            raise ConfigurationError(
                "GitHub token not configured. Run: pullmaster configure --github-token <token>"
            )

        self.base_url = base_url
        self.timeout = timeout

        self._transport = AsyncHTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
            http_transport=http_transport,
        )

        self.pulls = PullsClient(self._transport)
        self.reviews = ReviewsClient(self._transport)
        self.contents = ContentsClient(self._transport)

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> "GitHubClient":
        """
        Create a client from environment variables.

        Environment variables:
            PULLMASTER_GITHUB_TOKEN: Access token (falls back to GITHUB_TOKEN)
            PULLMASTER_API_URL: Base URL for API (optional, default: https://api.github.com)

        Raises:
            ConfigurationError: If no token variable is set
        """
        token = os.environ.get("PULLMASTER_GITHUB_TOKEN") or os.environ.get(
            "GITHUB_TOKEN"
        )
        base_url = os.environ.get("PULLMASTER_API_URL", cls.DEFAULT_BASE_URL)

        if not token:
            raise ConfigurationError(
                "PULLMASTER_GITHUB_TOKEN environment variable not set"
            )

        return cls(
            token=token,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
        )

    @classmethod
    def from_config(
        cls,
        config: "PullmasterConfig",
        retry_config: RetryConfig | None = None,
    ) -> "GitHubClient":
        """Create a client from a loaded configuration."""
        return cls(
            token=config.github_token,
            base_url=config.api_url,
            timeout=config.timeout,
            retry_config=retry_config,
        )

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport (for advanced use cases)."""
        return self._transport

    async def get_metadata(self, ref: PullRequestRef) -> PullRequestMetadata:
        return await self.pulls.get(ref)

    async def get_files(self, ref: PullRequestRef) -> list[FileChange]:
        return await self.pulls.list_files(ref)

    async def get_commits(self, ref: PullRequestRef) -> list[Commit]:
        return await self.pulls.list_commits(ref)

    async def get_reviews(self, ref: PullRequestRef) -> list[Review]:
        return await self.reviews.list(ref)

    async def get_file_content(
        self, ref: PullRequestRef, path: str, git_ref: str
    ) -> str | None:
        return await self.contents.get(ref, path, git_ref)

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "GitHubClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit - closes the client."""
        await self.close()

"""
Content fetcher.

Retrieves per-file content at the base and head commits of a pull request
with a bounded number of requests in flight.
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass

from pullmaster.client import PullRequestProvider
from pullmaster.concurrency import gather_or_cancel
from pullmaster.exceptions import ContentFetchFailedError
from pullmaster.logging import get_logger
from pullmaster.types.pulls import FileChange, PullRequestRef

logger = get_logger("aggregate")


@dataclass(frozen=True)
class FileContents:
    """Content of one file on both sides of a pull request."""

    base_content: str | None
    head_content: str | None


class ContentFetcher:
    """
    Fetch base/head content for every changed file.

    A single semaphore per fetch() call caps the number of simultaneous
    content requests across all file/ref pairs of that run.
    """

    DEFAULT_MAX_CONCURRENCY = 10

    def __init__(
        self,
        client: PullRequestProvider,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        """
        Initialize the content fetcher.

        Args:
            client: Provider used for content requests
            max_concurrency: Maximum content requests in flight at once

        Raises:
            ValueError: If max_concurrency is less than 1
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.client = client
        self.max_concurrency = max_concurrency

    async def fetch(
        self,
        ref: PullRequestRef,
        files: Iterable[FileChange],
        base_sha: str,
        head_sha: str,
    ) -> dict[str, FileContents]:
        """
        Fetch content at base_sha and head_sha for each file.

        Args:
            ref: Pull request whose repository is read
            files: Changed files (only filename is used)
            base_sha: Base commit SHA
            head_sha: Head commit SHA

        Returns:
            Mapping of filename to FileContents. A file that does not exist
            at one side has None there.

        Raises:
            ContentFetchFailedError: If any request fails; nothing partial is returned
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def fetch_one(path: str, git_ref: str) -> str | None:
            async with semaphore:
                return await self.client.get_file_content(ref, path, git_ref)

        async def fetch_file(filename: str) -> tuple[str, FileContents]:
            try:
                base_content, head_content = await gather_or_cancel(
                    fetch_one(filename, base_sha),
                    fetch_one(filename, head_sha),
                )
            except Exception as e:
                raise ContentFetchFailedError(filename, e) from e
            return filename, FileContents(base_content, head_content)

        filenames = [f.filename for f in files]
        logger.debug(
            "Fetching content for %d files of %s (max %d in flight)",
            len(filenames),
            ref,
            self.max_concurrency,
        )
        results = await gather_or_cancel(*(fetch_file(name) for name in filenames))
        return dict(results)

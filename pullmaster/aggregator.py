"""
Pull request aggregator.

Orchestrates the concurrent fetches for one pull request and merges them
into a single NormalizedPullRequestRecord.
"""

import asyncio
from collections.abc import Sequence
from dataclasses import replace

from pullmaster.client import PullRequestProvider
from pullmaster.concurrency import gather_or_cancel
from pullmaster.exceptions import AggregationCancelledError, UnknownError
from pullmaster.fetcher import ContentFetcher, FileContents
from pullmaster.logging import get_logger
from pullmaster.types.analysis import AnalysisMetadata, NormalizedPullRequestRecord
from pullmaster.types.pulls import FileChange, PullRequestMetadata, PullRequestRef

logger = get_logger("aggregate")


class PullRequestAggregator:
    """
    Build a consistent snapshot of a pull request.

    Metadata, changed files, commits and reviews are requested concurrently.
    As soon as metadata and the file list are known, content for every file
    is fetched at the base and head SHAs. The first failure anywhere fails
    the whole run with that error; no partial record is ever returned.
    Retries are left to the client.
    """

    def __init__(
        self,
        client: PullRequestProvider,
        max_concurrency: int = ContentFetcher.DEFAULT_MAX_CONCURRENCY,
        content_fetcher: ContentFetcher | None = None,
    ) -> None:
        """
        Initialize the aggregator.

        Args:
            client: Provider for this run (not shared across runs)
            max_concurrency: Cap on simultaneous content requests
            content_fetcher: Optional pre-built content fetcher
        """
        self.client = client
        self.content_fetcher = content_fetcher or ContentFetcher(
            client, max_concurrency=max_concurrency
        )

    async def aggregate(
        self, ref: PullRequestRef, timeout: float | None = None
    ) -> NormalizedPullRequestRecord:
        """
        Fetch and normalize a pull request.

        Args:
            ref: The pull request to fetch
            timeout: Optional overall deadline in seconds

        Returns:
            NormalizedPullRequestRecord with derived metadata for the full file list

        Raises:
            PullmasterError: The error of the first failing fetch, unchanged
            ContentFetchFailedError: If file content could not be fetched
            AggregationCancelledError: On timeout or cancellation
        """
        try:
            if timeout is None:
                return await self._aggregate(ref)
            return await asyncio.wait_for(self._aggregate(ref), timeout)
        except asyncio.TimeoutError as e:
            logger.warning("Aggregation of %s timed out after %ss", ref, timeout)
            raise AggregationCancelledError(
                f"Aggregation of {ref} timed out after {timeout}s"
            ) from e
        except asyncio.CancelledError as e:
            logger.warning("Aggregation of %s was cancelled", ref)
            raise AggregationCancelledError(
                f"Aggregation of {ref} was cancelled"
            ) from e

    async def _aggregate(self, ref: PullRequestRef) -> NormalizedPullRequestRecord:
        logger.info("Fetching pull request data for %s", ref)

        (metadata, files), commits, reviews = await gather_or_cancel(
            self._fetch_files_with_content(ref),
            self.client.get_commits(ref),
            self.client.get_reviews(ref),
        )

        derived = AnalysisMetadata.derive(files, commits, reviews)
        logger.info(
            "Fetched %s: %d files, %d commits, %d reviews (+%d -%d)",
            ref,
            derived.total_files,
            derived.total_commits,
            derived.total_reviews,
            derived.additions,
            derived.deletions,
        )

        return NormalizedPullRequestRecord(
            metadata=metadata,
            files=tuple(files),
            commits=tuple(commits),
            reviews=tuple(reviews),
            derived=derived,
        )

    async def _fetch_files_with_content(
        self, ref: PullRequestRef
    ) -> tuple[PullRequestMetadata, list[FileChange]]:
        metadata, files = await gather_or_cancel(
            self.client.get_metadata(ref),
            self.client.get_files(ref),
        )
        contents = await self.content_fetcher.fetch(
            ref, files, metadata.base_sha, metadata.head_sha
        )
        return metadata, merge_file_contents(files, contents)


def merge_file_contents(
    files: Sequence[FileChange], contents: dict[str, FileContents]
) -> list[FileChange]:
    """
    Join fetched content onto the file list by filename, keeping file order.

    Raises:
        UnknownError: If contents and files do not name the same files
    """
    known = {f.filename for f in files}
    unexpected = sorted(set(contents) - known)
    if unexpected:
        raise UnknownError(
            "CONTRACT_VIOLATION",
            f"Content returned for files not in the pull request: {', '.join(unexpected)}",
        )

    merged = []
    for f in files:
        fetched = contents.get(f.filename)
        if fetched is None:
            raise UnknownError(
                "CONTRACT_VIOLATION", f"No content fetched for {f.filename}"
            )
        merged.append(
            replace(
                f,
                base_content=fetched.base_content,
                head_content=fetched.head_content,
            )
        )
    return merged

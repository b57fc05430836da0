"""Reviews resource client."""

from typing import TYPE_CHECKING

from pullmaster.types.pulls import PullRequestRef, Review

if TYPE_CHECKING:
    from pullmaster.transport import AsyncHTTPTransport


class ReviewsClient:
    """Client for pull request review operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def list(self, ref: PullRequestRef) -> list[Review]:
        """
        List reviews for a pull request.

        Args:
            ref: The pull request reference

        Returns:
            List of Review objects, in provider order
        """
        reviews = await self.transport.get_paginated(
            f"/repos/{ref.owner}/{ref.repo_name}/pulls/{ref.number}/reviews"
        )
        return [
            Review(
                # Deleted accounts come back with a null user
                reviewer=(review.get("user") or {}).get("login", "ghost"),
                state=review.get("state", ""),
                submitted_at=review.get("submitted_at"),
            )
            for review in reviews
        ]

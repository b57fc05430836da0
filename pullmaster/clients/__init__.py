"""Pullmaster resource clients."""

from pullmaster.clients.contents import ContentsClient
from pullmaster.clients.pulls import PullsClient
from pullmaster.clients.reviews import ReviewsClient

__all__ = [
    "PullsClient",
    "ReviewsClient",
    "ContentsClient",
]

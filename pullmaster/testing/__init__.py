"""Pullmaster testing utilities.

Provides a fake provider and factories for testing code built on the
aggregation pipeline.
"""

from pullmaster.testing.fake import FakePullRequestClient, MockCall, MockResponse
from pullmaster.testing.fixtures import (
    create_mock_commit,
    create_mock_file,
    create_mock_metadata,
    create_mock_record,
    create_mock_review,
)

__all__ = [
    # Fake client
    "FakePullRequestClient",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_metadata",
    "create_mock_file",
    "create_mock_commit",
    "create_mock_review",
    "create_mock_record",
]

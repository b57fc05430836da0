"""Pullmaster - fetch, normalize and report on pull requests."""

from pullmaster.aggregator import PullRequestAggregator
from pullmaster.analysis import Analyzer, PendingAnalyzer
from pullmaster.client import GitHubClient, PullRequestProvider
from pullmaster.config import PullmasterConfig, find_config, load_config
from pullmaster.exceptions import (
    AggregationCancelledError,
    ConfigurationError,
    ContentFetchFailedError,
    InvalidReferenceError,
    NotFoundError,
    PullmasterError,
    RateLimitedError,
    TransientNetworkError,
    UnauthorizedError,
    UnknownError,
)
from pullmaster.fetcher import ContentFetcher, FileContents
from pullmaster.filters import FilterConfig, filter_files, filter_record
from pullmaster.logging import configure_logging, get_logger
from pullmaster.transport import AsyncHTTPTransport, RetryConfig
from pullmaster.types import (
    AnalysisFindings,
    AnalysisMetadata,
    Commit,
    FileChange,
    NormalizedPullRequestRecord,
    PullRequestMetadata,
    PullRequestRef,
    Review,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Pipeline
    "PullRequestAggregator",
    "ContentFetcher",
    "FileContents",
    "FilterConfig",
    "filter_files",
    "filter_record",
    # Clients
    "PullRequestProvider",
    "GitHubClient",
    # Analysis
    "Analyzer",
    "PendingAnalyzer",
    # Types
    "PullRequestRef",
    "PullRequestMetadata",
    "FileChange",
    "Commit",
    "Review",
    "AnalysisMetadata",
    "NormalizedPullRequestRecord",
    "AnalysisFindings",
    # Exceptions
    "PullmasterError",
    "InvalidReferenceError",
    "NotFoundError",
    "UnauthorizedError",
    "RateLimitedError",
    "TransientNetworkError",
    "ContentFetchFailedError",
    "AggregationCancelledError",
    "UnknownError",
    "ConfigurationError",
    # Configuration
    "PullmasterConfig",
    "find_config",
    "load_config",
    # Transport
    "AsyncHTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]

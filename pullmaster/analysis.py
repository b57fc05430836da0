"""
Analysis step interface.

The analysis step receives a normalized record and returns structured
findings. Only a placeholder implementation exists for now.
"""

from abc import ABC, abstractmethod

from pullmaster.types.analysis import AnalysisFindings, NormalizedPullRequestRecord

PENDING_SUMMARY = "AI analysis pending implementation"


class Analyzer(ABC):
    """Abstract base class for analysis steps."""

    @abstractmethod
    async def analyze(self, record: NormalizedPullRequestRecord) -> AnalysisFindings:
        """Analyze a pull request snapshot."""
        pass


class PendingAnalyzer(Analyzer):
    """Returns empty findings with a placeholder summary."""

    def __init__(self, model: str | None = None) -> None:
        self.model = model

    async def analyze(self, record: NormalizedPullRequestRecord) -> AnalysisFindings:
        return AnalysisFindings(summary=PENDING_SUMMARY)

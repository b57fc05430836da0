"""File filtering for normalized pull request records."""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from pullmaster.exceptions import ConfigurationError
from pullmaster.types.analysis import AnalysisMetadata, NormalizedPullRequestRecord
from pullmaster.types.pulls import FileChange


@dataclass(frozen=True)
class FilterConfig:
    """Which changed files to keep for analysis."""

    max_files: int | None = None
    exclude_patterns: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.max_files is not None and self.max_files < 1:
            raise ValueError("max_files must be a positive integer or None")
        # Accept any iterable of patterns (e.g. a list loaded from JSON)
        object.__setattr__(self, "exclude_patterns", tuple(self.exclude_patterns))

    def compile(self) -> list[re.Pattern[str]]:
        """
        Compile the exclusion patterns.

        Raises:
            ConfigurationError: If a pattern is not a valid regular expression
        """
        compiled = []
        for pattern in self.exclude_patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                raise ConfigurationError(
                    f"Invalid exclude pattern {pattern!r}: {e}"
                ) from e
        return compiled


def filter_files(
    files: Sequence[FileChange], config: FilterConfig
) -> list[FileChange]:
    """
    Truncate to config.max_files, then drop files matching any exclude pattern.

    The order matters: exclusion is applied to the already truncated list,
    so the result may hold fewer than max_files entries.
    """
    kept: Iterable[FileChange] = files
    if config.max_files is not None:
        kept = files[: config.max_files]

    patterns = config.compile()
    if patterns:
        kept = [
            f for f in kept if not any(p.search(f.filename) for p in patterns)
        ]

    return list(kept)


def filter_record(
    record: NormalizedPullRequestRecord, config: FilterConfig
) -> NormalizedPullRequestRecord:
    """
    Return a new record holding only the kept files.

    Derived metadata is recomputed from the filtered list, so totals always
    describe the files attached to the returned record.
    """
    files = filter_files(record.files, config)
    return replace(
        record,
        files=tuple(files),
        derived=AnalysisMetadata.derive(files, record.commits, record.reviews),
    )

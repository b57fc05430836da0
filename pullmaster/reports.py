"""
Report writers.

Turn a normalized record into the persisted outputs: a JSON + Markdown
analysis report, or a prompt dump with the raw snapshot alongside.
"""

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pullmaster.logging import get_logger
from pullmaster.types.analysis import AnalysisFindings, NormalizedPullRequestRecord

logger = get_logger("reports")

DEFAULT_OUTPUT_DIR = "pullmaster-results"


def _timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S-") + f"{now.microsecond // 1000:03d}Z"


def record_to_dict(record: NormalizedPullRequestRecord) -> dict[str, Any]:
    """Convert a record into JSON-serializable data."""
    data = asdict(record)
    data["derived"]["reviewers"] = sorted(record.derived.reviewers)
    return data


def build_results(
    record: NormalizedPullRequestRecord, findings: AnalysisFindings
) -> dict[str, Any]:
    """
    Assemble the JSON report structure.

    Metadata reflects whichever file list is attached to record, so pass the
    filtered record to report on the analyzed files.
    """
    meta = record.metadata
    derived = record.derived
    return {
        "pullRequest": {
            "title": meta.title,
            "description": meta.description,
            "author": meta.author,
            "baseBranch": meta.base_branch,
            "headBranch": meta.head_branch,
        },
        "changes": [
            {
                "filename": f.filename,
                "status": f.status,
                "additions": f.additions,
                "deletions": f.deletions,
                "previousContent": f.base_content,
                "newContent": f.head_content,
            }
            for f in record.files
        ],
        "commits": [
            {"message": c.message, "author": c.author_name, "date": c.author_date}
            for c in record.commits
        ],
        "metadata": {
            "totalCommits": derived.total_commits,
            "totalFiles": derived.total_files,
            "additions": derived.additions,
            "deletions": derived.deletions,
            "totalReviews": derived.total_reviews,
            "changedFiles": list(derived.changed_files),
            "reviewers": sorted(derived.reviewers),
        },
        "analysis": asdict(findings),
    }


def _bullets(items: list[str], prefix: str = "") -> str:
    return "\n".join(f"- {prefix}{item}" for item in items)


def render_markdown(results: dict[str, Any]) -> str:
    """Render the fixed-template Markdown report for build_results() output."""
    pr = results["pullRequest"]
    meta = results["metadata"]
    analysis = results["analysis"]
    return f"""# Pull Request Analysis Report

## Overview
- Title: {pr['title']}
- Author: {pr['author']}
- Base Branch: {pr['baseBranch']}
- Head Branch: {pr['headBranch']}

## Statistics
- Files Changed: {meta['totalFiles']}
- Total Commits: {meta['totalCommits']}
- Additions: {meta['additions']}
- Deletions: {meta['deletions']}

## Analysis Results
{analysis['summary']}

### Security Issues
{_bullets(analysis['security'], '🔒 ')}

### Code Quality
{_bullets(analysis['quality'], '💡 ')}

### Potential Bugs
{_bullets(analysis['bugs'], '🐛 ')}

### Recommendations
{_bullets(analysis['recommendations'], '✨ ')}

## Changed Files
{_bullets(meta['changedFiles'])}

## Reviewers
{_bullets(meta['reviewers'], '@')}
"""


def save_results(
    results: dict[str, Any],
    output_dir: Path | str | None = None,
    now: datetime | None = None,
) -> tuple[Path, Path]:
    """
    Write the JSON and Markdown reports.

    Args:
        results: Output of build_results()
        output_dir: Target directory (default: ./pullmaster-results)
        now: Timestamp used in the file names (default: current UTC time)

    Returns:
        (json_path, markdown_path)
    """
    directory = Path(output_dir) if output_dir else Path.cwd() / DEFAULT_OUTPUT_DIR
    directory.mkdir(parents=True, exist_ok=True)
    stamp = _timestamp(now)

    json_path = directory / f"analysis-{stamp}.json"
    json_path.write_text(json.dumps(results, indent=2), encoding="utf-8")

    md_path = directory / f"analysis-{stamp}.md"
    md_path.write_text(render_markdown(results), encoding="utf-8")

    logger.info("Saved report to %s and %s", json_path, md_path)
    return json_path, md_path


def build_prompt(record: NormalizedPullRequestRecord) -> str:
    """Build an analysis prompt from the record's metadata, commits and diffs."""
    meta = record.metadata
    derived = record.derived

    file_changes = "\n".join(
        f"""
File: {f.filename}
Status: {f.status}
Changes: +{f.additions} -{f.deletions}
Diff:
```
{f.patch or 'Binary file changed'}
```
"""
        for f in record.files
    )
    commits = "\n".join(f"- {c.message}" for c in record.commits)

    return f"""Please analyze this Pull Request and provide feedback on:
- Code quality issues
- Potential bugs or errors
- Security concerns
- Best practices recommendations
- Suggested improvements

Pull Request Details:
Title: {meta.title}
Description: {meta.description or 'No description provided'}
Author: {meta.author}
Base Branch: {meta.base_branch}
Head Branch: {meta.head_branch}

Changes Overview:
- Total Files Changed: {derived.total_files}
- Total Commits: {derived.total_commits}
- Total Additions: {derived.additions}
- Total Deletions: {derived.deletions}

Commits:
{commits}

File Changes:
{file_changes}
"""


def save_prompt(
    record: NormalizedPullRequestRecord,
    output_dir: Path | str | None = None,
    now: datetime | None = None,
    number: int | None = None,
) -> tuple[Path, Path]:
    """
    Write the prompt and the raw snapshot for later analysis.

    Files are named after number, falling back to the number in the record
    metadata.

    Returns:
        (prompt_path, data_path)
    """
    if number is None:
        number = record.metadata.number
    if number is None:
        raise ValueError("Pull request number is unknown; pass number explicitly")

    directory = Path(output_dir) if output_dir else Path.cwd()
    directory.mkdir(parents=True, exist_ok=True)
    stamp = _timestamp(now)

    prompt_path = directory / f"pr-{number}-prompt-{stamp}.txt"
    prompt_path.write_text(build_prompt(record), encoding="utf-8")

    data_path = directory / f"pr-{number}-data-{stamp}.json"
    data_path.write_text(json.dumps(record_to_dict(record), indent=2), encoding="utf-8")

    logger.info("Saved prompt to %s and raw data to %s", prompt_path, data_path)
    return prompt_path, data_path

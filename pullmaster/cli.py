"""Pullmaster command-line entry point.

Usage: pullmaster analyze github owner/repo 42 | pullmaster configure --init |
pullmaster validate.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pullmaster.aggregator import PullRequestAggregator
from pullmaster.analysis import PendingAnalyzer
from pullmaster.client import GitHubClient
from pullmaster.config import (
    init_config,
    load_config,
    save_config,
    validate_config,
)
from pullmaster.exceptions import ConfigurationError, PullmasterError
from pullmaster.filters import filter_record
from pullmaster.logging import configure_logging, safe_log_dict
from pullmaster.reports import build_results, save_prompt, save_results
from pullmaster.types.pulls import PullRequestRef

SUPPORTED_PROVIDERS = ("github",)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pullmaster",
        description="Fetch a pull request and write an analysis report",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log output (-v info, -vv debug)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze a pull request")
    analyze.add_argument("provider", help="Git hosting provider (github)")
    analyze.add_argument("repo", help="Repository in format owner/repo")
    analyze.add_argument("number", help="Pull request number")
    analyze.add_argument("--config", "-c", type=Path, help="Path to config file")
    analyze.add_argument("--output", "-o", type=Path, help="Output directory")
    analyze.add_argument(
        "--mode",
        choices=("report", "prompt"),
        default="report",
        help="Write an analysis report or dump a prompt with the raw data",
    )
    analyze.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Overall deadline in seconds for fetching the pull request",
    )

    configure = sub.add_parser("configure", help="Create or update configuration")
    configure.add_argument("--init", action="store_true", help="Initialize with defaults")
    configure.add_argument("--github-token", help="GitHub access token")
    configure.add_argument("--config", "-c", type=Path, help="Path to config file")

    validate = sub.add_parser("validate", help="Validate configuration")
    validate.add_argument("--config", "-c", type=Path, help="Path to config file")
    validate.add_argument("--quiet", "-q", action="store_true", help="Only set the exit code")

    return parser


async def run_analyze(args: argparse.Namespace) -> int:
    """Fetch, filter, analyze and persist one pull request."""
    if args.provider.lower() not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(
            f"Unsupported provider {args.provider!r}. Supported: {', '.join(SUPPORTED_PROVIDERS)}"
        )

    config = load_config(args.config)
    issues = validate_config(config)
    if issues:
        raise ConfigurationError("; ".join(issues))

    ref = PullRequestRef.parse(args.repo, args.number)
    print("Starting pull request analysis...")

    async with GitHubClient.from_config(config) as client:
        aggregator = PullRequestAggregator(
            client, max_concurrency=config.max_concurrency
        )
        print("Fetching PR data...")
        record = await aggregator.aggregate(ref, timeout=args.timeout)

    filtered = filter_record(record, config.filter_config())

    if args.mode == "prompt":
        prompt_path, data_path = save_prompt(filtered, args.output, number=ref.number)
        print("\nAnalysis preparation completed!")
        print(f"Files saved:\n- Prompt: {prompt_path}\n- Raw data: {data_path}")
        return 0

    findings = await PendingAnalyzer(config.ai_model).analyze(filtered)
    json_path, md_path = save_results(build_results(filtered, findings), args.output)
    print("\nAnalysis completed successfully!")
    print(f"Results saved to:\n- JSON: {json_path}\n- Markdown: {md_path}")
    return 0


def run_configure(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config)
    except ConfigurationError:
        if not args.init:
            raise
        print("Initializing new configuration...")
        config = None

    if config is not None and args.github_token:
        config.github_token = args.github_token
    if args.init or config is None:
        config = init_config(config, args.github_token)

    path = save_config(config, args.config)
    print(f"Configuration updated successfully! ({path})")

    for issue in validate_config(config):
        print(f"Warning: {issue}", file=sys.stderr)
    return 0


def run_validate(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    issues = validate_config(config)

    if not args.quiet:
        if not issues:
            print("Configuration is valid! ✅")
            print("\nCurrent configuration:")
            print(json.dumps(safe_log_dict(config.to_dict()), indent=2))
        else:
            print("Configuration validation failed! ❌", file=sys.stderr)
            print("\nIssues found:", file=sys.stderr)
            for issue in issues:
                print(f"- {issue}", file=sys.stderr)

    return 0 if not issues else 1


def main(argv: list[str] | None = None) -> int:
    """Entry point: dispatch to analyze, configure or validate."""
    args = build_parser().parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    configure_logging(level=level)

    try:
        if args.command == "analyze":
            return asyncio.run(run_analyze(args))
        if args.command == "configure":
            return run_configure(args)
        return run_validate(args)
    except PullmasterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Error: [CANCELLED] Interrupted", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""
Pytest plugin for Pullmaster testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["pullmaster.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from pullmaster.testing.fixtures import (
    fake_client,
    pr_ref,
    sample_files,
    sample_metadata,
    sample_record,
)

__all__ = [
    "fake_client",
    "pr_ref",
    "sample_files",
    "sample_metadata",
    "sample_record",
]

"""Pytest configuration helpers for test collection.

Put the repository root on sys.path so tests can import `modelstore` and
`tests.helpers` without an installed package or PYTHONPATH.
"""
import sys
from pathlib import Path


def pytest_configure(config):
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))

"""
Harness module - base querier and per-test dependency bundle (harness.deps)
"""

from .base_querier import MockQuerier

__all__ = [
    "MockQuerier",
]

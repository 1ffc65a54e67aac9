"""
Querier module - classifies serialized chain queries and answers them from test fixtures.

Submodules are imported directly (querier.simulator, querier.query, ...);
harness.base_querier depends on this package, so nothing is imported eagerly here.
"""

"""
Test fixtures package for hashtree tests.

Usage:
    from fixtures import make_tree, make_values

    def test_something():
        tree = make_tree(make_values(5))
"""

from .common import (
    LETTERS,
    make_values,
    make_engine,
    make_tree,
)

__all__ = [
    "LETTERS",
    "make_values",
    "make_engine",
    "make_tree",
]

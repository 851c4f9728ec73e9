"""
CLI command modules.
"""

from hashtree_cli.commands import demo, prove, root, verify

__all__ = ["demo", "prove", "root", "verify"]

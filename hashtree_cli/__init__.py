"""
hashtree CLI

Command-line interface for building Merkle trees and working with
inclusion proofs.

Usage:
    python -m hashtree_cli demo
    python -m hashtree_cli root a b c
    python -m hashtree_cli prove --value b a b c --out proof.json
    python -m hashtree_cli verify proof.json
"""

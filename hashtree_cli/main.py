"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m hashtree_cli demo
    python -m hashtree_cli root a b c d [--show-tree] [--json]
    python -m hashtree_cli prove --value b a b c d [--out proof.json] [--format json|binary]
    python -m hashtree_cli verify proof.json [--root 0x...] [--value b] [--json]
    python -m hashtree_cli config --show

Environment Variables:
    HASHTREE_HASH_ALGORITHM     hashlib algorithm name (default: sha256)
    HASHTREE_PROOF_FORMAT       Proof output format: json, binary (default: json)
    HASHTREE_LOG_LEVEL          Log level (default: INFO)
    HASHTREE_LOG_FILE           Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from hashtree import __version__
from hashtree.config import PROOF_FORMATS, RuntimeConfig
from hashtree.schemas.errors import HashTreeException
from hashtree_cli.commands import demo, prove, root, verify
from hashtree_cli.commands.common import EXIT_RUNTIME_ERROR, EXIT_SUCCESS


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_value_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "values",
        nargs="*",
        help="Leaf values (UTF-8 strings, order preserved)",
    )
    parser.add_argument(
        "--from-file", "-f",
        type=str,
        default=None,
        help="Read leaf values from a file, one per line",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="hashtree",
        description="hashtree CLI - Build Merkle trees, create and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to a YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--algorithm", "-a",
        type=str,
        default=None,
        help="hashlib digest algorithm (overrides config, default: sha256)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- demo command ---
    demo_parser = subparsers.add_parser(
        "demo",
        help="Build a tree over a..h, then prove and verify 'a'",
    )
    demo_parser.set_defaults(func=demo.demo_cmd)

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Compute the root digest of a set of values",
    )
    _add_value_args(root_parser)
    root_parser.add_argument(
        "--show-tree",
        action="store_true",
        default=False,
        help="Print every level of the tree",
    )
    root_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    root_parser.set_defaults(func=root.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Create an inclusion proof for one value",
    )
    _add_value_args(prove_parser)
    prove_parser.add_argument(
        "--value", "-v",
        type=str,
        required=True,
        help="The value to prove",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof to this file (default: stdout)",
    )
    prove_parser.add_argument(
        "--format",
        type=str,
        choices=list(PROOF_FORMATS),
        default=None,
        help="Proof encoding (default: from config)",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a serialized proof against a root digest",
    )
    verify_parser.add_argument(
        "proof_path",
        type=str,
        help="Path to a proof file (JSON or binary)",
    )
    verify_parser.add_argument(
        "--root", "-r",
        type=str,
        default=None,
        help="Trusted root digest (0x hex); required for binary proofs",
    )
    verify_parser.add_argument(
        "--value", "-v",
        type=str,
        default=None,
        help="Also check that the proof is for this value",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Show the effective configuration",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: hashtree config --show")
    return EXIT_SUCCESS


def load_runtime_config(args: argparse.Namespace) -> RuntimeConfig:
    """Config file (if any), then env vars, then command-line flags."""
    if args.config is not None:
        config = RuntimeConfig.from_yaml(args.config).with_env_overrides()
    else:
        config = RuntimeConfig.from_env()
    if args.algorithm:
        config.hash_algorithm = args.algorithm
    if args.log_level:
        config.log_level = args.log_level
    return config


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_runtime_config(args)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(level=config.log_level, log_file=config.log_file)

    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except HashTreeException as e:
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if config.log_level.upper() == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())

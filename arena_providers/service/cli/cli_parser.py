"""CLI parser construction for arena-cli.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions`` to keep files small and testable.
"""

from __future__ import annotations

import argparse

from ...base.models import WireFamily


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser with ``models`` and ``compare`` subcommands.

    Design
    ------
    No I/O or network calls occur here. ``compare`` is a dry run unless
    ``--execute`` is passed.
    """
    p = argparse.ArgumentParser(
        prog="arena-cli", description="Compare streamed model responses (safe by default: dry-run)"
    )
    p.add_argument("--catalog", default=None, help="Catalog YAML file or directory")
    p.add_argument("--log-level", default=None, help="debug|info|warning|error|critical")
    p.add_argument("--log-file", default=None, help="Also write JSON logs to this rotating file")
    sub = p.add_subparsers(dest="cmd")

    # models
    p_models = sub.add_parser("models", help="List catalog models with pricing")
    p_models.add_argument("--family", default=None, choices=[f.value for f in WireFamily])
    p_models.add_argument("--json", action="store_true")

    # compare
    p_cmp = sub.add_parser("compare", help="Plan or execute one prompt against several models")
    p_cmp.add_argument("--model", dest="models", action="append", required=True, help="Model id (repeatable)")
    p_cmp.add_argument("--prompt", required=True)
    p_cmp.add_argument("--system", default=None)
    p_cmp.add_argument("--max-tokens", type=int, default=None)
    p_cmp.add_argument("--temperature", type=float, default=None)
    p_cmp.add_argument("--reasoning-effort", default=None, choices=["minimal", "low", "medium", "high"])
    p_cmp.add_argument("--thinking-budget", type=int, default=None)
    p_cmp.add_argument("--web-search", action="store_true")
    p_cmp.add_argument("--execute", action="store_true")
    p_cmp.add_argument("--live", action="store_true", help="Print status transitions as they happen")
    p_cmp.add_argument("--json", action="store_true")

    return p


__all__ = ["build_parser"]

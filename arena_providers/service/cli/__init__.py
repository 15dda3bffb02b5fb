"""Arena CLI (package entrypoint).

Subcommands:
- ``models``: list the catalog with wire family, category and pricing.
- ``compare``: print the redacted request plan for a prompt, or run it with
  ``--execute`` and print per-model text, tokens, cost and errors.

Handlers live in ``cli_actions``; this module only parses and dispatches.
"""

from __future__ import annotations

import sys
from typing import Callable, Dict, Optional

from ...base.logging import configure_logger
from .cli_actions import handle_compare, handle_models, plan_compare
from .cli_parser import build_parser
from .cli_utils import parse_verbosity

_HANDLERS: Dict[str, Callable[..., int]] = {
	"models": handle_models,
	"compare": handle_compare,
}


def main(argv: Optional[list[str]] = None) -> int:
	"""Parse ``argv`` (default ``sys.argv[1:]``) and return the exit code.

	Exit codes: ``0`` success, ``1`` at least one model errored, ``2`` usage or
	catalog problems.
	"""
	parser = build_parser()
	args = parser.parse_args(sys.argv[1:] if argv is None else list(argv))
	level = None
	if args.log_level:
		level = parse_verbosity(args.log_level)
		if level is None:
			parser.error(f"invalid --log-level '{args.log_level}'")
	if level is not None or args.log_file:
		configure_logger(level=level, file_path=args.log_file)
	handler = _HANDLERS.get(args.cmd or "")
	if handler is None:
		parser.print_help()
		return 2
	return handler(args)


__all__ = ["main", "plan_compare"]

from __future__ import annotations

import argparse
import json
import logging
import sys

import uvicorn

from maskcheck.config import ScanConfig
from maskcheck.driver import check_masking
from maskcheck.errors import MaskCheckError
from maskcheck.report import summarize_duplicates, summarize_result
from maskcheck.resolver import find_duplicates
from maskcheck.scopes import ModuleScopeProvider


logger = logging.getLogger("maskcheck")


def _load_config(args: argparse.Namespace) -> ScanConfig:
	if args.config:
		return ScanConfig.from_file(args.config)
	return ScanConfig.from_env()


def cmd_check(args: argparse.Namespace) -> int:
	try:
		config = _load_config(args)
		provider = ModuleScopeProvider(args.module or ["__main__"])
		if args.duplicates:
			duplicates = find_duplicates(provider.scopes(), config.allowed)
			if args.json:
				print(json.dumps([d.model_dump() for d in duplicates], indent=2))
			else:
				print(summarize_duplicates(duplicates))
			return 1 if duplicates else 0
		result = check_masking(
			provider,
			scripts=args.script or [],
			functions=args.function or [],
			packages=args.package or [],
			config=config,
		)
	except MaskCheckError as e:
		logger.error("%s", e)
		return 2
	if args.json:
		print(json.dumps(result.model_dump(), indent=2))
	else:
		print(summarize_result(result))
	return 1 if result.problems else 0


def cmd_serve(args: argparse.Namespace) -> int:
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)
	return 0


def main(argv=None) -> int:
	parser = argparse.ArgumentParser(prog="maskcheck")
	parser.add_argument("--log-level", default="WARNING")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pc = sub.add_parser("check", help="Check scripts for calls to masked functions")
	pc.add_argument("--script", action="append", help="Script file or directory to check")
	pc.add_argument("--module", action="append", help="Module on the search path, first takes precedence")
	pc.add_argument("--package", action="append", help="Check all functions of this module")
	pc.add_argument("--function", action="append", help="Check the source of this function")
	pc.add_argument("--config", help="JSON configuration file (default: MASKCHECK_* environment)")
	pc.add_argument("--duplicates", action="store_true", help="Only list masked names")
	pc.add_argument("--json", action="store_true", help="Print JSON instead of text")
	pc.set_defaults(func=cmd_check)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)

	args = parser.parse_args(argv)
	logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
	return args.func(args)


if __name__ == "__main__":
	sys.exit(main())

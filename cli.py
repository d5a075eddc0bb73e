from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import uvicorn

from flowscope.config import load_settings
from flowscope.errors import FlowscopeError
from flowscope.log import configure_logging
from flowscope.pipeline import analyze_repository
from flowscope.summarize import summarize_result


def cmd_analyze(args: argparse.Namespace) -> int:
	configure_logging(verbose=args.verbose, log_file=Path(args.log_file) if args.log_file else None)
	settings = load_settings(fallback_enabled=False if args.no_fallback else None)
	try:
		result = analyze_repository(args.url, settings)
	except FlowscopeError as e:
		print(f"error: {e}", file=sys.stderr)
		return 1

	if args.summary:
		print(summarize_result(result))
	else:
		print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
	return 0


def cmd_serve(args: argparse.Namespace) -> int:
	configure_logging(verbose=args.verbose)
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)
	return 0


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="flowscope")
	parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pa = sub.add_parser("analyze", help="Analyze a GitHub repository and print its page flow")
	pa.add_argument("url", help="GitHub repository URL, optionally with /tree/<branch>")
	pa.add_argument("--summary", action="store_true", help="Print a text summary instead of JSON")
	pa.add_argument("--no-fallback", action="store_true", help="Fail instead of showing demo data")
	pa.add_argument("--log-file", help="Also write logs to this file")
	pa.set_defaults(func=cmd_analyze)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)
	return parser


def main() -> None:
	args = build_parser().parse_args()
	sys.exit(args.func(args))


if __name__ == "__main__":
	main()

"""
Command line runner for QuickJava.

	python run_java.py Program.java
	python run_java.py --example patterns --json
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from webapp.examples import EXAMPLES, example_names
from webapp.interpreter import SimulationConfig, interpret

ACCEPTED_SUFFIXES = (".java", ".txt")

logger = logging.getLogger("quickjava.cli")


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="quickjava", description="Simulate a small Java program and print the report.")
	source = parser.add_mutually_exclusive_group(required=True)
	source.add_argument("file", nargs="?", help="a .java or .txt file")
	source.add_argument("--example", choices=example_names(), help="run one of the bundled example programs")
	parser.add_argument("--json", action="store_true", help="print the structured result instead of the report")
	parser.add_argument("--max-iterations", type=int, default=None, help="loop iteration cap for this run")
	parser.add_argument("--print-only-bodies", action="store_true", help="only re-run print statements inside loop bodies")
	parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
	return parser


def load_source(path: Path) -> str:
	if path.suffix.lower() not in ACCEPTED_SUFFIXES:
		raise ValueError(f"Please select a .java or .txt file (got {path.name})")
	return path.read_text(encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> int:
	parser = build_parser()
	args = parser.parse_args(argv)
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)

	if args.example:
		source = EXAMPLES[args.example]
	else:
		try:
			source = load_source(Path(args.file))
		except (OSError, ValueError) as exc:
			print(f"error: {exc}", file=sys.stderr)
			return 2

	config = SimulationConfig.from_env()
	if args.max_iterations is not None:
		config = dataclasses.replace(config, max_iterations=args.max_iterations)
	if args.print_only_bodies:
		config = dataclasses.replace(config, print_only_bodies=True)

	logger.debug("running with %s", config)
	result = interpret(source, config)
	if args.json:
		print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
	else:
		print(result.report)
	return 0 if result.success else 1


if __name__ == "__main__":
	sys.exit(main())

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
synmac CLI: expand `#[derive(Builder)]` sites and `seq!` invocations in files.

Each source file is one compilation unit. Expanded units are printed (or written
with -o) in a deterministic layout; any diagnostic fails the run with exit code
1 and no output for that unit.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from synmac.core.config import ExpansionConfig
from synmac.core.diagnostics import Diagnostic
from synmac.expander import expand_source
from synmac.tokens.printer import render_pretty


def _diag_to_json(diag: Diagnostic, phase: str, source: Path) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	file = diag.span.file if diag.span.file is not None else str(source)
	return {
		"phase": diag.phase or phase,
		"code": diag.code,
		"message": diag.message,
		"severity": diag.severity,
		"file": file,
		"line": diag.span.line,
		"column": diag.span.column,
		"notes": list(diag.notes),
	}


def _diag_to_text(diag: Diagnostic, source: Path) -> str:
	file = diag.span.file if diag.span.file is not None else str(source)
	text = f"{file}:{diag.span.describe()}: {diag.severity}: {diag.message}"
	for note in diag.notes:
		text += f"\n  note: {note}"
	return text


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="synmac", description="Expand builder derives and seq! invocations")
	parser.add_argument("source", type=Path, nargs="+", help="Path(s) to source file(s); each is one unit")
	parser.add_argument("-o", "--output", type=Path, help="Write the expanded unit(s) here instead of stdout")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/code/message/severity/file/line/column)",
	)
	parser.add_argument(
		"--builder-suffix",
		default="Builder",
		help="Suffix appended to a struct name to name its builder (default: Builder)",
	)
	parser.add_argument(
		"--recursion-limit",
		type=int,
		default=128,
		help="Maximum nesting of seq! invocations produced by other expansions (default: 128)",
	)
	return parser


def main(argv: list[str] | None = None) -> int:
	"""
	Expand every source file. With --json, diagnostics are printed as one JSON
	object `{"exit_code", "diagnostics"}` on stdout (plus `output` on success
	without -o); otherwise as `file:line:col: severity: message` on stderr.
	"""
	parser = build_parser()
	args = parser.parse_args(argv)
	try:
		config = ExpansionConfig(builder_suffix=args.builder_suffix, recursion_limit=args.recursion_limit)
	except ValueError as err:
		parser.error(str(err))

	rendered: List[str] = []
	diagnostics: List[tuple[Diagnostic, Path]] = []
	for source_path in args.source:
		try:
			text = source_path.read_text()
		except OSError as err:
			diagnostics.append((Diagnostic(message=f"cannot read {source_path}: {err.strerror}", phase="io"), source_path))
			continue
		result = expand_source(text, file=str(source_path), config=config)
		if not result.ok:
			diagnostics.extend((d, source_path) for d in result.diagnostics)
			continue
		rendered.append(render_pretty(result.tokens))

	if diagnostics:
		if args.json:
			payload = {
				"exit_code": 1,
				"diagnostics": [_diag_to_json(d, "expand", src) for d, src in diagnostics],
			}
			print(json.dumps(payload))
		else:
			for d, src in diagnostics:
				print(_diag_to_text(d, src), file=sys.stderr)
		return 1

	output = "\n".join(rendered)
	if args.output is not None:
		args.output.write_text(output)
	if args.json:
		payload = {"exit_code": 0, "diagnostics": []}
		if args.output is None:
			payload["output"] = output
		print(json.dumps(payload))
	elif args.output is None:
		sys.stdout.write(output)
	return 0


__all__ = ["main", "build_parser"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostics reported for one unit of expansion.

Macro engines raise `StructuralError`; `synmac.expander` turns each one into a
`Diagnostic` and the CLI prints them as text or JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	message: str
	# `E-LEX`, `E-BUILDER`, `E-SEQ`; unset for driver problems such as unreadable files.
	code: str | None = None
	# `lex`, `expand` or `io`.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)
	# Extra lines printed under the message.
	notes: list[str] = field(default_factory=list)


def has_errors(diagnostics: list[Diagnostic]) -> bool:
	return any(d.severity == "error" for d in diagnostics)


__all__ = ["Diagnostic", "has_errors"]

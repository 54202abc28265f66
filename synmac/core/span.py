# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span representation shared by tokens and diagnostics.

A Span carries best-effort file/line/column info plus character offsets into the
source text. The lexer token that produced the span may be kept in `raw`; it is
excluded from comparisons so two lexes of the same text compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (file/line/column plus char offsets)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	start: Optional[int] = None
	end: Optional[int] = None
	raw: Any = field(default=None, compare=False, repr=False)

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a lexer token (or anything shaped like one).

		If `loc` is already a Span, it is returned unchanged. Lark tokens expose
		`line`/`column`/`end_line`/`end_column` and `start_pos`/`end_pos`.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			return loc
		return cls(
			file=file or getattr(loc, "file", None) or None,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			start=getattr(loc, "start_pos", None),
			end=getattr(loc, "end_pos", None),
			raw=loc,
		)

	@property
	def known(self) -> bool:
		"""True when the span points at a real line (not the `Span()` sentinel)."""
		return self.line is not None

	def join(self, other: "Span") -> "Span":
		"""Return a span covering `self` through `other` (same file assumed)."""
		if not self.known:
			return other
		if not other.known:
			return self
		return Span(
			file=self.file or other.file,
			line=self.line,
			column=self.column,
			end_line=other.end_line,
			end_column=other.end_column,
			start=self.start,
			end=other.end,
		)

	def describe(self) -> str:
		"""`line:column` for messages, `?:?` when unknown."""
		if not self.known:
			return "?:?"
		return f"{self.line}:{self.column if self.column is not None else '?'}"


__all__ = ["Span"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Expansion-time error raised for malformed macro input.
"""

from __future__ import annotations

from .span import Span


class StructuralError(ValueError):
	"""
	Malformed input shape detected before any output is produced.

	This is a `ValueError` subclass carrying the span of the offending token so
	the host boundary can convert it into a positioned diagnostic instead of
	crashing the expansion.
	"""

	def __init__(self, message: str, *, span: Span | None = None) -> None:
		super().__init__(message)
		self.message = message
		self.span = span if span is not None else Span()


__all__ = ["StructuralError"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parse cursor over a token stream.

Header and declaration parsers walk a stream with a `Cursor`: `peek` looks ahead,
`expect_*` consumes or raises `StructuralError` at the offending token. When the
stream runs out, errors point at `end_span` (usually the closing delimiter of
the enclosing group, or the last token seen).
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from synmac.core.errors import StructuralError
from synmac.core.span import Span
from .tree import Delimiter, Group, Ident, Literal, LiteralKind, Punct, Spacing, TokenStream, TokenTree

_INT_SUFFIX = re.compile(r"(i8|i16|i32|i64|i128|isize|u8|u16|u32|u64|u128|usize)$")


def describe(tree: Optional[TokenTree]) -> str:
	"""Short user-facing description of a token for messages."""
	if tree is None:
		return "end of input"
	if isinstance(tree, Ident):
		return f"`{tree.text}`"
	if isinstance(tree, Punct):
		return f"`{tree.char}`"
	if isinstance(tree, Literal):
		return f"literal `{tree.text}`"
	return f"`{tree.delimiter.open}`"


def int_literal_value(lit: Literal) -> int:
	"""
	Value of an integer literal token (`1_000`, `0x1F`, `7u8`).

	Leading zeros are decimal, not octal.
	"""
	if lit.kind is not LiteralKind.INT:
		raise TypeError(f"not an integer literal: {lit.text}")
	text = _INT_SUFFIX.sub("", lit.text).replace("_", "")
	lowered = text.lower()
	if lowered.startswith("0x"):
		return int(text[2:], 16)
	if lowered.startswith("0o"):
		return int(text[2:], 8)
	if lowered.startswith("0b"):
		return int(text[2:], 2)
	return int(text, 10)


class Cursor:
	def __init__(self, stream: TokenStream, *, end_span: Optional[Span] = None) -> None:
		self._stream = tuple(stream)
		self._pos = 0
		if end_span is None:
			end_span = self._stream[-1].span if self._stream else Span()
		self._end_span = end_span

	@classmethod
	def of_group(cls, group: Group) -> "Cursor":
		return cls(group.stream, end_span=group.close_span)

	# Inspection --------------------------------------------------------

	@property
	def position(self) -> int:
		return self._pos

	def at_end(self) -> bool:
		return self._pos >= len(self._stream)

	def peek(self, offset: int = 0) -> Optional[TokenTree]:
		idx = self._pos + offset
		if idx < len(self._stream):
			return self._stream[idx]
		return None

	def rest(self) -> TokenStream:
		return self._stream[self._pos :]

	def span_here(self) -> Span:
		tree = self.peek()
		return tree.span if tree is not None else self._end_span

	def peek_ident(self, text: Optional[str] = None) -> bool:
		tree = self.peek()
		return isinstance(tree, Ident) and (text is None or tree.text == text)

	def peek_punct(self, op: str) -> bool:
		"""True when the next tokens spell `op` as joint punctuation."""
		for i, ch in enumerate(op):
			tree = self.peek(i)
			if not isinstance(tree, Punct) or tree.char != ch:
				return False
			if i + 1 < len(op) and tree.spacing is not Spacing.JOINT:
				return False
		return True

	def peek_group(self, delimiter: Optional[Delimiter] = None) -> bool:
		tree = self.peek()
		return isinstance(tree, Group) and (delimiter is None or tree.delimiter is delimiter)

	# Consumption -------------------------------------------------------

	def error(self, message: str, *, span: Optional[Span] = None) -> StructuralError:
		return StructuralError(message, span=span if span is not None else self.span_here())

	def advance(self) -> TokenTree:
		tree = self.peek()
		if tree is None:
			raise self.error("unexpected end of input")
		self._pos += 1
		return tree

	def expect_ident(self, what: str = "identifier") -> Ident:
		tree = self.peek()
		if not isinstance(tree, Ident):
			raise self.error(f"expected {what}, found {describe(tree)}")
		self._pos += 1
		return tree

	def expect_keyword(self, keyword: str) -> Ident:
		tree = self.peek()
		if not isinstance(tree, Ident) or tree.text != keyword:
			raise self.error(f"expected `{keyword}`, found {describe(tree)}")
		self._pos += 1
		return tree

	def expect_punct(self, op: str) -> Tuple[Punct, ...]:
		if not self.peek_punct(op):
			raise self.error(f"expected `{op}`, found {describe(self.peek())}")
		taken = tuple(self._stream[self._pos : self._pos + len(op)])
		self._pos += len(op)
		return taken  # type: ignore[return-value]

	def eat_punct(self, op: str) -> bool:
		if self.peek_punct(op):
			self._pos += len(op)
			return True
		return False

	def expect_group(self, delimiter: Delimiter) -> Group:
		tree = self.peek()
		if not isinstance(tree, Group) or tree.delimiter is not delimiter:
			raise self.error(f"expected `{delimiter.open}`, found {describe(tree)}")
		self._pos += 1
		return tree

	def expect_literal(self, kind: LiteralKind, what: str) -> Literal:
		tree = self.peek()
		if not isinstance(tree, Literal) or tree.kind is not kind:
			raise self.error(f"expected {what}, found {describe(tree)}")
		self._pos += 1
		return tree

	def expect_int(self) -> Tuple[Literal, int]:
		lit = self.expect_literal(LiteralKind.INT, "integer literal")
		return lit, int_literal_value(lit)

	def expect_end(self) -> None:
		if not self.at_end():
			raise self.error(f"unexpected token {describe(self.peek())}")


__all__ = ["Cursor", "describe", "int_literal_value"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Bounded range expansion: `seq!(N in 0..4 { ... })`.

The body is repeated once per index of the half-open range. In each copy every
identifier spelled exactly like the loop variable becomes an unsuffixed integer
literal carrying that identifier's span, so later diagnostics still point at
user source. Substitution is textual: `N + 1` becomes `0 + 1`, nothing is
evaluated. A negative index is spelled as a `-` punct followed by the
magnitude, both on the identifier's span. The body's own braces are not
repeated; only its contents are.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from synmac.core.errors import StructuralError
from synmac.core.span import Span
from synmac.tokens.cursor import Cursor, describe, int_literal_value
from synmac.tokens.tree import Delimiter, Group, Ident, Literal, LiteralKind, Punct, Spacing, TokenStream, TokenTree
from synmac.tokens.walker import TokenWalker


@dataclass(frozen=True)
class RangeExpansionRequest:
	loop_var: Ident
	start: int
	end: int
	body: Group
	span: Span = Span()

	@property
	def indices(self) -> range:
		return range(self.start, self.end)


def _parse_bound(cur: Cursor) -> Tuple[Span, int]:
	"""An integer literal, optionally negated: `3`, `-2`, `0x10`."""
	minus = cur.peek() if cur.peek_punct("-") else None
	tree = cur.peek(1 if minus is not None else 0)
	if isinstance(tree, Literal) and tree.kind is LiteralKind.INT:
		cur.advance()
		if minus is not None:
			cur.advance()
			return minus.span.join(tree.span), -int_literal_value(tree)
		return tree.span, int_literal_value(tree)
	if minus is not None:
		cur.advance()
	raise cur.error(f"expected integer literal, found {describe(tree)}")


def parse_request(stream: TokenStream, *, end_span: Optional[Span] = None) -> RangeExpansionRequest:
	"""Parse `<ident> in <int>..<int> { <tokens> }`."""
	cur = Cursor(stream, end_span=end_span)
	var = cur.expect_ident("loop variable")
	cur.expect_keyword("in")
	start_span, start = _parse_bound(cur)
	if cur.peek_punct("..="):
		raise cur.error("inclusive ranges are not supported, use `start..end`")
	cur.expect_punct("..")
	_, end = _parse_bound(cur)
	body = cur.expect_group(Delimiter.BRACE)
	cur.expect_end()
	if start > end:
		raise StructuralError(
			f"range start must not exceed range end ({start} > {end})",
			span=start_span,
		)
	return RangeExpansionRequest(
		loop_var=var,
		start=start,
		end=end,
		body=body,
		span=var.span.join(body.span),
	)


class LoopVarSubstituter(TokenWalker):
	"""Replace the loop variable with one index value throughout a stream."""

	def __init__(self, name: str, value: int) -> None:
		self._name = name
		self._value = value

	def visit_ident(self, ident: Ident) -> Sequence[TokenTree]:
		if ident.text != self._name:
			return (ident,)
		if self._value < 0:
			return (Punct("-", Spacing.ALONE, ident.span), Literal.int_unsuffixed(-self._value, ident.span))
		return (Literal.int_unsuffixed(self._value, ident.span),)


def expand_request(request: RangeExpansionRequest) -> TokenStream:
	"""Concatenate one substituted copy of the body per index, ascending."""
	out: List[TokenTree] = []
	for idx in request.indices:
		out.extend(LoopVarSubstituter(request.loop_var.text, idx).walk(request.body.stream))
	return tuple(out)


def expand_seq(stream: TokenStream, *, end_span: Optional[Span] = None) -> TokenStream:
	"""Expansion entry point: macro input tokens -> repeated body tokens."""
	return expand_request(parse_request(stream, end_span=end_span))


__all__ = [
	"RangeExpansionRequest",
	"LoopVarSubstituter",
	"parse_request",
	"expand_request",
	"expand_seq",
]

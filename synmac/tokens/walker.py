# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generic traversal over token trees.

`TokenWalker` is the rewriting visitor used by the engines: it rebuilds a stream
node by node, recursing only into groups. Groups are rebuilt with their original
delimiter and spans; leaves are returned verbatim unless a subclass overrides the
matching `visit_*` hook. Every hook returns a sequence so a subclass can drop a
node or replace it with several.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence

from synmac.core.span import Span
from .tree import Group, Ident, Literal, Punct, TokenStream, TokenTree


class TokenWalker:
	"""Order-preserving rewriting visitor over a token stream."""

	def walk(self, stream: Iterable[TokenTree]) -> TokenStream:
		out: List[TokenTree] = []
		for tree in stream:
			out.extend(self.visit(tree))
		return tuple(out)

	def visit(self, tree: TokenTree) -> Sequence[TokenTree]:
		if isinstance(tree, Group):
			return self.visit_group(tree)
		if isinstance(tree, Ident):
			return self.visit_ident(tree)
		if isinstance(tree, Punct):
			return self.visit_punct(tree)
		if isinstance(tree, Literal):
			return self.visit_literal(tree)
		raise TypeError(f"not a token tree: {tree!r}")

	def visit_group(self, group: Group) -> Sequence[TokenTree]:
		return (group.with_stream(self.walk(group.stream)),)

	def visit_ident(self, ident: Ident) -> Sequence[TokenTree]:
		return (ident,)

	def visit_punct(self, punct: Punct) -> Sequence[TokenTree]:
		return (punct,)

	def visit_literal(self, literal: Literal) -> Sequence[TokenTree]:
		return (literal,)


class Respanner(TokenWalker):
	"""Move every token (and group delimiter) onto one span."""

	def __init__(self, span: Span) -> None:
		self._span = span

	def visit_group(self, group: Group) -> Sequence[TokenTree]:
		return (
			Group(
				delimiter=group.delimiter,
				stream=self.walk(group.stream),
				span=self._span,
				open_span=self._span,
				close_span=self._span,
			),
		)

	def visit_ident(self, ident: Ident) -> Sequence[TokenTree]:
		return (Ident(ident.text, self._span),)

	def visit_punct(self, punct: Punct) -> Sequence[TokenTree]:
		return (Punct(punct.char, punct.spacing, self._span),)

	def visit_literal(self, literal: Literal) -> Sequence[TokenTree]:
		return (Literal(literal.kind, literal.text, self._span),)


def iter_tokens(stream: Iterable[TokenTree]) -> Iterator[TokenTree]:
	"""Yield leaves depth-first in source order (groups themselves are skipped)."""
	for tree in stream:
		if isinstance(tree, Group):
			yield from iter_tokens(tree.stream)
		else:
			yield tree


def strip_spans(stream: Iterable[TokenTree]) -> TokenStream:
	"""Copy of `stream` with every span reset to the unknown sentinel."""
	return Respanner(Span()).walk(stream)


__all__ = ["TokenWalker", "Respanner", "iter_tokens", "strip_spans"]

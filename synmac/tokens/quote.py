# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Quasi-quoting: build token streams from source templates.

A template is ordinary source text where `#name` marks a splice point:

    quote("fn #name(&mut self) -> &mut Self { self }", span, name=field_ident)

Template tokens are moved onto `span` (the invocation site); spliced tokens keep
their own spans, so diagnostics about user-written names and types still point
at user source. Bindings may be a single tree or a sequence of trees.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable, List, Mapping, Sequence, Union

from synmac.core.span import Span
from .lexer import lex
from .tree import Ident, Punct, Spacing, TokenStream, TokenTree
from .walker import Respanner

Splice = Union[TokenTree, Sequence[TokenTree]]


@lru_cache(maxsize=256)
def _template(source: str) -> TokenStream:
	return lex(source, file="<quote>")


class _Interpolator(Respanner):
	def __init__(self, span: Span, bindings: Mapping[str, TokenStream]) -> None:
		super().__init__(span)
		self._bindings = bindings

	def walk(self, stream: Iterable[TokenTree]) -> TokenStream:
		trees = tuple(stream)
		out: List[TokenTree] = []
		idx = 0
		while idx < len(trees):
			tree = trees[idx]
			nxt = trees[idx + 1] if idx + 1 < len(trees) else None
			if isinstance(tree, Punct) and tree.char == "#" and isinstance(nxt, Ident):
				if nxt.text not in self._bindings:
					raise KeyError(f"unbound template placeholder #{nxt.text}")
				spliced = self._bindings[nxt.text]
				self._unjoin_tail(out, spliced)
				out.extend(spliced)
				idx += 2
				continue
			out.extend(self.visit(tree))
			idx += 1
		return tuple(out)

	@staticmethod
	def _unjoin_tail(out: List[TokenTree], spliced: TokenStream) -> None:
		# A template punct written right before `#name` lexes as joint; it only
		# stays joint when the spliced tokens start with punctuation.
		if out and isinstance(out[-1], Punct) and out[-1].spacing is Spacing.JOINT:
			if not (spliced and isinstance(spliced[0], Punct)):
				last = out[-1]
				out[-1] = Punct(last.char, Spacing.ALONE, last.span)


def _as_stream(value: Splice) -> TokenStream:
	if isinstance(value, (list, tuple)):
		return tuple(value)
	return (value,)  # type: ignore[return-value]


def quote(template: str, span: Span, **bindings: Splice) -> TokenStream:
	"""Lex `template` and splice `bindings` at each `#name`."""
	streams = {name: _as_stream(value) for name, value in bindings.items()}
	return _Interpolator(span, streams).walk(_template(template))


def join(streams: Iterable[TokenStream], separator: TokenStream = ()) -> TokenStream:
	"""Concatenate streams, inserting `separator` between them."""
	out: List[TokenTree] = []
	for idx, stream in enumerate(streams):
		if idx and separator:
			out.extend(separator)
		out.extend(stream)
	return tuple(out)


__all__ = ["quote", "join"]

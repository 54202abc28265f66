# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Deterministic text rendering of token streams.

`render` produces a single-line form used by golden tests: the same stream always
renders to the same bytes. `render_pretty` breaks brace-delimited bodies into indented lines
for the CLI. Neither tries to reproduce the original source layout.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .tree import Delimiter, Group, Ident, Literal, Punct, Spacing, TokenStream, TokenTree


def _needs_space(prev2: Optional[TokenTree], prev: TokenTree, cur: TokenTree) -> bool:
	if isinstance(prev, Punct):
		if prev.spacing is Spacing.JOINT:
			return False
		# Second colon of `::`.
		if prev.char == ":" and isinstance(prev2, Punct) and prev2.char == ":" and prev2.spacing is Spacing.JOINT:
			return False
		if prev.char in ".<":
			return False
		if prev.char == "#" and isinstance(cur, Group) and cur.delimiter is Delimiter.BRACKET:
			return False
		if prev.char == "!" and isinstance(cur, Group):
			return False
		if prev.char == "&" and isinstance(cur, (Ident, Punct)):
			return False
		# Prefix minus: `-1`, `f(-2)`, `x = -3`.
		if prev.char == "-" and isinstance(cur, Literal) and (prev2 is None or isinstance(prev2, Punct)):
			return False
	if isinstance(cur, Punct):
		if cur.char in ",;.>":
			return False
		if cur.char == "!" and isinstance(prev, Ident):
			return False
		# `name: Type`, `a::b`.
		if cur.char == ":" and isinstance(prev, Ident):
			return False
		# Postfix `?`.
		if cur.char == "?":
			return False
		if cur.char == "<" and isinstance(prev, Ident):
			return False
	if isinstance(cur, Group) and cur.delimiter in (Delimiter.PARENTHESIS, Delimiter.BRACKET):
		if isinstance(prev, (Ident, Group)):
			return False
	return True


def _leaf_text(tree: TokenTree) -> str:
	if isinstance(tree, Ident):
		return tree.text
	if isinstance(tree, Punct):
		return tree.char
	if isinstance(tree, Literal):
		return tree.text
	raise TypeError(f"not a leaf: {tree!r}")


def render(stream: Sequence[TokenTree]) -> str:
	"""Single-line rendering."""
	parts: List[str] = []
	prev2: Optional[TokenTree] = None
	prev: Optional[TokenTree] = None
	for tree in stream:
		if prev is not None and _needs_space(prev2, prev, tree):
			parts.append(" ")
		if isinstance(tree, Group):
			parts.append(_render_group(tree))
		else:
			parts.append(_leaf_text(tree))
		prev2, prev = prev, tree
	return "".join(parts)


def _render_group(group: Group) -> str:
	inner = render(group.stream)
	if group.delimiter is Delimiter.BRACE and inner:
		return f"{{ {inner} }}"
	return f"{group.delimiter.open}{inner}{group.delimiter.close}"


class _PrettyPrinter:
	"""Line-breaking renderer: statements and brace bodies on their own lines."""

	def __init__(self, indent: str) -> None:
		self._indent = indent

	def lines(self, stream: TokenStream, depth: int) -> List[str]:
		lines: List[str] = []
		current: List[TokenTree] = []
		for idx, tree in enumerate(stream):
			current.append(tree)
			nxt = stream[idx + 1] if idx + 1 < len(stream) else None
			if self._breaks_after(stream, idx, nxt):
				lines.append(self._line(current, depth))
				current = []
		if current:
			lines.append(self._line(current, depth))
		return lines

	@staticmethod
	def _breaks_after(stream: TokenStream, idx: int, nxt: Optional[TokenTree]) -> bool:
		tree = stream[idx]
		if isinstance(tree, Punct) and tree.char in ";,":
			return True
		if isinstance(tree, Group) and tree.delimiter is Delimiter.BRACE:
			# `} else {`, `},` and `}.method()` stay on one line.
			if isinstance(nxt, Punct) and nxt.char in ",;.?":
				return False
			if isinstance(nxt, Ident) and nxt.text == "else":
				return False
			return True
		if isinstance(tree, Group) and tree.delimiter is Delimiter.BRACKET and idx > 0:
			prev = stream[idx - 1]
			return isinstance(prev, Punct) and prev.char == "#"
		return False

	def _line(self, trees: List[TokenTree], depth: int) -> str:
		# Only a trailing brace group expands over several lines.
		if trees and isinstance(trees[-1], Group) and trees[-1].delimiter is Delimiter.BRACE and trees[-1].stream:
			head = render(trees[:-1])
			body = self.lines(trees[-1].stream, depth + 1)
			pad = self._indent * depth
			opener = f"{head} {{" if head else "{"
			return "\n".join([pad + opener, *body, pad + "}"])
		if (
			len(trees) >= 2
			and isinstance(trees[-2], Group)
			and trees[-2].delimiter is Delimiter.BRACE
			and trees[-2].stream
			and isinstance(trees[-1], Punct)
		):
			expanded = self._line(trees[:-1], depth)
			return expanded + trees[-1].char
		return self._indent * depth + render(trees)


def render_pretty(stream: TokenStream, *, indent: str = "\t") -> str:
	"""Multi-line rendering; ends with a newline unless the stream is empty."""
	lines = _PrettyPrinter(indent).lines(tuple(stream), 0)
	if not lines:
		return ""
	return "\n".join(lines) + "\n"


__all__ = ["render", "render_pretty"]

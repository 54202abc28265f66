# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Token tree model.

Source text is represented as a flat sequence of token trees where each tree is
either a delimited `Group` (holding its own nested stream) or a leaf: `Ident`,
`Punct` or `Literal`. Keywords are plain identifiers; multi-character operators
are runs of `Punct` joined by `Spacing.JOINT`.

All nodes are frozen so streams can be shared between expansions and compared
structurally (spans included, raw lexer tokens excluded).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Tuple, Union

from synmac.core.span import Span


class Delimiter(Enum):
	PARENTHESIS = ("(", ")")
	BRACKET = ("[", "]")
	BRACE = ("{", "}")
	# Invisible grouping; renders without delimiters.
	NONE = ("", "")

	@property
	def open(self) -> str:
		return self.value[0]

	@property
	def close(self) -> str:
		return self.value[1]


class Spacing(Enum):
	ALONE = "alone"
	# Followed immediately by another punctuation character (`..`, `->`, `::`).
	JOINT = "joint"


class LiteralKind(Enum):
	INT = "int"
	FLOAT = "float"
	STR = "str"
	BYTE_STR = "byte_str"
	CHAR = "char"
	BYTE = "byte"


@dataclass(frozen=True)
class Ident:
	text: str
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Punct:
	char: str
	spacing: Spacing = Spacing.ALONE
	span: Span = field(default_factory=Span)

	def __post_init__(self) -> None:
		if len(self.char) != 1:
			raise ValueError(f"Punct holds a single character, got {self.char!r}")


@dataclass(frozen=True)
class Literal:
	"""A literal leaf; `text` is the source form (quotes and suffixes included)."""

	kind: LiteralKind
	text: str
	span: Span = field(default_factory=Span)

	@classmethod
	def int_unsuffixed(cls, value: int, span: Span | None = None) -> "Literal":
		if value < 0:
			raise ValueError("integer literal tokens are non-negative; emit a `-` Punct first")
		return cls(LiteralKind.INT, str(value), span if span is not None else Span())

	@classmethod
	def string(cls, value: str, span: Span | None = None) -> "Literal":
		"""Build a string literal token whose decoded content is `value`."""
		escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
		return cls(LiteralKind.STR, f'"{escaped}"', span if span is not None else Span())

	def str_value(self) -> str:
		"""Decoded content of a string literal (simple escapes only)."""
		if self.kind is not LiteralKind.STR:
			raise TypeError(f"not a string literal: {self.text}")
		if self.text.startswith("r"):
			# r#"..."#: no escapes, content between the hashed quotes.
			hashes = len(self.text) - 1 - len(self.text[1:].lstrip("#"))
			return self.text[2 + hashes : len(self.text) - 1 - hashes]
		out: list[str] = []
		body = self.text[1:-1]
		i = 0
		while i < len(body):
			ch = body[i]
			if ch == "\\" and i + 1 < len(body):
				nxt = body[i + 1]
				out.append({"n": "\n", "t": "\t", "r": "\r", "0": "\0"}.get(nxt, nxt))
				i += 2
				continue
			out.append(ch)
			i += 1
		return "".join(out)


@dataclass(frozen=True)
class Group:
	delimiter: Delimiter
	stream: "TokenStream" = ()
	span: Span = field(default_factory=Span)
	open_span: Span = field(default_factory=Span)
	close_span: Span = field(default_factory=Span)

	def with_stream(self, stream: Iterable["TokenTree"]) -> "Group":
		"""Same delimiter and spans, new contents."""
		return Group(
			delimiter=self.delimiter,
			stream=tuple(stream),
			span=self.span,
			open_span=self.open_span,
			close_span=self.close_span,
		)


TokenTree = Union[Group, Ident, Punct, Literal]
TokenStream = Tuple[TokenTree, ...]


def is_ident(tree: TokenTree, text: str | None = None) -> bool:
	return isinstance(tree, Ident) and (text is None or tree.text == text)


def is_punct(tree: TokenTree, char: str | None = None) -> bool:
	return isinstance(tree, Punct) and (char is None or tree.char == char)


def is_group(tree: TokenTree, delimiter: Delimiter | None = None) -> bool:
	return isinstance(tree, Group) and (delimiter is None or tree.delimiter is delimiter)


def puncts(op: str, span: Span | None = None) -> TokenStream:
	"""Spell a (possibly multi-character) operator as joint Punct tokens."""
	sp = span if span is not None else Span()
	out = []
	for i, ch in enumerate(op):
		spacing = Spacing.JOINT if i + 1 < len(op) else Spacing.ALONE
		out.append(Punct(ch, spacing, sp))
	return tuple(out)


def detach_tail(stream: TokenStream) -> TokenStream:
	"""
	Copy of `stream` whose last token is not joint.

	A sub-stream cut out of its context (a field type before `,`) must not claim
	to be glued to a token it no longer contains.
	"""
	if stream and isinstance(stream[-1], Punct) and stream[-1].spacing is Spacing.JOINT:
		last = stream[-1]
		return tuple(stream[:-1]) + (Punct(last.char, Spacing.ALONE, last.span),)
	return tuple(stream)


def stream_span(stream: TokenStream) -> Span:
	"""Span covering a non-empty stream (first token through last)."""
	if not stream:
		return Span()
	return stream[0].span.join(stream[-1].span)


__all__ = [
	"Delimiter",
	"Spacing",
	"LiteralKind",
	"Ident",
	"Punct",
	"Literal",
	"Group",
	"TokenTree",
	"TokenStream",
	"is_ident",
	"is_punct",
	"is_group",
	"puncts",
	"detach_tail",
	"stream_span",
]

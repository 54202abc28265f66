# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source text -> token tree.

The grammar (`grammar.lark`) only knows about delimiters and flat leaves, so the
parse tree maps one-to-one onto `Group`/`Ident`/`Punct`/`Literal`. Punctuation
spacing is recovered from character offsets: a punct is JOINT when the next
token in the same group is punctuation starting exactly where it ends.

Doc comments are not dropped with the other comments: `/// text` lexes as the
`#[doc = " text"]` attribute it stands for, so items keep their docs when they
are copied into expansion output.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from synmac.core.errors import StructuralError
from synmac.core.span import Span
from .tree import Delimiter, Group, Ident, Literal, LiteralKind, Punct, Spacing, TokenStream, TokenTree

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

_GROUP_DELIMITERS = {
	"paren": Delimiter.PARENTHESIS,
	"bracket": Delimiter.BRACKET,
	"brace": Delimiter.BRACE,
}

_LITERAL_KINDS = {
	"INT": LiteralKind.INT,
	"FLOAT": LiteralKind.FLOAT,
	"STRING": LiteralKind.STR,
	"BYTE_STRING": LiteralKind.BYTE_STR,
	"CHAR": LiteralKind.CHAR,
	"BYTE_CHAR": LiteralKind.BYTE,
}

_CLOSERS = {"RPAR": ")", "RSQB": "]", "RBRACE": "}"}


def lex(source: str, *, file: Optional[str] = None) -> TokenStream:
	"""
	Lex `source` into a token stream.

	Unknown characters and unbalanced delimiters raise `StructuralError` at the
	offending position.
	"""
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as err:
		raise _lex_error(err, file) from None
	return _Builder(file).build_stream(tree.children)


def lex_file(path: Path) -> TokenStream:
	return lex(path.read_text(), file=str(path))


def _lex_error(err: UnexpectedInput, file: Optional[str]) -> StructuralError:
	line = getattr(err, "line", None)
	column = getattr(err, "column", None)
	if isinstance(err, UnexpectedCharacters):
		ch = err.char if getattr(err, "char", None) else "?"
		message = f"unknown start of token: {ch!r}"
	elif isinstance(err, UnexpectedToken):
		tok = err.token
		if tok.type == "$END":
			message = "this file contains an unclosed delimiter"
		elif tok.type in _CLOSERS:
			message = f"unexpected closing delimiter: `{_CLOSERS[tok.type]}`"
		else:
			message = f"unexpected token `{tok}`"
	else:
		message = str(err)
	# Lark reports -1 for positions it cannot attribute (end of input).
	if not isinstance(line, int) or line < 0:
		line = None
		column = None
	if not isinstance(column, int) or column < 0:
		column = None
	return StructuralError(message, span=Span(file=file, line=line, column=column, raw=err))


class _Builder:
	"""Convert lark parse-tree children into token trees for one file."""

	def __init__(self, file: Optional[str]) -> None:
		self._file = file

	def _span(self, tok: Token) -> Span:
		return Span.from_loc(tok, file=self._file)

	def build_stream(self, children: List[object]) -> TokenStream:
		out: List[TokenTree] = []
		for idx, child in enumerate(children):
			if isinstance(child, Tree):
				out.append(self._group(child))
				continue
			assert isinstance(child, Token)
			nxt = children[idx + 1] if idx + 1 < len(children) else None
			out.extend(self._leaf(child, nxt))
		return tuple(out)

	def _group(self, node: Tree) -> Group:
		delimiter = _GROUP_DELIMITERS[node.data]
		open_tok, *inner, close_tok = node.children
		open_span = self._span(open_tok)
		close_span = self._span(close_tok)
		return Group(
			delimiter=delimiter,
			stream=self.build_stream(inner),
			span=open_span.join(close_span),
			open_span=open_span,
			close_span=close_span,
		)

	def _leaf(self, tok: Token, nxt: object) -> List[TokenTree]:
		if tok.type == "IDENT":
			return [Ident(str(tok), self._span(tok))]
		if tok.type in _LITERAL_KINDS:
			return [Literal(_LITERAL_KINDS[tok.type], str(tok), self._span(tok))]
		if tok.type == "LIFETIME":
			return self._lifetime(tok)
		if tok.type == "DOC_COMMENT":
			return self._doc_attribute(tok)
		if tok.type == "PUNCT":
			return [Punct(str(tok), self._spacing(tok, nxt), self._span(tok))]
		raise TypeError(f"unexpected token type {tok.type}")

	def _lifetime(self, tok: Token) -> List[TokenTree]:
		# `'a` is a joint quote followed by an identifier, the usual token-tree shape.
		quote_span = Span(
			file=self._file,
			line=tok.line,
			column=tok.column,
			end_line=tok.line,
			end_column=tok.column + 1,
			start=tok.start_pos,
			end=tok.start_pos + 1,
		)
		name_span = Span(
			file=self._file,
			line=tok.line,
			column=tok.column + 1,
			end_line=tok.end_line,
			end_column=tok.end_column,
			start=tok.start_pos + 1,
			end=tok.end_pos,
		)
		return [Punct("'", Spacing.JOINT, quote_span), Ident(str(tok)[1:], name_span)]

	def _doc_attribute(self, tok: Token) -> List[TokenTree]:
		# `/// text` is `#[doc = " text"]`, `//! text` is `#![doc = " text"]`.
		span = self._span(tok)
		text = str(tok)
		body = (Ident("doc", span), Punct("=", Spacing.ALONE, span), Literal.string(text[3:].rstrip("\r"), span))
		attr = Group(Delimiter.BRACKET, body, span=span, open_span=span, close_span=span)
		if text.startswith("//!"):
			return [Punct("#", Spacing.JOINT, span), Punct("!", Spacing.ALONE, span), attr]
		return [Punct("#", Spacing.ALONE, span), attr]

	@staticmethod
	def _spacing(tok: Token, nxt: object) -> Spacing:
		if isinstance(nxt, Token) and nxt.type in ("PUNCT", "LIFETIME") and nxt.start_pos == tok.end_pos:
			return Spacing.JOINT
		return Spacing.ALONE


__all__ = ["lex", "lex_file"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Token trees: lexing, traversal, parsing cursor, quasi-quoting and rendering.

Every engine consumes and produces `TokenStream`s (immutable tuples of
`Group | Ident | Punct | Literal`).
"""

from .tree import (
	Delimiter,
	Spacing,
	LiteralKind,
	Ident,
	Punct,
	Literal,
	Group,
	TokenTree,
	TokenStream,
	is_ident,
	is_punct,
	is_group,
	puncts,
	detach_tail,
	stream_span,
)
from .lexer import lex, lex_file
from .walker import TokenWalker, Respanner, iter_tokens, strip_spans
from .cursor import Cursor, describe, int_literal_value
from .quote import quote, join
from .printer import render, render_pretty

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
	"lex",
	"lex_file",
	"TokenWalker",
	"Respanner",
	"iter_tokens",
	"strip_spans",
	"Cursor",
	"describe",
	"int_literal_value",
	"quote",
	"join",
	"render",
	"render_pretty",
]

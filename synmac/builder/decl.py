# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Aggregate declaration parsing for `#[derive(Builder)]`.

Accepted shape (attributes and visibility anywhere they are legal):

    #[derive(Builder)]
    pub struct Command {
        executable: String,
        #[builder(each = "arg")]
        args: Vec<String>,
        current_dir: Option<String>,
    }

Enums, unions and any other item fail with "expected struct"; tuple and unit
structs fail with "expected named fields". Both errors point at the item name.
Nothing is produced for a rejected item.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from synmac.core.config import DEFAULT_CONFIG, ExpansionConfig
from synmac.core.errors import StructuralError
from synmac.core.span import Span
from synmac.tokens.cursor import Cursor, describe
from synmac.tokens.tree import Delimiter, Group, Ident, Punct, Spacing, TokenStream, TokenTree, detach_tail, stream_span
from .classify import TypeDescriptor, classify


@dataclass(frozen=True)
class FieldDescriptor:
	name: Ident
	declared_type: TokenStream
	descriptor: TypeDescriptor
	# Bracket groups of the field's `#[...]` attributes, in source order.
	attributes: Tuple[Group, ...] = ()
	span: Span = Span()


@dataclass(frozen=True)
class AggregateDeclaration:
	name: Ident
	fields: Tuple[FieldDescriptor, ...]
	attributes: Tuple[Group, ...] = ()
	span: Span = Span()


def parse_outer_attributes(cur: Cursor) -> Tuple[Group, ...]:
	"""Consume `#[...]` attributes; returns their bracket groups."""
	attrs: List[Group] = []
	while cur.peek_punct("#"):
		nxt = cur.peek(1)
		if not isinstance(nxt, Group) or nxt.delimiter is not Delimiter.BRACKET:
			raise cur.error(f"expected `[` after `#`, found {describe(nxt)}", span=cur.span_here())
		cur.advance()
		attrs.append(cur.expect_group(Delimiter.BRACKET))
	return tuple(attrs)


def skip_visibility(cur: Cursor) -> None:
	"""Consume `pub`, `pub(crate)`, `pub(in path)` and friends."""
	if cur.peek_ident("pub"):
		cur.advance()
		if cur.peek_group(Delimiter.PARENTHESIS):
			cur.advance()


def _take_type(cur: Cursor) -> TokenStream:
	"""Consume type tokens up to a top-level `,` (angle brackets are tracked)."""
	taken: List[TokenTree] = []
	depth = 0
	while not cur.at_end():
		tree = cur.peek()
		if isinstance(tree, Punct):
			if tree.char == "," and depth == 0:
				break
			if tree.char == "<":
				depth += 1
			elif tree.char == ">":
				prev = taken[-1] if taken else None
				arrow = isinstance(prev, Punct) and prev.char == "-" and prev.spacing is Spacing.JOINT
				if not arrow:
					depth -= 1
		taken.append(cur.advance())
	return detach_tail(tuple(taken))


def _parse_fields(body: Group, config: ExpansionConfig) -> Tuple[FieldDescriptor, ...]:
	cur = Cursor.of_group(body)
	fields: List[FieldDescriptor] = []
	seen: dict[str, Ident] = {}
	while not cur.at_end():
		attrs = parse_outer_attributes(cur)
		skip_visibility(cur)
		name = cur.expect_ident("field name")
		if name.text in seen:
			raise StructuralError(f"field `{name.text}` is already declared", span=name.span)
		seen[name.text] = name
		cur.expect_punct(":")
		ty = _take_type(cur)
		if not ty:
			raise cur.error(f"expected type for field `{name.text}`, found {describe(cur.peek())}")
		fields.append(
			FieldDescriptor(
				name=name,
				declared_type=ty,
				descriptor=classify(ty, config),
				attributes=attrs,
				span=name.span.join(stream_span(ty)),
			)
		)
		if not cur.at_end():
			cur.expect_punct(",")
	return tuple(fields)


def parse_aggregate(item: TokenStream, config: ExpansionConfig = DEFAULT_CONFIG) -> AggregateDeclaration:
	"""Parse a struct item into an `AggregateDeclaration` or raise `StructuralError`."""
	cur = Cursor(item)
	attrs = parse_outer_attributes(cur)
	skip_visibility(cur)
	keyword = cur.expect_ident("item")
	name_tok: Optional[TokenTree] = cur.peek()
	name_span = name_tok.span if isinstance(name_tok, Ident) else keyword.span
	if keyword.text != "struct":
		raise StructuralError("expected struct", span=name_span)
	name = cur.expect_ident("struct name")
	if cur.peek_punct("<"):
		raise cur.error(f"generic structs are not supported by derive({config.derive_name})")
	if cur.peek_group(Delimiter.PARENTHESIS) or cur.peek_punct(";"):
		raise StructuralError("expected named fields", span=name.span)
	if cur.peek_ident("where"):
		raise cur.error(f"`where` clauses are not supported by derive({config.derive_name})")
	body = cur.expect_group(Delimiter.BRACE)
	cur.expect_end()
	return AggregateDeclaration(
		name=name,
		fields=_parse_fields(body, config),
		attributes=attrs,
		span=stream_span(tuple(item)),
	)


__all__ = [
	"FieldDescriptor",
	"AggregateDeclaration",
	"parse_aggregate",
	"parse_outer_attributes",
	"skip_visibility",
]

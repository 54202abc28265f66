# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Field attribute resolution for the builder derive.

The only attribute the derive understands is the each-alias on a Vec field:

    #[builder(each = "arg")]
    args: Vec<String>,

Resolution produces an explicit tagged result so every case is handled by the
caller: `NoAlias`, `EachAlias(name)` or `MalformedAlias(error)`. Attributes with
any other path (`doc`, `serde`, ...) are ignored. A `builder` attribute on a
field that is not Repeated is rejected without looking at its contents.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple, Union

from synmac.core.config import DEFAULT_CONFIG, ExpansionConfig
from synmac.core.errors import StructuralError
from synmac.tokens.cursor import Cursor
from synmac.tokens.tree import Delimiter, Group, Ident, LiteralKind, Spacing
from .classify import RepeatedType
from .decl import FieldDescriptor

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Identifiers that cannot name a generated setter.
_RESERVED = frozenset(
	{
		"as", "break", "const", "continue", "crate", "else", "enum", "extern", "false", "fn",
		"for", "if", "impl", "in", "let", "loop", "match", "mod", "move", "mut", "pub", "ref",
		"return", "self", "Self", "static", "struct", "super", "trait", "true", "type", "unsafe",
		"use", "where", "while", "async", "await", "dyn", "_",
	}
)


@dataclass(frozen=True)
class NoAlias:
	pass


@dataclass(frozen=True)
class EachAlias:
	# Setter name; carries the span of the string literal it was read from.
	name: Ident
	keyword: Ident


@dataclass(frozen=True)
class MalformedAlias:
	error: StructuralError


AliasResolution = Union[NoAlias, EachAlias, MalformedAlias]


def expected_each_message(config: ExpansionConfig = DEFAULT_CONFIG) -> str:
	return f'expected `{config.attribute_name}({config.each_keyword} = "...")`'


def builder_attributes(field: FieldDescriptor, config: ExpansionConfig = DEFAULT_CONFIG) -> List[Tuple[Ident, Group]]:
	"""`(path, bracket group)` for each of the field's `#[builder...]` attributes."""
	found: List[Tuple[Ident, Group]] = []
	for attr in field.attributes:
		head = attr.stream[0] if attr.stream else None
		if isinstance(head, Ident) and head.text == config.attribute_name:
			found.append((head, attr))
	return found


def is_valid_setter_name(name: str) -> bool:
	return bool(_IDENT_RE.match(name)) and name not in _RESERVED


def _parse_each(path: Ident, attr: Group, config: ExpansionConfig) -> EachAlias:
	outer = Cursor.of_group(attr)
	outer.advance()  # path
	if not outer.peek_group(Delimiter.PARENTHESIS):
		raise StructuralError(expected_each_message(config), span=outer.span_here() if not outer.at_end() else path.span)
	args = outer.expect_group(Delimiter.PARENTHESIS)
	if not outer.at_end():
		raise StructuralError(expected_each_message(config), span=outer.span_here())

	cur = Cursor.of_group(args)
	key = cur.peek()
	if not isinstance(key, Ident):
		raise StructuralError(expected_each_message(config), span=cur.span_here())
	if key.text != config.each_keyword:
		raise StructuralError(expected_each_message(config), span=key.span)
	cur.advance()
	eq = cur.peek()
	if not cur.peek_punct("=") or eq.spacing is not Spacing.ALONE:  # type: ignore[union-attr]
		raise StructuralError(expected_each_message(config), span=cur.span_here())
	cur.advance()
	lit = cur.peek()
	try:
		cur.expect_literal(LiteralKind.STR, "string literal")
	except StructuralError:
		raise StructuralError(expected_each_message(config), span=cur.span_here()) from None
	if not cur.at_end():
		raise StructuralError(expected_each_message(config), span=cur.span_here())
	value = lit.str_value()  # type: ignore[union-attr]
	if not is_valid_setter_name(value):
		raise StructuralError(f"`{value}` is not a valid setter name", span=lit.span)  # type: ignore[union-attr]
	return EachAlias(name=Ident(value, lit.span), keyword=key)  # type: ignore[union-attr]


def classify_each_alias(field: FieldDescriptor, config: ExpansionConfig = DEFAULT_CONFIG) -> AliasResolution:
	"""Tagged each-alias resolution for one field (never raises)."""
	attrs = builder_attributes(field, config)
	if not attrs:
		return NoAlias()
	path, attr = attrs[0]
	if not isinstance(field.descriptor, RepeatedType):
		return MalformedAlias(
			StructuralError(
				f"`{config.attribute_name}({config.each_keyword} = ...)` requires a Vec field",
				span=path.span,
			)
		)
	if len(attrs) > 1:
		dup_path, _ = attrs[1]
		return MalformedAlias(StructuralError(f"duplicate `{config.attribute_name}` attribute", span=dup_path.span))
	try:
		return _parse_each(path, attr, config)
	except StructuralError as err:
		return MalformedAlias(err)


def resolve_each_alias(field: FieldDescriptor, config: ExpansionConfig = DEFAULT_CONFIG) -> EachAlias | None:
	"""Alias for a field, `None` when absent; malformed attributes raise."""
	resolution = classify_each_alias(field, config)
	if isinstance(resolution, NoAlias):
		return None
	if isinstance(resolution, EachAlias):
		return resolution
	if isinstance(resolution, MalformedAlias):
		raise resolution.error
	raise TypeError(f"unexpected alias resolution {resolution!r}")


__all__ = [
	"NoAlias",
	"EachAlias",
	"MalformedAlias",
	"AliasResolution",
	"classify_each_alias",
	"resolve_each_alias",
	"builder_attributes",
	"expected_each_message",
	"is_valid_setter_name",
]

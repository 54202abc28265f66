# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Syntactic classification of declared field types.

A field type is Optional or Repeated only when it is literally spelled as a
single unqualified wrapper segment with one angle-bracketed type argument:

    Option<String>      -> OptionalType(inner=String)
    Vec<u8>             -> RepeatedType(inner=u8)
    std::vec::Vec<u8>   -> ScalarType   (qualified path)
    Option::<u8>        -> ScalarType   (turbofish)
    Vec<'a, u8>         -> ScalarType   (lifetime argument)

Matching is name-based only. There is no type information at expansion time,
so a user type that happens to be called `Option` or `Vec` is classified as the
wrapper. Only the outermost wrapper counts: `Vec<Option<T>>` is Repeated with
element type `Option<T>`, the element is never unwrapped again. This keeps the
outer `Vec` semantics (empty by default, appendable) instead of degrading the
whole compound type to Scalar, matching how the derive has always matched on
the first path segment only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from synmac.core.config import DEFAULT_CONFIG, ExpansionConfig
from synmac.tokens.tree import Group, Delimiter, Ident, Literal, Punct, Spacing, TokenStream, detach_tail


@dataclass(frozen=True)
class ScalarType:
	ty: TokenStream


@dataclass(frozen=True)
class OptionalType:
	ty: TokenStream
	inner: TokenStream


@dataclass(frozen=True)
class RepeatedType:
	ty: TokenStream
	inner: TokenStream


TypeDescriptor = Union[ScalarType, OptionalType, RepeatedType]


def split_generic_args(args: TokenStream) -> List[TokenStream]:
	"""Split angle-bracket contents on top-level commas (nested `<...>` aware)."""
	parts: List[TokenStream] = []
	current: list = []
	depth = 0
	prev: Optional[object] = None
	for tree in args:
		if isinstance(tree, Punct):
			if tree.char == "<":
				depth += 1
			elif tree.char == ">" and not _is_arrow_tail(prev):
				depth -= 1
			elif tree.char == "," and depth == 0:
				parts.append(tuple(current))
				current = []
				prev = tree
				continue
		current.append(tree)
		prev = tree
	if current:
		parts.append(tuple(current))
	return parts


def _is_arrow_tail(prev: Optional[object]) -> bool:
	# `>` of `->` does not close an angle bracket.
	return isinstance(prev, Punct) and prev.char == "-" and prev.spacing is Spacing.JOINT


def _closing_angle(ty: TokenStream, open_idx: int) -> Optional[int]:
	depth = 0
	for idx in range(open_idx, len(ty)):
		tree = ty[idx]
		if not isinstance(tree, Punct):
			continue
		if tree.char == "<":
			depth += 1
		elif tree.char == ">" and not _is_arrow_tail(ty[idx - 1]):
			depth -= 1
			if depth == 0:
				return idx
	return None


def _is_type_argument(arg: TokenStream) -> bool:
	if not arg:
		return False
	head = arg[0]
	# Lifetime: `'a`.
	if isinstance(head, Punct) and head.char == "'":
		return False
	# Const argument: `3`, `{ N + 1 }`.
	if isinstance(head, Literal):
		return False
	if isinstance(head, Group) and head.delimiter is Delimiter.BRACE:
		return False
	# Associated binding/constraint: `Item = T`, `Item: Bound`.
	if len(arg) >= 2 and isinstance(head, Ident) and isinstance(arg[1], Punct):
		second = arg[1]
		if second.char == "=" and second.spacing is Spacing.ALONE:
			return False
		if second.char == ":" and second.spacing is Spacing.ALONE:
			return False
	return True


def wrapped_inner(ty: TokenStream, names: Tuple[str, ...]) -> Optional[TokenStream]:
	"""
	Return the single type argument of `Name<Arg>` when `Name` is in `names`.

	The whole type must be exactly the wrapper: one identifier, `<`, one
	non-lifetime type argument, `>`, and nothing else.
	"""
	ty = tuple(ty)
	if len(ty) < 4:
		return None
	head = ty[0]
	if not isinstance(head, Ident) or head.text not in names:
		return None
	opener = ty[1]
	if not isinstance(opener, Punct) or opener.char != "<":
		return None
	close_idx = _closing_angle(ty, 1)
	if close_idx is None or close_idx != len(ty) - 1:
		return None
	args = split_generic_args(ty[2:close_idx])
	if len(args) != 1 or not _is_type_argument(args[0]):
		return None
	return detach_tail(args[0])


def classify(ty: TokenStream, config: ExpansionConfig = DEFAULT_CONFIG) -> TypeDescriptor:
	"""Classify a declared field type as Scalar, Optional(inner) or Repeated(inner)."""
	ty = tuple(ty)
	inner = wrapped_inner(ty, config.repeated_wrappers)
	if inner is not None:
		return RepeatedType(ty=ty, inner=inner)
	inner = wrapped_inner(ty, config.optional_wrappers)
	if inner is not None:
		return OptionalType(ty=ty, inner=inner)
	return ScalarType(ty=ty)


__all__ = [
	"ScalarType",
	"OptionalType",
	"RepeatedType",
	"TypeDescriptor",
	"classify",
	"wrapped_inner",
	"split_generic_args",
]

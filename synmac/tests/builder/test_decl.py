# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from synmac.builder.classify import OptionalType, RepeatedType, ScalarType
from synmac.builder.decl import parse_aggregate
from synmac.core.errors import StructuralError
from synmac.tokens.lexer import lex
from synmac.tokens.printer import render
from synmac.tokens.tree import Punct, Spacing

COMMAND = """
#[derive(Builder)]
pub struct Command {
	executable: String,
	/// arguments in order
	#[builder(each = "arg")]
	pub args: Vec<String>,
	env: Vec<String>,
	pub(crate) current_dir: Option<String>,
}
"""


def test_parse_aggregate_keeps_declaration_order():
	decl = parse_aggregate(lex(COMMAND))
	assert decl.name.text == "Command"
	assert [f.name.text for f in decl.fields] == ["executable", "args", "env", "current_dir"]
	kinds = [type(f.descriptor) for f in decl.fields]
	assert kinds == [ScalarType, RepeatedType, RepeatedType, OptionalType]
	assert [render(f.declared_type) for f in decl.fields] == ["String", "Vec<String>", "Vec<String>", "Option<String>"]


def test_parse_aggregate_collects_attributes():
	decl = parse_aggregate(lex(COMMAND))
	assert [render(a.stream) for a in decl.attributes] == ["derive(Builder)"]
	assert [render(a.stream) for a in decl.fields[1].attributes] == ['doc = " arguments in order"', 'builder(each = "arg")']
	assert decl.fields[0].attributes == ()


def test_field_type_does_not_stay_joint_with_the_separator():
	decl = parse_aggregate(lex("struct A { v: Vec<u8>, }"))
	last = decl.fields[0].declared_type[-1]
	assert isinstance(last, Punct) and last.char == ">"
	assert last.spacing is Spacing.ALONE


def test_field_types_with_commas_inside_angles():
	decl = parse_aggregate(lex("struct M { map: HashMap<String, Vec<u8>>, f: fn(u8) -> u8 }"))
	assert [render(f.declared_type) for f in decl.fields] == ["HashMap<String, Vec<u8>>", "fn(u8) -> u8"]


def test_empty_struct_has_no_fields():
	assert parse_aggregate(lex("struct Empty {}")).fields == ()


@pytest.mark.parametrize(
	"source, message",
	[
		("enum E { A, B }", "expected struct"),
		("union U { a: u8 }", "expected struct"),
		("struct T(u8, u16);", "expected named fields"),
		("struct U;", "expected named fields"),
	],
)
def test_rejected_shapes_point_at_the_name(source: str, message: str):
	stream = lex(source)
	with pytest.raises(StructuralError) as excinfo:
		parse_aggregate(stream)
	assert excinfo.value.message == message
	assert excinfo.value.span == stream[1].span


def test_generic_struct_is_rejected():
	with pytest.raises(StructuralError) as excinfo:
		parse_aggregate(lex("struct G<T> { t: T }"))
	assert excinfo.value.message == "generic structs are not supported by derive(Builder)"


def test_where_clause_is_rejected():
	with pytest.raises(StructuralError) as excinfo:
		parse_aggregate(lex("struct W where u8: Copy { t: u8 }"))
	assert excinfo.value.message == "`where` clauses are not supported by derive(Builder)"


def test_duplicate_field_is_rejected_at_second_declaration():
	stream = lex("struct D {\n a: u8,\n a: u16 }")
	with pytest.raises(StructuralError) as excinfo:
		parse_aggregate(stream)
	assert excinfo.value.message == "field `a` is already declared"
	assert excinfo.value.span.line == 3


def test_missing_field_type_is_reported():
	with pytest.raises(StructuralError) as excinfo:
		parse_aggregate(lex("struct A { a: , b: u8 }"))
	assert excinfo.value.message == "expected type for field `a`, found `,`"


def test_missing_colon_is_reported():
	with pytest.raises(StructuralError) as excinfo:
		parse_aggregate(lex("struct A { a u8 }"))
	assert excinfo.value.message == "expected `:`, found `u8`"

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from synmac.core.errors import StructuralError
from synmac.tokens.cursor import Cursor, describe, int_literal_value
from synmac.tokens.lexer import lex
from synmac.tokens.tree import Delimiter, Literal, LiteralKind


@pytest.mark.parametrize(
	"text, value",
	[
		("0", 0),
		("1_000", 1000),
		("0x1F", 31),
		("0o17", 15),
		("0b101", 5),
		("7u8", 7),
		("42usize", 42),
		("007", 7),
	],
)
def test_int_literal_value(text: str, value: int):
	assert int_literal_value(Literal(LiteralKind.INT, text)) == value


def test_int_literal_value_rejects_other_kinds():
	with pytest.raises(TypeError):
		int_literal_value(Literal(LiteralKind.STR, '"1"'))


def test_peek_punct_requires_joint_spelling():
	assert Cursor(lex("..")).peek_punct("..")
	assert not Cursor(lex(". .")).peek_punct("..")
	assert Cursor(lex("..=")).peek_punct("..")


def test_expect_sequence_consumes_tokens():
	cur = Cursor(lex("pub(crate) x: u8"))
	assert cur.expect_keyword("pub").text == "pub"
	assert cur.expect_group(Delimiter.PARENTHESIS).stream[0].text == "crate"
	assert cur.expect_ident("field name").text == "x"
	assert [p.char for p in cur.expect_punct(":")] == [":"]
	assert not cur.eat_punct(",")
	assert cur.expect_ident().text == "u8"
	cur.expect_end()
	assert cur.at_end()


def test_expect_ident_reports_found_token():
	stream = lex("1 x")
	with pytest.raises(StructuralError) as excinfo:
		Cursor(stream).expect_ident("loop variable")
	assert excinfo.value.message == "expected loop variable, found literal `1`"
	assert excinfo.value.span == stream[0].span


def test_errors_at_end_point_at_end_span():
	group = lex("(a)")[0]
	cur = Cursor.of_group(group)
	cur.advance()
	with pytest.raises(StructuralError) as excinfo:
		cur.expect_keyword("in")
	assert excinfo.value.message == "expected `in`, found end of input"
	assert excinfo.value.span == group.close_span


def test_expect_end_rejects_trailing_tokens():
	cur = Cursor(lex("a b"))
	cur.advance()
	with pytest.raises(StructuralError) as excinfo:
		cur.expect_end()
	assert excinfo.value.message == "unexpected token `b`"


def test_expect_int_returns_literal_and_value():
	lit, value = Cursor(lex("0x10")).expect_int()
	assert lit.text == "0x10"
	assert value == 16


def test_describe_tokens():
	a, comma, group, lit = lex('a , [x] "s"')
	assert describe(a) == "`a`"
	assert describe(comma) == "`,`"
	assert describe(group) == "`[`"
	assert describe(lit) == 'literal `"s"`'
	assert describe(None) == "end of input"

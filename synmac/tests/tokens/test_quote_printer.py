# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from synmac.core.span import Span
from synmac.tokens.lexer import lex
from synmac.tokens.printer import render, render_pretty
from synmac.tokens.quote import join, quote
from synmac.tokens.tree import Ident, Literal, Punct, Spacing
from synmac.tokens.walker import iter_tokens, strip_spans

SITE = Span(file="site.rs", line=4, column=8)


def test_quote_splices_single_tree_and_streams():
	name = Ident("go", Span(file="user.rs", line=1, column=1))
	ty = lex("Vec<u8>")
	out = quote("fn #name(v: #ty) {}", SITE, name=name, ty=ty)
	assert render(out) == "fn go(v: Vec<u8>) {}"


def test_quote_moves_template_tokens_to_site_and_keeps_spliced_spans():
	name = Ident("go", Span(file="user.rs", line=1, column=1))
	out = quote("fn #name()", SITE, name=name)
	assert out[0].span == SITE
	assert out[1] is name
	assert out[2].open_span == SITE


def test_quote_unjoins_punct_before_ident_splice():
	out = quote("self.#field", SITE, field=Ident("x"))
	dot = out[1]
	assert isinstance(dot, Punct) and dot.spacing is Spacing.ALONE


def test_quote_keeps_joint_punct_before_punct_splice():
	out = quote("-#tail", SITE, tail=Punct(">"))
	assert out[0].spacing is Spacing.JOINT


def test_quote_unbound_placeholder_is_a_programming_error():
	with pytest.raises(KeyError):
		quote("#missing", SITE)


def test_quote_splices_inside_groups():
	out = quote("f(#a, [#b])", SITE, a=Literal.int_unsuffixed(1), b=())
	assert strip_spans(out) == strip_spans(lex("f(1, [])"))


def test_join_with_separator():
	parts = [lex("a"), lex("b"), lex("c")]
	assert render(join(parts, lex(","))) == "a, b, c"
	assert join([]) == ()


@pytest.mark.parametrize(
	"source, expected",
	[
		("f(a, b)", "f(a, b)"),
		("x: &mut Vec<u8>", "x: &mut Vec<u8>"),
		("a::b::c", "a::b::c"),
		("-> &mut Self", "-> &mut Self"),
		("self.x = 1;", "self.x = 1;"),
		("#[derive(Builder)]", "#[derive(Builder)]"),
		("seq!(i in 0..3 {})", "seq!(i in 0..3 {})"),
		("{ a } {}", "{ a } {}"),
		("ok_or(e)?,", "ok_or(e)?,"),
		("&'a str", "&'a str"),
		("let x = -1;", "let x = -1;"),
		("f(-2)", "f(-2)"),
		("a - 1", "a - 1"),
		("let x = 1f32;", "let x = 1f32;"),
		("let b = b\"ab\";", "let b = b\"ab\";"),
		("m(b'a', r#\"x\"#)", "m(b'a', r#\"x\"#)"),
		("/// hi\nstruct A;", "#[doc = \" hi\"] struct A;"),
	],
)
def test_render_single_line(source: str, expected: str):
	assert render(lex(source)) == expected


def test_render_ignores_source_layout():
	assert render(lex("f (\n\ta ,b\n)")) == render(lex("f(a, b)"))


def test_render_pretty_breaks_bodies_into_lines():
	text = render_pretty(lex("struct A { a: u8, b: u8 } fn f() { g(); }"))
	assert text == "struct A {\n\ta: u8,\n\tb: u8\n}\nfn f() {\n\tg();\n}\n"


def test_render_pretty_keeps_attributes_on_their_own_line():
	text = render_pretty(lex("#[derive(Builder)] struct A {}"), indent="    ")
	assert text == "#[derive(Builder)]\nstruct A {}\n"


def test_render_pretty_empty_stream():
	assert render_pretty(()) == ""


def test_literal_string_escapes_round_trip():
	lit = Literal.string('field "x" is None')
	assert lit.text == '"field \\"x\\" is None"'
	assert lit.str_value() == 'field "x" is None'
	assert [t.text for t in iter_tokens(lex(lit.text))] == [lit.text]

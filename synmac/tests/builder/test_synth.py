# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Builder synthesis tests.

Golden comparisons go through `render`, so they pin the generated token
sequence without depending on the punctuation spacing of spliced user tokens.
"""

from __future__ import annotations

import pytest

from synmac.builder.decl import parse_aggregate
from synmac.builder.synth import FinalizeMode, SetterMode, derive_builder, emit_builder, plan_builder
from synmac.core.config import ExpansionConfig
from synmac.core.errors import StructuralError
from synmac.tokens.lexer import lex
from synmac.tokens.printer import render
from synmac.tokens.tree import Ident
from synmac.tokens.walker import iter_tokens, strip_spans

COMMAND = """
#[derive(Builder)]
pub struct Command {
	executable: String,
	#[builder(each = "arg")]
	args: Vec<String>,
	current_dir: Option<String>,
}
"""

COMMAND_BUILDER = r"""
pub struct CommandBuilder {
	executable: std::option::Option<String>,
	args: Vec<String>,
	current_dir: std::option::Option<String>,
}
impl Command {
	pub fn builder() -> CommandBuilder {
		CommandBuilder {
			executable: std::option::Option::None,
			args: std::default::Default::default(),
			current_dir: std::option::Option::None,
		}
	}
}
impl CommandBuilder {
	pub fn executable(&mut self, executable: String) -> &mut Self {
		self.executable = std::option::Option::Some(executable);
		self
	}
	pub fn args(&mut self, args: Vec<String>) -> &mut Self {
		self.args = args;
		self
	}
	pub fn arg(&mut self, arg: String) -> &mut Self {
		self.args.push(arg);
		self
	}
	pub fn current_dir(&mut self, current_dir: String) -> &mut Self {
		self.current_dir = std::option::Option::Some(current_dir);
		self
	}
	pub fn build(&mut self) -> std::result::Result<Command, std::boxed::Box<dyn std::error::Error>> {
		std::result::Result::Ok(Command {
			executable: self.executable.clone().ok_or("field \"executable\" is None")?,
			args: self.args.clone(),
			current_dir: self.current_dir.clone(),
		})
	}
}
"""


def _plan(source: str):
	return plan_builder(parse_aggregate(lex(source)))


def test_derive_builder_golden_output():
	out = derive_builder(lex(COMMAND))
	assert render(out) == render(lex(COMMAND_BUILDER))


def test_plan_setters_and_finalize_modes():
	plan = _plan(COMMAND)
	assert plan.builder.text == "CommandBuilder"
	setters = [(s.name.text, s.mode) for f in plan.fields for s in f.setters]
	assert setters == [
		("executable", SetterMode.STORE),
		("args", SetterMode.REPLACE),
		("arg", SetterMode.APPEND),
		("current_dir", SetterMode.STORE),
	]
	assert [f.finalize for f in plan.fields] == [FinalizeMode.REQUIRE, FinalizeMode.PASS, FinalizeMode.PASS]


def test_storage_types_follow_the_defaulting_rule():
	plan = _plan(COMMAND)
	assert [render(f.storage_type) for f in plan.fields] == [
		"std::option::Option<String>",
		"Vec<String>",
		"std::option::Option<String>",
	]
	# Optional setters take the unwrapped type; the element setter takes the element type.
	params = {s.name.text: render(s.param_type) for f in plan.fields for s in f.setters}
	assert params == {"executable": "String", "args": "Vec<String>", "arg": "String", "current_dir": "String"}


def test_alias_equal_to_field_name_replaces_the_whole_setter():
	plan = _plan('struct S { #[builder(each = "env")] env: Vec<String> }')
	(field,) = plan.fields
	assert [(s.name.text, s.mode) for s in field.setters] == [("env", SetterMode.APPEND)]


def test_alias_equal_to_field_name_emits_one_setter():
	out = derive_builder(lex('struct S { #[builder(each = "env")] env: Vec<String> }'))
	leaves = list(iter_tokens(out))
	fns = [leaves[i + 1].text for i, t in enumerate(leaves) if isinstance(t, Ident) and t.text == "fn"]
	assert fns == ["builder", "env", "build"]


def test_vec_without_alias_gets_replacement_setter_only():
	plan = _plan("struct S { items: Vec<u8> }")
	assert [(s.name.text, s.mode) for s in plan.fields[0].setters] == [("items", SetterMode.REPLACE)]


def test_builder_suffix_from_config():
	config = ExpansionConfig(builder_suffix="Factory")
	out = derive_builder(lex("struct Widget { size: u32 }"), config)
	assert render(out).startswith("pub struct WidgetFactory {")


def test_setter_named_build_collides_with_finalizer():
	with pytest.raises(StructuralError) as excinfo:
		_plan("struct S { build: u8 }")
	assert excinfo.value.message == "setter `build` would collide with the generated `build` method"


def test_alias_named_build_collides_with_finalizer():
	stream = lex('struct S { #[builder(each = "build")] steps: Vec<u8> }')
	with pytest.raises(StructuralError) as excinfo:
		plan_builder(parse_aggregate(stream))
	assert "would collide" in excinfo.value.message


def test_alias_reusing_another_field_name_is_rejected():
	source = 'struct S {\n arg: u8,\n #[builder(each = "arg")]\n args: Vec<u8> }'
	with pytest.raises(StructuralError) as excinfo:
		_plan(source)
	assert excinfo.value.message == "setter `arg` is generated more than once"
	# Points at the alias literal, not the earlier field.
	assert excinfo.value.span.line == 3


def test_malformed_alias_aborts_synthesis():
	with pytest.raises(StructuralError) as excinfo:
		derive_builder(lex('struct S { #[builder(eac = "arg")] args: Vec<String> }'))
	assert excinfo.value.message == 'expected `builder(each = "...")`'


def test_template_tokens_carry_the_aggregate_name_span():
	stream = lex(COMMAND)
	decl = parse_aggregate(stream)
	out = emit_builder(plan_builder(decl))
	assert out[0].span == decl.name.span
	assert out[2].text == "CommandBuilder"
	assert out[2].span == decl.name.span


def test_user_written_types_keep_their_spans():
	stream = lex(COMMAND)
	out = derive_builder(stream)
	strings = [t for t in iter_tokens(out) if isinstance(t, Ident) and t.text == "String"]
	assert strings
	assert {t.span.line for t in strings} <= {4, 6, 7}


def test_empty_struct_builds_trivially():
	out = derive_builder(lex("struct Unit {}"))
	expected = """
	pub struct UnitBuilder {}
	impl Unit { pub fn builder() -> UnitBuilder { UnitBuilder {} } }
	impl UnitBuilder {
		pub fn build(&mut self) -> std::result::Result<Unit, std::boxed::Box<dyn std::error::Error>> {
			std::result::Result::Ok(Unit {})
		}
	}
	"""
	assert render(out) == render(lex(expected))


def test_derivation_is_deterministic():
	first = derive_builder(lex(COMMAND))
	second = derive_builder(lex(COMMAND))
	assert first == second
	assert strip_spans(first) == strip_spans(second)
	assert render(first) == render(second)

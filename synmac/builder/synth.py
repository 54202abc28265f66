# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Builder synthesis.

Pipeline placement:
  item tokens -> parse_aggregate (decl) -> plan_builder -> emit_builder -> tokens

`plan_builder` decides everything about the generated API (storage types,
setters, finalizer behaviour) and records it in a `BuilderPlan`. Emission is a
straight rendering of the plan through `quote` templates, and `runtime.py`
materializes the same plan as a Python class, so both back ends agree by
construction.

For `struct Command { executable: String, #[builder(each = "arg")] args: Vec<String>,
current_dir: Option<String> }` the output is:

    pub struct CommandBuilder {
        executable: std::option::Option<String>,
        args: Vec<String>,
        current_dir: std::option::Option<String>,
    }
    impl Command {
        pub fn builder() -> CommandBuilder { ... all empty ... }
    }
    impl CommandBuilder {
        pub fn executable(&mut self, executable: String) -> &mut Self { ... }
        pub fn args(&mut self, args: Vec<String>) -> &mut Self { ... }
        pub fn arg(&mut self, arg: String) -> &mut Self { ... push ... }
        pub fn current_dir(&mut self, current_dir: String) -> &mut Self { ... }
        pub fn build(&mut self) -> Result<Command, Box<dyn Error>> { ... }
    }
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from synmac.core.config import DEFAULT_CONFIG, ExpansionConfig
from synmac.core.errors import StructuralError
from synmac.core.span import Span
from synmac.tokens.quote import join, quote
from synmac.tokens.tree import Ident, Literal, TokenStream
from .attrs import EachAlias, resolve_each_alias
from .classify import OptionalType, RepeatedType, ScalarType
from .decl import AggregateDeclaration, FieldDescriptor, parse_aggregate

FINALIZER_NAME = "build"
CONSTRUCTOR_NAME = "builder"


class SetterMode(Enum):
	# Store `Some(value)` (Scalar and Optional fields).
	STORE = "store"
	# Overwrite the whole sequence.
	REPLACE = "replace"
	# Push one element onto the sequence.
	APPEND = "append"


class FinalizeMode(Enum):
	# Absent value fails the build with `field "<name>" is None`.
	REQUIRE = "require"
	# Stored value is passed through (None / empty sequence are legitimate).
	PASS = "pass"


@dataclass(frozen=True)
class SetterPlan:
	name: Ident
	mode: SetterMode
	param_type: TokenStream


@dataclass(frozen=True)
class FieldPlan:
	field: FieldDescriptor
	alias: Optional[EachAlias]
	storage_type: TokenStream
	setters: Tuple[SetterPlan, ...]
	finalize: FinalizeMode

	@property
	def name(self) -> str:
		return self.field.name.text

	@property
	def repeated(self) -> bool:
		return isinstance(self.field.descriptor, RepeatedType)


@dataclass(frozen=True)
class BuilderPlan:
	target: Ident
	builder: Ident
	fields: Tuple[FieldPlan, ...]
	# Span given to template tokens (the derive site).
	span: Span = Span()


def missing_field_message(name: str) -> str:
	return f'field "{name}" is None'


def _field_plan(field: FieldDescriptor, span: Span, config: ExpansionConfig) -> FieldPlan:
	desc = field.descriptor
	alias = resolve_each_alias(field, config)
	if isinstance(desc, ScalarType):
		return FieldPlan(
			field=field,
			alias=None,
			storage_type=quote("std::option::Option<#ty>", span, ty=desc.ty),
			setters=(SetterPlan(field.name, SetterMode.STORE, desc.ty),),
			finalize=FinalizeMode.REQUIRE,
		)
	if isinstance(desc, OptionalType):
		return FieldPlan(
			field=field,
			alias=None,
			storage_type=quote("std::option::Option<#ty>", span, ty=desc.inner),
			setters=(SetterPlan(field.name, SetterMode.STORE, desc.inner),),
			finalize=FinalizeMode.PASS,
		)
	if isinstance(desc, RepeatedType):
		replace = SetterPlan(field.name, SetterMode.REPLACE, desc.ty)
		if alias is None:
			setters: Tuple[SetterPlan, ...] = (replace,)
		else:
			append = SetterPlan(alias.name, SetterMode.APPEND, desc.inner)
			# An alias equal to the field name takes over the setter name.
			setters = (append,) if alias.name.text == field.name.text else (replace, append)
		return FieldPlan(
			field=field,
			alias=alias,
			storage_type=desc.ty,
			setters=setters,
			finalize=FinalizeMode.PASS,
		)
	raise TypeError(f"unexpected type descriptor {desc!r}")


def plan_builder(decl: AggregateDeclaration, config: ExpansionConfig = DEFAULT_CONFIG) -> BuilderPlan:
	"""Decide the generated API for `decl`; raises `StructuralError` on conflicts."""
	span = decl.name.span
	fields = tuple(_field_plan(f, span, config) for f in decl.fields)
	taken: Dict[str, Ident] = {}
	for plan in fields:
		for setter in plan.setters:
			text = setter.name.text
			if text == FINALIZER_NAME:
				raise StructuralError(
					f"setter `{text}` would collide with the generated `{FINALIZER_NAME}` method",
					span=setter.name.span,
				)
			if text in taken:
				raise StructuralError(f"setter `{text}` is generated more than once", span=setter.name.span)
			taken[text] = setter.name
	return BuilderPlan(
		target=decl.name,
		builder=Ident(decl.name.text + config.builder_suffix, span),
		fields=fields,
		span=span,
	)


def _emit_setter(plan: FieldPlan, setter: SetterPlan, span: Span) -> TokenStream:
	head = quote(
		"pub fn #setter(&mut self, #setter: #ty) -> &mut Self",
		span,
		setter=setter.name,
		ty=setter.param_type,
	)
	if setter.mode is SetterMode.STORE:
		body = quote("self.#field = std::option::Option::Some(#setter);", span, field=plan.field.name, setter=setter.name)
	elif setter.mode is SetterMode.REPLACE:
		body = quote("self.#field = #setter;", span, field=plan.field.name, setter=setter.name)
	elif setter.mode is SetterMode.APPEND:
		body = quote("self.#field.push(#setter);", span, field=plan.field.name, setter=setter.name)
	else:
		raise TypeError(f"unexpected setter mode {setter.mode!r}")
	return quote("#head { #body self }", span, head=head, body=body)


def _emit_finalized_value(plan: FieldPlan, span: Span) -> TokenStream:
	if plan.finalize is FinalizeMode.REQUIRE:
		msg = Literal.string(missing_field_message(plan.name), span)
		return quote("#name: self.#name.clone().ok_or(#msg)?,", span, name=plan.field.name, msg=msg)
	return quote("#name: self.#name.clone(),", span, name=plan.field.name)


def emit_builder(plan: BuilderPlan) -> TokenStream:
	"""Render a plan as the builder struct plus its two impl blocks."""
	span = plan.span
	storage = join(quote("#name: #ty,", span, name=f.field.name, ty=f.storage_type) for f in plan.fields)
	initial: List[TokenStream] = []
	for f in plan.fields:
		if f.repeated:
			initial.append(quote("#name: std::default::Default::default(),", span, name=f.field.name))
		else:
			initial.append(quote("#name: std::option::Option::None,", span, name=f.field.name))
	setters = join(_emit_setter(f, s, span) for f in plan.fields for s in f.setters)
	values = join(_emit_finalized_value(f, span) for f in plan.fields)
	return quote(
		"""
		pub struct #builder { #storage }
		impl #target {
			pub fn #ctor() -> #builder {
				#builder { #initial }
			}
		}
		impl #builder {
			#setters
			pub fn #finalizer(&mut self) -> std::result::Result<#target, std::boxed::Box<dyn std::error::Error>> {
				std::result::Result::Ok(#target { #values })
			}
		}
		""",
		span,
		builder=plan.builder,
		ctor=Ident(CONSTRUCTOR_NAME, span),
		finalizer=Ident(FINALIZER_NAME, span),
		target=plan.target,
		storage=storage,
		initial=join(initial),
		setters=setters,
		values=values,
	)


def derive_builder(item: TokenStream, config: ExpansionConfig = DEFAULT_CONFIG) -> TokenStream:
	"""Derivation entry point: struct item tokens -> generated builder tokens."""
	return emit_builder(plan_builder(parse_aggregate(item, config), config))


__all__ = [
	"SetterMode",
	"FinalizeMode",
	"SetterPlan",
	"FieldPlan",
	"BuilderPlan",
	"FINALIZER_NAME",
	"CONSTRUCTOR_NAME",
	"missing_field_message",
	"plan_builder",
	"emit_builder",
	"derive_builder",
]

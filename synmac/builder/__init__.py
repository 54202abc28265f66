# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`#[derive(Builder)]`: staged-construction API synthesis for named-field structs.

Modules:
  - classify: syntactic Scalar / Optional / Repeated field-type classification
  - decl: struct item -> AggregateDeclaration
  - attrs: `#[builder(each = "...")]` resolution
  - synth: BuilderPlan and its token emission (`derive_builder`)
  - runtime: BuilderPlan materialized as a Python class
"""

from .classify import ScalarType, OptionalType, RepeatedType, TypeDescriptor, classify
from .decl import FieldDescriptor, AggregateDeclaration, parse_aggregate
from .attrs import NoAlias, EachAlias, MalformedAlias, classify_each_alias, resolve_each_alias
from .synth import (
	SetterMode,
	FinalizeMode,
	SetterPlan,
	FieldPlan,
	BuilderPlan,
	plan_builder,
	emit_builder,
	derive_builder,
)
from .runtime import ValueMissingError, materialize, record_type, builder_from_source

__all__ = [
	"ScalarType",
	"OptionalType",
	"RepeatedType",
	"TypeDescriptor",
	"classify",
	"FieldDescriptor",
	"AggregateDeclaration",
	"parse_aggregate",
	"NoAlias",
	"EachAlias",
	"MalformedAlias",
	"classify_each_alias",
	"resolve_each_alias",
	"SetterMode",
	"FinalizeMode",
	"SetterPlan",
	"FieldPlan",
	"BuilderPlan",
	"plan_builder",
	"emit_builder",
	"derive_builder",
	"ValueMissingError",
	"materialize",
	"record_type",
	"builder_from_source",
]

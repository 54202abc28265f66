# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
In-process evaluation of a `BuilderPlan`.

`materialize` turns a plan into a Python builder class with the same contract as
the emitted code: chained setters, append/replace semantics for Repeated fields,
and a `build()` that requires every Scalar field. A missing field raises
`ValueMissingError` (the Python error channel for the generated `Result`).

`build()` copies values out and never resets builder state, so calling it twice
yields equal results and a failed call leaves the builder untouched.
"""

from __future__ import annotations

import copy
import dataclasses
import keyword
from typing import Any, Callable, Dict, Optional, Tuple

from synmac.core.config import DEFAULT_CONFIG, ExpansionConfig
from synmac.core.errors import StructuralError
from synmac.tokens.lexer import lex
from .decl import parse_aggregate
from .synth import (
	CONSTRUCTOR_NAME,
	BuilderPlan,
	FinalizeMode,
	SetterMode,
	missing_field_message,
	plan_builder,
)


class ValueMissingError(ValueError):
	"""A required field was never set before `build()`."""

	def __init__(self, field: str) -> None:
		super().__init__(missing_field_message(field))
		self.field = field


class _Unset:
	def __repr__(self) -> str:
		return "<unset>"


_UNSET = _Unset()

# Builder state is stored under names that are not Rust identifiers, so no
# generated setter can shadow it.
_PLAN_ATTR = "synmac:plan"
_TARGET_ATTR = "synmac:target"
_VALUES_ATTR = "synmac:values"


def record_attribute(name: str) -> str:
	"""Python attribute for a field; keywords such as `from` or `class` get a trailing `_`."""
	return name + "_" if keyword.iskeyword(name) else name


def _is_special_name(name: str) -> bool:
	return len(name) > 4 and name.startswith("__") and name.endswith("__")


def check_python_names(plan: BuilderPlan) -> Dict[str, str]:
	"""
	Map field names to record attributes, rejecting plans Python cannot host.

	A setter spelled like a special method (`__init__`) would replace it, and two
	fields may land on the same attribute (`from` next to `from_`).
	"""
	attrs: Dict[str, str] = {}
	owners: Dict[str, str] = {}
	for f in plan.fields:
		for setter in f.setters:
			if _is_special_name(setter.name.text):
				raise StructuralError(
					f"setter `{setter.name.text}` clashes with a Python special method",
					span=setter.name.span,
				)
		attr = record_attribute(f.name)
		if attr in owners:
			raise StructuralError(
				f"field `{f.name}` maps to attribute `{attr}`, already used by `{owners[attr]}`",
				span=f.field.name.span,
			)
		owners[attr] = f.name
		attrs[f.name] = attr
	return attrs


def _values(builder: "MaterializedBuilder") -> Dict[str, Any]:
	return getattr(builder, _VALUES_ATTR)


class MaterializedBuilder:
	"""Base of every materialized builder class; setters are added per plan."""

	def __init__(self) -> None:
		plan: BuilderPlan = getattr(type(self), _PLAN_ATTR)
		setattr(self, _VALUES_ATTR, {f.name: [] if f.repeated else _UNSET for f in plan.fields})

	def build(self) -> Any:
		cls = type(self)
		plan: BuilderPlan = getattr(cls, _PLAN_ATTR)
		values = _values(self)
		kwargs: Dict[str, Any] = {}
		for f in plan.fields:
			value = values[f.name]
			attr = record_attribute(f.name)
			if f.finalize is FinalizeMode.REQUIRE:
				if value is _UNSET:
					raise ValueMissingError(f.name)
				kwargs[attr] = copy.copy(value)
			elif f.repeated:
				kwargs[attr] = list(value)
			else:
				kwargs[attr] = None if value is _UNSET else copy.copy(value)
		return getattr(cls, _TARGET_ATTR)(**kwargs)

	def __repr__(self) -> str:
		inner = ", ".join(f"{k}={v!r}" for k, v in _values(self).items())
		return f"{type(self).__name__}({inner})"


def _make_setter(field: str, name: str, mode: SetterMode) -> Callable[..., Any]:
	if mode is SetterMode.STORE:

		def setter(self: MaterializedBuilder, value: Any) -> MaterializedBuilder:
			_values(self)[field] = value
			return self

	elif mode is SetterMode.REPLACE:

		def setter(self: MaterializedBuilder, value: Any) -> MaterializedBuilder:
			_values(self)[field] = list(value)
			return self

	elif mode is SetterMode.APPEND:

		def setter(self: MaterializedBuilder, value: Any) -> MaterializedBuilder:
			_values(self)[field].append(value)
			return self

	else:
		raise TypeError(f"unexpected setter mode {mode!r}")
	setter.__name__ = name
	setter.__qualname__ = name
	return setter


def record_type(plan: BuilderPlan) -> type:
	"""Frozen dataclass standing in for the aggregate, fields in declaration order."""
	attrs = check_python_names(plan)
	return dataclasses.make_dataclass(plan.target.text, [attrs[f.name] for f in plan.fields], frozen=True)


def materialize(plan: BuilderPlan, target: Optional[Callable[..., Any]] = None) -> type:
	"""
	Build the Python builder class for `plan`.

	`target` receives the finalized fields as keyword arguments named by
	`record_attribute`; by default a frozen dataclass named after the aggregate
	is generated (see `record_type`). Setters keep the declared names, so a
	setter called `from` is reached with `getattr(builder, "from")`.
	"""
	check_python_names(plan)
	namespace: Dict[str, Any] = {
		_PLAN_ATTR: plan,
		_TARGET_ATTR: staticmethod(target if target is not None else record_type(plan)),
	}
	for f in plan.fields:
		for setter in f.setters:
			namespace[setter.name.text] = _make_setter(f.name, setter.name.text, setter.mode)
	return type(plan.builder.text, (MaterializedBuilder,), namespace)


def builder_from_source(source: str, config: ExpansionConfig = DEFAULT_CONFIG) -> Tuple[type, type]:
	"""
	Materialize a struct declaration written as source text.

	Returns `(record, builder)`; `record.builder()` creates a fresh builder.
	"""
	plan = plan_builder(parse_aggregate(lex(source), config), config)
	record = record_type(plan)
	builder = materialize(plan, record)
	setattr(record, CONSTRUCTOR_NAME, staticmethod(builder))
	return record, builder


__all__ = [
	"ValueMissingError",
	"MaterializedBuilder",
	"materialize",
	"record_type",
	"record_attribute",
	"check_python_names",
	"builder_from_source",
]

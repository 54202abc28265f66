# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Host boundary: run the macro engines over a compilation unit.

Pipeline placement:
  source -> lex -> expand_unit (derive sites + `seq!` invocations) -> tokens

Engines raise `StructuralError`; this module is the only place that catches it
and turns it into a positioned `Diagnostic`. A unit with any diagnostic produces
no tokens: there is no partial output.

Derive sites are items whose outer attributes include `#[derive(..., Builder)]`;
the generated builder tokens are spliced right after the item, which itself is
kept verbatim. `seq!(...)` invocations (any delimiter) are replaced by their
expansion and the result is scanned again so nested invocations expand too.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from synmac.builder.synth import derive_builder
from synmac.core.config import DEFAULT_CONFIG, ExpansionConfig
from synmac.core.diagnostics import Diagnostic, has_errors
from synmac.core.errors import StructuralError
from synmac.seq.expand import expand_seq
from synmac.tokens.lexer import lex
from synmac.tokens.tree import Delimiter, Group, Ident, Punct, TokenStream, TokenTree, is_ident, is_punct

CODE_LEX = "E-LEX"
CODE_BUILDER = "E-BUILDER"
CODE_SEQ = "E-SEQ"


@dataclass
class MacroOutput:
	tokens: TokenStream = ()
	diagnostics: List[Diagnostic] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return not has_errors(self.diagnostics)


@dataclass
class ExpansionResult:
	tokens: TokenStream = ()
	diagnostics: List[Diagnostic] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return not has_errors(self.diagnostics)


def error_diagnostic(err: StructuralError, *, code: str, phase: str = "expand") -> Diagnostic:
	return Diagnostic(message=err.message, code=code, phase=phase, severity="error", span=err.span)


def run_macro(fn: Callable[..., TokenStream], *args, code: str, **kwargs) -> MacroOutput:
	"""Invoke one engine; a `StructuralError` becomes a diagnostic and empty output."""
	try:
		tokens = fn(*args, **kwargs)
	except StructuralError as err:
		return MacroOutput(tokens=(), diagnostics=[error_diagnostic(err, code=code)])
	return MacroOutput(tokens=tuple(tokens), diagnostics=[])


def _derive_list_names(attr: Group) -> List[str]:
	"""Trailing path segments listed in a `derive(...)` attribute body, else []."""
	stream = attr.stream
	if len(stream) != 2 or not is_ident(stream[0], "derive"):
		return []
	args = stream[1]
	if not isinstance(args, Group) or args.delimiter is not Delimiter.PARENTHESIS:
		return []
	names: List[str] = []
	last: Optional[str] = None
	for tree in args.stream:
		if isinstance(tree, Ident):
			last = tree.text
		elif is_punct(tree, ","):
			if last is not None:
				names.append(last)
			last = None
	if last is not None:
		names.append(last)
	return names


def _item_end(stream: TokenStream, start: int) -> int:
	"""Index just past the item beginning at `start` (`;` or first brace body)."""
	for idx in range(start, len(stream)):
		tree = stream[idx]
		if is_punct(tree, ";"):
			return idx + 1
		if isinstance(tree, Group) and tree.delimiter is Delimiter.BRACE:
			return idx + 1
	return len(stream)


class UnitExpander:
	"""Expands every macro use site in one compilation unit."""

	def __init__(self, config: ExpansionConfig = DEFAULT_CONFIG) -> None:
		self._config = config
		self._diagnostics: List[Diagnostic] = []

	@property
	def diagnostics(self) -> List[Diagnostic]:
		return list(self._diagnostics)

	def expand(self, stream: TokenStream) -> ExpansionResult:
		tokens = self._expand_stream(tuple(stream), 0)
		if has_errors(self._diagnostics):
			return ExpansionResult(tokens=(), diagnostics=list(self._diagnostics))
		return ExpansionResult(tokens=tokens, diagnostics=list(self._diagnostics))

	def _is_seq_call(self, stream: TokenStream, idx: int) -> bool:
		if idx + 2 >= len(stream):
			return False
		group = stream[idx + 2]
		return (
			is_ident(stream[idx], self._config.seq_name)
			and is_punct(stream[idx + 1], "!")
			and isinstance(group, Group)
			and group.delimiter is not Delimiter.NONE
		)

	def _derive_site(self, stream: TokenStream, idx: int) -> bool:
		"""True when an item with `#[derive(..., Builder)]` starts at `idx`."""
		found = False
		pos = idx
		while pos + 1 < len(stream) and is_punct(stream[pos], "#"):
			attr = stream[pos + 1]
			if not isinstance(attr, Group) or attr.delimiter is not Delimiter.BRACKET:
				return False
			if self._config.derive_name in _derive_list_names(attr):
				found = True
			pos += 2
		return found and pos > idx

	def _expand_stream(self, stream: TokenStream, depth: int) -> TokenStream:
		out: List[TokenTree] = []
		idx = 0
		while idx < len(stream):
			tree = stream[idx]
			if self._is_seq_call(stream, idx):
				out.extend(self._expand_seq_call(tree, stream[idx + 2], depth))  # type: ignore[arg-type]
				idx += 3
				continue
			if is_punct(tree, "#") and self._derive_site(stream, idx):
				end = _item_end(stream, idx)
				item = stream[idx:end]
				out.extend(item)
				result = run_macro(derive_builder, item, self._config, code=CODE_BUILDER)
				self._diagnostics.extend(result.diagnostics)
				out.extend(result.tokens)
				idx = end
				continue
			if isinstance(tree, Group):
				out.append(tree.with_stream(self._expand_stream(tree.stream, depth)))
			else:
				out.append(tree)
			idx += 1
		return tuple(out)

	def _expand_seq_call(self, name: Ident, group: Group, depth: int) -> TokenStream:
		if depth >= self._config.recursion_limit:
			err = StructuralError(
				f"recursion limit reached while expanding `{self._config.seq_name}!` (limit {self._config.recursion_limit})",
				span=name.span,
			)
			self._diagnostics.append(error_diagnostic(err, code=CODE_SEQ))
			return ()
		result = run_macro(expand_seq, group.stream, end_span=group.close_span, code=CODE_SEQ)
		self._diagnostics.extend(result.diagnostics)
		if not result.ok:
			return ()
		return self._expand_stream(result.tokens, depth + 1)


def expand_unit(stream: TokenStream, config: ExpansionConfig = DEFAULT_CONFIG) -> ExpansionResult:
	return UnitExpander(config).expand(stream)


def expand_source(source: str, *, file: Optional[str] = None, config: ExpansionConfig = DEFAULT_CONFIG) -> ExpansionResult:
	"""Lex and expand one compilation unit given as text."""
	try:
		stream = lex(source, file=file)
	except StructuralError as err:
		return ExpansionResult(tokens=(), diagnostics=[error_diagnostic(err, code=CODE_LEX, phase="lex")])
	return expand_unit(stream, config)


__all__ = [
	"MacroOutput",
	"ExpansionResult",
	"UnitExpander",
	"run_macro",
	"error_diagnostic",
	"expand_unit",
	"expand_source",
	"CODE_LEX",
	"CODE_BUILDER",
	"CODE_SEQ",
]

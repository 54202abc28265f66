# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-invocation expansion settings.

Nothing here is global: the CLI builds one `ExpansionConfig` from its flags and
library callers pass their own (or rely on `DEFAULT_CONFIG`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ExpansionConfig:
	# Builder type name = aggregate name + suffix.
	builder_suffix: str = "Builder"
	# Single-segment wrapper names recognized by the type classifier.
	optional_wrappers: Tuple[str, ...] = ("Option",)
	repeated_wrappers: Tuple[str, ...] = ("Vec",)
	derive_name: str = "Builder"
	attribute_name: str = "builder"
	each_keyword: str = "each"
	seq_name: str = "seq"
	# Maximum nesting of macro invocations produced by other expansions.
	recursion_limit: int = 128

	def __post_init__(self) -> None:
		if not self.builder_suffix:
			raise ValueError("builder_suffix must not be empty")
		if self.recursion_limit < 1:
			raise ValueError(f"recursion_limit must be positive, got {self.recursion_limit}")
		overlap = set(self.optional_wrappers) & set(self.repeated_wrappers)
		if overlap:
			raise ValueError(f"wrapper names cannot be both optional and repeated: {sorted(overlap)}")


DEFAULT_CONFIG = ExpansionConfig()


__all__ = ["ExpansionConfig", "DEFAULT_CONFIG"]

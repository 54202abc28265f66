# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
synmac: compile-time syntax extensions over token trees.

Two engines share the token-tree core:
  - `synmac.builder`: `#[derive(Builder)]` staged-construction synthesis
  - `synmac.seq`: `seq!(N in a..b { ... })` bounded range expansion

`synmac.expander` runs both over a compilation unit and turns structural
errors into diagnostics. The CLI entrypoint is `synmac.cli:main`.
"""

__all__ = []

"""
synmac.core: shared span/diagnostic/error/config types used by every engine.

Modules:
  - span: Span (source positions)
  - diagnostics: Diagnostic record produced at the host boundary
  - errors: StructuralError raised by lexer, parsers and engines
  - config: ExpansionConfig (recognized names, limits)
"""

from .span import Span
from .diagnostics import Diagnostic, has_errors
from .errors import StructuralError
from .config import ExpansionConfig, DEFAULT_CONFIG

__all__ = [
	"Span",
	"Diagnostic",
	"has_errors",
	"StructuralError",
	"ExpansionConfig",
	"DEFAULT_CONFIG",
]

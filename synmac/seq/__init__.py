"""
`seq!`: repeat a token body over an integer range with textual substitution.
"""

from .expand import RangeExpansionRequest, LoopVarSubstituter, parse_request, expand_request, expand_seq

__all__ = [
	"RangeExpansionRequest",
	"LoopVarSubstituter",
	"parse_request",
	"expand_request",
	"expand_seq",
]

"""
Models package for docscheck

Contains data structures and type definitions for the lint pipeline.
"""

from .state import ProgramState, pipeline
from .diagnostics import Diagnostic, DiagnosticCode, Severity, SourceRange
from .directives import DirectiveDefinition, DIRECTIVES
from .parser import DirectiveBlock, DirectiveParameter, ParseResult
from .substitutions import MUTATION_OPERATORS, MutationOperator, SubstitutionExpression
from .versions import (
    AppliesAnalysis,
    Lifecycle,
    LIFECYCLE_STATES,
    ParsedVersionEntry,
    Version,
    VersionOverlap,
)

__all__ = [
    "ProgramState",
    "pipeline",
    "Diagnostic",
    "DiagnosticCode",
    "Severity",
    "SourceRange",
    "DirectiveDefinition",
    "DIRECTIVES",
    "DirectiveBlock",
    "DirectiveParameter",
    "ParseResult",
    "AppliesAnalysis",
    "Lifecycle",
    "LIFECYCLE_STATES",
    "ParsedVersionEntry",
    "Version",
    "VersionOverlap",
    "MUTATION_OPERATORS",
    "MutationOperator",
    "SubstitutionExpression",
]

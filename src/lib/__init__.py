"""
docscheck - Validator for colon-fenced directive Markdown

Checks directive blocks, applies_to lifecycle values, substitutions and
YAML frontmatter, reporting problems as positioned diagnostics.
"""

__version__ = "1.0.0"

from .parser import DirectiveParser
from .directives import DirectiveRegistry, DirectiveValidator
from .linter import DocumentLinter
from .log import LOG, state_connectToLogger

__all__ = [
    "DirectiveParser",
    "DirectiveRegistry",
    "DirectiveValidator",
    "DocumentLinter",
    "LOG",
    "state_connectToLogger",
    "__version__",
]

"""
Diagnostic data models

Every checker in docscheck reports problems as Diagnostic records carrying a
source range, a human-readable message, a severity and a stable code. Codes
are part of the public contract: reports, tests and downstream quick-fix
tooling key on them.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Any, Dict, Optional


class Severity(Enum):
    """
    Diagnostic severity levels

    ERROR: the construct is unusable as written
    WARNING: usable but likely wrong
    INFORMATION: worth knowing, nothing to fix necessarily
    HINT: stylistic or clarity suggestion
    """
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


class DiagnosticCode:
    """Stable machine-readable diagnostic codes"""

    # Directive blocks
    MISSING_CLOSING_DIRECTIVE = "missing_closing_directive"
    MISMATCHED_COLON_COUNT = "mismatched_colon_count"
    UNKNOWN_DIRECTIVE = "unknown_directive"
    MISSING_ARGUMENT = "missing_argument"
    UNKNOWN_PARAMETER = "unknown_parameter"
    INVALID_DIRECTIVE_CONTENT = "invalid_directive_content"
    MALFORMED_MISSING_BRACE = "malformed_directive_missing_brace"
    MALFORMED_MISSING_BRACES = "malformed_directive_missing_braces"

    # applies_to values and keys
    INVALID_VERSION_RANGE = "invalid_version_range"
    OVERLAPPING_VERSIONS = "overlapping_versions"
    MULTIPLE_UNBOUND_VERSIONS = "multiple_unbound_versions"
    REMOVED_EXACT_VERSION = "removed_exact_version"
    IMPLICIT_VERSION_SYNTAX = "implicit_version_syntax"
    INVALID_LIFECYCLE_VALUE = "invalid_lifecycle_value"
    UNKNOWN_APPLIES_KEY = "unknown_applies_key"
    UNKNOWN_NESTED_KEY = "unknown_nested_key"
    INVALID_APPLIES_FORMAT = "invalid_applies_format"

    # Frontmatter
    YAML_SYNTAX_ERROR = "yaml_syntax_error"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    UNKNOWN_FIELD = "unknown_field"
    TYPE_ERROR = "type_error"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    MAX_LENGTH_EXCEEDED = "max_length_exceeded"
    INVALID_PRODUCT_FORMAT = "invalid_product_format"
    INVALID_PRODUCT_ID = "invalid_product_id"

    # Substitutions
    UNDEFINED_SUB = "undefined_sub"
    USE_SUB = "use_sub"


@dataclass(frozen=True)
class SourceRange:
    """
    A span of document text

    Lines and characters are 0-based. The end character is exclusive.

    Example:
        The word "note" in ":::{note}" on the first line:
        SourceRange(start_line=0, start_char=4, end_line=0, end_char=8)
    """
    start_line: int
    start_char: int
    end_line: int
    end_char: int

    @classmethod
    def line_span(cls, line: int, text: str) -> "SourceRange":
        """Range covering a whole line of text"""
        return cls(line, 0, line, len(text))

    @classmethod
    def point(cls, line: int, char: int = 0) -> "SourceRange":
        """Empty range at a single position"""
        return cls(line, char, line, char)

    def contains(self, other: "SourceRange") -> bool:
        """Check whether other lies entirely inside this range"""
        starts_after = (other.start_line, other.start_char) >= (self.start_line, self.start_char)
        ends_before = (other.end_line, other.end_char) <= (self.end_line, self.end_char)
        return starts_after and ends_before

    def to_dict(self) -> Dict[str, int]:
        return {
            "start_line": self.start_line,
            "start_char": self.start_char,
            "end_line": self.end_line,
            "end_char": self.end_char,
        }


@dataclass(frozen=True)
class Diagnostic:
    """
    One reported problem

    Attributes:
        range: Where the problem is in the document
        message: Human-readable description
        severity: Severity level
        code: Stable identifier from DiagnosticCode
        source: Name of the checker that produced it (e.g. "directives")
    """
    range: SourceRange
    message: str
    severity: Severity
    code: str
    source: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary"""
        return {
            "range": self.range.to_dict(),
            "message": self.message,
            "severity": self.severity.value,
            "code": self.code,
            "source": self.source,
        }

"""
Substitution references and checks

Substitution variables come from the nearest docset file (`subs:` mapping)
and the document's frontmatter (`sub:` mapping), frontmatter winning. Two
checks run over the document body:

- undefined_sub: a `{{name}}` reference whose variable is not defined
- use_sub: a literal value that has a substitution defined for it

Example:
    >>> substitution_parse("version | M.M | trim")
    SubstitutionExpression(variable_name='version', mutations=['M.M', 'trim'])
"""

import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import yaml

from ..models.diagnostics import Diagnostic, DiagnosticCode, Severity, SourceRange
from ..models.frontmatter import PRODUCTS
from ..models.substitutions import SubstitutionExpression
from .log import LOG

SOURCE = "substitutions"

REFERENCE_PATTERN = re.compile(r'\{\{([^}]+)\}\}')


class DocsetError(Exception):
    """A docset file exists but cannot be read or parsed"""


def substitution_parse(text: str) -> SubstitutionExpression:
    """
    Split the text inside `{{ }}` into variable name and mutation operators

    Segments are trimmed and empty operator segments dropped, so
    "name || lc |" gives mutations ["lc"].
    """
    parts = [part.strip() for part in text.split('|')]
    return SubstitutionExpression(
        variable_name=parts[0],
        mutations=[part for part in parts[1:] if part],
    )


def shorthand_resolve(name: str, substitutions: Mapping[str, str]) -> Optional[str]:
    """
    Resolve a variable name to the key that defines it

    A leading dot is shorthand for the product namespace: `.kibana` resolves
    to `product.kibana`.

    Returns:
        The defining key, or None when the variable is undefined or empty
    """
    key = f"product.{name[1:]}" if name.startswith('.') else name
    if substitutions.get(key):
        return key
    return None


def productSubstitutions_get() -> Dict[str, str]:
    """Built-in `product.<id>` substitutions, one per known product"""
    return {f"product.{product_id}": name for product_id, name in PRODUCTS.items()}


def substitutions_order(substitutions: Mapping[Any, Any]) -> Dict[str, str]:
    """
    Normalize a substitution mapping

    Keys and values become strings, None and empty values are dropped, and the
    result is ordered by value length, longest first, so longer literals claim
    their text before shorter ones contained in them.
    """
    normalized = {
        str(key): str(value)
        for key, value in substitutions.items()
        if value is not None and str(value) != ''
    }
    return dict(sorted(normalized.items(), key=lambda item: -len(item[1])))


def docset_find(document: Path, filenames: Iterable[str]) -> Optional[Path]:
    """
    Find the docset file nearest to a document

    Walks up from the document's directory to the filesystem root. In each
    directory the names are tried in the given order.
    """
    names = list(filenames)
    for directory in document.resolve().parents:
        for name in names:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def docset_load(docset: Path) -> Dict[str, str]:
    """
    Read the `subs:` mapping of a docset file

    Returns:
        The ordered substitutions; {} when the file has no `subs:`

    Raises:
        DocsetError: if the file cannot be read, is not valid YAML, or its
            `subs:` is not a mapping
    """
    try:
        data = yaml.safe_load(docset.read_text(encoding="utf-8"))
    except OSError as error:
        raise DocsetError(f"Cannot read docset {docset}: {error}") from error
    except yaml.YAMLError as error:
        raise DocsetError(f"Invalid YAML in docset {docset}: {error}") from error

    if not isinstance(data, dict) or data.get('subs') is None:
        return {}

    subs = data['subs']
    if not isinstance(subs, dict):
        raise DocsetError(f"'subs' in docset {docset} must be a mapping")

    LOG(f"Loaded {len(subs)} substitutions from {docset}", level=2)
    return substitutions_order(subs)


class SubstitutionChecker:
    """
    Checks substitution use in document lines

    Usage:
        checker = SubstitutionChecker(lines, {"version": "9.1"}, body_start=4)
        diagnostics = checker.check()
    """

    def __init__(self, lines: List[str], substitutions: Mapping[Any, Any], body_start: int = 0):
        """
        Args:
            lines: Document lines
            substitutions: Variable name to value
            body_start: First line after the frontmatter; literal values are
                not reported above it, where substitutions are defined
        """
        self.lines = lines
        self.substitutions = substitutions_order(substitutions)
        self.body_start = body_start

    def check(self) -> List[Diagnostic]:
        diagnostics = self.undefined_check()
        diagnostics.extend(self.literal_check())
        return diagnostics

    def undefined_check(self) -> List[Diagnostic]:
        """Information diagnostics for references to undefined variables"""
        diagnostics: List[Diagnostic] = []
        for line_num, text in enumerate(self.lines):
            for match in REFERENCE_PATTERN.finditer(text):
                expression = substitution_parse(match.group(1))
                if shorthand_resolve(expression.variable_name, self.substitutions) is not None:
                    continue
                diagnostics.append(Diagnostic(
                    range=SourceRange(line_num, match.start(), line_num, match.end()),
                    message=f"Undefined substitution variable: '{expression.variable_name}'",
                    severity=Severity.INFORMATION,
                    code=DiagnosticCode.UNDEFINED_SUB,
                    source=SOURCE,
                ))
        LOG(f"Undefined substitutions: {len(diagnostics)}", level=3)
        return diagnostics

    def literal_check(self) -> List[Diagnostic]:
        """
        Warnings for literal values that should be written as `{{key}}`

        A value matches only between non-word characters or line ends. A match
        lying inside an already reported range is not reported again.
        """
        diagnostics: List[Diagnostic] = []
        patterns = [
            (key, value, re.compile(rf'(\W|^){re.escape(value)}(\W|$)'))
            for key, value in self.substitutions.items()
        ]

        for line_num in range(self.body_start, len(self.lines)):
            text = self.lines[line_num]
            reported: List[SourceRange] = []
            for key, value, pattern in patterns:
                for match in pattern.finditer(text):
                    start = match.start() + len(match.group(1))
                    found = SourceRange(line_num, start, line_num, start + len(value))
                    if any(existing.contains(found) for existing in reported):
                        continue
                    reported.append(found)
                    diagnostics.append(Diagnostic(
                        range=found,
                        message=f"Use substitute `{{{{{key}}}}}` instead of `{value}`",
                        severity=Severity.WARNING,
                        code=DiagnosticCode.USE_SUB,
                        source=SOURCE,
                    ))

        LOG(f"Literal substitution values: {len(diagnostics)}", level=3)
        return diagnostics

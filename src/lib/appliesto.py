"""
applies_to validation

Semantic analysis of applies_to values (comma-separated lifecycle entries)
and discovery of applies_to payloads in a document body.

An applies_to value such as `preview 9.0-9.2, ga 9.3+` is validated in two
passes:
1. Syntax: every entry must match the entry grammar, else one error
2. Semantics: implicit syntax, multiple unbound entries, inverted ranges,
   `removed =X` as the latest state, overlapping coverage

Payloads are found in three places in the body:
- inline roles        {applies_to}`stack: ga 9.1`
- section blocks      ```{applies_to}  followed by `key: value` lines
- directive params    :applies_to: stack: ga 9.1

Example:
    >>> [d.code for d in appliesValue_validate("ga 9.0-9.5, preview 9.3-9.8")]
    ['overlapping_versions']
"""

import re
from typing import Iterable, List, Optional, Tuple

from ..models.diagnostics import Diagnostic, DiagnosticCode, Severity, SourceRange
from ..models.frontmatter import APPLIES_KEYS, NESTED_APPLIES_KEYS
from ..models.parser import DirectiveBlock
from ..models.versions import (
    AppliesAnalysis,
    Lifecycle,
    ParsedVersionEntry,
    Version,
    VersionOverlap,
)
from .log import LOG
from .versions import (
    bound_compare,
    entry_isImplicit,
    entry_isValid,
    versionEntry_parse,
    version_format,
    versions_compare,
)

SOURCE = "applies_to"

INLINE_ROLE_PATTERN = re.compile(r'\{applies_to\}`([^`]*)`')
SECTION_OPEN_PATTERN = re.compile(r'^\s*(`{3,})\{applies_to\}\s*$')
KEY_VALUE_PATTERN = re.compile(r'^(\s*)([^:\s][^:]*?)\s*:(.*)$')


def overlap_find(a: ParsedVersionEntry, b: ParsedVersionEntry) -> Optional[Version]:
    """
    Find the first version covered by both entries

    Entries without a start version (bare lifecycle, `all`, unparseable)
    never overlap. Unbound entries extend to infinity.

    Returns:
        The larger of the two start versions when the ranges intersect, else None
    """
    if a.start_version is None or b.start_version is None:
        return None

    a_end = None if a.is_unbound else (a.end_version or a.start_version)
    b_end = None if b.is_unbound else (b.end_version or b.start_version)

    if bound_compare(a.start_version, b_end) <= 0 and bound_compare(b.start_version, a_end) <= 0:
        if versions_compare(a.start_version, b.start_version) >= 0:
            return a.start_version
        return b.start_version

    return None


def overlappingEntries_find(entries: List[ParsedVersionEntry]) -> Optional[VersionOverlap]:
    """Return the first overlapping pair, scanning i ascending then j > i"""
    for i in range(len(entries)):
        for j in range(i + 1, len(entries)):
            version = overlap_find(entries[i], entries[j])
            if version is not None:
                return VersionOverlap(
                    first=entries[i].original_entry,
                    second=entries[j].original_entry,
                    version=version_format(version),
                )
    return None


def entries_analyze(entries: Iterable[str]) -> AppliesAnalysis:
    """
    Analyze applies_to entries in a single pass

    Args:
        entries: Entry strings, already comma-split and trimmed

    Returns:
        AppliesAnalysis with everything the diagnostics need

    Example:
        >>> entries_analyze(["ga 9.0+", "beta 8.0+"]).unbound_count
        2
    """
    analysis = AppliesAnalysis()
    implicit_count = 0
    versioned_count = 0
    highest_version: Optional[Version] = None
    highest_entry: Optional[ParsedVersionEntry] = None

    for entry in entries:
        if not entry:
            continue

        parsed = versionEntry_parse(entry)
        if parsed is None:
            continue

        analysis.parsed_entries.append(parsed)

        if entry_isImplicit(entry):
            implicit_count += 1

        if parsed.version_spec and parsed.version_spec != 'all':
            versioned_count += 1

        if parsed.is_unbound and parsed.start_version is not None:
            analysis.unbound_count += 1

        if parsed.is_range and parsed.start_version is not None and parsed.end_version is not None:
            if versions_compare(parsed.start_version, parsed.end_version) > 0:
                analysis.invalid_ranges.append(parsed)

        # Ties keep the first entry encountered
        effective = parsed.end_version or parsed.start_version
        if effective is not None:
            if highest_version is None or versions_compare(effective, highest_version) > 0:
                highest_version = effective
                highest_entry = parsed

    if (
        highest_entry is not None
        and highest_entry.lifecycle is Lifecycle.REMOVED
        and highest_entry.is_exact
    ):
        analysis.removed_exact_as_highest = highest_entry

    analysis.has_implicit_entries = implicit_count > 0
    analysis.all_entries_implicit = versioned_count > 0 and implicit_count == versioned_count

    if len(analysis.parsed_entries) > 1 and not analysis.all_entries_implicit:
        analysis.overlap = overlappingEntries_find(analysis.parsed_entries)

    return analysis


def analysis_diagnose(
    analysis: AppliesAnalysis,
    entries: List[str],
    value_range: Optional[SourceRange] = None,
) -> List[Diagnostic]:
    """
    Turn a semantic analysis into diagnostics

    Order: implicit syntax hint, multiple unbound warning, invalid range
    warnings, removed-exact hint, overlap warning.

    Args:
        analysis: Result of entries_analyze()
        entries: The entries that were analyzed
        value_range: Where the value sits in the document
    """
    value_range = value_range or SourceRange.point(0)
    diagnostics: List[Diagnostic] = []

    def add(message: str, severity: Severity, code: str) -> None:
        diagnostics.append(Diagnostic(
            range=value_range, message=message, severity=severity, code=code, source=SOURCE,
        ))

    if analysis.has_implicit_entries:
        if analysis.all_entries_implicit and len(entries) > 1:
            add(
                "Consider using explicit version ranges for clarity. Example: "
                "'preview 9.4-10.9, ga 11.0-12.2, removed 12.3+' instead of inferring ranges.",
                Severity.HINT,
                DiagnosticCode.IMPLICIT_VERSION_SYNTAX,
            )
        else:
            add(
                "Consider using explicit syntax: Use '+' for \"and later\" (e.g., 'ga 9.1+') "
                "or '=' for exact version (e.g., 'ga =9.1')",
                Severity.HINT,
                DiagnosticCode.IMPLICIT_VERSION_SYNTAX,
            )

    if analysis.unbound_count > 1 and not analysis.all_entries_implicit:
        add(
            "Only one entry per key can use the greater-than syntax. "
            f"Found {analysis.unbound_count} unbound entries.",
            Severity.WARNING,
            DiagnosticCode.MULTIPLE_UNBOUND_VERSIONS,
        )

    for entry in analysis.invalid_ranges:
        add(
            f"Invalid version range in '{entry.original_entry}': the first version must be "
            "less than or equal to the second version",
            Severity.WARNING,
            DiagnosticCode.INVALID_VERSION_RANGE,
        )

    removed = analysis.removed_exact_as_highest
    if removed is not None and removed.start_version is not None:
        version = version_format(removed.start_version)
        add(
            f"'removed ={version}' means removed only in version {version}. "
            f"If the feature stays removed, use 'removed {version}+' instead.",
            Severity.HINT,
            DiagnosticCode.REMOVED_EXACT_VERSION,
        )

    if analysis.overlap is not None:
        overlap = analysis.overlap
        add(
            f"Overlapping versions: '{overlap.first}' and '{overlap.second}' both cover "
            f"version {overlap.version}. A version cannot be in multiple lifecycle states.",
            Severity.WARNING,
            DiagnosticCode.OVERLAPPING_VERSIONS,
        )

    return diagnostics


def appliesValue_validate(value: str, value_range: Optional[SourceRange] = None) -> List[Diagnostic]:
    """
    Validate one applies_to value

    Main entry point for value validation. Syntax errors stop validation of
    the value; otherwise semantic diagnostics follow.

    Args:
        value: Value text such as "preview 9.0-9.2, ga 9.3+"
        value_range: Where the value sits in the document

    Returns:
        Diagnostics for the value, all positioned at value_range
    """
    value_range = value_range or SourceRange.point(0)

    if not value.strip():
        return []

    if value.strip() == 'all':
        return [Diagnostic(
            range=value_range,
            message=(
                "Invalid lifecycle value 'all'. 'all' must be preceded by a lifecycle state "
                "(e.g., 'ga all', 'beta all')"
            ),
            severity=Severity.ERROR,
            code=DiagnosticCode.INVALID_LIFECYCLE_VALUE,
            source=SOURCE,
        )]

    entries = [entry.strip() for entry in value.split(',')]

    for entry in entries:
        if not entry_isValid(entry):
            return [Diagnostic(
                range=value_range,
                message=(
                    f"Invalid lifecycle value '{value}'. Expected format: 'state', "
                    "'state version', 'state version+', 'state =version', 'state x.x-y.y', "
                    "or 'state all'"
                ),
                severity=Severity.ERROR,
                code=DiagnosticCode.INVALID_LIFECYCLE_VALUE,
                source=SOURCE,
            )]

    analysis = entries_analyze(entries)
    return analysis_diagnose(analysis, entries, value_range)


def appliesKey_validate(key: str, key_range: SourceRange) -> List[Diagnostic]:
    """Warn about a top-level applies_to key the parser does not know"""
    if key in APPLIES_KEYS:
        return []
    return [Diagnostic(
        range=key_range,
        message=f"Unknown applies_to key: {key}. Valid keys: {', '.join(APPLIES_KEYS)}",
        severity=Severity.WARNING,
        code=DiagnosticCode.UNKNOWN_APPLIES_KEY,
        source=SOURCE,
    )]


def nestedKey_validate(parent: str, key: str, key_range: SourceRange) -> List[Diagnostic]:
    """
    Warn about a key nested under deployment, serverless or product

    Children of other parents are not checked.
    """
    valid_keys = NESTED_APPLIES_KEYS.get(parent)
    if valid_keys is None or key in valid_keys:
        return []
    return [Diagnostic(
        range=key_range,
        message=f"Unknown {parent} key: {key}. Valid keys: {', '.join(valid_keys)}",
        severity=Severity.WARNING,
        code=DiagnosticCode.UNKNOWN_NESTED_KEY,
        source=SOURCE,
    )]


def appliesLine_validate(
    text: str, line: int, offset: int = 0, parent: Optional[str] = None
) -> Tuple[List[Diagnostic], Optional[str]]:
    """
    Validate one `key: value` payload found on a document line

    Args:
        text: The payload, e.g. "stack: ga 9.1"
        line: Document line of the payload
        offset: Character where the payload starts on that line
        parent: Enclosing key when the payload is nested (section blocks)

    Returns:
        (diagnostics, key) where key is the parsed key, or None when the
        payload is not `key: value` shaped
    """
    match = KEY_VALUE_PATTERN.match(text)
    if not match:
        stripped = text.strip()
        start = offset + (len(text) - len(text.lstrip()))
        return [Diagnostic(
            range=SourceRange(line, start, line, start + len(stripped)),
            message=f"Invalid applies_to format '{stripped}'. Expected 'key: value' (e.g., 'stack: ga 9.1')",
            severity=Severity.ERROR,
            code=DiagnosticCode.INVALID_APPLIES_FORMAT,
            source=SOURCE,
        )], None

    indent, key, rest = match.group(1), match.group(2), match.group(3)
    key_start = offset + len(indent)
    key_range = SourceRange(line, key_start, line, key_start + len(key))

    if parent is None:
        diagnostics = appliesKey_validate(key, key_range)
    else:
        diagnostics = nestedKey_validate(parent, key, key_range)

    value = rest.strip()
    if value:
        value_start = offset + match.start(3) + (len(rest) - len(rest.lstrip()))
        value_range = SourceRange(line, value_start, line, value_start + len(value))
        diagnostics.extend(appliesValue_validate(value, value_range))

    return diagnostics, key


class AppliesScanner:
    """
    Finds and validates applies_to payloads in a document body

    Frontmatter is not scanned here; lines before body_start are skipped.
    """

    def __init__(self, lines: List[str], blocks: Iterable[DirectiveBlock] = (), body_start: int = 0):
        """
        Args:
            lines: Document lines
            blocks: Parsed directive blocks, for `:applies_to:` parameters
            body_start: First line after the frontmatter
        """
        self.lines = lines
        self.blocks = list(blocks)
        self.body_start = body_start

    def scan(self) -> List[Diagnostic]:
        """Validate every payload, in document order per source kind"""
        diagnostics: List[Diagnostic] = []
        diagnostics.extend(self.inlineRoles_scan())
        diagnostics.extend(self.sections_scan())
        diagnostics.extend(self.parameters_scan())
        return diagnostics

    def inlineRoles_scan(self) -> List[Diagnostic]:
        """Validate {applies_to}`key: value` roles"""
        diagnostics: List[Diagnostic] = []
        for line_num in range(self.body_start, len(self.lines)):
            for match in INLINE_ROLE_PATTERN.finditer(self.lines[line_num]):
                found, _ = appliesLine_validate(match.group(1), line_num, match.start(1))
                diagnostics.extend(found)
        LOG(f"Inline applies_to roles: {len(diagnostics)} diagnostics", level=3)
        return diagnostics

    def sections_scan(self) -> List[Diagnostic]:
        """
        Validate ```{applies_to} section blocks

        Each non-blank line is a `key: value` payload. A key with an empty value
        becomes the parent of the more-indented lines that follow it.
        """
        diagnostics: List[Diagnostic] = []
        line_num = self.body_start

        while line_num < len(self.lines):
            opening = SECTION_OPEN_PATTERN.match(self.lines[line_num])
            line_num += 1
            if not opening:
                continue

            fence = opening.group(1)
            parent: Optional[str] = None
            parent_indent = -1

            while line_num < len(self.lines):
                text = self.lines[line_num]
                if text.strip().startswith(fence) and not text.strip().strip('`'):
                    line_num += 1
                    break
                if text.strip():
                    indent = len(text) - len(text.lstrip())
                    if indent <= parent_indent:
                        parent, parent_indent = None, -1
                    found, key = appliesLine_validate(text, line_num, 0, parent)
                    diagnostics.extend(found)
                    if key is not None and parent is None and not text.split(':', 1)[1].strip():
                        parent, parent_indent = key, indent
                line_num += 1

        LOG(f"applies_to sections: {len(diagnostics)} diagnostics", level=3)
        return diagnostics

    def parameters_scan(self) -> List[Diagnostic]:
        """Validate `:applies_to:` parameters of directive blocks"""
        diagnostics: List[Diagnostic] = []
        for block in self.blocks:
            for parameter in block.parameters:
                if parameter.name != 'applies_to' or not parameter.value:
                    continue
                line_num = parameter.range.start_line
                text = self.lines[line_num]
                offset = text.find(parameter.value, len(':applies_to:'))
                found, _ = appliesLine_validate(parameter.value, line_num, max(offset, 0))
                diagnostics.extend(found)
        LOG(f"applies_to parameters: {len(diagnostics)} diagnostics", level=3)
        return diagnostics

"""
Lifecycle version expressions

Parsing and comparison for single applies_to entries such as `ga 9.1+`,
`preview 9.0-9.1`, `removed =9.2`, `beta all` or a bare `deprecated`.

All functions are pure and never raise on malformed text: an unparseable
entry is None, an unparseable version bound is None.

Example:
    >>> versionEntry_parse("ga 9.1+").start_version
    (9, 1)
    >>> versions_compare((9, 1), (9, 1, 0))
    0
"""

import re
from typing import Optional

from ..models.versions import LIFECYCLE_STATES, Lifecycle, ParsedVersionEntry, Version

LIFECYCLE_GROUP = '|'.join(LIFECYCLE_STATES)
DOTTED = r'[0-9]+(?:\.[0-9]+)*'

# lifecycle [all | =X | X-Y | X | X+]
ENTRY_PATTERN = re.compile(
    rf'^(?:{LIFECYCLE_GROUP})(?:\s+(?:all|={DOTTED}|{DOTTED}-{DOTTED}|{DOTTED}\+?))?$'
)

# lifecycle X, with neither +, = nor a range
IMPLICIT_PATTERN = re.compile(rf'^(?:{LIFECYCLE_GROUP})\s+{DOTTED}$')


def version_parse(text: Optional[str]) -> Optional[Version]:
    """
    Parse a dotted version into a tuple of non-negative integers

    Args:
        text: Version text such as "9.1" or "8.17.2"

    Returns:
        Tuple of components, or None if empty or any component is not numeric

    Example:
        >>> version_parse("9.1")
        (9, 1)
        >>> version_parse("9.x") is None
        True
    """
    if not text:
        return None
    parts = text.split('.')
    if not all(part.isdigit() and part.isascii() for part in parts):
        return None
    return tuple(int(part) for part in parts)


def version_format(version: Version) -> str:
    """Render a version tuple as dotted text"""
    return '.'.join(str(part) for part in version)


def versions_compare(v1: Version, v2: Version) -> int:
    """
    Compare two versions component-wise

    Missing trailing components count as 0, so 9.1 equals 9.1.0.

    Returns:
        -1 if v1 < v2, 0 if equal, 1 if v1 > v2
    """
    length = max(len(v1), len(v2))
    for index in range(length):
        p1 = v1[index] if index < len(v1) else 0
        p2 = v2[index] if index < len(v2) else 0
        if p1 < p2:
            return -1
        if p1 > p2:
            return 1
    return 0


def bound_compare(version: Version, bound: Optional[Version]) -> int:
    """
    Compare a version against an upper bound that may be unbounded

    A bound of None means "no upper limit" and is above every version.
    """
    if bound is None:
        return -1
    return versions_compare(version, bound)


def entry_isValid(entry: str) -> bool:
    """
    Check one entry against the applies_to entry grammar

    Empty entries and bare lifecycle words are valid.
    """
    if not entry:
        return True
    return ENTRY_PATTERN.match(entry) is not None


def entry_isImplicit(entry: str) -> bool:
    """Check whether an entry uses bare `state X.Y` syntax"""
    return IMPLICIT_PATTERN.match(entry) is not None


def versionEntry_parse(entry: str) -> Optional[ParsedVersionEntry]:
    """
    Parse a single lifecycle entry into structured form

    The first whitespace-separated token must be a lifecycle word, otherwise
    the text is not an entry and None is returned. The optional second token
    decides the shape.

    Args:
        entry: Entry text such as "ga 9.1+"

    Returns:
        ParsedVersionEntry, or None if the text does not start with a lifecycle

    Example:
        >>> versionEntry_parse("removed =9.2").end_version
        (9, 2)
        >>> versionEntry_parse("ga").is_unbound
        True
    """
    trimmed = entry.strip()
    parts = trimmed.split()
    if not parts or parts[0] not in LIFECYCLE_STATES:
        return None

    lifecycle = Lifecycle(parts[0])

    if len(parts) == 1:
        # No version means all versions
        return ParsedVersionEntry(
            original_entry=trimmed,
            lifecycle=lifecycle,
            version_spec=None,
            is_unbound=True,
        )

    version_spec = parts[1]

    if version_spec == 'all':
        return ParsedVersionEntry(
            original_entry=trimmed,
            lifecycle=lifecycle,
            version_spec=version_spec,
            is_unbound=True,
        )

    if version_spec.startswith('='):
        version = version_parse(version_spec[1:])
        return ParsedVersionEntry(
            original_entry=trimmed,
            lifecycle=lifecycle,
            version_spec=version_spec,
            is_exact=True,
            start_version=version,
            end_version=version,
        )

    if '-' in version_spec:
        range_parts = version_spec.split('-')
        if len(range_parts) == 2 and all(range_parts):
            return ParsedVersionEntry(
                original_entry=trimmed,
                lifecycle=lifecycle,
                version_spec=version_spec,
                is_range=True,
                start_version=version_parse(range_parts[0]),
                end_version=version_parse(range_parts[1]),
            )

    # Greater than or equal: X or X+
    version_text = version_spec[:-1] if version_spec.endswith('+') else version_spec
    return ParsedVersionEntry(
        original_entry=trimmed,
        lifecycle=lifecycle,
        version_spec=version_spec,
        is_unbound=True,
        start_version=version_parse(version_text),
    )
